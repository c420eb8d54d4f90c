"""
Unit System - Footman stats and per-unit combat state.

The skirmish is a footman-versus-footman melee fight. Distances are
Chebyshev (king-move) distances, so diagonal neighbours are in melee range.
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import Optional, Tuple


class UnitType(IntEnum):
    FOOTMAN = 0


@dataclass(frozen=True)
class UnitStats:
    hp: int
    damage: int            # Per completed attack
    attack_range: int      # Chebyshev distance, 1 = melee
    move_time: int         # Ticks per one-cell move
    attack_time: int       # Ticks per attack


UNIT_STATS = {
    UnitType.FOOTMAN: UnitStats(hp=160, damage=6, attack_range=1,
                                move_time=1, attack_time=2),
}


class ActionState(IntEnum):
    IDLE = 0
    MOVING = 1
    ATTACKING = 2


@dataclass
class Unit:
    """A footman on the map, with its durative action in progress."""
    unit_id: int
    unit_type: UnitType
    player: int                  # 0 or 1
    x: int
    y: int
    hp: int = -1                 # -1: full health for the unit type

    action_state: ActionState = ActionState.IDLE
    action_target: Optional[Tuple[int, int]] = None   # Destination or target cell
    action_ticks_remaining: int = 0
    target_id: Optional[int] = None                   # Unit being attacked or approached

    def __post_init__(self):
        if self.hp == -1:
            self.hp = self.stats.hp

    @property
    def stats(self) -> UnitStats:
        return UNIT_STATS[self.unit_type]

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def is_idle(self) -> bool:
        return self.action_state == ActionState.IDLE

    @property
    def health_fraction(self) -> float:
        return self.hp / self.stats.hp

    def take_damage(self, damage: int):
        """Health never drops below zero."""
        self.hp = max(0, self.hp - damage)

    def distance_to(self, x: int, y: int) -> int:
        return max(abs(self.x - x), abs(self.y - y))

    def in_attack_range(self, x: int, y: int) -> bool:
        return self.distance_to(x, y) <= self.stats.attack_range

    def reset_action(self):
        """Back to idle once the current action finishes."""
        self.action_state = ActionState.IDLE
        self.action_target = None
        self.action_ticks_remaining = 0
        self.target_id = None
