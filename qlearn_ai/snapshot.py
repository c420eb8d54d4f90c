"""
Snapshot and Assignment value types.

A Snapshot is the learner's view of one decision step: which units are on
each side, how much health each has, and where each stands. An Assignment
maps each friendly unit to the enemy it is told to attack.

Both are immutable. Their maps are copied on construction, so a "previous"
snapshot can never be changed through a reference held by the "current" one.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

Position = Tuple[int, int]


@dataclass(frozen=True)
class Snapshot:
    """Immutable per-step record of unit identity, health, and position."""
    friendly_ids: Tuple[int, ...]
    enemy_ids: Tuple[int, ...]
    health: Mapping[int, int]
    positions: Mapping[int, Position]
    friendly_deaths: int = 0

    def __post_init__(self):
        friendly_ids = tuple(self.friendly_ids)
        enemy_ids = tuple(self.enemy_ids)
        health = {uid: int(hp) for uid, hp in self.health.items()}
        positions = {uid: (int(p[0]), int(p[1]))
                     for uid, p in self.positions.items()}

        if len(set(friendly_ids)) != len(friendly_ids):
            raise ValueError(f"Duplicate friendly unit IDs: {friendly_ids}")
        if len(set(enemy_ids)) != len(enemy_ids):
            raise ValueError(f"Duplicate enemy unit IDs: {enemy_ids}")
        overlap = set(friendly_ids) & set(enemy_ids)
        if overlap:
            raise ValueError(f"Units on both sides: {sorted(overlap)}")
        for uid in friendly_ids + enemy_ids:
            if uid not in health:
                raise ValueError(f"Unit {uid} has no health entry")
            if uid not in positions:
                raise ValueError(f"Unit {uid} has no position entry")
            if health[uid] < 0:
                raise ValueError(f"Unit {uid} has negative health {health[uid]}")
        if self.friendly_deaths < 0:
            raise ValueError("friendly_deaths must be non-negative")

        object.__setattr__(self, 'friendly_ids', friendly_ids)
        object.__setattr__(self, 'enemy_ids', enemy_ids)
        object.__setattr__(self, 'health', MappingProxyType(health))
        object.__setattr__(self, 'positions', MappingProxyType(positions))

    @classmethod
    def from_units(cls, units: Iterable, player: int,
                   previous: Optional['Snapshot'] = None) -> 'Snapshot':
        """
        Build a snapshot from unit observations.

        ``units`` is any iterable of objects exposing ``unit_id``, ``player``,
        ``x``, ``y`` and ``hp`` (e.g. ``game.UnitView``). Units with no health
        left are skipped. When ``previous`` is given, its friendly-death
        counter is carried forward and increased by the number of friendly
        units that disappeared since.
        """
        friendly, enemies = [], []
        health: Dict[int, int] = {}
        positions: Dict[int, Position] = {}
        for unit in units:
            if unit.hp <= 0:
                continue
            (friendly if unit.player == player else enemies).append(unit.unit_id)
            health[unit.unit_id] = unit.hp
            positions[unit.unit_id] = (unit.x, unit.y)

        deaths = 0
        if previous is not None:
            alive = set(friendly)
            deaths = previous.friendly_deaths + sum(
                1 for uid in previous.friendly_ids if uid not in alive
            )
        return cls(tuple(friendly), tuple(enemies), health, positions, deaths)

    def is_friendly(self, unit_id: int) -> bool:
        return unit_id in self.friendly_ids

    def is_enemy(self, unit_id: int) -> bool:
        return unit_id in self.enemy_ids

    def health_of(self, unit_id: int) -> int:
        try:
            return self.health[unit_id]
        except KeyError:
            raise KeyError(f"Unit {unit_id} has no health entry in snapshot") from None

    def position_of(self, unit_id: int) -> Position:
        try:
            return self.positions[unit_id]
        except KeyError:
            raise KeyError(f"Unit {unit_id} has no position entry in snapshot") from None

    def with_dead_placeholder(self, unit_id: int, position: Position) -> 'Snapshot':
        """
        Copy of this snapshot that still tracks a friendly unit which died
        this step: health 0 at its last known position, death counter + 1.
        """
        if unit_id in self.friendly_ids or unit_id in self.enemy_ids:
            raise ValueError(f"Unit {unit_id} is still present in the snapshot")
        health = dict(self.health)
        positions = dict(self.positions)
        health[unit_id] = 0
        positions[unit_id] = position
        return Snapshot(self.friendly_ids + (unit_id,), self.enemy_ids,
                        health, positions, self.friendly_deaths + 1)

    def __str__(self) -> str:
        friendlies = ", ".join(f"{uid}:{self.health[uid]}" for uid in self.friendly_ids)
        enemies = ", ".join(f"{uid}:{self.health[uid]}" for uid in self.enemy_ids)
        return f"Snapshot(friendly=[{friendlies}] enemy=[{enemies}] deaths={self.friendly_deaths})"


class Assignment(Mapping[int, int]):
    """Immutable friendly unit ID -> target enemy ID mapping."""

    __slots__ = ('_targets',)

    def __init__(self, targets: Optional[Mapping[int, int]] = None):
        self._targets: Dict[int, int] = dict(targets or {})

    def __getitem__(self, unit_id: int) -> int:
        return self._targets[unit_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def target_of(self, unit_id: int) -> Optional[int]:
        return self._targets.get(unit_id)

    def __repr__(self) -> str:
        return f"Assignment({self._targets!r})"
