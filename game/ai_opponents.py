"""
Scripted AI Opponents - Bot controllers for the enemy side.

Provides several behaviours:
- IdleAI: Issues no directives (units only defend by standing still)
- RandomTargetAI: Every unit attacks a random enemy, picked among those
  already in reach when there are any
- NearestTargetAI: Every unit attacks its nearest enemy (the classic
  footman scenario opponent)
"""

from typing import List, Optional

import numpy as np

from game.game_state import GameState
from game.units import Unit
from game.actions import Action, ActionType


class BaseAI:
    """Base class for scripted AI opponents."""

    def get_actions(self, state: GameState, player: int) -> List[Action]:
        """Return directives for the player's idle units."""
        return []

    def _attack(self, unit: Unit, target: Unit) -> Action:
        return Action(unit_id=unit.unit_id, action_type=ActionType.ATTACK,
                      target_id=target.unit_id)

    def _find_nearest(self, unit: Unit, targets: List[Unit]) -> Optional[Unit]:
        if not targets:
            return None
        return min(targets, key=lambda t: (unit.distance_to(t.x, t.y), t.unit_id))


class IdleAI(BaseAI):
    """Never issues a directive."""


class NearestTargetAI(BaseAI):
    """Each idle unit attacks the Chebyshev-nearest enemy (ties by lowest ID)."""

    def get_actions(self, state: GameState, player: int) -> List[Action]:
        gm = state.game_map
        enemies = gm.get_player_units(1 - player)
        actions = []
        for unit in gm.get_player_units(player):
            if not unit.is_idle:
                continue
            target = self._find_nearest(unit, enemies)
            if target is not None:
                actions.append(self._attack(unit, target))
        return actions


class RandomTargetAI(BaseAI):
    """Each idle unit attacks a random enemy, preferring ones in reach."""

    def __init__(self, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def get_actions(self, state: GameState, player: int) -> List[Action]:
        gm = state.game_map
        enemies = gm.get_player_units(1 - player)
        if not enemies:
            return []
        actions = []
        for unit in gm.get_player_units(player):
            if not unit.is_idle:
                continue
            candidates = gm.units_in_range(unit, 1 - player) or enemies
            target = candidates[int(self._rng.integers(len(candidates)))]
            actions.append(self._attack(unit, target))
        return actions


OPPONENTS = {
    'nearest': NearestTargetAI,
    'random': RandomTargetAI,
    'idle': IdleAI,
}
