"""
Action Selector - Epsilon-greedy target assignment.

Each friendly unit either explores (uniformly random enemy) or exploits
(the enemy with the strictly highest Q-value; the first enemy wins ties).
Random draws come from an explicitly passed generator, so tests can drive
the branch choice with a stub exposing ``random()`` and ``integers(n)``.
"""

from typing import Dict, Mapping, Optional

import numpy as np

from qlearn_ai.estimator import LinearQEstimator
from qlearn_ai.features import FeatureExtractor
from qlearn_ai.snapshot import Assignment, Snapshot


class ActionSelector:
    """Chooses an attack target for every friendly unit in a snapshot."""

    def __init__(self, estimator: LinearQEstimator,
                 extractor: Optional[FeatureExtractor] = None,
                 rng=None, seed: Optional[int] = None):
        self.estimator = estimator
        self.extractor = extractor if extractor is not None else FeatureExtractor()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.explored = 0
        self.exploited = 0

    def best_target(self, snapshot: Snapshot, unit_id: int,
                    assignment: Mapping[int, int]) -> Optional[int]:
        """Enemy with the highest Q-value for ``unit_id``, or None if no enemies remain."""
        best_id = None
        best_q = None
        for enemy_id in snapshot.enemy_ids:
            q = self.estimator.q_value(
                self.extractor.extract(snapshot, unit_id, enemy_id, assignment)
            )
            if best_q is None or q > best_q:
                best_id, best_q = enemy_id, q
        return best_id

    def greedy_assignment(self, snapshot: Snapshot,
                          assignment: Mapping[int, int]) -> Assignment:
        """Greedy target for every friendly unit, scored against ``assignment``."""
        targets: Dict[int, int] = {}
        for unit_id in snapshot.friendly_ids:
            target = self.best_target(snapshot, unit_id, assignment)
            if target is not None:
                targets[unit_id] = target
        return Assignment(targets)

    def select_actions(self, snapshot: Snapshot,
                       previous_assignment: Mapping[int, int],
                       epsilon: float, training: bool) -> Assignment:
        if not snapshot.enemy_ids:
            return Assignment()

        enemies = snapshot.enemy_ids
        targets: Dict[int, int] = {}
        for unit_id in snapshot.friendly_ids:
            if training and self.rng.random() < epsilon:
                targets[unit_id] = enemies[int(self.rng.integers(len(enemies)))]
                self.explored += 1
            else:
                targets[unit_id] = self.best_target(snapshot, unit_id, previous_assignment)
                self.exploited += 1
        return Assignment(targets)
