"""
TD Learner - One Q-learning update per friendly unit.

For a unit that acted under the previous assignment:

    previous_q = Q(previous snapshot, unit, previous target)
    next_q     = Q(current snapshot, unit, greedy target)
    td_error   = reward + discount * next_q - previous_q

and the estimator steps along the previous feature vector. A unit that died
this step is kept in a working copy of the current snapshot with health 0
at its last known position, so both feature vectors stay defined.
"""

import logging
from typing import Mapping, Optional

from qlearn_ai.estimator import LinearQEstimator
from qlearn_ai.features import FeatureExtractor
from qlearn_ai.selector import ActionSelector
from qlearn_ai.snapshot import Snapshot

logger = logging.getLogger(__name__)


class TDLearner:
    """Applies temporal-difference updates to a shared linear estimator."""

    def __init__(self, estimator: LinearQEstimator, extractor: FeatureExtractor,
                 selector: ActionSelector, discount_factor: float = 0.9,
                 learning_rate: float = 1e-4):
        self.estimator = estimator
        self.extractor = extractor
        self.selector = selector
        self.discount_factor = discount_factor
        self.learning_rate = learning_rate

    def update(self, reward: float, current: Snapshot, previous: Snapshot,
               previous_assignment: Mapping[int, int], unit_id: int) -> Optional[float]:
        """
        Update the weights for ``unit_id``. Returns the TD error, or None when
        the unit had no target in the previous assignment.
        """
        previous_target = previous_assignment.get(unit_id)
        if previous_target is None:
            logger.debug(f"Unit {unit_id} had no target, skipping update")
            return None

        previous_features = self.extractor.extract(
            previous, unit_id, previous_target, previous_assignment
        )
        previous_q = self.estimator.q_value(previous_features)

        working = current
        if not current.is_friendly(unit_id):
            working = current.with_dead_placeholder(
                unit_id, previous.position_of(unit_id)
            )

        next_assignment = self.selector.greedy_assignment(working, previous_assignment)
        next_target = next_assignment.get(unit_id)
        if next_target is None:
            # No enemies left: terminal transition
            next_q = 0.0
        else:
            next_features = self.extractor.extract(
                working, unit_id, next_target, next_assignment
            )
            next_q = self.estimator.q_value(next_features)

        td_error = reward + self.discount_factor * next_q - previous_q
        self.estimator.apply_update(previous_features, td_error, self.learning_rate)
        logger.debug(f"Unit {unit_id}: reward={reward:.2f} "
                     f"prev_q={previous_q:.4f} next_q={next_q:.4f} td={td_error:.4f}")
        return td_error
