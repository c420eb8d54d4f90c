"""
Linear Q-Estimator - Q(s, a) as a dot product of weights and features.

The weight vector is owned here and changed only through ``apply_update``.
Two update rules are supported:

- ``uniform`` (default): every weight moves by ``learning_rate * td_error``,
  independent of the feature values.
- ``semi_gradient``: the textbook rule, ``learning_rate * td_error * f_i``.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from qlearn_ai.features import NUM_FEATURES

logger = logging.getLogger(__name__)

UPDATE_RULES = ('uniform', 'semi_gradient')


class LinearQEstimator:
    """
    Linear function approximator over a fixed-length feature vector.

    Without explicit ``weights`` the vector is drawn uniformly from [-1, 1)
    using ``rng`` (or a generator seeded with ``seed``).
    """

    def __init__(self, weights: Optional[Sequence[float]] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = 42,
                 num_features: int = NUM_FEATURES,
                 update_rule: str = 'uniform'):
        if update_rule not in UPDATE_RULES:
            raise ValueError(f"Unknown update rule: {update_rule!r}")
        self.num_features = num_features
        self.update_rule = update_rule

        if weights is not None:
            self._weights = self._validated(weights)
        else:
            rng = rng if rng is not None else np.random.default_rng(seed)
            self._weights = rng.uniform(-1.0, 1.0, num_features)

    def _validated(self, weights: Sequence[float]) -> np.ndarray:
        w = np.array(weights, dtype=np.float64).reshape(-1)
        if w.shape[0] != self.num_features:
            raise ValueError(
                f"Expected {self.num_features} weights, got {w.shape[0]}"
            )
        return w

    @property
    def weights(self) -> np.ndarray:
        return self._weights.copy()

    def set_weights(self, weights: Sequence[float]):
        """Replace the weight vector, e.g. with values restored from storage."""
        self._weights = self._validated(weights)
        logger.debug(f"Weights replaced: {np.round(self._weights, 4).tolist()}")

    def q_value(self, features: Sequence[float]) -> float:
        f = np.asarray(features, dtype=np.float64)
        if f.shape != self._weights.shape:
            raise ValueError(
                f"Feature vector length {f.size} does not match "
                f"weight vector length {self._weights.size}"
            )
        return float(np.dot(self._weights, f))

    def apply_update(self, features: Sequence[float], td_error: float,
                     learning_rate: float):
        """One TD step on the weight vector."""
        f = np.asarray(features, dtype=np.float64)
        if f.shape != self._weights.shape:
            raise ValueError(
                f"Feature vector length {f.size} does not match "
                f"weight vector length {self._weights.size}"
            )
        if self.update_rule == 'semi_gradient':
            self._weights += learning_rate * td_error * f
        else:
            self._weights += learning_rate * td_error

    def __repr__(self) -> str:
        return (f"LinearQEstimator(rule={self.update_rule}, "
                f"weights={np.round(self._weights, 4).tolist()})")
