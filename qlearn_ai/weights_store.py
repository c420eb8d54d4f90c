"""
Weight Store - Text-file persistence for the estimator's weight vector.

One value per line, fixed ``%f`` format. A missing file is reported as
``None`` so the caller can fall back to random initialization.
"""

import logging
import os
from typing import Optional, Sequence

import numpy as np

from qlearn_ai.config import DEFAULT_WEIGHTS_PATH
from qlearn_ai.features import NUM_FEATURES

logger = logging.getLogger(__name__)


class WeightStore:
    def __init__(self, path: str = DEFAULT_WEIGHTS_PATH,
                 num_features: int = NUM_FEATURES):
        self.path = path
        self.num_features = num_features

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def save(self, weights: Sequence[float]):
        """Overwrite the weight file with ``weights``."""
        w = np.asarray(weights, dtype=np.float64).reshape(-1)
        if w.shape[0] != self.num_features:
            raise ValueError(f"Expected {self.num_features} weights, got {w.shape[0]}")
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        np.savetxt(self.path, w, fmt='%f')
        logger.debug(f"Saved weights to {self.path}")

    def load(self) -> Optional[np.ndarray]:
        """Weight vector from disk, or None if the file does not exist."""
        if not self.exists():
            logger.warning(f"Weight file {self.path} not found, using random weights")
            return None
        w = np.atleast_1d(np.loadtxt(self.path, dtype=np.float64))
        if w.shape[0] != self.num_features:
            raise ValueError(
                f"Weight file {self.path} holds {w.shape[0]} values, "
                f"expected {self.num_features}"
            )
        logger.info(f"Loaded weights from {self.path}")
        return w
