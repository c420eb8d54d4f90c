"""
Q-Learning Footman Controller

Online reinforcement learning for attack-target assignment in the footman
skirmish. Features:

- Immutable per-step snapshots of unit health and position
- Nine hand-designed features per (unit, target) pair
- Linear Q-estimator with a configurable TD update rule
- Epsilon-greedy target selection driven by an explicit random source
- Event-gated learning: nothing happened, nothing to learn
- Training/evaluation cycles with epsilon decay and reward history
"""

from qlearn_ai.geometry import chebyshev_distance, is_adjacent
from qlearn_ai.snapshot import Snapshot, Assignment
from qlearn_ai.features import FeatureExtractor, extract_features, NUM_FEATURES
from qlearn_ai.estimator import LinearQEstimator
from qlearn_ai.selector import ActionSelector
from qlearn_ai.reward import compute_reward
from qlearn_ai.events import has_significant_event
from qlearn_ai.learner import TDLearner
from qlearn_ai.schedule import ControllerMode, EpisodeSchedule
from qlearn_ai.config import QLearningConfig, RunConfig
from qlearn_ai.controller import EpisodeController, EpisodeSummary
from qlearn_ai.weights_store import WeightStore

__all__ = [
    "chebyshev_distance", "is_adjacent",
    "Snapshot", "Assignment",
    "FeatureExtractor", "extract_features", "NUM_FEATURES",
    "LinearQEstimator",
    "ActionSelector",
    "compute_reward",
    "has_significant_event",
    "TDLearner",
    "ControllerMode", "EpisodeSchedule",
    "QLearningConfig", "RunConfig",
    "EpisodeController", "EpisodeSummary",
    "WeightStore",
]
