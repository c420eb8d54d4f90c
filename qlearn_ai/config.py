"""
Configuration - Learning hyperparameters and run settings.

Values can come from defaults, environment variables (``QLEARN_*``) or a
JSON file.
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional
import os
import json
import logging

from qlearn_ai.estimator import UPDATE_RULES

logger = logging.getLogger(__name__)

DEFAULT_EPISODES = 100
DEFAULT_WEIGHTS_PATH = os.path.join("agent_weights", "weights.txt")

_TRUE_FLAGS = ('true', '1', 'yes')
_FALSE_FLAGS = ('false', '0', 'no')


@dataclass
class QLearningConfig:
    """Hyperparameters for the Q-learning controller"""
    # TD update
    discount_factor: float = 0.9
    learning_rate: float = 1e-4
    update_rule: str = "uniform"

    # Exploration schedule
    initial_epsilon: float = 0.1
    epsilon_decay: float = 0.002  # per full cycle
    cycle_length: int = 15
    evaluation_episodes: int = 5  # last N episodes of each cycle
    episode_budget: int = DEFAULT_EPISODES  # training episodes

    # Randomness
    weight_seed: Optional[int] = 42
    selection_seed: Optional[int] = None

    # Reward shaping
    base_step_reward: float = -0.1
    death_penalty: float = 100.0
    kill_bonus: float = 100.0

    # Features
    survival_health_threshold: int = 20

    def validate(self) -> 'QLearningConfig':
        """Raise ValueError on out-of-range settings"""
        if not 0.0 <= self.discount_factor <= 1.0:
            raise ValueError(f"discount_factor must be in [0, 1], got {self.discount_factor}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if self.update_rule not in UPDATE_RULES:
            raise ValueError(f"update_rule must be one of {UPDATE_RULES}, got {self.update_rule!r}")
        if not 0.0 <= self.initial_epsilon <= 1.0:
            raise ValueError(f"initial_epsilon must be in [0, 1], got {self.initial_epsilon}")
        if self.epsilon_decay < 0:
            raise ValueError(f"epsilon_decay must be non-negative, got {self.epsilon_decay}")
        if self.cycle_length <= 0:
            raise ValueError(f"cycle_length must be positive, got {self.cycle_length}")
        if not 0 <= self.evaluation_episodes < self.cycle_length:
            raise ValueError("evaluation_episodes must be in [0, cycle_length)")
        if self.episode_budget <= 0:
            raise ValueError(f"episode_budget must be positive, got {self.episode_budget}")
        if self.survival_health_threshold <= 0:
            raise ValueError("survival_health_threshold must be positive")
        return self

    @classmethod
    def from_env(cls) -> 'QLearningConfig':
        """Load from environment variables"""
        def _seed(name, default):
            value = os.getenv(name)
            if value is None:
                return default
            return None if value.lower() == 'none' else int(value)

        return cls(
            discount_factor=float(os.getenv('QLEARN_DISCOUNT', 0.9)),
            learning_rate=float(os.getenv('QLEARN_LEARNING_RATE', 1e-4)),
            update_rule=os.getenv('QLEARN_UPDATE_RULE', 'uniform'),
            initial_epsilon=float(os.getenv('QLEARN_EPSILON', 0.1)),
            epsilon_decay=float(os.getenv('QLEARN_EPSILON_DECAY', 0.002)),
            cycle_length=int(os.getenv('QLEARN_CYCLE_LENGTH', 15)),
            evaluation_episodes=int(os.getenv('QLEARN_EVAL_EPISODES', 5)),
            episode_budget=int(os.getenv('QLEARN_EPISODES', DEFAULT_EPISODES)),
            weight_seed=_seed('QLEARN_WEIGHT_SEED', 42),
            selection_seed=_seed('QLEARN_SELECTION_SEED', None),
        ).validate()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration"""
        return asdict(self)

    def save(self, filepath: str):
        """Save configuration to file"""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'QLearningConfig':
        """Load configuration from file; unknown keys are ignored"""
        with open(filepath, 'r') as f:
            data = json.load(f)
        known = {f.name for f in fields(cls)}
        ignored = sorted(set(data) - known)
        if ignored:
            logger.warning(f"Ignoring unknown config keys: {ignored}")
        return cls(**{k: v for k, v in data.items() if k in known}).validate()


@dataclass
class RunConfig:
    """Settings for one training run"""
    episodes: int = DEFAULT_EPISODES
    load_weights: bool = False
    weights_path: str = DEFAULT_WEIGHTS_PATH

    # Environment
    map_size: int = 12
    footmen_per_side: int = 5
    max_ticks: int = 1000
    opponent: str = "nearest"

    seed: Optional[int] = None
    render: bool = False
    verbose: bool = False


def parse_load_flag(value: Optional[str]) -> bool:
    """Interpret the load-weights argument; bad or missing values mean False."""
    if value is None:
        logger.warning("No load-weights flag given, defaulting to false")
        return False
    text = str(value).strip().lower()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    logger.warning(f"Unrecognised load-weights flag {value!r}, defaulting to false")
    return False


def resolve_episode_count(value: Optional[int]) -> int:
    """Episode budget from the command line; missing or non-positive means the default."""
    if value is None:
        logger.warning(f"No episode count given, defaulting to {DEFAULT_EPISODES}")
        return DEFAULT_EPISODES
    if value <= 0:
        logger.warning(f"Episode count must be positive (got {value}), "
                       f"defaulting to {DEFAULT_EPISODES}")
        return DEFAULT_EPISODES
    return value
