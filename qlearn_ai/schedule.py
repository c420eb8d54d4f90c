"""
Episode Schedule - Training/evaluation phases and epsilon decay.

Episodes are grouped in fixed-length cycles. With the default 15-episode
cycle and 5 evaluation episodes, episodes 1-10 of every cycle train and
11-15 evaluate with frozen weights.
"""

from enum import Enum


class ControllerMode(Enum):
    TRAINING = "training"
    EVALUATION = "evaluation"


class EpisodeSchedule:
    """Maps a 1-based episode index to its mode and cycle position."""

    def __init__(self, cycle_length: int = 15, evaluation_episodes: int = 5,
                 initial_epsilon: float = 0.1, epsilon_decay: float = 0.002):
        if cycle_length <= 0:
            raise ValueError("cycle_length must be positive")
        if not 0 <= evaluation_episodes < cycle_length:
            raise ValueError("evaluation_episodes must be in [0, cycle_length)")
        self.cycle_length = cycle_length
        self.evaluation_episodes = evaluation_episodes
        self.initial_epsilon = initial_epsilon
        self.epsilon_decay = epsilon_decay

    @property
    def training_episodes(self) -> int:
        return self.cycle_length - self.evaluation_episodes

    def _check(self, episode: int):
        if episode < 1:
            raise ValueError(f"Episode index must be >= 1, got {episode}")

    def position_in_cycle(self, episode: int) -> int:
        """1-based position of ``episode`` within its cycle."""
        self._check(episode)
        return (episode - 1) % self.cycle_length + 1

    def cycle_of(self, episode: int) -> int:
        """1-based cycle number containing ``episode``."""
        self._check(episode)
        return (episode - 1) // self.cycle_length + 1

    def mode_for(self, episode: int) -> ControllerMode:
        if self.position_in_cycle(episode) > self.training_episodes:
            return ControllerMode.EVALUATION
        return ControllerMode.TRAINING

    def evaluation_index(self, episode: int):
        """1-based index among the cycle's evaluation episodes, or None."""
        position = self.position_in_cycle(episode)
        if position <= self.training_episodes:
            return None
        return position - self.training_episodes

    def is_cycle_end(self, episode: int) -> bool:
        return self.position_in_cycle(episode) == self.cycle_length

    def training_games_through(self, episode: int) -> int:
        """Training episodes completed once ``episode`` has finished."""
        self._check(episode)
        full_cycles, rest = divmod(episode, self.cycle_length)
        return full_cycles * self.training_episodes + min(rest, self.training_episodes)

    def epsilon_after(self, cycles: int) -> float:
        """Exploration rate after ``cycles`` completed cycles, floored at 0."""
        return max(0.0, self.initial_epsilon - cycles * self.epsilon_decay)
