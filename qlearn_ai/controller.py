"""
Episode Controller - Drives the learning loop across decision steps and episodes.

Per episode:

    start_episode()            mode chosen by the schedule, per-episode state cleared
    step(observations) ...     one call per decision step, returns the assignment
    end_episode(won)           evaluation average, epsilon decay, run budget

On each step after the first, the event gate decides whether anything
happened. If not, the previous assignment is returned untouched. If so,
every friendly unit of the previous snapshot is rewarded, trained on (in
training mode only) and a fresh assignment is selected.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from qlearn_ai.config import QLearningConfig
from qlearn_ai.events import has_significant_event
from qlearn_ai.learner import TDLearner
from qlearn_ai.reward import compute_reward
from qlearn_ai.schedule import ControllerMode, EpisodeSchedule
from qlearn_ai.selector import ActionSelector
from qlearn_ai.snapshot import Assignment, Snapshot

logger = logging.getLogger(__name__)


@dataclass
class EpisodeSummary:
    """Outcome of one finished episode."""
    episode: int
    mode: ControllerMode
    cumulative_reward: float
    won: bool
    evaluation_index: Optional[int]
    training_games: int
    cycle_complete: bool
    average_evaluation_reward: float
    epsilon: float
    finished: bool


class EpisodeController:
    """
    Stateful Q-learning controller for one side of the skirmish.

    Run state (epsilon, reward history, episode index) persists across
    episodes; snapshot and assignment state is reset by ``start_episode``.
    """

    def __init__(self, selector: ActionSelector, learner: TDLearner,
                 config: Optional[QLearningConfig] = None, player: int = 0):
        self.config = (config or QLearningConfig()).validate()
        self.selector = selector
        self.learner = learner
        self.player = player
        self.schedule = EpisodeSchedule(
            cycle_length=self.config.cycle_length,
            evaluation_episodes=self.config.evaluation_episodes,
            initial_epsilon=self.config.initial_epsilon,
            epsilon_decay=self.config.epsilon_decay,
        )

        # Run state
        self.epsilon = self.config.initial_epsilon
        self.episode = 0
        self.cycles_completed = 0
        self.reward_history: List[float] = [0.0]
        self.average_evaluation_reward = 0.0
        self.evaluation_games = 0
        self.finished = False

        # Episode state
        self.mode: Optional[ControllerMode] = None
        self.in_episode = False
        self.previous_snapshot: Optional[Snapshot] = None
        self.previous_assignment = Assignment()
        self.cumulative_reward = 0.0

        # Counters
        self.steps = 0
        self.skipped_steps = 0
        self.updates = 0

    @property
    def training(self) -> bool:
        return self.mode == ControllerMode.TRAINING

    @property
    def estimator(self):
        return self.learner.estimator

    def start_episode(self) -> ControllerMode:
        if self.finished:
            raise RuntimeError("Run is finished; no more episodes can be started")

        self.episode += 1
        self.mode = self.schedule.mode_for(self.episode)
        if self.mode == ControllerMode.TRAINING:
            self.average_evaluation_reward = 0.0
            self.evaluation_games = 0

        self.in_episode = True
        self.previous_snapshot = None
        self.previous_assignment = Assignment()
        self.cumulative_reward = 0.0
        logger.debug(f"Episode {self.episode} started in {self.mode.value} mode "
                     f"(epsilon={self.epsilon:.3f})")
        return self.mode

    def step(self, observations: Iterable) -> Assignment:
        """
        Process one decision step.

        ``observations`` are read-only unit records (``unit_id``, ``player``,
        ``x``, ``y``, ``hp``) for every live unit.
        """
        if not self.in_episode:
            raise RuntimeError("Call start_episode() before step()")
        self.steps += 1

        previous = self.previous_snapshot
        current = Snapshot.from_units(observations, self.player, previous=previous)

        if previous is None:
            self.previous_snapshot = current
            self.previous_assignment = self.selector.select_actions(
                current, Assignment(), self.epsilon, self.training
            )
            return self.previous_assignment

        if not has_significant_event(current, previous):
            self.skipped_steps += 1
            return self.previous_assignment

        cfg = self.config
        for unit_id in previous.friendly_ids:
            reward = compute_reward(
                previous, current, self.previous_assignment, unit_id,
                base_step_reward=cfg.base_step_reward,
                death_penalty=cfg.death_penalty,
                kill_bonus=cfg.kill_bonus,
            )
            self.cumulative_reward += reward
            logger.debug(f"Unit {unit_id} reward {reward:.2f}")
            if self.training:
                td_error = self.learner.update(
                    reward, current, previous, self.previous_assignment, unit_id
                )
                if td_error is not None:
                    self.updates += 1

        self.previous_snapshot = current
        self.previous_assignment = self.selector.select_actions(
            current, self.previous_assignment, self.epsilon, self.training
        )
        return self.previous_assignment

    def end_episode(self, won: bool) -> EpisodeSummary:
        if not self.in_episode:
            raise RuntimeError("Call start_episode() before end_episode()")
        self.in_episode = False

        episode = self.episode
        evaluation_index = self.schedule.evaluation_index(episode)
        if self.mode == ControllerMode.EVALUATION:
            self.evaluation_games += 1
            n = self.evaluation_games
            self.average_evaluation_reward += (
                self.cumulative_reward - self.average_evaluation_reward
            ) / n

        training_games = self.schedule.training_games_through(episode)
        cycle_complete = self.schedule.is_cycle_end(episode)
        if cycle_complete:
            self.cycles_completed += 1
            self.reward_history.append(self.average_evaluation_reward)
            self.epsilon = self.schedule.epsilon_after(self.cycles_completed)
            logger.info(f"Cycle {self.cycles_completed} complete: "
                        f"{training_games} games trained, "
                        f"average evaluation reward {self.average_evaluation_reward:.2f}, "
                        f"epsilon now {self.epsilon:.3f}")
            if training_games >= self.config.episode_budget:
                self.finished = True
                logger.info(f"Episode budget of {self.config.episode_budget} reached")

        return EpisodeSummary(
            episode=episode,
            mode=self.mode,
            cumulative_reward=self.cumulative_reward,
            won=won,
            evaluation_index=evaluation_index,
            training_games=training_games,
            cycle_complete=cycle_complete,
            average_evaluation_reward=self.average_evaluation_reward,
            epsilon=self.epsilon,
            finished=self.finished,
        )

    def get_stats(self) -> dict:
        return {
            'episodes': self.episode,
            'cycles': self.cycles_completed,
            'epsilon': self.epsilon,
            'steps': self.steps,
            'skipped_steps': self.skipped_steps,
            'updates': self.updates,
            'reward_history': list(self.reward_history),
        }
