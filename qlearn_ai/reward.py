"""
Reward Calculator - Scalar reward for one friendly unit over one transition.

    reward = step cost - death penalty              (actor died)

    reward = step cost
             - health lost
             + kill bonus                          (target killed, adjacent)
             + damage dealt to the target          (target alive, adjacent)

A dead actor scores the death penalty whatever happened to its target.
For a living actor the enemy-facing terms apply only when it had a target
in the previous assignment and the two units are adjacent. A target that
vanished from the current snapshot is located at its previous position for
this computation only.
"""

from typing import Mapping

from qlearn_ai.geometry import is_adjacent
from qlearn_ai.snapshot import Snapshot

BASE_STEP_REWARD = -0.1
DEATH_PENALTY = 100.0
KILL_BONUS = 100.0


def _target_position(target: int, current: Snapshot, previous: Snapshot):
    if target in current.positions:
        return current.position_of(target)
    return previous.position_of(target)


def compute_reward(previous: Snapshot, current: Snapshot,
                   previous_assignment: Mapping[int, int], actor: int,
                   base_step_reward: float = BASE_STEP_REWARD,
                   death_penalty: float = DEATH_PENALTY,
                   kill_bonus: float = KILL_BONUS) -> float:
    reward = base_step_reward

    if not current.is_friendly(actor):
        return reward - death_penalty

    reward -= previous.health_of(actor) - current.health_of(actor)

    target = previous_assignment.get(actor)
    if target is None:
        return reward

    if is_adjacent(current.position_of(actor),
                   _target_position(target, current, previous)):
        if not current.is_enemy(target):
            reward += kill_bonus
        else:
            reward += previous.health_of(target) - current.health_of(target)

    return reward
