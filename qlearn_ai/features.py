"""
Feature Extractor - Encodes an (actor, candidate target) situation for the
linear Q-estimator.

Each call produces a fixed-length vector of NUM_FEATURES floats:

  0  bias                 constant 1
  1  actor_health         actor's current health
  2  neg_target_health    minus the target's current health
  3  target_preference    +100 nearest enemy / -100 actor unassigned / +50 otherwise
  4  peer_pressure        per other assigned friendly: +10 same target, +0.1 otherwise
  5  health_ratio         actor health / max(target health, 1)
  6  survivability        per friendly: +10 above the health threshold, +0.1 otherwise
  7  in_range             +10 adjacent to target, -10 otherwise
  8  threat               +10 per adjacent enemy up to two, -10 per enemy beyond that

Extraction is deterministic. Every referenced unit must be present in the
snapshot; a missing ID raises KeyError instead of being defaulted.
"""

from typing import Iterable, Mapping, Optional

import numpy as np

from qlearn_ai.geometry import adjacent_count, is_adjacent, is_closest
from qlearn_ai.snapshot import Snapshot

NUM_FEATURES = 9

FEATURE_NAMES = (
    'bias',
    'actor_health',
    'neg_target_health',
    'target_preference',
    'peer_pressure',
    'health_ratio',
    'survivability',
    'in_range',
    'threat',
)

# Target preference scores
NEAREST_TARGET_SCORE = 100.0
UNASSIGNED_SCORE = -100.0
ASSIGNED_SCORE = 50.0

# Peer pressure scores
SHARED_TARGET_SCORE = 10.0
OTHER_TARGET_SCORE = 0.1

# Survivability scores
HEALTHY_SCORE = 10.0
WOUNDED_SCORE = 0.1

RANGE_SCORE = 10.0
THREAT_SCORE = 10.0
TOLERABLE_THREAT = 2


class FeatureExtractor:
    """
    Maps (snapshot, actor, target, assignment) to a feature vector.

    ``survival_health_threshold`` is the health a friendly unit must exceed
    to count as healthy in the survivability feature.
    """

    def __init__(self, survival_health_threshold: int = 20):
        if survival_health_threshold <= 0:
            raise ValueError("survival_health_threshold must be positive")
        self.survival_health_threshold = survival_health_threshold
        self.num_features = NUM_FEATURES

    def __call__(self, snapshot: Snapshot, actor: int, target: int,
                 assignment: Mapping[int, int]) -> np.ndarray:
        return self.extract(snapshot, actor, target, assignment)

    def extract(self, snapshot: Snapshot, actor: int, target: int,
                assignment: Mapping[int, int],
                friendly_ids: Optional[Iterable[int]] = None,
                enemy_ids: Optional[Iterable[int]] = None) -> np.ndarray:
        """
        Feature vector for ``actor`` attacking ``target``.

        ``friendly_ids`` and ``enemy_ids`` default to the snapshot's own
        unit sets.
        """
        friendly_ids = snapshot.friendly_ids if friendly_ids is None else tuple(friendly_ids)
        enemy_ids = snapshot.enemy_ids if enemy_ids is None else tuple(enemy_ids)

        actor_hp = snapshot.health_of(actor)
        target_hp = snapshot.health_of(target)
        actor_pos = snapshot.position_of(actor)
        target_pos = snapshot.position_of(target)
        positions = snapshot.positions

        f = np.zeros(NUM_FEATURES, dtype=np.float64)
        f[0] = 1.0
        f[1] = actor_hp
        f[2] = -target_hp

        if is_closest(actor_pos, target, enemy_ids, positions):
            f[3] = NEAREST_TARGET_SCORE
        elif actor not in assignment:
            f[3] = UNASSIGNED_SCORE
        else:
            f[3] = ASSIGNED_SCORE

        peer = 0.0
        for attacker, attacked in assignment.items():
            if attacker == actor:
                continue
            peer += SHARED_TARGET_SCORE if attacked == target else OTHER_TARGET_SCORE
        f[4] = peer

        f[5] = actor_hp / max(target_hp, 1)

        threshold = self.survival_health_threshold
        f[6] = sum(HEALTHY_SCORE if snapshot.health_of(uid) > threshold else WOUNDED_SCORE
                   for uid in friendly_ids)

        f[7] = RANGE_SCORE if is_adjacent(actor_pos, target_pos) else -RANGE_SCORE

        threats = adjacent_count(actor_pos, enemy_ids, positions)
        if threats <= TOLERABLE_THREAT:
            f[8] = threats * THREAT_SCORE
        else:
            f[8] = -threats * THREAT_SCORE

        return f


def extract_features(snapshot: Snapshot, actor: int, target: int,
                     assignment: Mapping[int, int],
                     survival_health_threshold: int = 20) -> np.ndarray:
    """Convenience wrapper around ``FeatureExtractor.extract``."""
    return FeatureExtractor(survival_health_threshold).extract(
        snapshot, actor, target, assignment
    )
