"""
Event Gate - Decides whether a transition warrants learning and re-selection.
"""

from qlearn_ai.snapshot import Snapshot


def has_significant_event(current: Snapshot, previous: Snapshot) -> bool:
    """
    True if an enemy disappeared, the friendly death counter went up, or a
    unit present in both snapshots lost health.
    """
    if len(current.enemy_ids) < len(previous.enemy_ids):
        return True
    if current.friendly_deaths > previous.friendly_deaths:
        return True
    for unit_id, hp in current.health.items():
        before = previous.health.get(unit_id)
        if before is not None and hp < before:
            return True
    return False
