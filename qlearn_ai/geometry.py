"""
Grid geometry helpers used by feature extraction and reward computation.

Positions are (x, y) integer pairs. Adjacency is the 8-neighbourhood and
includes the cell itself.
"""

from typing import Iterable, Mapping, Sequence

Position = Sequence[int]


def chebyshev_distance(p: Position, q: Position) -> int:
    """King-move distance: max(|dx|, |dy|)."""
    return max(abs(p[0] - q[0]), abs(p[1] - q[1]))


def is_adjacent(p: Position, q: Position) -> bool:
    return abs(p[0] - q[0]) <= 1 and abs(p[1] - q[1]) <= 1


def adjacent_count(origin: Position, unit_ids: Iterable[int],
                   positions: Mapping[int, Position]) -> int:
    """Number of the given units standing in the 8-neighbourhood of ``origin``."""
    return sum(1 for uid in unit_ids if is_adjacent(origin, positions[uid]))


def is_closest(origin: Position, candidate: int, unit_ids: Iterable[int],
               positions: Mapping[int, Position]) -> bool:
    """
    True if no unit in ``unit_ids`` is strictly closer to ``origin`` than
    ``candidate``. Ties count as closest.
    """
    best = chebyshev_distance(origin, positions[candidate])
    for uid in unit_ids:
        if chebyshev_distance(origin, positions[uid]) < best:
            return False
    return True
