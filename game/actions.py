"""
Action System - Action types and directive encoding.

Each unit can be given one action per tick. Actions are durative (they take
one or more game ticks to complete). Once assigned, actions run to completion.

Controllers speak in attack directives: "unit U attacks unit T". The engine
turns a directive into a melee hit when the target is adjacent, or into a
one-cell move toward the target otherwise (a compound attack).
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple


class ActionType(IntEnum):
    NOOP = 0
    MOVE = 1
    ATTACK = 2


class Direction(IntEnum):
    NORTH = 0
    NORTHEAST = 1
    EAST = 2
    SOUTHEAST = 3
    SOUTH = 4
    SOUTHWEST = 5
    WEST = 6
    NORTHWEST = 7


# Direction offsets: (dx, dy)
DIR_OFFSETS: Dict[Direction, Tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.NORTHEAST: (1, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTHEAST: (1, 1),
    Direction.SOUTH: (0, 1),
    Direction.SOUTHWEST: (-1, 1),
    Direction.WEST: (-1, 0),
    Direction.NORTHWEST: (-1, -1),
}

_OFFSET_TO_DIR = {offset: d for d, offset in DIR_OFFSETS.items()}


@dataclass(frozen=True)
class Action:
    """A single action assigned to a unit."""
    unit_id: int
    action_type: ActionType
    direction: Optional[Direction] = None   # For move
    target_id: Optional[int] = None         # For attack


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def direction_toward(ux: int, uy: int, tx: int, ty: int) -> Optional[Direction]:
    """Direction of the single king-move step from (ux, uy) toward (tx, ty)."""
    offset = (_sign(tx - ux), _sign(ty - uy))
    return _OFFSET_TO_DIR.get(offset)


def neighbouring_directions(direction: Direction) -> List[Direction]:
    """The two directions 45 degrees either side of ``direction``."""
    return [Direction((direction + 1) % 8), Direction((direction - 1) % 8)]


def attack_directives(assignment: Mapping[int, int]) -> List[Action]:
    """
    Convert a unit -> target mapping into ATTACK actions.

    Units without a target receive no directive.
    """
    return [Action(unit_id=unit_id, action_type=ActionType.ATTACK,
                   target_id=target_id)
            for unit_id, target_id in assignment.items()]
