"""
Game Map - The skirmish battlefield.

A rectangular grid of open cells and walls. Each open cell holds at most
one footman; a position index keeps cell lookups constant time.
"""

from typing import Dict, List, Optional, Tuple
from enum import IntEnum

from game.units import Unit, UnitType

Cell = Tuple[int, int]


class Terrain(IntEnum):
    EMPTY = 0
    WALL = 1


class GameMap:
    """Grid battlefield with walls and a unit-per-cell occupancy index."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.terrain: List[List[int]] = [
            [Terrain.EMPTY] * width for _ in range(height)
        ]
        self.units: Dict[int, Unit] = {}
        self._next_unit_id = 0
        self._occupant: Dict[Cell, int] = {}  # cell -> unit_id

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_passable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.terrain[y][x] != Terrain.WALL

    def is_empty(self, x: int, y: int) -> bool:
        """Open cell with nobody standing on it."""
        return self.is_passable(x, y) and (x, y) not in self._occupant

    def get_unit_at(self, x: int, y: int) -> Optional[Unit]:
        uid = self._occupant.get((x, y))
        return None if uid is None else self.units[uid]

    def add_unit(self, unit_type: UnitType, player: int, x: int, y: int,
                 hp: int = -1) -> Optional[Unit]:
        """Place a new unit with the next free ID; None if the cell is taken."""
        if not self.is_empty(x, y):
            return None
        unit = Unit(unit_id=self._next_unit_id, unit_type=unit_type,
                    player=player, x=x, y=y, hp=hp)
        self._next_unit_id += 1
        self.units[unit.unit_id] = unit
        self._occupant[unit.position] = unit.unit_id
        return unit

    def remove_unit(self, unit_id: int):
        unit = self.units.pop(unit_id, None)
        if unit is not None:
            self._occupant.pop(unit.position, None)

    def move_unit(self, unit_id: int, new_x: int, new_y: int) -> bool:
        """Relocate a unit to an empty cell. Returns False if it cannot."""
        unit = self.units.get(unit_id)
        if unit is None or not self.is_empty(new_x, new_y):
            return False
        del self._occupant[unit.position]
        unit.x, unit.y = new_x, new_y
        self._occupant[unit.position] = unit_id
        return True

    def get_player_units(self, player: int) -> List[Unit]:
        """Living units of one side, in ID order."""
        return [u for u in self.units.values() if u.player == player and u.is_alive]

    def units_in_range(self, unit: Unit, enemy_player: int) -> List[Unit]:
        """Living enemy units within ``unit``'s Chebyshev attack range."""
        return [other for other in self.get_player_units(enemy_player)
                if unit.in_attack_range(other.x, other.y)]

    def set_wall(self, x: int, y: int):
        if self.in_bounds(x, y):
            self.terrain[y][x] = Terrain.WALL

    @classmethod
    def create_skirmish_map(cls, size: int = 12,
                            footmen_per_side: int = 5) -> 'GameMap':
        """
        Two facing columns of footmen.

        Player 0 stands at x=1 and gets IDs 0..n-1; player 1 stands at
        x=size-2 and gets IDs n..2n-1. Both columns are vertically centred.
        """
        if footmen_per_side > size:
            raise ValueError(
                f"Cannot fit {footmen_per_side} footmen on a {size}x{size} map"
            )
        gm = cls(size, size)
        top = (size - footmen_per_side) // 2
        columns = ((0, min(1, size - 1)), (1, max(size - 2, 0)))
        for player, x in columns:
            for row in range(top, top + footmen_per_side):
                gm.add_unit(UnitType.FOOTMAN, player=player, x=x, y=row)
        return gm
