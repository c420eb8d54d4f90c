"""
Game State - Complete skirmish state with read-only observations.

Provides the bridge between the game engine and controllers: each decision
step a controller receives immutable ``UnitView`` records describing every
live unit (identity, owning side, position, health) and nothing else.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from game.game_map import GameMap


@dataclass(frozen=True)
class UnitView:
    """Read-only observation of one live unit."""
    unit_id: int
    player: int
    x: int
    y: int
    hp: int


class GameState:
    """
    Complete game state wrapper providing observations and game-over checks.
    """

    def __init__(self, game_map: GameMap):
        self.game_map = game_map
        self.tick = 0
        self.max_ticks = 1000
        self.done = False
        self.winner = -1  # -1 = ongoing, 0 = player 0, 1 = player 1, 2 = draw

    def unit_views(self, player: Optional[int] = None) -> List[UnitView]:
        """Observations of every live unit, optionally for one player only."""
        return [
            UnitView(unit_id=u.unit_id, player=u.player, x=u.x, y=u.y, hp=u.hp)
            for u in self.game_map.units.values()
            if u.is_alive and (player is None or u.player == player)
        ]

    def total_hp(self, player: int) -> int:
        return sum(u.hp for u in self.game_map.get_player_units(player))

    def check_game_over(self) -> Tuple[bool, int]:
        """
        Check if game is over.

        Game ends when:
        - A player has no units left
        - Max ticks reached (decided by remaining total HP)
        """
        p0_units = self.game_map.get_player_units(0)
        p1_units = self.game_map.get_player_units(1)

        if not p0_units and not p1_units:
            return True, 2  # Draw
        if not p0_units:
            return True, 1  # Player 1 wins
        if not p1_units:
            return True, 0  # Player 0 wins
        if self.tick >= self.max_ticks:
            s0 = self.total_hp(0)
            s1 = self.total_hp(1)
            if s0 > s1:
                return True, 0
            elif s1 > s0:
                return True, 1
            return True, 2

        return False, -1
