"""
Game Renderer - ASCII views of the skirmish for debugging and training logs.

Friendly footmen (player 0) are drawn as ``F``, enemies as ``f``. A footman
at or below a quarter of its maximum health is drawn as ``W`` / ``w``.
"""

from typing import List, Mapping, Optional

from game.game_state import GameState
from game.game_map import Terrain
from game.units import Unit

WOUNDED_FRACTION = 0.25

_WINNER_BANNERS = {
    0: "*** PLAYER 0 WINS! ***",
    1: "*** PLAYER 1 WINS! ***",
    2: "*** DRAW ***",
}


def _unit_symbol(unit: Unit) -> str:
    symbol = 'w' if unit.health_fraction <= WOUNDED_FRACTION else 'f'
    return symbol.upper() if unit.player == 0 else symbol


def _grid_rows(state: GameState) -> List[str]:
    gm = state.game_map
    cells = [['#' if t == Terrain.WALL else '.' for t in row] for row in gm.terrain]
    for unit in gm.units.values():
        if unit.is_alive:
            cells[unit.y][unit.x] = _unit_symbol(unit)

    ruler = "  " + "".join(str(x % 10) for x in range(gm.width))
    border = "  " + "-" * gm.width
    rows = [ruler, border]
    rows.extend(f"{y % 10}|{''.join(row)}|{y % 10}" for y, row in enumerate(cells))
    rows.extend([border, ruler])
    return rows


class GameRenderer:
    """ASCII renderer for the footman skirmish."""

    @staticmethod
    def render(state: GameState, show_info: bool = True,
               assignment: Optional[Mapping[int, int]] = None) -> str:
        """Full map view, optionally followed by the current attack orders."""
        if not show_info:
            return "\n".join(_grid_rows(state))

        gm = state.game_map
        lines = [
            f"Tick: {state.tick}/{state.max_ticks}  "
            f"P0 hp: {state.total_hp(0)}  P1 hp: {state.total_hp(1)}",
            f"P0 footmen: {len(gm.get_player_units(0))}  "
            f"P1 footmen: {len(gm.get_player_units(1))}",
            "",
        ]
        lines.extend(_grid_rows(state))
        lines.append("")
        lines.append("Legend: F/f=Footman W/w=Wounded #=Wall  UPPER=P0  lower=P1")

        if assignment:
            orders = ", ".join(f"{u}->{t}" for u, t in sorted(assignment.items()))
            lines.append(f"Orders: {orders}")

        if state.done:
            lines.append("")
            lines.append(_WINNER_BANNERS.get(state.winner, "*** GAME OVER ***"))

        return "\n".join(lines)

    @staticmethod
    def render_compact(state: GameState) -> str:
        """Single-line summary for log records."""
        parts = [f"T{state.tick:04d}"]
        for player in (0, 1):
            units = state.game_map.get_player_units(player)
            parts.append(f"P{player}[u={len(units)} hp={state.total_hp(player)}]")
        return " ".join(parts)

    @staticmethod
    def render_unit_details(state: GameState, player: int) -> str:
        """One line per living footman of ``player``: position, health, current action."""
        lines = [f"Player {player} units:"]
        for unit in state.game_map.get_player_units(player):
            action = unit.action_state.name
            if unit.target_id is not None:
                action += f" -> #{unit.target_id}"
            if unit.action_ticks_remaining > 0:
                action += f" ({unit.action_ticks_remaining} ticks left)"
            lines.append(f"  #{unit.unit_id} {_unit_symbol(unit)} at ({unit.x},{unit.y}) "
                         f"HP={unit.hp}/{unit.stats.hp} {action}")
        return "\n".join(lines)
