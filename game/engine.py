"""
Game Engine - Advances the skirmish one tick at a time.

Each tick:
1. Directives are handed to idle units owned by the issuing player.
2. Every busy unit counts down its durative action; finished moves are
   carried out at once, finished attacks queue a hit.
3. Queued hits land together, so two footmen can kill each other.
4. Dead units leave the map and the game-over check runs.

An attack directive on a target out of reach becomes a one-cell step
toward it (compound attack); the controller re-issues it every tick.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from game.game_map import GameMap
from game.game_state import GameState
from game.units import Unit, ActionState
from game.actions import (
    Action, ActionType, DIR_OFFSETS, direction_toward, neighbouring_directions,
)


@dataclass(frozen=True)
class DamageRecord:
    """One hit landed during a tick."""
    attacker_id: int
    target_id: int
    damage: int


class GameEngine:
    """
    Skirmish simulator with a Gym-like reset/step interface.
    """

    def __init__(self, map_size: int = 12, footmen_per_side: int = 5,
                 max_ticks: int = 1000):
        self.map_size = map_size
        self.footmen_per_side = footmen_per_side
        self.max_ticks = max_ticks
        self.state: Optional[GameState] = None
        self._starters = {
            ActionType.MOVE: self._start_move,
            ActionType.ATTACK: self._start_attack,
        }

    def reset(self, game_map: Optional[GameMap] = None) -> GameState:
        """Start a new skirmish, on the standard layout unless a map is given."""
        if game_map is None:
            game_map = GameMap.create_skirmish_map(self.map_size, self.footmen_per_side)
        self.state = GameState(game_map)
        self.state.max_ticks = self.max_ticks
        return self.state

    def step(self, p0_actions: Sequence[Action],
             p1_actions: Sequence[Action]) -> Tuple[GameState, Dict]:
        """
        Advance one tick with directives from both players.

        Returns (state, info). ``info`` carries the tick's damage log and the
        IDs of units that died, besides unit counts and total health.
        """
        if self.state is None:
            raise RuntimeError("Call reset() before step()")
        state = self.state
        gm = state.game_map

        for player, actions in ((0, p0_actions), (1, p1_actions)):
            self._issue(actions, player)

        damage_log = self._advance_actions()
        for record in damage_log:
            gm.units[record.target_id].take_damage(record.damage)

        deaths = [uid for uid, u in gm.units.items() if not u.is_alive]
        for uid in deaths:
            gm.remove_unit(uid)

        state.tick += 1
        state.done, state.winner = state.check_game_over()

        info = {
            'tick': state.tick,
            'done': state.done,
            'winner': state.winner,
            'damage_log': damage_log,
            'deaths': deaths,
        }
        for player in (0, 1):
            info[f'p{player}_units'] = len(gm.get_player_units(player))
            info[f'p{player}_hp'] = state.total_hp(player)
        return state, info

    def _issue(self, actions: Sequence[Action], player: int):
        """Hand directives to idle units of ``player``; others are ignored."""
        units = self.state.game_map.units
        for action in actions:
            unit = units.get(action.unit_id)
            if unit is None or unit.player != player:
                continue
            if not unit.is_alive or not unit.is_idle:
                continue
            starter = self._starters.get(action.action_type)
            if starter is not None:
                starter(unit, action)

    def _begin(self, unit: Unit, action_state: ActionState,
               cell: Tuple[int, int], ticks: int, target_id: Optional[int] = None):
        unit.action_state = action_state
        unit.action_target = cell
        unit.action_ticks_remaining = ticks
        unit.target_id = target_id

    def _start_move(self, unit: Unit, action: Action):
        if action.direction is None:
            return
        dx, dy = DIR_OFFSETS[action.direction]
        cell = (unit.x + dx, unit.y + dy)
        if self.state.game_map.is_empty(*cell):
            self._begin(unit, ActionState.MOVING, cell, unit.stats.move_time)

    def _start_attack(self, unit: Unit, action: Action):
        """Strike an adjacent enemy, or take one step toward a distant one."""
        target = self.state.game_map.units.get(action.target_id)
        if target is None or not target.is_alive or target.player == unit.player:
            return

        if unit.in_attack_range(target.x, target.y):
            self._begin(unit, ActionState.ATTACKING, target.position,
                        unit.stats.attack_time, target.unit_id)
            return

        cell = self._step_toward(unit, target.x, target.y)
        if cell is not None:
            self._begin(unit, ActionState.MOVING, cell,
                        unit.stats.move_time, target.unit_id)

    def _step_toward(self, unit: Unit, tx: int, ty: int) -> Optional[Tuple[int, int]]:
        """Empty neighbouring cell strictly closer to (tx, ty), direct line first."""
        primary = direction_toward(unit.x, unit.y, tx, ty)
        if primary is None:
            return None
        gm = self.state.game_map
        current = unit.distance_to(tx, ty)
        for d in [primary] + neighbouring_directions(primary):
            dx, dy = DIR_OFFSETS[d]
            nx, ny = unit.x + dx, unit.y + dy
            if gm.is_empty(nx, ny) and max(abs(tx - nx), abs(ty - ny)) < current:
                return (nx, ny)
        return None

    def _advance_actions(self) -> List[DamageRecord]:
        """Count down busy units. Returns the hits from attacks that finished."""
        gm = self.state.game_map
        hits: List[DamageRecord] = []
        for unit in list(gm.units.values()):
            if unit.is_idle or not unit.is_alive:
                continue
            unit.action_ticks_remaining -= 1
            if unit.action_ticks_remaining > 0:
                continue

            if unit.action_state == ActionState.MOVING:
                gm.move_unit(unit.unit_id, *unit.action_target)
            elif unit.action_state == ActionState.ATTACKING:
                target = gm.units.get(unit.target_id)
                if (target is not None and target.is_alive
                        and unit.in_attack_range(target.x, target.y)):
                    hits.append(DamageRecord(unit.unit_id, target.unit_id,
                                             unit.stats.damage))
            unit.reset_action()
        return hits
