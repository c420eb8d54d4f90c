"""
Tests for the footman skirmish environment.

Tests cover:
- Unit creation and stats
- Map operations
- Directive helpers
- Game state observations and game-over detection
- Game engine mechanics (compound attack, simultaneous damage)
- Scripted opponents
- Full game simulation
"""

import sys
import os
import dataclasses

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from game.units import Unit, UnitType, UNIT_STATS, ActionState
from game.game_map import GameMap, Terrain
from game.game_state import GameState, UnitView
from game.actions import (
    ActionType, Direction, DIR_OFFSETS, Action,
    attack_directives, direction_toward, neighbouring_directions,
)
from game.engine import GameEngine, DamageRecord
from game.ai_opponents import IdleAI, NearestTargetAI, RandomTargetAI, OPPONENTS
from game.renderer import GameRenderer


def _duel_map(p0_pos, p1_pos, width=6, height=6, hp=-1):
    gm = GameMap(width, height)
    gm.add_unit(UnitType.FOOTMAN, player=0, x=p0_pos[0], y=p0_pos[1], hp=hp)
    gm.add_unit(UnitType.FOOTMAN, player=1, x=p1_pos[0], y=p1_pos[1], hp=hp)
    return gm


class TestUnits:
    def test_unit_types_exist(self):
        for ut in UnitType:
            assert ut in UNIT_STATS

    def test_footman_stats(self):
        stats = UNIT_STATS[UnitType.FOOTMAN]
        assert stats.hp == 160
        assert stats.damage == 6
        assert stats.attack_range == 1

    def test_unit_creation(self):
        u = Unit(unit_id=0, unit_type=UnitType.FOOTMAN, player=0, x=3, y=4)
        assert u.hp == 160
        assert u.position == (3, 4)
        assert u.is_idle
        assert u.is_alive
        assert u.target_id is None

    def test_unit_damage(self):
        u = Unit(unit_id=0, unit_type=UnitType.FOOTMAN, player=0, x=0, y=0, hp=10)
        u.take_damage(6)
        assert u.hp == 4
        assert u.is_alive
        u.take_damage(6)
        assert u.hp == 0
        assert not u.is_alive

    def test_health_fraction(self):
        u = Unit(unit_id=0, unit_type=UnitType.FOOTMAN, player=0, x=0, y=0, hp=40)
        assert u.health_fraction == pytest.approx(0.25)

    def test_chebyshev_distance(self):
        u = Unit(unit_id=0, unit_type=UnitType.FOOTMAN, player=0, x=2, y=3)
        assert u.distance_to(2, 3) == 0
        assert u.distance_to(3, 4) == 1
        assert u.distance_to(5, 6) == 3

    def test_diagonal_in_melee_range(self):
        u = Unit(unit_id=0, unit_type=UnitType.FOOTMAN, player=0, x=5, y=5)
        assert u.in_attack_range(6, 6)
        assert u.in_attack_range(4, 5)
        assert not u.in_attack_range(7, 5)

    def test_reset_action(self):
        u = Unit(unit_id=0, unit_type=UnitType.FOOTMAN, player=0, x=0, y=0)
        u.action_state = ActionState.ATTACKING
        u.target_id = 3
        u.action_ticks_remaining = 2
        u.reset_action()
        assert u.is_idle
        assert u.target_id is None
        assert u.action_ticks_remaining == 0


class TestGameMap:
    def test_map_creation(self):
        gm = GameMap(8, 8)
        assert gm.width == 8
        assert gm.height == 8
        assert len(gm.units) == 0

    def test_add_and_remove_unit(self):
        gm = GameMap(8, 8)
        u = gm.add_unit(UnitType.FOOTMAN, player=0, x=2, y=3)
        assert u is not None
        assert gm.get_unit_at(2, 3) is u
        assert gm.add_unit(UnitType.FOOTMAN, player=1, x=2, y=3) is None
        gm.remove_unit(u.unit_id)
        assert gm.get_unit_at(2, 3) is None

    def test_move_unit(self):
        gm = GameMap(8, 8)
        u = gm.add_unit(UnitType.FOOTMAN, player=0, x=2, y=3)
        assert gm.move_unit(u.unit_id, 3, 4)
        assert gm.get_unit_at(2, 3) is None
        assert gm.get_unit_at(3, 4) is u

    def test_walls_block(self):
        gm = GameMap(8, 8)
        gm.set_wall(4, 4)
        assert gm.terrain[4][4] == Terrain.WALL
        assert not gm.is_passable(4, 4)
        assert gm.add_unit(UnitType.FOOTMAN, player=0, x=4, y=4) is None

    def test_units_in_range(self):
        gm = _duel_map((2, 2), (3, 3))
        gm.add_unit(UnitType.FOOTMAN, player=1, x=5, y=5)
        targets = gm.units_in_range(gm.units[0], enemy_player=1)
        assert [t.unit_id for t in targets] == [1]

    def test_skirmish_map_layout(self):
        gm = GameMap.create_skirmish_map(size=12, footmen_per_side=5)
        p0 = gm.get_player_units(0)
        p1 = gm.get_player_units(1)
        assert len(p0) == 5
        assert len(p1) == 5
        assert {u.x for u in p0} == {1}
        assert {u.x for u in p1} == {10}
        assert sorted(u.y for u in p0) == [3, 4, 5, 6, 7]
        assert [u.unit_id for u in p0] == [0, 1, 2, 3, 4]

    def test_skirmish_map_too_small(self):
        with pytest.raises(ValueError):
            GameMap.create_skirmish_map(size=3, footmen_per_side=4)


class TestActions:
    def test_direction_offsets(self):
        assert len(DIR_OFFSETS) == 8
        assert DIR_OFFSETS[Direction.NORTH] == (0, -1)
        assert DIR_OFFSETS[Direction.SOUTHEAST] == (1, 1)

    def test_direction_toward(self):
        assert direction_toward(0, 0, 3, 0) == Direction.EAST
        assert direction_toward(0, 0, 3, -2) == Direction.NORTHEAST
        assert direction_toward(5, 5, 1, 9) == Direction.SOUTHWEST
        assert direction_toward(2, 2, 2, 2) is None

    def test_neighbouring_directions(self):
        assert set(neighbouring_directions(Direction.NORTH)) == {
            Direction.NORTHEAST, Direction.NORTHWEST,
        }

    def test_attack_directives(self):
        actions = attack_directives({0: 5, 1: 6})
        assert len(actions) == 2
        assert all(a.action_type == ActionType.ATTACK for a in actions)
        assert {(a.unit_id, a.target_id) for a in actions} == {(0, 5), (1, 6)}

    def test_no_assignment_no_directive(self):
        assert attack_directives({}) == []


class TestGameState:
    def test_unit_views(self):
        gm = GameMap.create_skirmish_map(12, 5)
        state = GameState(gm)
        views = state.unit_views()
        assert len(views) == 10
        assert len(state.unit_views(0)) == 5
        v = state.unit_views(1)[0]
        assert isinstance(v, UnitView)
        assert v.player == 1
        assert v.hp == 160

    def test_unit_views_are_read_only(self):
        state = GameState(GameMap.create_skirmish_map(12, 5))
        v = state.unit_views()[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            v.hp = 1

    def test_not_over_at_start(self):
        state = GameState(GameMap.create_skirmish_map(12, 5))
        assert state.check_game_over() == (False, -1)

    def test_side_eliminated(self):
        gm = _duel_map((1, 1), (4, 4))
        gm.remove_unit(1)
        assert GameState(gm).check_game_over() == (True, 0)

    def test_timeout_decided_by_hp(self):
        gm = _duel_map((1, 1), (4, 4))
        gm.units[0].take_damage(10)
        state = GameState(gm)
        state.tick = state.max_ticks
        assert state.check_game_over() == (True, 1)


class TestGameEngine:
    def test_step_before_reset(self):
        with pytest.raises(RuntimeError):
            GameEngine().step([], [])

    def test_reset(self):
        engine = GameEngine(map_size=12, footmen_per_side=5)
        state = engine.reset()
        assert state.tick == 0
        assert not state.done
        assert len(state.game_map.get_player_units(0)) == 5

    def test_step_noop(self):
        engine = GameEngine()
        engine.reset()
        state, info = engine.step([], [])
        assert state.tick == 1
        assert info['p0_units'] == 5
        assert info['p1_hp'] == 5 * 160

    def test_attack_adjacent(self):
        engine = GameEngine()
        engine.reset(_duel_map((1, 1), (2, 2)))
        attack = [Action(0, ActionType.ATTACK, target_id=1)]
        state, _ = engine.step(attack, [])
        assert state.game_map.units[0].action_state == ActionState.ATTACKING
        assert state.game_map.units[1].hp == 160
        state, info = engine.step(attack, [])
        assert state.game_map.units[1].hp == 154
        assert info['damage_log'] == [DamageRecord(attacker_id=0, target_id=1, damage=6)]
        assert info['deaths'] == []

    def test_compound_attack_closes_in(self):
        engine = GameEngine()
        engine.reset(_duel_map((0, 0), (3, 0)))
        state, _ = engine.step([Action(0, ActionType.ATTACK, target_id=1)], [])
        assert state.game_map.units[0].position == (1, 0)
        state, _ = engine.step([Action(0, ActionType.ATTACK, target_id=1)], [])
        assert state.game_map.units[0].position == (2, 0)

    def test_compound_attack_steps_around_blocker(self):
        gm = _duel_map((0, 1), (3, 1))
        gm.set_wall(1, 1)
        engine = GameEngine()
        engine.reset(gm)
        state, _ = engine.step([Action(0, ActionType.ATTACK, target_id=1)], [])
        assert state.game_map.units[0].position in ((1, 0), (1, 2))

    def test_move(self):
        engine = GameEngine()
        engine.reset(_duel_map((1, 1), (4, 4)))
        state, _ = engine.step([Action(0, ActionType.MOVE, direction=Direction.SOUTH)], [])
        assert state.game_map.units[0].position == (1, 2)

    def test_directive_for_enemy_unit_ignored(self):
        engine = GameEngine()
        engine.reset(_duel_map((1, 1), (4, 4)))
        state, _ = engine.step([Action(1, ActionType.MOVE, direction=Direction.NORTH)], [])
        assert state.game_map.units[1].position == (4, 4)

    def test_simultaneous_kill_is_draw(self):
        engine = GameEngine()
        engine.reset(_duel_map((1, 1), (2, 1), hp=6))
        p0 = [Action(0, ActionType.ATTACK, target_id=1)]
        p1 = [Action(1, ActionType.ATTACK, target_id=0)]
        engine.step(p0, p1)
        state, info = engine.step(p0, p1)
        assert state.done
        assert state.winner == 2
        assert info['p0_units'] == 0 and info['p1_units'] == 0

    def test_dead_units_removed(self):
        engine = GameEngine()
        engine.reset(_duel_map((1, 1), (2, 1), hp=6))
        p0 = [Action(0, ActionType.ATTACK, target_id=1)]
        engine.step(p0, [])
        state, info = engine.step(p0, [])
        assert info['deaths'] == [1]
        assert 1 not in state.game_map.units
        assert state.done
        assert state.winner == 0

    def test_max_ticks(self):
        engine = GameEngine(max_ticks=3)
        engine.reset(_duel_map((0, 0), (5, 5)))
        for _ in range(3):
            state, _ = engine.step([], [])
        assert state.done
        assert state.winner == 2


class TestAIOpponents:
    def test_registry(self):
        assert set(OPPONENTS) == {'nearest', 'random', 'idle'}

    def test_idle_ai(self):
        state = GameState(GameMap.create_skirmish_map(12, 5))
        assert IdleAI().get_actions(state, player=1) == []

    def test_nearest_target_ai(self):
        gm = GameMap(8, 8)
        gm.add_unit(UnitType.FOOTMAN, player=1, x=4, y=4)
        gm.add_unit(UnitType.FOOTMAN, player=0, x=1, y=1)
        gm.add_unit(UnitType.FOOTMAN, player=0, x=5, y=6)
        actions = NearestTargetAI().get_actions(GameState(gm), player=1)
        assert len(actions) == 1
        assert actions[0].target_id == 2

    def test_nearest_tie_breaks_by_id(self):
        gm = GameMap(8, 8)
        gm.add_unit(UnitType.FOOTMAN, player=1, x=4, y=4)
        gm.add_unit(UnitType.FOOTMAN, player=0, x=2, y=4)
        gm.add_unit(UnitType.FOOTMAN, player=0, x=6, y=4)
        actions = NearestTargetAI().get_actions(GameState(gm), player=1)
        assert actions[0].target_id == 1

    def test_random_target_ai_reproducible(self):
        state = GameState(GameMap.create_skirmish_map(12, 5))
        a = RandomTargetAI(seed=7).get_actions(state, player=1)
        b = RandomTargetAI(seed=7).get_actions(state, player=1)
        assert a == b
        assert all(x.target_id in range(5) for x in a)

    def test_random_target_ai_keeps_fighting_in_reach(self):
        gm = GameMap(8, 8)
        gm.add_unit(UnitType.FOOTMAN, player=1, x=4, y=4)
        gm.add_unit(UnitType.FOOTMAN, player=0, x=0, y=0)
        gm.add_unit(UnitType.FOOTMAN, player=0, x=5, y=5)
        gm.add_unit(UnitType.FOOTMAN, player=0, x=7, y=0)
        state = GameState(gm)
        for seed in range(10):
            actions = RandomTargetAI(seed=seed).get_actions(state, player=1)
            assert actions[0].target_id == 2

    def test_ai_vs_ai_game(self):
        engine = GameEngine(map_size=8, footmen_per_side=3, max_ticks=500)
        state = engine.reset()
        ai0, ai1 = NearestTargetAI(), NearestTargetAI()
        for _ in range(500):
            state, info = engine.step(ai0.get_actions(state, 0),
                                      ai1.get_actions(state, 1))
            if state.done:
                break
        assert state.done
        assert state.winner in (0, 1, 2)


class TestRenderer:
    def test_render(self):
        engine = GameEngine()
        state = engine.reset()
        output = GameRenderer.render(state)
        assert "Tick:" in output
        assert "F" in output
        assert "f" in output

    def test_render_orders_and_wounded(self):
        engine = GameEngine()
        state = engine.reset(_duel_map((1, 1), (2, 1), hp=30))
        output = GameRenderer.render(state, assignment={0: 1})
        assert "Orders: 0->1" in output
        assert "1|.Ww...|1" in output

    def test_render_map_only(self):
        state = GameEngine().reset()
        output = GameRenderer.render(state, show_info=False)
        assert "Tick:" not in output
        assert len(output.splitlines()) == 12 + 4

    def test_render_compact(self):
        state = GameEngine().reset()
        output = GameRenderer.render_compact(state)
        assert output.startswith("T0000")
        assert "P0[u=5 hp=800]" in output

    def test_render_unit_details(self):
        state = GameEngine().reset()
        output = GameRenderer.render_unit_details(state, 0)
        assert output.startswith("Player 0 units:")
        assert "HP=160/160" in output


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
