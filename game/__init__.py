"""
Footman Skirmish Environment for the Q-learning controller

A pure-Python melee skirmish modeled after the classic footman-versus-footman
reinforcement learning scenario. Features:

- Grid-based maps with walls and one unit per cell
- Footman units with Chebyshev (8-neighbourhood) melee range
- Compound attack directives: close in, then strike
- Durative actions with simultaneous damage resolution
- Read-only unit observations for controllers
- Deterministic game mechanics
"""

from game.units import UnitType, Unit, UNIT_STATS
from game.game_map import GameMap
from game.game_state import GameState, UnitView
from game.actions import ActionType, Action, attack_directives
from game.engine import GameEngine, DamageRecord
from game.ai_opponents import IdleAI, NearestTargetAI, RandomTargetAI, OPPONENTS
from game.renderer import GameRenderer

__all__ = [
    "UnitType", "Unit", "UNIT_STATS",
    "GameMap", "GameState", "UnitView",
    "ActionType", "Action", "attack_directives",
    "GameEngine", "DamageRecord",
    "IdleAI", "NearestTargetAI", "RandomTargetAI", "OPPONENTS",
    "GameRenderer",
]
