"""
Training Script - Train the footman Q-learning controller in the skirmish.

Usage:
    python -m qlearn_ai.train                        # 100 training episodes, fresh weights
    python -m qlearn_ai.train 300                    # 300 training episodes
    python -m qlearn_ai.train 300 true               # Continue from saved weights
    python -m qlearn_ai.train --opponent random      # Different enemy script
    python -m qlearn_ai.train --render --verbose     # Watch and log every step
"""

import argparse
import logging
import time
from typing import Optional

from game.actions import attack_directives
from game.ai_opponents import OPPONENTS, RandomTargetAI
from game.engine import GameEngine
from game.renderer import GameRenderer
from qlearn_ai.config import (
    QLearningConfig, RunConfig, parse_load_flag, resolve_episode_count,
)
from qlearn_ai.controller import EpisodeController
from qlearn_ai.estimator import LinearQEstimator
from qlearn_ai.features import FeatureExtractor
from qlearn_ai.learner import TDLearner
from qlearn_ai.report import format_cycle_line, format_game_line, format_test_data
from qlearn_ai.selector import ActionSelector
from qlearn_ai.weights_store import WeightStore

logger = logging.getLogger(__name__)


def build_controller(config: QLearningConfig,
                     store: Optional[WeightStore] = None,
                     load_weights: bool = False) -> EpisodeController:
    """Wire estimator, selector and learner into a controller for player 0."""
    estimator = LinearQEstimator(seed=config.weight_seed,
                                 update_rule=config.update_rule)
    if load_weights and store is not None:
        weights = store.load()
        if weights is not None:
            estimator.set_weights(weights)

    extractor = FeatureExtractor(config.survival_health_threshold)
    selector = ActionSelector(estimator, extractor, seed=config.selection_seed)
    learner = TDLearner(estimator, extractor, selector,
                        discount_factor=config.discount_factor,
                        learning_rate=config.learning_rate)
    return EpisodeController(selector, learner, config, player=0)


def create_opponent(name: str, seed: Optional[int] = None):
    if name not in OPPONENTS:
        raise ValueError(f"Unknown opponent {name!r}; choose from {sorted(OPPONENTS)}")
    if OPPONENTS[name] is RandomTargetAI:
        return RandomTargetAI(seed=seed)
    return OPPONENTS[name]()


def play_episode(controller: EpisodeController, engine: GameEngine, opponent,
                 render: bool = False) -> bool:
    """
    Play one skirmish to completion. The controller sees every tick,
    including the terminal one. Returns True if the controller's side won.
    """
    state = engine.reset()
    while not state.done:
        assignment = controller.step(state.unit_views())
        p0_actions = attack_directives(assignment)
        p1_actions = opponent.get_actions(state, player=1)
        state, info = engine.step(p0_actions, p1_actions)
        if render:
            print(GameRenderer.render(state, assignment=assignment))
            print(GameRenderer.render_unit_details(state, controller.player))
        else:
            logger.debug(GameRenderer.render_compact(state))

    # Credit the final transition
    controller.step(state.unit_views())
    return state.winner == controller.player


def train(run: RunConfig, config: Optional[QLearningConfig] = None) -> dict:
    """Main training function."""
    config = config or QLearningConfig()
    config.episode_budget = run.episodes
    if run.seed is not None:
        config.weight_seed = run.seed
        config.selection_seed = run.seed
    config.validate()

    print("=" * 70)
    print("FOOTMAN Q-LEARNING - Skirmish Training")
    print("=" * 70)

    engine = GameEngine(map_size=run.map_size,
                        footmen_per_side=run.footmen_per_side,
                        max_ticks=run.max_ticks)
    opponent = create_opponent(run.opponent, seed=run.seed)
    store = WeightStore(run.weights_path)
    controller = build_controller(config, store, load_weights=run.load_weights)

    print(f"\nEnvironment: {run.map_size}x{run.map_size} map, "
          f"{run.footmen_per_side} footmen per side")
    print(f"Opponent: {run.opponent}")
    print(f"Training episodes: {run.episodes}")
    print(f"Weights: {run.weights_path} (loaded: {run.load_weights})")

    start_time = time.time()
    wins = 0
    games = 0
    output_lines = []

    while not controller.finished:
        controller.start_episode()
        won = play_episode(controller, engine, opponent, render=run.render)
        summary = controller.end_episode(won)
        store.save(controller.estimator.weights)

        games += 1
        wins += int(won)
        print(format_game_line(summary))

        if summary.cycle_complete:
            print(format_test_data(controller.reward_history,
                                   controller.schedule.training_episodes))
            line = format_cycle_line(summary.training_games,
                                     summary.average_evaluation_reward)
            output_lines.append(line)
            print(line)

    elapsed = time.time() - start_time
    stats = controller.get_stats()

    print("\n" + "=" * 70)
    print("TRAINING COMPLETE")
    print("=" * 70)
    for line in output_lines:
        print(f"  {line}")
    print(f"  Games played:     {games}")
    print(f"  Win rate:         {wins / max(games, 1):.1%}")
    print(f"  Decision steps:   {stats['steps']} ({stats['skipped_steps']} skipped)")
    print(f"  Weight updates:   {stats['updates']}")
    print(f"  Final epsilon:    {stats['epsilon']:.3f}")
    print(f"  Elapsed time:     {elapsed:.1f}s")
    print(f"\nWeights saved to: {run.weights_path}")

    stats.update({'games': games, 'wins': wins, 'elapsed_seconds': elapsed})
    return stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Train a Q-learning footman controller'
    )
    parser.add_argument('episodes', type=int, nargs='?', default=None,
                        help='Training episodes to run (default: 100)')
    parser.add_argument('load_weights', nargs='?', default=None,
                        help='Load saved weights first: true/false (default: false)')
    parser.add_argument('--weights-path', type=str, default=RunConfig.weights_path,
                        help=f'Weight file (default: {RunConfig.weights_path})')
    parser.add_argument('--map-size', type=int, default=12,
                        help='Map size (default: 12)')
    parser.add_argument('--footmen', type=int, default=5,
                        help='Footmen per side (default: 5)')
    parser.add_argument('--max-ticks', type=int, default=1000,
                        help='Max game ticks per episode (default: 1000)')
    parser.add_argument('--opponent', type=str, default='nearest',
                        choices=sorted(OPPONENTS),
                        help='Enemy script (default: nearest)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for weights, exploration and opponent')
    parser.add_argument('--render', action='store_true',
                        help='Print the map and unit details after every tick')
    parser.add_argument('--verbose', action='store_true',
                        help='Debug logging')
    return parser


def parse_run_config(argv=None) -> RunConfig:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    return RunConfig(
        episodes=resolve_episode_count(args.episodes),
        load_weights=parse_load_flag(args.load_weights),
        weights_path=args.weights_path,
        map_size=args.map_size,
        footmen_per_side=args.footmen,
        max_ticks=args.max_ticks,
        opponent=args.opponent,
        seed=args.seed,
        render=args.render,
        verbose=args.verbose,
    )


def main(argv=None):
    run = parse_run_config(argv)
    train(run)


if __name__ == '__main__':
    main()
