"""
Progress reporting - Text tables and per-game lines for training runs.
"""

from typing import Sequence


def format_test_data(average_rewards: Sequence[float], games_per_row: int = 10) -> str:
    """Table of games trained on vs. average cumulative evaluation reward."""
    lines = [
        "",
        "Games Played      Average Cumulative Reward",
        "-------------     -------------------------",
    ]
    for i, reward in enumerate(average_rewards):
        games = str(games_per_row * i)
        avg = f"{reward:.2f}"
        lines.append(f"    {games:<14}{avg:>14}")
    lines.append("-------------     -------------------------")
    return "\n".join(lines)


def format_game_line(summary) -> str:
    """One-line result for a finished episode."""
    result = "won" if summary.won else "lost"
    if summary.evaluation_index is not None:
        return (f"Played evaluation game {summary.evaluation_index} and {result} "
                f"(Cumulative reward: {summary.cumulative_reward:.2f})")
    return f"Played game {summary.training_games} and {result}"


def format_cycle_line(games_trained: int, average_reward: float) -> str:
    return f"Games trained on: {games_trained}, Average Reward: {average_reward:.2f}"
