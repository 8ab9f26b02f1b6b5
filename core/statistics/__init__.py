"""Statistics over simulated War games."""

from core.statistics.simulation import (
    GameSummary,
    SimulationSummary,
    play_full_game,
    simulate_games,
)

__all__ = [
    "GameSummary",
    "SimulationSummary",
    "play_full_game",
    "simulate_games",
]
