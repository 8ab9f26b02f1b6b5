"""Headless simulation of complete War games."""

import logging
from collections import Counter
from dataclasses import dataclass
from random import Random

from core.cards import ShuffleMethod
from core.game.engine import WarGame
from core.game.events import EventType
from core.game.state import GameOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSummary:
    """Result of one complete game."""

    outcome: GameOutcome
    battles: int
    wars: int
    longest_war: int
    rounds_won_player1: int
    rounds_won_player2: int
    capped: bool = False


@dataclass(frozen=True)
class SimulationSummary:
    """Aggregate over many games."""

    games: int
    player1_wins: int
    player2_wins: int
    ties: int
    capped: int
    mean_battles: float
    mean_wars: float
    longest_war: int

    @property
    def player1_win_rate(self) -> float:
        return self.player1_wins / self.games if self.games else 0.0

    @property
    def player2_win_rate(self) -> float:
        return self.player2_wins / self.games if self.games else 0.0

    @property
    def tie_rate(self) -> float:
        return self.ties / self.games if self.games else 0.0


def play_full_game(
    rng: Random,
    shuffle_method: ShuffleMethod = "classic",
    max_battles: int = 10_000,
) -> GameSummary:
    """
    Deal a shuffled deck and play battles until the game ends.

    War can cycle forever, so play stops after max_battles; such a game is
    reported as capped with an UNDECIDED outcome.

    Args:
        rng: Random source for the shuffle
        shuffle_method: Shuffle to use
        max_battles: Battle cap

    Returns:
        Summary of the game
    """
    if max_battles < 1:
        raise ValueError("max_battles must be at least 1")

    game = WarGame(rng=rng, shuffle_method=shuffle_method)
    game.new_game()

    wars = 0
    longest_war = 0
    while game.can_battle and game.battles_played < max_battles:
        result = game.play_battle()
        wars += len(game.events.events_of(EventType.WAR_DECLARED))
        longest_war = max(longest_war, result.wars)
        game.events.clear_history()

    return GameSummary(
        outcome=game.outcome,
        battles=game.battles_played,
        wars=wars,
        longest_war=longest_war,
        rounds_won_player1=game.rounds_won_player1,
        rounds_won_player2=game.rounds_won_player2,
        capped=not game.is_over,
    )


def simulate_games(
    num_games: int,
    seed: int | None = None,
    shuffle_method: ShuffleMethod = "classic",
    max_battles: int = 10_000,
) -> SimulationSummary:
    """
    Play many games from one seeded random source.

    Args:
        num_games: Number of games to play
        seed: Seed for reproducible results (None for a random seed)
        shuffle_method: Shuffle to use
        max_battles: Battle cap per game

    Returns:
        Aggregate statistics
    """
    if num_games < 1:
        raise ValueError("num_games must be at least 1")

    rng = Random(seed)
    summaries = [play_full_game(rng, shuffle_method, max_battles) for _ in range(num_games)]
    outcomes = Counter(s.outcome for s in summaries)

    summary = SimulationSummary(
        games=num_games,
        player1_wins=outcomes[GameOutcome.PLAYER1_WINS],
        player2_wins=outcomes[GameOutcome.PLAYER2_WINS],
        ties=outcomes[GameOutcome.TIE],
        capped=sum(1 for s in summaries if s.capped),
        mean_battles=sum(s.battles for s in summaries) / num_games,
        mean_wars=sum(s.wars for s in summaries) / num_games,
        longest_war=max(s.longest_war for s in summaries),
    )
    logger.info(
        "simulated %d games: P1 %d, P2 %d, ties %d, capped %d",
        summary.games,
        summary.player1_wins,
        summary.player2_wins,
        summary.ties,
        summary.capped,
    )
    return summary
