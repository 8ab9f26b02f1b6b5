"""Pytest fixtures for War engine tests."""

import pytest
from random import Random

from core.cards import Card, Deck
from core.game import WarGame


def cards(*codes: str) -> list[Card]:
    """Build a stack from card strings, front card first."""
    return [Card.from_string(code) for code in codes]


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    d = Deck(rng=rng)
    d.shuffle()
    return d


@pytest.fixture
def game():
    """An engine that has not been set up."""
    return WarGame()


@pytest.fixture
def dealt_game(rng):
    """A game dealt from a seeded, shuffled deck."""
    g = WarGame(rng=rng)
    g.new_game()
    return g


@pytest.fixture
def stacked_game():
    """Factory for a game with fixed stacks given as card strings."""

    def _make(player1: list[str], player2: list[str]) -> WarGame:
        g = WarGame()
        g.setup(cards(*player1), cards(*player2))
        return g

    return _make
