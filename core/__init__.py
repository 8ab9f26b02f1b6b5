"""Core War engine - 100% UI-agnostic."""

from core.cards import Card, Deck, Rank, Suit, deal, fisher_yates_shuffle, new_deck, shuffle

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "deal",
    "fisher_yates_shuffle",
    "new_deck",
    "shuffle",
]
