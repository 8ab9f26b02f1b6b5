"""Card and Deck classes - immutable card representations and shuffling."""

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterator, Literal

ShuffleMethod = Literal["classic", "fisher_yates"]

CARDS_IN_DECK = 52


class Suit(Enum):
    """Card suits."""

    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3

    def __str__(self) -> str:
        return self.name.title()

    @property
    def symbol(self) -> str:
        """Return the suit glyph."""
        return {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }[self]


class Rank(Enum):
    """Card ranks, ordered Two (lowest) to Ace (highest)."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        return self.name.title()

    def __lt__(self, other: "Rank") -> bool:
        if not isinstance(other, Rank):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: "Rank") -> bool:
        if not isinstance(other, Rank):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: "Rank") -> bool:
        if not isinstance(other, Rank):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: "Rank") -> bool:
        if not isinstance(other, Rank):
            return NotImplemented
        return self.value >= other.value

    @property
    def short(self) -> str:
        """Return the compact label ('2'..'10', 'J', 'Q', 'K', 'A')."""
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]


_RANK_ALIASES = {rank.short: rank for rank in Rank} | {"T": Rank.TEN}

_SUIT_ALIASES = {
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card. Only the rank takes part in a battle."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank} of {self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def short(self) -> str:
        """Compact form such as 'Q♥'."""
        return f"{self.rank.short}{self.suit.symbol}"

    def beats(self, other: "Card") -> bool:
        """Check if this card outranks another (suits are ignored)."""
        return self.rank > other.rank

    def ties(self, other: "Card") -> bool:
        """Check if both cards share a rank."""
        return self.rank == other.rank

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh', '10D'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        if rank_str not in _RANK_ALIASES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_ALIASES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_ALIASES[rank_str], _SUIT_ALIASES[suit_str])


def new_deck() -> list[Card]:
    """Return the 52 cards in canonical order: suit-major, rank-minor."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def shuffle(cards: list[Card], rng: Random) -> None:
    """
    Shuffle cards in place by swapping every position with a random one.

    The swap partner is drawn from the whole list on every pass rather than
    from the unshuffled suffix, so some orderings are slightly more likely
    than others. Use fisher_yates_shuffle() for an unbiased permutation.

    Args:
        cards: Cards to permute
        rng: Random source (seed it for reproducible games)
    """
    n = len(cards)
    for i in range(n):
        j = rng.randrange(n)
        cards[i], cards[j] = cards[j], cards[i]


def fisher_yates_shuffle(cards: list[Card], rng: Random) -> None:
    """Shuffle cards in place with the textbook Fisher-Yates algorithm."""
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]


SHUFFLES = {
    "classic": shuffle,
    "fisher_yates": fisher_yates_shuffle,
}


def deal(cards: list[Card]) -> tuple[list[Card], list[Card]]:
    """
    Deal cards alternately to two players, starting with player 1.

    A trailing odd card is left undealt.

    Returns:
        (player1_cards, player2_cards)
    """
    pairs = len(cards) // 2
    player1 = [cards[2 * i] for i in range(pairs)]
    player2 = [cards[2 * i + 1] for i in range(pairs)]
    return player1, player2


class Deck:
    """A standard 52-card deck."""

    def __init__(self, rng: Random | None = None) -> None:
        """Initialize a new deck in canonical order."""
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self.reset()

    def reset(self) -> None:
        """Reset deck to all 52 cards in order."""
        self._cards = new_deck()

    def shuffle(self, method: ShuffleMethod = "classic") -> None:
        """
        Shuffle the deck.

        Args:
            method: "classic" (full-range swap) or "fisher_yates"
        """
        if method not in SHUFFLES:
            raise ValueError(f"Unknown shuffle method: {method}")
        SHUFFLES[method](self._cards, self._rng)

    def deal(self) -> tuple[list[Card], list[Card]]:
        """Split the deck alternately into two player stacks."""
        return deal(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards(self) -> list[Card]:
        """Return a copy of the cards in their current order."""
        return list(self._cards)
