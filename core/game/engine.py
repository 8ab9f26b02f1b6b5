"""War game engine with state machine."""

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable, Sequence

from transitions import Machine

from core.cards import Card, Deck, ShuffleMethod
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import (
    BATTLE_CARDS_REQUIRED,
    WAR_CARDS_REQUIRED,
    GameOutcome,
    GameState,
    Player,
)

logger = logging.getLogger(__name__)


class InvalidStateError(RuntimeError):
    """Raised when an action is not allowed in the current game state."""

    def __init__(self, message: str, state: GameState) -> None:
        super().__init__(message)
        self.state = state


@dataclass(frozen=True, slots=True)
class BattleCard:
    """A card committed to a battle stack."""

    card: Card
    face_down: bool = False

    def __str__(self) -> str:
        return f"{self.card} (face down)" if self.face_down else str(self.card)


def _as_battle_cards(cards: Sequence[Card]) -> tuple[BattleCard, ...]:
    # Odd positions are the skipped cards of a war
    return tuple(BattleCard(card, face_down=i % 2 == 1) for i, card in enumerate(cards))


@dataclass(frozen=True)
class BattleResult:
    """Snapshot of the game after one call to play_battle()."""

    battle_cards_player1: tuple[BattleCard, ...]
    battle_cards_player2: tuple[BattleCard, ...]
    round_winner: Player
    wars: int
    outcome: GameOutcome
    rounds_won_player1: int
    rounds_won_player2: int
    cards_remaining_player1: int
    cards_remaining_player2: int

    @property
    def game_over(self) -> bool:
        return self.outcome.is_decided

    @property
    def message(self) -> str | None:
        """Announcement of the game's result, None while undecided."""
        return self.outcome.message


class WarGame:
    """
    War game engine using a state machine.

    Owns the two player stacks and the two battle stacks. One call to
    play_battle() resolves a whole battle, including any wars it escalates
    into. The engine is UI-agnostic: callers read BattleResult values and
    the read-only properties, or subscribe to events.
    """

    # State machine states
    STATES = [s.name.lower() for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {
            "trigger": "deal",
            "source": ["waiting_for_setup", "awaiting_battle", "game_over"],
            "dest": "awaiting_battle",
        },
        {"trigger": "go_to_war", "source": ["awaiting_battle", "in_war"], "dest": "in_war"},
        {"trigger": "settle", "source": ["awaiting_battle", "in_war"], "dest": "awaiting_battle"},
        {"trigger": "finish", "source": ["awaiting_battle", "in_war"], "dest": "game_over"},
    ]

    def __init__(
        self,
        rng: Random | None = None,
        shuffle_method: ShuffleMethod = "classic",
    ) -> None:
        """
        Initialize an engine with no cards dealt.

        Args:
            rng: Random number generator used by new_game()
            shuffle_method: Shuffle used by new_game()
        """
        self._rng = rng or Random()
        self._shuffle_method: ShuffleMethod = shuffle_method

        self._player1: list[Card] = []
        self._player2: list[Card] = []
        self._battle1: list[Card] = []
        self._battle2: list[Card] = []
        self._rounds_won1 = 0
        self._rounds_won2 = 0
        self._battles_played = 0
        self._war_depth = 0
        self._outcome = GameOutcome.UNDECIDED
        self._last_result: BattleResult | None = None

        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="waiting_for_setup",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> GameState:
        """Get current game state as enum."""
        return GameState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def new_game(
        self,
        rng: Random | None = None,
        shuffle_method: ShuffleMethod | None = None,
    ) -> None:
        """Shuffle a fresh deck, deal it alternately and set up the game."""
        deck = Deck(rng=rng or self._rng)
        deck.shuffle(shuffle_method or self._shuffle_method)
        player1, player2 = deck.deal()
        self.setup(player1, player2)

    def setup(self, player1_cards: Sequence[Card], player2_cards: Sequence[Card]) -> None:
        """
        Start (or restart) a game with the given player stacks.

        Args:
            player1_cards: Player 1's stack, front card first
            player2_cards: Player 2's stack, front card first

        Raises:
            ValueError: If a card appears in both stacks
        """
        shared = set(player1_cards) & set(player2_cards)
        if shared:
            raise ValueError(
                "Players cannot share cards: " + ", ".join(sorted(str(c) for c in shared))
            )

        self._player1 = list(player1_cards)
        self._player2 = list(player2_cards)
        self._battle1.clear()
        self._battle2.clear()
        self._rounds_won1 = 0
        self._rounds_won2 = 0
        self._battles_played = 0
        self._war_depth = 0
        self._outcome = GameOutcome.UNDECIDED
        self._last_result = None

        self.deal()
        self.events.emit_new(
            EventType.GAME_STARTED,
            cards_player1=len(self._player1),
            cards_player2=len(self._player2),
        )
        logger.debug(
            "game set up with %d/%d cards", len(self._player1), len(self._player2)
        )

        if not self.can_continue(BATTLE_CARDS_REQUIRED):
            self._end_game(BATTLE_CARDS_REQUIRED)

    def can_continue(self, required_cards: int) -> bool:
        """Check that both players hold at least required_cards cards."""
        return len(self._player1) >= required_cards and len(self._player2) >= required_cards

    def play_battle(self) -> BattleResult:
        """
        Play one battle, escalating into wars on tied ranks.

        Returns:
            The result of the battle

        Raises:
            InvalidStateError: If the game has not been set up or is over
        """
        if not self.can_battle:
            message = (
                "Game is over" if self.state == GameState.GAME_OVER else "Game has not been set up"
            )
            self.events.emit_new(
                EventType.INVALID_ACTION,
                message=message,
                state=self.state.name,
            )
            raise InvalidStateError(message, self.state)

        self._battle1.clear()
        self._battle2.clear()
        self._battles_played += 1
        self._war_depth = 0
        self.events.emit_new(EventType.BATTLE_STARTED, battle=self._battles_played)

        self._commit(BATTLE_CARDS_REQUIRED)
        winner = self._compare_cards()

        result = self._snapshot(winner)
        self._last_result = result
        return result

    def _commit(self, count: int) -> None:
        """Move the front count cards of each player stack to the battle stacks."""
        self._battle1.extend(self._player1[:count])
        self._battle2.extend(self._player2[:count])
        del self._player1[:count]
        del self._player2[:count]
        self.events.emit_new(
            EventType.CARDS_COMMITTED,
            player1=[str(c) for c in self._battle1[-count:]],
            player2=[str(c) for c in self._battle2[-count:]],
        )

    def _compare_cards(self) -> Player:
        """Compare the last battle cards until one player wins or the game ends."""
        while True:
            card1 = self._battle1[-1]
            card2 = self._battle2[-1]

            if not card1.ties(card2):
                break

            if not self.can_continue(WAR_CARDS_REQUIRED):
                self.events.emit_new(
                    EventType.WAR_CUT_SHORT,
                    rank=card1.rank.name,
                    cards_player1=len(self._player1),
                    cards_player2=len(self._player2),
                )
                self._end_game(WAR_CARDS_REQUIRED)
                return Player.NONE

            self._war_depth += 1
            self.go_to_war()
            self.events.emit_new(
                EventType.WAR_DECLARED, rank=card1.rank.name, depth=self._war_depth
            )
            logger.debug("war %d on %s", self._war_depth, card1.rank)
            self._commit(WAR_CARDS_REQUIRED)

        if card1.beats(card2):
            winner = Player.PLAYER1
            # Winner's own battle stack goes in first
            self._player1.extend(self._battle1)
            self._player1.extend(self._battle2)
            self._rounds_won1 += 1
        else:
            winner = Player.PLAYER2
            self._player2.extend(self._battle2)
            self._player2.extend(self._battle1)
            self._rounds_won2 += 1

        self.events.emit_new(
            EventType.ROUND_WON,
            winner=winner.name,
            cards_won=len(self._battle1) + len(self._battle2),
            wars=self._war_depth,
        )
        logger.debug(
            "battle %d won by %s (%d/%d cards left)",
            self._battles_played,
            winner,
            len(self._player1),
            len(self._player2),
        )

        if self.can_continue(BATTLE_CARDS_REQUIRED):
            self.settle()
        else:
            self._end_game(BATTLE_CARDS_REQUIRED)
        return winner

    def _end_game(self, required_cards: int) -> None:
        """Decide the outcome from which players are short of required_cards."""
        player1_short = len(self._player1) < required_cards
        player2_short = len(self._player2) < required_cards

        if player1_short and player2_short:
            self._outcome = GameOutcome.TIE
        elif player1_short:
            self._outcome = GameOutcome.PLAYER2_WINS
        else:
            self._outcome = GameOutcome.PLAYER1_WINS

        self.finish()
        self.events.emit_new(
            EventType.GAME_ENDED,
            outcome=self._outcome.name,
            message=self._outcome.message,
            battles=self._battles_played,
        )
        logger.info(
            "game over after %d battles: %s", self._battles_played, self._outcome.message
        )

    def _snapshot(self, winner: Player) -> BattleResult:
        return BattleResult(
            battle_cards_player1=_as_battle_cards(self._battle1),
            battle_cards_player2=_as_battle_cards(self._battle2),
            round_winner=winner,
            wars=self._war_depth,
            outcome=self._outcome,
            rounds_won_player1=self._rounds_won1,
            rounds_won_player2=self._rounds_won2,
            cards_remaining_player1=len(self._player1),
            cards_remaining_player2=len(self._player2),
        )

    @property
    def outcome(self) -> GameOutcome:
        """Terminal outcome, UNDECIDED while the game goes on."""
        return self._outcome

    @property
    def is_over(self) -> bool:
        return self.state == GameState.GAME_OVER

    @property
    def can_battle(self) -> bool:
        """Check if play_battle() may be called."""
        return self.state == GameState.AWAITING_BATTLE

    @property
    def last_result(self) -> BattleResult | None:
        return self._last_result

    @property
    def war_depth(self) -> int:
        """Number of wars fought in the current (or last) battle."""
        return self._war_depth

    @property
    def battles_played(self) -> int:
        return self._battles_played

    @property
    def rounds_won_player1(self) -> int:
        return self._rounds_won1

    @property
    def rounds_won_player2(self) -> int:
        return self._rounds_won2

    @property
    def cards_remaining_player1(self) -> int:
        return len(self._player1)

    @property
    def cards_remaining_player2(self) -> int:
        return len(self._player2)

    @property
    def player1_stack(self) -> tuple[Card, ...]:
        return tuple(self._player1)

    @property
    def player2_stack(self) -> tuple[Card, ...]:
        return tuple(self._player2)

    @property
    def battle_stack_player1(self) -> tuple[Card, ...]:
        return tuple(self._battle1)

    @property
    def battle_stack_player2(self) -> tuple[Card, ...]:
        return tuple(self._battle2)

    @property
    def total_cards(self) -> int:
        """Cards across all four stacks."""
        return len(self._player1) + len(self._player2) + len(self._battle1) + len(self._battle2)
