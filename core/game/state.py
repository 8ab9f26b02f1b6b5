"""Game state, player and outcome enumerations."""

from enum import Enum, auto

# Cards each player must still hold to take part in the next step
BATTLE_CARDS_REQUIRED = 1
WAR_CARDS_REQUIRED = 2


class GameState(Enum):
    """
    Game state machine states.

    Flow: WAITING_FOR_SETUP → AWAITING_BATTLE ⇄ IN_WAR → GAME_OVER
    """

    # No cards dealt yet
    WAITING_FOR_SETUP = auto()

    # Ready for the next battle
    AWAITING_BATTLE = auto()

    # Ranks tied and a war is being fought
    IN_WAR = auto()

    # A player could not commit the cards required
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[GameState, list[GameState]] = {
    GameState.WAITING_FOR_SETUP: [GameState.AWAITING_BATTLE],
    GameState.AWAITING_BATTLE: [
        GameState.AWAITING_BATTLE,
        GameState.IN_WAR,
        GameState.GAME_OVER,
    ],
    GameState.IN_WAR: [GameState.IN_WAR, GameState.AWAITING_BATTLE, GameState.GAME_OVER],
    # Only a new setup leaves GAME_OVER
    GameState.GAME_OVER: [GameState.AWAITING_BATTLE],
}


def is_valid_transition(from_state: GameState, to_state: GameState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])


class Player(Enum):
    """Round winner. NONE when a war could not be finished."""

    NONE = 0
    PLAYER1 = 1
    PLAYER2 = 2

    def __str__(self) -> str:
        if self == Player.NONE:
            return "None"
        return f"Player {self.value}"


class GameOutcome(Enum):
    """Terminal result of a game."""

    UNDECIDED = auto()
    PLAYER1_WINS = auto()
    PLAYER2_WINS = auto()
    TIE = auto()

    @property
    def message(self) -> str | None:
        """Human-readable announcement, None while the game goes on."""
        return {
            GameOutcome.UNDECIDED: None,
            GameOutcome.PLAYER1_WINS: "Player 1 has won the game!",
            GameOutcome.PLAYER2_WINS: "Player 2 has won the game!",
            GameOutcome.TIE: "Both players are out of cards!",
        }[self]

    @property
    def is_decided(self) -> bool:
        return self != GameOutcome.UNDECIDED
