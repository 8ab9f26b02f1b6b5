"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


# Game schemas
class NewGameRequest(BaseModel):
    """Request to start a new game."""

    seed: int | None = Field(default=None, description="Seed for a reproducible shuffle")
    shuffle_method: Literal["classic", "fisher_yates"] | None = None


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    name: str
    short: str


class BattleCardResponse(BaseModel):
    """Card committed to a battle stack."""

    card: CardResponse
    face_down: bool


class BattleResponse(BaseModel):
    """Result of one battle."""

    battle_cards_player1: list[BattleCardResponse]
    battle_cards_player2: list[BattleCardResponse]
    round_winner: Literal["NONE", "PLAYER1", "PLAYER2"]
    wars: int
    outcome: Literal["UNDECIDED", "PLAYER1_WINS", "PLAYER2_WINS", "TIE"]
    game_over: bool
    message: str | None
    rounds_won_player1: int
    rounds_won_player2: int
    cards_remaining_player1: int
    cards_remaining_player2: int


class GameStateResponse(BaseModel):
    """Current game state."""

    state: str
    rounds_won_player1: int
    rounds_won_player2: int
    cards_remaining_player1: int
    cards_remaining_player2: int
    battles_played: int
    last_battle: BattleResponse | None
    outcome: str
    message: str | None
    can_battle: bool


# Statistics schemas
class SimulationRequest(BaseModel):
    """Request to simulate complete games."""

    games: int = Field(default=100, ge=1, le=10_000)
    seed: int | None = None
    shuffle_method: Literal["classic", "fisher_yates"] = "classic"
    max_battles: int = Field(default=10_000, ge=1, le=100_000)


class SimulationResponse(BaseModel):
    """Aggregate simulation result."""

    games: int
    player1_wins: int
    player2_wins: int
    ties: int
    capped: int
    mean_battles: float
    mean_wars: float
    longest_war: int
    player1_win_rate: float
    player2_win_rate: float
    tie_rate: float
