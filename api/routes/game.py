"""Game API endpoints."""

import time
from random import Random
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Header

from api.schemas import (
    BattleCardResponse,
    BattleResponse,
    CardResponse,
    GameStateResponse,
    NewGameRequest,
)
from api.session import create_session, extract_session_id, get_session, update_session
from config import config
from core.cards import Card, Rank, Suit
from core.game import BattleCard, BattleResult, GameOutcome, InvalidStateError, Player, WarGame
from logging_utils import get_logger

logger = get_logger(__name__)

router = APIRouter()

# Session data keys
SESSION_KEY_GAME = "game"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"


def _serialize_card(card: Card) -> dict[str, int]:
    """Serialize a card to a dict."""
    return {"rank": card.rank.value, "suit": card.suit.value}


def _deserialize_card(data: dict[str, int]) -> Card:
    """Deserialize a card from a dict."""
    return Card(Rank(data["rank"]), Suit(data["suit"]))


def _serialize_game(game: WarGame) -> dict[str, Any]:
    """Serialize game state for session storage."""
    last = game.last_result
    return {
        "state": game._machine_state,
        "player1": [_serialize_card(c) for c in game._player1],
        "player2": [_serialize_card(c) for c in game._player2],
        "battle1": [_serialize_card(c) for c in game._battle1],
        "battle2": [_serialize_card(c) for c in game._battle2],
        "rounds_won1": game.rounds_won_player1,
        "rounds_won2": game.rounds_won_player2,
        "battles_played": game.battles_played,
        "war_depth": game.war_depth,
        "outcome": game.outcome.name,
        "last_round_winner": last.round_winner.name if last is not None else None,
        "shuffle_method": game._shuffle_method,
    }


def _deserialize_game(data: dict[str, Any]) -> WarGame:
    """Restore game from session data."""
    game = WarGame(shuffle_method=data.get("shuffle_method", "classic"))

    # Restore state machine state
    game._machine_state = data["state"]

    game._player1 = [_deserialize_card(c) for c in data["player1"]]
    game._player2 = [_deserialize_card(c) for c in data["player2"]]
    game._battle1 = [_deserialize_card(c) for c in data["battle1"]]
    game._battle2 = [_deserialize_card(c) for c in data["battle2"]]
    game._rounds_won1 = data["rounds_won1"]
    game._rounds_won2 = data["rounds_won2"]
    game._battles_played = data["battles_played"]
    game._war_depth = data["war_depth"]
    game._outcome = GameOutcome[data["outcome"]]

    # The last result is the state as it stood when that battle finished
    if data["last_round_winner"] is not None:
        game._last_result = game._snapshot(Player[data["last_round_winner"]])

    return game


def _require_session(token: str) -> None:
    """Verify a signed session token, 404 if it is not valid."""
    if extract_session_id(token) is None:
        raise HTTPException(status_code=404, detail="Unknown or expired session")


def _create_game(request: NewGameRequest | None = None) -> WarGame:
    """Create and deal a new game."""
    seed = request.seed if request and request.seed is not None else config.game.seed
    method = (request.shuffle_method if request else None) or config.game.shuffle_method
    game = WarGame(rng=Random(seed), shuffle_method=method)
    game.new_game()
    return game


async def _load_game(token: str) -> WarGame | None:
    """Load game from the session store; None once the session has expired."""
    session_data = await get_session(token)
    if session_data and SESSION_KEY_GAME in session_data:
        return _deserialize_game(session_data[SESSION_KEY_GAME])
    return None


async def _save_game(token: str, game: WarGame) -> None:
    """Save game to the session store, restarting the session TTL."""
    now = int(time.time())
    session_data = await get_session(token) or {}
    session_data[SESSION_KEY_GAME] = _serialize_game(game)
    session_data[SESSION_KEY_LAST_ACTIVITY] = now
    session_data.setdefault(SESSION_KEY_CREATED_AT, now)
    await update_session(token, session_data)


async def _get_game(token: str) -> WarGame:
    """Load the session's game, dealing a new one if none is stored."""
    _require_session(token)
    game = await _load_game(token)
    if game is None:
        game = _create_game()
        await _save_game(token, game)
    return game


def _card_response(card: Card) -> CardResponse:
    return CardResponse(
        rank=str(card.rank),
        suit=str(card.suit),
        name=str(card),
        short=card.short,
    )


def _battle_cards_response(cards: tuple[BattleCard, ...]) -> list[BattleCardResponse]:
    return [BattleCardResponse(card=_card_response(bc.card), face_down=bc.face_down) for bc in cards]


def _battle_response(result: BattleResult) -> BattleResponse:
    """Convert a BattleResult to BattleResponse."""
    return BattleResponse(
        battle_cards_player1=_battle_cards_response(result.battle_cards_player1),
        battle_cards_player2=_battle_cards_response(result.battle_cards_player2),
        round_winner=result.round_winner.name,
        wars=result.wars,
        outcome=result.outcome.name,
        game_over=result.game_over,
        message=result.message,
        rounds_won_player1=result.rounds_won_player1,
        rounds_won_player2=result.rounds_won_player2,
        cards_remaining_player1=result.cards_remaining_player1,
        cards_remaining_player2=result.cards_remaining_player2,
    )


def _game_state_response(game: WarGame) -> GameStateResponse:
    """Convert game state to response."""
    last = game.last_result
    return GameStateResponse(
        state=game.state.name,
        rounds_won_player1=game.rounds_won_player1,
        rounds_won_player2=game.rounds_won_player2,
        cards_remaining_player1=game.cards_remaining_player1,
        cards_remaining_player2=game.cards_remaining_player2,
        battles_played=game.battles_played,
        last_battle=_battle_response(last) if last is not None else None,
        outcome=game.outcome.name,
        message=game.outcome.message,
        can_battle=game.can_battle,
    )


@router.post("/new")
async def new_game(
    request: NewGameRequest | None = None,
    session_token: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> dict[str, str]:
    """Deal a new game, reusing the session when a valid token is given."""
    if session_token is None or extract_session_id(session_token) is None:
        session_token = await create_session()

    game = _create_game(request)
    await _save_game(session_token, game)
    logger.info("new game for session %s", extract_session_id(session_token))

    return {"session_id": session_token}


@router.get("/state")
async def get_state(
    session_token: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    game = await _get_game(session_token)
    return _game_state_response(game)


@router.post("/battle")
async def play_battle(
    session_token: Annotated[str, Header(alias="X-Session-ID")],
) -> BattleResponse:
    """Play the next battle, including any wars it leads to."""
    game = await _get_game(session_token)

    try:
        result = game.play_battle()
    except InvalidStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    await _save_game(session_token, game)
    return _battle_response(result)
