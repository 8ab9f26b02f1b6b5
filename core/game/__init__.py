"""Game engine and state management."""

from core.game.events import EventEmitter, GameEvent, EventType
from core.game.state import (
    BATTLE_CARDS_REQUIRED,
    WAR_CARDS_REQUIRED,
    GameOutcome,
    GameState,
    Player,
)
from core.game.engine import BattleCard, BattleResult, InvalidStateError, WarGame

__all__ = [
    "EventEmitter",
    "GameEvent",
    "EventType",
    "BATTLE_CARDS_REQUIRED",
    "WAR_CARDS_REQUIRED",
    "GameOutcome",
    "GameState",
    "Player",
    "BattleCard",
    "BattleResult",
    "InvalidStateError",
    "WarGame",
]
