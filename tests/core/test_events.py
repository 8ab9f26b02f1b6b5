"""Tests for the event emitter and game state table."""

from core.game.events import EventEmitter, EventType, GameEvent
from core.game.engine import WarGame
from core.game.state import (
    VALID_TRANSITIONS,
    GameOutcome,
    GameState,
    Player,
    is_valid_transition,
)


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_type_handler_before_catch_all(self):
        emitter = EventEmitter()
        calls = []
        emitter.subscribe(lambda e: calls.append("all"))
        emitter.subscribe(lambda e: calls.append("typed"), EventType.WAR_DECLARED)

        emitter.emit_new(EventType.WAR_DECLARED, depth=1)

        assert calls == ["typed", "all"]

    def test_handler_only_gets_its_type(self):
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append, EventType.ROUND_WON)

        emitter.emit_new(EventType.BATTLE_STARTED, battle=1)
        emitter.emit_new(EventType.ROUND_WON, winner="PLAYER1")

        assert [e.event_type for e in seen] == [EventType.ROUND_WON]

    def test_unsubscribe(self):
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append)

        assert emitter.unsubscribe(seen.append) is True
        assert emitter.unsubscribe(seen.append) is False

        emitter.emit_new(EventType.GAME_STARTED)
        assert seen == []

    def test_history_is_bounded(self):
        emitter = EventEmitter(max_history=3)
        for i in range(5):
            emitter.emit_new(EventType.BATTLE_STARTED, battle=i)

        assert [e.data["battle"] for e in emitter.history] == [2, 3, 4]

    def test_history_copy_and_clear(self):
        emitter = EventEmitter()
        emitter.emit_new(EventType.GAME_STARTED)
        emitter.history.clear()
        assert len(emitter.history) == 1

        emitter.clear_history()
        assert emitter.history == []

    def test_event_str(self):
        event = GameEvent(EventType.ROUND_WON, {"winner": "PLAYER2"})
        assert str(event) == "ROUND_WON: {'winner': 'PLAYER2'}"


class TestGameState:
    """Tests for state and outcome enumerations."""

    def test_transitions(self):
        assert is_valid_transition(GameState.WAITING_FOR_SETUP, GameState.AWAITING_BATTLE)
        assert is_valid_transition(GameState.AWAITING_BATTLE, GameState.IN_WAR)
        assert is_valid_transition(GameState.IN_WAR, GameState.IN_WAR)
        assert is_valid_transition(GameState.IN_WAR, GameState.AWAITING_BATTLE)
        assert is_valid_transition(GameState.IN_WAR, GameState.GAME_OVER)
        assert not is_valid_transition(GameState.WAITING_FOR_SETUP, GameState.IN_WAR)
        assert not is_valid_transition(GameState.WAITING_FOR_SETUP, GameState.GAME_OVER)
        assert is_valid_transition(GameState.GAME_OVER, GameState.AWAITING_BATTLE)
        assert not is_valid_transition(GameState.GAME_OVER, GameState.IN_WAR)
        assert not is_valid_transition(GameState.GAME_OVER, GameState.GAME_OVER)

    def test_table_matches_engine_machine(self):
        """The transition table lists exactly the moves the engine can make."""
        machine_moves = set()
        for transition in WarGame.TRANSITIONS:
            sources = transition["source"]
            assert isinstance(sources, list)
            for source in sources:
                machine_moves.add((GameState[source.upper()], GameState[transition["dest"].upper()]))

        table_moves = {(src, dest) for src, dests in VALID_TRANSITIONS.items() for dest in dests}

        assert machine_moves == table_moves

    def test_state_str(self):
        assert str(GameState.AWAITING_BATTLE) == "Awaiting Battle"

    def test_outcome_messages(self):
        assert GameOutcome.UNDECIDED.message is None
        assert GameOutcome.PLAYER1_WINS.message == "Player 1 has won the game!"
        assert GameOutcome.PLAYER2_WINS.message == "Player 2 has won the game!"
        assert GameOutcome.TIE.message == "Both players are out of cards!"
        assert not GameOutcome.UNDECIDED.is_decided
        assert GameOutcome.TIE.is_decided

    def test_player_str(self):
        assert str(Player.PLAYER1) == "Player 1"
        assert str(Player.NONE) == "None"
