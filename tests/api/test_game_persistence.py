"""Tests for game state persistence (serialization/deserialization)."""

import json
from random import Random

from api.routes.game import (
    _deserialize_card,
    _deserialize_game,
    _serialize_card,
    _serialize_game,
)
from core.cards import Card, Rank, Suit
from core.game import GameOutcome, GameState, Player, WarGame


class TestCardSerialization:
    """Tests for card serialization."""

    def test_serialize_card_structure(self):
        serialized = _serialize_card(Card(Rank.SEVEN, Suit.DIAMONDS))
        assert serialized == {"rank": 7, "suit": Suit.DIAMONDS.value}

    def test_every_card_restores(self):
        for suit in Suit:
            for rank in Rank:
                card = Card(rank, suit)
                assert _deserialize_card(_serialize_card(card)) == card


class TestGameSerialization:
    """Tests for whole-game serialization."""

    def _played_game(self, battles: int = 10) -> WarGame:
        game = WarGame(rng=Random(3))
        game.new_game()
        for _ in range(battles):
            if not game.can_battle:
                break
            game.play_battle()
        return game

    def test_serialized_game_is_json(self):
        data = _serialize_game(self._played_game())
        assert json.loads(json.dumps(data)) == data

    def test_restored_game_matches(self):
        game = self._played_game()

        restored = _deserialize_game(_serialize_game(game))

        assert restored.state == game.state
        assert restored.player1_stack == game.player1_stack
        assert restored.player2_stack == game.player2_stack
        assert restored.battle_stack_player1 == game.battle_stack_player1
        assert restored.rounds_won_player1 == game.rounds_won_player1
        assert restored.rounds_won_player2 == game.rounds_won_player2
        assert restored.battles_played == game.battles_played
        assert restored.last_result == game.last_result

    def test_restored_game_plays_on_identically(self):
        game = self._played_game()
        restored = _deserialize_game(_serialize_game(game))

        if game.can_battle:
            assert restored.play_battle() == game.play_battle()

    def test_fresh_game_has_no_last_result(self):
        game = WarGame(rng=Random(1))
        game.new_game()

        restored = _deserialize_game(_serialize_game(game))

        assert restored.last_result is None
        assert restored.state == GameState.AWAITING_BATTLE

    def test_finished_game(self):
        game = WarGame()
        game.setup([Card(Rank.KING, Suit.HEARTS)], [Card(Rank.TEN, Suit.CLUBS)])
        game.play_battle()

        restored = _deserialize_game(_serialize_game(game))

        assert restored.is_over
        assert restored.outcome == GameOutcome.PLAYER1_WINS
        assert restored.last_result.round_winner == Player.PLAYER1
