"""Unit tests for src/services/intents.py"""

import pytest

from src.chain.clarity import UINT_MAX, UIntCV, serialize
from src.config import Settings
from src.core.exceptions import InvalidBetError, InvalidIntentError, InvalidMoveError
from src.core.shared_types import ContractFunction, Move
from src.services.intents import TransactionIntentBuilder


@pytest.fixture
def builder(settings: Settings) -> TransactionIntentBuilder:
    return TransactionIntentBuilder(settings)


def test_build_play(builder: TransactionIntentBuilder, settings: Settings) -> None:
    intent = builder.build_play(3, 4, Move.X)
    assert intent.function_name == ContractFunction.PLAY
    assert intent.function_args == (UIntCV(3), UIntCV(4), UIntCV(1))
    assert intent.contract_address == settings.contract_address
    assert intent.contract_name == settings.contract_name


def test_build_create(builder: TransactionIntentBuilder) -> None:
    intent = builder.build_create(1_000_000, 0, Move.X)
    assert intent.function_name == ContractFunction.CREATE_GAME
    assert intent.arg_values == [1_000_000, 0, 1]


def test_build_join(builder: TransactionIntentBuilder) -> None:
    intent = builder.build_join(12, 8, Move.O)
    assert intent.function_name == ContractFunction.JOIN_GAME
    assert intent.arg_values == [12, 8, 2]


def test_zero_bet(builder: TransactionIntentBuilder) -> None:
    with pytest.raises(InvalidBetError):
        builder.build_create(0, 4, Move.X)


@pytest.mark.parametrize("bet_amount", [-5, 1.5, "100", True])
def test_invalid_bets(builder: TransactionIntentBuilder, bet_amount) -> None:
    with pytest.raises(InvalidBetError):
        builder.build_create(bet_amount, 4, Move.X)


def test_move_index_out_of_range(builder: TransactionIntentBuilder) -> None:
    with pytest.raises(InvalidMoveError):
        builder.build_join(3, 9, Move.O)


@pytest.mark.parametrize("move_index", [-1, 9, 100, 2.0, "4", None])
def test_invalid_move_index_for_every_builder(builder: TransactionIntentBuilder, move_index) -> None:
    with pytest.raises(InvalidMoveError):
        builder.build_create(100, move_index, Move.X)
    with pytest.raises(InvalidMoveError):
        builder.build_join(1, move_index, Move.X)
    with pytest.raises(InvalidMoveError):
        builder.build_play(1, move_index, Move.X)


def test_move_value_is_not_checked_for_legality(builder: TransactionIntentBuilder) -> None:
    """EMPTY is not a move a player can make, but the contract is the one to reject it."""
    intent = builder.build_play(1, 0, Move.EMPTY)
    assert intent.arg_values == [1, 0, 0]


def test_negative_move_cannot_be_encoded(builder: TransactionIntentBuilder) -> None:
    with pytest.raises(InvalidMoveError):
        builder.build_play(1, 0, -1)


def test_validation_errors_share_a_base(builder: TransactionIntentBuilder) -> None:
    with pytest.raises(InvalidIntentError):
        builder.build_create(0, 0, Move.X)


def test_intent_is_immutable(builder: TransactionIntentBuilder) -> None:
    intent = builder.build_play(3, 4, Move.X)
    with pytest.raises(Exception):
        intent.function_name = ContractFunction.JOIN_GAME


@pytest.mark.parametrize("game_id", [-1, True, False, 2**128, 1.0, "3", None])
def test_invalid_game_id_for_join_and_play(builder: TransactionIntentBuilder, game_id) -> None:
    with pytest.raises(InvalidIntentError) as join_error:
        builder.build_join(game_id, 4, Move.X)
    with pytest.raises(InvalidIntentError) as play_error:
        builder.build_play(game_id, 4, Move.X)
    # the position is fine, the game id is what gets rejected
    assert not isinstance(join_error.value, (InvalidMoveError, InvalidBetError))
    assert not isinstance(play_error.value, (InvalidMoveError, InvalidBetError))


def test_game_id_zero_is_valid(builder: TransactionIntentBuilder) -> None:
    assert builder.build_join(0, 4, Move.O).arg_values == [0, 4, 2]


def test_bet_above_uint_range(builder: TransactionIntentBuilder) -> None:
    with pytest.raises(InvalidBetError):
        builder.build_create(2**128, 4, Move.X)


def test_largest_values_still_encode(builder: TransactionIntentBuilder) -> None:
    """Whatever passes validation can be serialized for the signer."""
    create = builder.build_create(UINT_MAX, 4, Move.X)
    play = builder.build_play(UINT_MAX, 8, Move.O)
    for intent in (create, play):
        for arg in intent.function_args:
            assert serialize(arg)[0] == 0x01


def test_move_above_uint_range(builder: TransactionIntentBuilder) -> None:
    with pytest.raises(InvalidMoveError):
        builder.build_play(1, 0, 2**128)
