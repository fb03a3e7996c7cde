"""
Conversion between the contract's tagged values and the domain Game.

The `get-game` function returns `(optional (tuple ...))` with the fields
player-one, player-two, is-player-one-turn, bet-amount, board and winner.
Anything that does not match that schema decodes to "no game" instead of crashing the caller.
"""

import logging

from src.chain.clarity import (
    BoolCV,
    ClarityValue,
    ContractPrincipalCV,
    ListCV,
    NoneCV,
    SomeCV,
    StandardPrincipalCV,
    TupleCV,
    UIntCV,
    principal_cv,
)
from src.core.exceptions import ChainQueryError, DecodeError
from src.core.models import BOARD_SIZE, Game
from src.core.shared_types import Move

logger = logging.getLogger(__name__)


def decode_latest_game_id(value: ClarityValue) -> int:
    """`get-latest-game-id` returns a plain uint."""
    if not isinstance(value, UIntCV):
        raise ChainQueryError(f"Expected a uint for the latest game id, got {value.type}")
    return value.value


def decode_game(game_id: int, value: ClarityValue) -> Game | None:
    """Decode the response of `get-game`. None means the game does not exist (or could not be interpreted)."""
    if isinstance(value, NoneCV):
        return None

    if not isinstance(value, SomeCV):
        logger.warning("Game %s: expected an optional, got %s", game_id, value.type)
        return None

    try:
        return game_from_tuple(game_id, value.value)
    except DecodeError as exc:
        logger.warning("Game %s: malformed record treated as missing (%s)", game_id, exc)
        return None


def game_from_tuple(game_id: int, value: ClarityValue) -> Game:
    if not isinstance(value, TupleCV):
        raise DecodeError(f"Expected a tuple, got {value.type}")
    fields = value.value

    is_player_one_turn = _field(fields, "is-player-one-turn")
    if not isinstance(is_player_one_turn, BoolCV):
        raise DecodeError("is-player-one-turn should be a bool")

    bet_amount = _field(fields, "bet-amount")
    if not isinstance(bet_amount, UIntCV):
        raise DecodeError("bet-amount should be a uint")

    return Game(
        id=game_id,
        player_one=_principal(_field(fields, "player-one"), "player-one"),
        player_two=_optional_principal(_field(fields, "player-two"), "player-two"),
        is_player_one_turn=is_player_one_turn.value,
        bet_amount=bet_amount.value,
        board=_board(_field(fields, "board")),
        winner=_optional_principal(_field(fields, "winner"), "winner"),
    )


def encode_game(game: Game) -> SomeCV:
    """Reverse operation: the tagged value the contract returns for this game."""

    def optional(address: str | None) -> ClarityValue:
        return NoneCV() if address is None else SomeCV(principal_cv(address))

    return SomeCV(
        TupleCV(
            {
                "player-one": principal_cv(game.player_one),
                "player-two": optional(game.player_two),
                "is-player-one-turn": BoolCV(game.is_player_one_turn),
                "bet-amount": UIntCV(game.bet_amount),
                "board": ListCV(tuple(UIntCV(int(cell)) for cell in game.board)),
                "winner": optional(game.winner),
            }
        )
    )


# -- Internal helpers --
def _field(fields: dict[str, ClarityValue], name: str) -> ClarityValue:
    if name not in fields:
        raise DecodeError(f"Missing field {name!r}")
    return fields[name]


def _principal(value: ClarityValue, name: str) -> str:
    if isinstance(value, (StandardPrincipalCV, ContractPrincipalCV)):
        return value.value
    raise DecodeError(f"{name} should be a principal, got {value.type}")


def _optional_principal(value: ClarityValue, name: str) -> str | None:
    if isinstance(value, NoneCV):
        return None
    if isinstance(value, SomeCV):
        return _principal(value.value, name)
    raise DecodeError(f"{name} should be an optional principal, got {value.type}")


def _board(value: ClarityValue) -> tuple[Move, ...]:
    if not isinstance(value, ListCV):
        raise DecodeError(f"board should be a list, got {value.type}")
    if len(value.value) != BOARD_SIZE:
        raise DecodeError(f"board should have {BOARD_SIZE} cells, got {len(value.value)}")

    cells = []
    for cell in value.value:
        if not isinstance(cell, UIntCV):
            raise DecodeError(f"board cell should be a uint, got {cell.type}")
        try:
            cells.append(Move(cell.value))
        except ValueError as exc:
            raise DecodeError(f"Unknown board cell value {cell.value}") from exc
    return tuple(cells)
