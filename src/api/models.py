"""Requests and Response models exchanged with the outside world (wallet / signer)"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from src.chain.clarity import UINT_MAX, UIntCV
from src.config import AppDetails
from src.core.exceptions import InvalidBetError, InvalidIntentError, InvalidMoveError
from src.core.models import BOARD_SIZE
from src.core.shared_types import ContractFunction, Move, PostConditionMode


def _is_uint(value: Any) -> bool:
    """Every argument ends up as a uint. bool is an int subclass, but never a valid amount / position / id."""
    return (
        isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= UINT_MAX
    )


# --- REQUEST MODELS ---
class MoveRequest(BaseModel):
    move_index: int
    move: int

    @field_validator("move_index", mode="before")
    @classmethod
    def validate_move_index(cls, value: Any) -> int:
        if not _is_uint(value) or value >= BOARD_SIZE:
            raise InvalidMoveError(
                f"Move index must be an integer between 0 and {BOARD_SIZE - 1}, got {value!r}."
            )
        return value

    @field_validator("move", mode="before")
    @classmethod
    def validate_move(cls, value: Any) -> int:
        """Only checks the move can be sent as a uint. Whether it is legal (not EMPTY, cell free) is up to the contract."""
        if not _is_uint(value):
            raise InvalidMoveError(
                f"Move must be one of {', '.join(m.name for m in Move)}, got {value!r}."
            )
        return int(value)


class CreateGameRequest(MoveRequest):
    bet_amount: int

    @field_validator("bet_amount", mode="before")
    @classmethod
    def validate_bet_amount(cls, value: Any) -> int:
        if not _is_uint(value) or value == 0:
            raise InvalidBetError(
                f"Bet amount must be a positive integer of at most {UINT_MAX}, got {value!r}."
            )
        return value


class GameMoveRequest(MoveRequest):
    """Move on an existing game."""

    game_id: int

    @field_validator("game_id", mode="before")
    @classmethod
    def validate_game_id(cls, value: Any) -> int:
        if not _is_uint(value):
            raise InvalidIntentError(
                f"Game id must be a non-negative integer, got {value!r}."
            )
        return value


class JoinGameRequest(GameMoveRequest):
    pass


class PlayRequest(GameMoveRequest):
    pass


# --- RESPONSE MODELS ---
class ContractCallIntent(BaseModel):
    """Unsigned description of a contract call, ready for a signer to approve and broadcast."""

    model_config = ConfigDict(frozen=True)

    contract_address: str
    contract_name: str
    function_name: ContractFunction
    function_args: tuple[UIntCV, ...]

    @property
    def arg_values(self) -> list[int]:
        return [arg.value for arg in self.function_args]


class ContractCallRequest(BaseModel):
    """What the signing / broadcasting side receives."""

    intent: ContractCallIntent
    app_details: AppDetails
    post_condition_mode: PostConditionMode = PostConditionMode.ALLOW
