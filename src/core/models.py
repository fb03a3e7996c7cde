"""
Domain level data model of a tic-tac-toe game, as mirrored from the contract.

The contract is the source of truth: nothing here enforces game rules, it only interprets the state the contract computed.
"""

from dataclasses import dataclass
from decimal import Decimal

from src.core.shared_types import GameStatus, Move

BOARD_SIZE = 9
MICRO_STX_PER_STX = 1_000_000

EMPTY_BOARD: tuple[Move, ...] = (Move.EMPTY,) * BOARD_SIZE

# Type alias to make Game easier to read
Address = str


@dataclass(frozen=True)
class Game:
    """Immutable snapshot of a single game record."""

    id: int
    player_one: Address
    player_two: Address | None
    is_player_one_turn: bool
    bet_amount: int  # micro-STX
    board: tuple[Move, ...]
    winner: Address | None

    @property
    def status(self) -> GameStatus:
        if self.winner is not None:
            return GameStatus.ENDED
        if self.player_two is None:
            return GameStatus.OPEN
        return GameStatus.IN_PROGRESS

    @property
    def next_move(self) -> Move:
        """Player one always plays X."""
        return Move.X if self.is_player_one_turn else Move.O

    @property
    def winning_move(self) -> Move | None:
        """
        Mark of the side that won, if the game ended.
        ---
        The contract does not store the winning mark. Once a winner is set, `is_player_one_turn` still points at the side
        that did NOT make the last move, so the winner is the other one.
        NOTE fragile: only holds as long as the contract keeps flipping the turn on the winning move.
        """
        if self.winner is None:
            return None
        return Move.O if self.is_player_one_turn else Move.X

    @property
    def bet_amount_stx(self) -> Decimal:
        return format_stx(self.bet_amount)


def format_stx(micro_stx: int) -> Decimal:
    """Convert the smallest on-chain unit (micro-STX) to STX."""
    return Decimal(micro_stx) / MICRO_STX_PER_STX
