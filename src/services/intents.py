"""
Turn a user's intent (create / join / play) into a contract call description.

Pure construction: validation errors are raised to the caller before anything touches the network.
Signing and broadcasting are someone else's job.
"""

from src.api.models import (
    ContractCallIntent,
    CreateGameRequest,
    JoinGameRequest,
    PlayRequest,
)
from src.chain.clarity import UIntCV
from src.config import Settings
from src.core.shared_types import ContractFunction


class TransactionIntentBuilder:
    def __init__(self, settings: Settings) -> None:
        self.contract_address = settings.contract_address
        self.contract_name = settings.contract_name

    def build_create(self, bet_amount: int, move_index: int, move: int) -> ContractCallIntent:
        """(create-game bet-amount move-index move)"""
        request = CreateGameRequest(bet_amount=bet_amount, move_index=move_index, move=move)
        return self._intent(
            ContractFunction.CREATE_GAME,
            request.bet_amount,
            request.move_index,
            request.move,
        )

    def build_join(self, game_id: int, move_index: int, move: int) -> ContractCallIntent:
        """(join-game game-id move-index move)"""
        request = JoinGameRequest(game_id=game_id, move_index=move_index, move=move)
        return self._intent(
            ContractFunction.JOIN_GAME, request.game_id, request.move_index, request.move
        )

    def build_play(self, game_id: int, move_index: int, move: int) -> ContractCallIntent:
        """(play game-id move-index move)"""
        request = PlayRequest(game_id=game_id, move_index=move_index, move=move)
        return self._intent(
            ContractFunction.PLAY, request.game_id, request.move_index, request.move
        )

    def _intent(self, function: ContractFunction, *args: int) -> ContractCallIntent:
        return ContractCallIntent(
            contract_address=self.contract_address,
            contract_name=self.contract_name,
            function_name=function,
            function_args=tuple(UIntCV(int(arg)) for arg in args),
        )
