"""Orchestration between the wallet session, the chain read model and the signer (and the reverse direction)."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol

from src.api.models import ContractCallIntent, ContractCallRequest
from src.chain.client import BalanceReader
from src.chain.reader import ChainStateReader
from src.config import Settings
from src.core.exceptions import NotConnectedError
from src.core.models import Address, Game, format_stx
from src.core.shared_types import Move, PostConditionMode
from src.services.categorize import GameViews, categorize_games
from src.services.intents import TransactionIntentBuilder
from src.session.resolver import SessionIdentityResolver

logger = logging.getLogger(__name__)


class IntentConsumer(Protocol):
    """Prompts the signer and broadcasts the transaction."""

    def submit(self, request: ContractCallRequest) -> None: ...


@dataclass(frozen=True)
class LobbyView:
    """Everything the game list needs to render."""

    games: tuple[Game, ...]
    views: GameViews
    viewer: Address | None
    fetch_failed: bool = False  # games could not be listed at all: offer a retry, do not show "no games yet"
    errors: list[str] = field(default_factory=list)
    contract_url: str | None = None  # explorer page of the game contract


class LobbyService:
    """Orchestration of layers for the game lobby."""

    def __init__(
        self,
        settings: Settings,
        resolver: SessionIdentityResolver,
        reader: ChainStateReader,
        consumer: IntentConsumer,
        balances: BalanceReader | None = None,
    ) -> None:
        self.settings = settings
        self.resolver = resolver
        self.reader = reader
        self.consumer = consumer
        self.balances = balances
        self.builder = TransactionIntentBuilder(settings)

    # -- Read side --
    async def refresh(self, force: bool = False) -> LobbyView:
        """Fetch the games and split them for the current viewer. `force` drops cached data first."""
        if force:
            self.reader.clear_cache()

        games = await self.reader.get_all_games()
        viewer = self.resolver.address
        views = categorize_games(games, viewer)

        fetch_failed = not games and self.reader.last_error is not None
        errors = [str(self.reader.last_error)] if fetch_failed else []
        return LobbyView(
            games=games,
            views=views,
            viewer=viewer,
            fetch_failed=fetch_failed,
            errors=errors,
            contract_url=self.settings.explorer_tx_url(self.settings.contract_id),
        )

    async def game(self, game_id: int) -> Game | None:
        return await self.reader.get_game(game_id)

    async def stx_balance(self) -> Decimal | None:
        """
        Balance of the connected wallet, in STX.
        None when nobody is connected or no balance source was given. Lookup failures raise ChainQueryError.
        """
        address = self.resolver.address
        if address is None or self.balances is None:
            return None
        micro_stx = await self.balances.get_stx_balance(address, self.settings.network)
        return format_stx(micro_stx)

    # -- Write side --
    def create_game(self, bet_amount: int, move_index: int, move: Move) -> ContractCallRequest:
        """First player creates a game with a bet and an opening move."""
        self._require_session()
        intent = self.builder.build_create(bet_amount, move_index, move)
        return self._submit(intent)

    def join_game(self, game_id: int, move_index: int, move: Move) -> ContractCallRequest:
        """Second player matches the bet and makes the first reply."""
        self._require_session()
        intent = self.builder.build_join(game_id, move_index, move)
        return self._submit(intent)

    def play(self, game_id: int, move_index: int, move: Move) -> ContractCallRequest:
        self._require_session()
        intent = self.builder.build_play(game_id, move_index, move)
        return self._submit(intent)

    def disconnect(self) -> None:
        self.resolver.disconnect()

    # -- Internal helpers --
    def _require_session(self) -> None:
        if self.resolver.identity is None:
            raise NotConnectedError("User not connected")

    def _submit(self, intent: ContractCallIntent) -> ContractCallRequest:
        """Hand the intent to the signer, then drop cached state so the next refresh sees the change."""
        request = ContractCallRequest(
            intent=intent,
            app_details=self.settings.app_details,
            post_condition_mode=PostConditionMode.ALLOW,
        )
        self.consumer.submit(request)
        logger.info("Sent %s transaction", intent.function_name.value)

        self.reader.clear_cache()
        return request
