"""
Read model of the tic-tac-toe contract.

Games are stored on-chain by sequential id (0 up to `get-latest-game-id`), one read-only call per game.
The public API node rate-limits those calls, so the full list is fetched in small concurrent batches with a pause
in between, and everything is cached for a short while.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from src.cache import ExpiringCache
from src.chain.clarity import ClarityValue, UIntCV
from src.chain.client import ReadOnlyCaller
from src.chain.decoder import decode_game, decode_latest_game_id
from src.config import Settings
from src.core.exceptions import ChainQueryError
from src.core.models import Game
from src.core.shared_types import ContractFunction

logger = logging.getLogger(__name__)

CACHE_TTL = 30.0  # seconds
BATCH_SIZE = 3
BATCH_DELAY = 2.0  # seconds
ALL_GAMES_KEY = "all-games"

_MISSING = object()


def game_cache_key(game_id: int) -> str:
    return f"game-{game_id}"


class ChainStateReader:
    """Fetches and caches game records. The only owner of its cache."""

    def __init__(
        self,
        caller: ReadOnlyCaller,
        settings: Settings,
        cache: ExpiringCache | None = None,
        batch_size: int = BATCH_SIZE,
        batch_delay: float = BATCH_DELAY,
        cache_ttl: float = CACHE_TTL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.caller = caller
        self.settings = settings
        self._cache = cache if cache is not None else ExpiringCache(default_ttl=cache_ttl)
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.cache_ttl = cache_ttl
        self._sleep = sleep
        # set when the last full refresh could not even get the game count
        self.last_error: ChainQueryError | None = None

    async def get_latest_game_count(self) -> int:
        """Number of games created so far (ids are 0 .. count - 1)."""
        result = await self._call(ContractFunction.GET_LATEST_GAME_ID, [])
        return decode_latest_game_id(result)

    async def get_game(self, game_id: int) -> Game | None:
        """
        Fetch a single game. None if it does not exist (or its record cannot be interpreted).
        ---
        Failed calls raise ChainQueryError and are NOT cached.
        """
        cache_key = game_cache_key(game_id)
        cached = self._cache.get(cache_key, _MISSING)
        if cached is not _MISSING:
            logger.debug("Cache hit for %s", cache_key)
            return cached

        result = await self._call(ContractFunction.GET_GAME, [UIntCV(game_id)])
        game = decode_game(game_id, result)
        self._cache.set(cache_key, game, self.cache_ttl)
        return game

    async def get_all_games(self) -> tuple[Game, ...]:
        """
        Every game that could be fetched, in ascending id order.
        ---
        * A game that fails to load is left out, the rest still gets returned.
        * The result is the cached snapshot itself, so it is a tuple.
        * If the game count itself cannot be fetched, an empty tuple is returned and `last_error` is set,
          so callers can tell "fetch failed" apart from "no games yet".
        """
        cached = self._cache.get(ALL_GAMES_KEY, _MISSING)
        if cached is not _MISSING:
            logger.debug("Returning %d cached games", len(cached))
            return cached

        try:
            count = await self.get_latest_game_count()
        except ChainQueryError as exc:
            logger.error("Failed to fetch the latest game id: %s", exc)
            self.last_error = exc
            return ()

        logger.info("Fetching %d games in batches of %d", count, self.batch_size)
        games: list[Game] = []
        for start in range(0, count, self.batch_size):
            batch_ids = list(range(start, min(start + self.batch_size, count)))
            results = await asyncio.gather(
                *(self.get_game(game_id) for game_id in batch_ids),
                return_exceptions=True,
            )

            # results line up with batch_ids, whatever order the calls completed in
            for game_id, result in zip(batch_ids, results):
                if isinstance(result, Exception):
                    logger.warning("Skipping game %s: %s", game_id, result)
                elif isinstance(result, BaseException):
                    raise result
                elif result is not None:
                    games.append(result)

            if start + self.batch_size < count:
                await self._sleep(self.batch_delay)

        logger.info("Fetched %d of %d games", len(games), count)
        snapshot = tuple(games)
        self._cache.set(ALL_GAMES_KEY, snapshot, self.cache_ttl)
        self.last_error = None
        return snapshot

    def clear_cache(self) -> None:
        """Forget everything, the next read goes back to the chain. Call after submitting a transaction."""
        self._cache.clear()

    async def _call(self, function: ContractFunction, args: list[ClarityValue]) -> ClarityValue:
        try:
            return await self.caller.call_read_only(
                contract_address=self.settings.contract_address,
                contract_name=self.settings.contract_name,
                function_name=function.value,
                args=args,
                sender_address=self.settings.contract_address,
                network=self.settings.network,
            )
        except ChainQueryError:
            raise
        except Exception as exc:
            raise ChainQueryError(f"Call to {function.value!r} failed: {exc}") from exc
