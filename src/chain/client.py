"""Read-only contract calls against a Stacks node API."""

import asyncio
import logging
from typing import Protocol, Sequence

import requests

from src.chain.clarity import ClarityValue, from_hex, to_hex
from src.core.exceptions import ChainQueryError, DecodeError
from src.core.shared_types import Network

logger = logging.getLogger(__name__)


class ReadOnlyCaller(Protocol):
    """Anything that can evaluate a read-only contract function and return its tagged result."""

    async def call_read_only(
        self,
        contract_address: str,
        contract_name: str,
        function_name: str,
        args: Sequence[ClarityValue],
        sender_address: str,
        network: Network,
    ) -> ClarityValue:
        """Raise ChainQueryError if the call fails or the result cannot be parsed."""
        ...


class BalanceReader(Protocol):
    async def get_stx_balance(self, address: str, network: Network) -> int: ...


class StacksApiClient:
    """ReadOnlyCaller (and BalanceReader) talking to the node API over HTTP."""

    def __init__(
        self,
        api_urls: dict[Network, str],
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_urls = {network: url.rstrip("/") for network, url in api_urls.items()}
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    async def call_read_only(
        self,
        contract_address: str,
        contract_name: str,
        function_name: str,
        args: Sequence[ClarityValue],
        sender_address: str,
        network: Network,
    ) -> ClarityValue:
        # requests is blocking, keep the event loop free for the rest of the batch
        return await asyncio.to_thread(
            self._call,
            contract_address,
            contract_name,
            function_name,
            args,
            sender_address,
            network,
        )

    def _call(
        self,
        contract_address: str,
        contract_name: str,
        function_name: str,
        args: Sequence[ClarityValue],
        sender_address: str,
        network: Network,
    ) -> ClarityValue:
        url = f"{self._api_url(network)}/v2/contracts/call-read/{contract_address}/{contract_name}/{function_name}"
        payload = {
            "sender": sender_address,
            "arguments": [to_hex(arg) for arg in args],
        }

        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            raise ChainQueryError(f"Call to {function_name!r} failed: {exc}") from exc
        except ValueError as exc:
            raise ChainQueryError(
                f"Call to {function_name!r} returned a non JSON body"
            ) from exc

        if not isinstance(body, dict):
            raise ChainQueryError(f"Unexpected response shape from {function_name!r}")

        if not body.get("okay"):
            raise ChainQueryError(
                f"Call to {function_name!r} rejected: {body.get('cause', 'unknown cause')}"
            )

        result = body.get("result")
        if not isinstance(result, str):
            raise ChainQueryError(f"Call to {function_name!r} returned no result")

        try:
            value = from_hex(result)
        except DecodeError as exc:
            raise ChainQueryError(
                f"Cannot parse result of {function_name!r}: {exc}"
            ) from exc

        logger.debug("call-read %s.%s::%s -> %s", contract_address, contract_name, function_name, value.type)
        return value

    async def get_stx_balance(self, address: str, network: Network) -> int:
        """Spendable balance of `address`, in micro-STX."""
        return await asyncio.to_thread(self._get_balance, address, network)

    def _get_balance(self, address: str, network: Network) -> int:
        url = f"{self._api_url(network)}/extended/v1/address/{address}/stx"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            raise ChainQueryError(f"Balance lookup for {address} failed: {exc}") from exc
        except ValueError as exc:
            raise ChainQueryError(f"Balance lookup for {address} returned a non JSON body") from exc

        # the API sends amounts as decimal strings, they can exceed 2**53
        try:
            balance = int(body["balance"])
        except (TypeError, KeyError, ValueError) as exc:
            raise ChainQueryError(f"Unexpected balance response for {address}") from exc

        logger.debug("balance %s -> %d", address, balance)
        return balance

    def _api_url(self, network: Network) -> str:
        if network not in self.api_urls:
            raise ChainQueryError(f"No API url configured for network {network!r}")
        return self.api_urls[network]
