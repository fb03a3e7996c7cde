"""
Wallet session of the current user, and which address it represents on the active network.

The wallet persists its session as a JSON blob under a single key:

    {"userData": {"identityAddress": "...", "decentralizedID": "...", "addresses": {"testnet": "...", "mainnet": "..."}}}

Older sessions only carry `identityAddress`.
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.core.exceptions import SessionDecodeError
from src.core.shared_types import Network
from src.session.store import SESSION_KEY, SessionStore

logger = logging.getLogger(__name__)


class NetworkAddresses(BaseModel):
    testnet: str
    mainnet: str


class SessionIdentity(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    identity_address: str = Field(alias="identityAddress")
    decentralized_id: Optional[str] = Field(default=None, alias="decentralizedID")
    network_addresses: Optional[NetworkAddresses] = Field(default=None, alias="addresses")


class StoredSession(BaseModel):
    """Shape of the persisted blob."""

    model_config = ConfigDict(populate_by_name=True)

    user_data: SessionIdentity = Field(alias="userData")


def parse_session(blob: str) -> SessionIdentity:
    try:
        return StoredSession.model_validate_json(blob).user_data
    except ValidationError as exc:
        raise SessionDecodeError(f"Cannot interpret stored session: {exc}") from exc


def resolve_address(identity: SessionIdentity, network: Network) -> str:
    """Network specific address if the session has one, else the generic identity address."""
    if identity.network_addresses is not None:
        address = getattr(identity.network_addresses, Network(network).value)
        if address:
            return address
    return identity.identity_address


class SessionIdentityResolver:
    """Owns the identity for the lifetime of the process. Other components only read it."""

    def __init__(self, store: SessionStore, network: Network) -> None:
        self.store = store
        self.network = network
        self.identity: SessionIdentity | None = None

    def load(self) -> SessionIdentity | None:
        """Read the persisted session. A malformed blob counts as 'not connected'."""
        blob = self.store.get(SESSION_KEY)
        if blob is None:
            self.identity = None
            return None

        try:
            self.identity = parse_session(blob)
        except SessionDecodeError as exc:
            logger.warning("Ignoring stored session: %s", exc)
            self.identity = None
        return self.identity

    def save(self, identity: SessionIdentity) -> None:
        """Persist the identity handed over by a completed wallet connect."""
        blob = StoredSession(user_data=identity).model_dump_json(by_alias=True)
        self.store.put(SESSION_KEY, blob)
        self.identity = identity

    def resolve_address(self, identity: SessionIdentity) -> str:
        return resolve_address(identity, self.network)

    @property
    def address(self) -> str | None:
        """Address of the loaded identity on the configured network, None if not connected."""
        if self.identity is None:
            return None
        return self.resolve_address(self.identity)

    def disconnect(self) -> None:
        """Forget the session, both persisted and in memory."""
        self.store.remove(SESSION_KEY)
        self.identity = None
        logger.info("Wallet session cleared")
