"""Wire the components together from a single Settings object."""

import logging

from sqlalchemy.orm import Session, sessionmaker

from src.chain.client import StacksApiClient
from src.chain.reader import ChainStateReader
from src.config import DEFAULT_API_URLS, Settings
from src.db.database import create_db_engine
from src.services.lobby_service import IntentConsumer, LobbyService
from src.session.resolver import SessionIdentityResolver
from src.session.store import SQLSessionStore


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # every read-only call opens a connection, keep those quiet
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def open_db_session(settings: Settings) -> Session:
    """Long-lived session for the session store. Lives as long as the app, the caller owns closing it."""
    engine = create_db_engine(settings.session_database_url)
    return sessionmaker(bind=engine)()


def build_lobby_service(
    settings: Settings,
    consumer: IntentConsumer,
    db_session: Session | None = None,
) -> LobbyService:
    """Build the lobby with the persisted session already loaded."""
    resolver = SessionIdentityResolver(
        SQLSessionStore(db_session or open_db_session(settings)), settings.network
    )
    resolver.load()

    api_urls = {**DEFAULT_API_URLS, settings.network: settings.stacks_api_url}
    client = StacksApiClient(api_urls, timeout=settings.request_timeout)
    reader = ChainStateReader(client, settings)
    return LobbyService(settings, resolver, reader, consumer, balances=client)
