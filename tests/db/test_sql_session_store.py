"""Unit tests for the SQLAlchemy implementation in src/session/store.py"""

from sqlalchemy.orm import Session

from src.session.store import SESSION_KEY, SQLSessionStore


def test_get_unknown_key(db_session: Session) -> None:
    """Should return None if nothing was stored. NOTE with an empty database, any key is a valid test case."""
    store = SQLSessionStore(db_session)
    assert store.get(SESSION_KEY) is None


def test_put_then_get(db_session: Session) -> None:
    store = SQLSessionStore(db_session)
    store.put(SESSION_KEY, '{"userData": {}}')
    assert store.get(SESSION_KEY) == '{"userData": {}}'


def test_put_overwrites(db_session: Session) -> None:
    store = SQLSessionStore(db_session)
    store.put(SESSION_KEY, "first")
    store.put(SESSION_KEY, "second")
    assert store.get(SESSION_KEY) == "second"


def test_remove(db_session: Session) -> None:
    store = SQLSessionStore(db_session)
    store.put(SESSION_KEY, "blob")
    store.put("other", "kept")
    store.remove(SESSION_KEY)

    assert store.get(SESSION_KEY) is None
    assert store.get("other") == "kept"


def test_remove_unknown_key_is_noop(db_session: Session) -> None:
    store = SQLSessionStore(db_session)
    store.remove(SESSION_KEY)
    assert store.get(SESSION_KEY) is None


def test_shared_between_store_instances(db_session: Session) -> None:
    """A session written by one process step is visible to the next one using the same database."""
    SQLSessionStore(db_session).put(SESSION_KEY, "blob")
    assert SQLSessionStore(db_session).get(SESSION_KEY) == "blob"
