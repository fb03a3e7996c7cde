"""Protocol for the persisted-session provider + implementations (in memory, SQLAlchemy)"""

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.db.schema import DBSessionEntry

SESSION_KEY = "blockstack-session"


class SessionStore(Protocol):
    """String key/value store holding the serialized wallet session."""

    def get(self, key: str) -> str | None:
        """Stored value, if any."""
        ...

    def put(self, key: str, value: str) -> None:
        """Store (or overwrite) a value. Written when a wallet connect completes."""
        ...

    def remove(self, key: str) -> None:
        """Delete the value, no-op if absent."""
        ...


class InMemorySessionStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def put(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class SQLSessionStore:
    """Session blobs stored in a table using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get(self, key: str) -> str | None:
        entry = self._fetch(key)
        if entry:
            return entry.value
        return None

    def put(self, key: str, value: str) -> None:
        entry = self._fetch(key)
        if entry:
            entry.value = value
        else:
            self.db.add(DBSessionEntry(key=key, value=value))
        self.db.commit()

    def remove(self, key: str) -> None:
        entry = self._fetch(key)
        if not entry:
            return
        self.db.delete(entry)
        self.db.commit()

    def _fetch(self, key: str) -> DBSessionEntry | None:
        query = select(DBSessionEntry).where(DBSessionEntry.key == key)
        return self.db.scalar(query)
