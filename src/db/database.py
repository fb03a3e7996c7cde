"""Database engine for the session store"""

from sqlalchemy import Engine, create_engine

from src.db.schema import Base


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine and ensure all tables exist."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, echo=echo, connect_args=connect_args)
    Base.metadata.create_all(bind=engine)
    return engine
