"""SQLAlchemy engine, session e dependency FastAPI."""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_database_url

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    # SQLite in-memory (test): una sola connessione condivisa tra i thread.
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {"pool_pre_ping": True}


_database_url = get_database_url()

engine = create_engine(_database_url, echo=False, **_engine_kwargs(_database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Dependency that yields a DB session. Caller must close."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Crea tutte le tabelle se mancano.
    Le migrazioni di schema sono gestite fuori da questo servizio.
    """
    from app.models import (  # noqa: F401
        formation,
        player,
        team,
        user,
    )

    Base.metadata.create_all(bind=engine)
    logger.info("create_all completato")
