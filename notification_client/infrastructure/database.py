"""Database configuration for the persisted client state."""

from __future__ import annotations

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from notification_client.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


def create_state_engine(database_url: str) -> Engine:
    """Create the engine backing the client state table.

    In-memory SQLite databases share a single connection so that every session
    sees the same data.
    """

    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database(engine: Engine) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from notification_client.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.debug("Client state tables ready on %s", engine.url)


def session_factory_from_settings(settings: Settings) -> sessionmaker:
    """Build a ready-to-use session factory for ``settings``."""

    engine = create_state_engine(settings.checkpoint_database_url)
    initialize_database(engine)
    return create_session_factory(engine)


__all__ = [
    "Base",
    "create_session_factory",
    "create_state_engine",
    "initialize_database",
    "session_factory_from_settings",
]
