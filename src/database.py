"""Database configuration and session management."""

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base: Any = declarative_base()


class Database:
    """Connection pool plus session factory for one process.

    Built once when the application starts and disposed when it stops.
    """

    def __init__(self, url: str | URL, pool_size: int = 10):
        self.url = url
        if str(url).startswith("sqlite"):
            self.engine: Engine = create_engine(
                url, connect_args={"check_same_thread": False}, pool_pre_ping=True
            )
        else:
            self.engine = create_engine(
                url,
                pool_pre_ping=True,
                pool_size=pool_size,
                max_overflow=0,
            )
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        """Check a session out of the pool."""
        return self.session_factory()

    def create_all(self) -> None:
        """Create every registered table that does not exist yet."""
        create_tables(self.engine)

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()
        logger.info("Database connection pool disposed")


def create_tables(bind: Engine | Connection) -> None:
    """Create all tables, skipping the ones already present."""
    # Import all models here so they are registered with Base.metadata
    from src import models  # noqa: F401

    Base.metadata.create_all(bind=bind, checkfirst=True)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
