#!/usr/bin/env python3
"""Create the database and the users table.

Reads the same MYSQL_* / DATABASE_URL settings as the API.

Usage:
    # From project root:
    python scripts/init_db.py
"""

import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine, text

from src.config import get_settings
from src.database import Database

logger = logging.getLogger("init_db")


def create_database_if_missing(settings) -> None:
    """Create the MySQL database itself; other backends are left alone."""
    if settings.database_url:
        return

    server_url = settings.sqlalchemy_url.set(database=None)
    engine = create_engine(server_url)
    try:
        with engine.begin() as conn:
            conn.execute(
                text(
                    f"CREATE DATABASE IF NOT EXISTS `{settings.mysql_database}` "
                    "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
                )
            )
    finally:
        engine.dispose()


def init_database() -> None:
    """Create the database and all tables."""
    settings = get_settings()
    create_database_if_missing(settings)

    database = Database(settings.sqlalchemy_url, pool_size=1)
    try:
        database.create_all()
    finally:
        database.dispose()

    logger.info("Database ready.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        init_database()
    except Exception:
        logger.exception("DB init failed")
        sys.exit(1)
