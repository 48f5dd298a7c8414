from __future__ import annotations

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from condo_maintenance.config import SETTINGS

logger = logging.getLogger(__name__)


def _enforce_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # Occurrence history cascades with its activity; SQLite only honours that with the pragma.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str) -> Engine:
    db_engine = create_engine(database_url, pool_pre_ping=True)
    if db_engine.dialect.name == "sqlite":
        event.listen(db_engine, "connect", _enforce_sqlite_foreign_keys)
    return db_engine


engine = build_engine(SETTINGS.database_url)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def init_db() -> None:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    logger.info("Connected to %s database", engine.dialect.name)
