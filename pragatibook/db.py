"""Engine construction and schema migrations.

The web app opens one connection per request from :func:`get_engine`; the
admin console holds a single connection from :func:`connect` for its session.
"""

import logging
from functools import lru_cache
from pathlib import Path

from alembic.config import Config
from sqlalchemy import Connection, create_engine, event
from sqlalchemy.engine import Engine

from alembic import command
from pragatibook.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "alembic"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def create_db_engine(url: str) -> Engine:
    """Build an engine for ``url``.

    SQLite connections enforce foreign keys and may move between threads, since
    pooled connections are handed to whichever worker serves the next request.
    """
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(url, pool_pre_ping=True, pool_recycle=1800)
    logger.info("Database engine created (%s)", engine.dialect.name)
    return engine


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine(settings.db_url)


def connect() -> Connection:
    """Open a connection for a console session. The caller closes it."""
    return get_engine().connect()


def _alembic_config(url: str) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Alembic options go through ConfigParser interpolation.
    cfg.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return cfg


def initialize_db(url: str | None = None) -> None:
    """Upgrade the database at ``url`` (the configured one by default) to the latest revision."""
    cfg = _alembic_config(url or settings.db_url)
    logger.info("Running migrations from %s", MIGRATIONS_DIR)
    command.upgrade(cfg, "head")
    logger.info("Migrations complete")
