"""Engine and session plumbing for the habit store."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

SessionFactory = Callable[[], ContextManager[Session]]

logger = get_logger(__name__)


def _enforce_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(config: BaseConfig) -> Engine:
    """Build the engine for ``config.DATABASE_URL``.

    SQLite only checks foreign keys when asked to on each connection, so logs
    pointing at a missing habit (or habits at a missing user) are refused there too.
    """
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enforce_sqlite_foreign_keys)
    return engine


def init_database(engine: Engine) -> None:
    """Create the users, habits, habit_logs and goals tables if missing."""
    from .. import models  # noqa: F401  registers the tables on SQLModel.metadata

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> SessionFactory:
    """Sessions that commit when the block exits cleanly and roll back otherwise.

    Objects stay readable after commit; repositories expunge what they return.
    """

    @contextmanager
    def unit_of_work() -> Iterator[Session]:
        with Session(engine, expire_on_commit=False) as session:
            try:
                yield session
                session.commit()
            except Exception:
                logger.debug("Rolling back session", exc_info=True)
                session.rollback()
                raise

    return unit_of_work


@dataclass
class Database:
    engine: Engine
    session_factory: SessionFactory


def open_database(config: BaseConfig) -> Database:
    """Engine, schema and session factory for one app or CLI run."""
    engine = create_db_engine(config)
    init_database(engine)
    logger.info("Database ready", extra={"dialect": engine.dialect.name})
    return Database(engine=engine, session_factory=create_session_factory(engine))
