import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import Settings

Base = declarative_base()

logger = logging.getLogger(__name__)


class Database:
    """Storage client: one engine (and its pool) plus a session factory.

    Built once at startup and handed to the app; nothing here is global.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = sessionmaker(
            bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings, **engine_kwargs: Any) -> "Database":
        url = settings.database_url
        if url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        else:
            engine_kwargs.setdefault("pool_size", settings.db_pool_size)
            engine_kwargs.setdefault("max_overflow", settings.db_max_overflow)
            engine_kwargs.setdefault("pool_recycle", settings.db_pool_recycle_seconds)
        return cls(create_engine(url, future=True, **engine_kwargs))

    def session(self) -> Session:
        return self.session_factory()

    def ping(self) -> None:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def create_all(self) -> None:
        # Register the mapped tables before create_all().
        from . import entities  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_session(request: Request) -> Generator[Session, None, None]:
    session = get_database(request).session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def open_database(settings: Settings) -> Database:
    database = Database.from_settings(settings)
    logger.info("database.open", extra={"dialect": database.engine.dialect.name})
    return database
