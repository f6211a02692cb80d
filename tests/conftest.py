import httpx
import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.pool import StaticPool

from bookstore.app import create_app
from bookstore.config import Settings
from bookstore.db import Database
from bookstore.entities import BookRecord


def make_memory_database() -> Database:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    database = Database(engine)
    database.create_all()
    return database


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def database():
    database = make_memory_database()
    yield database
    database.dispose()


@pytest.fixture()
def app(database):
    return create_app(settings=Settings(database_url="sqlite://"), database=database)


@pytest.fixture()
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture()
def seed(database):
    """Insert rows directly, bypassing the API's five-column write path."""

    def _seed(*rows: dict) -> None:
        defaults = {"author": "Anon", "isbn": "", "year": 2000, "price": 10.0}
        with database.session() as session:
            for row in rows:
                session.execute(insert(BookRecord.__table__).values(**{**defaults, **row}))
            session.commit()

    return _seed

