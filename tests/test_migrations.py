from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import Numeric, create_engine, inspect

from bookstore.entities import BookRecord


def make_cfg(db_url: str) -> Config:
    cfg = Config("alembic.ini")
    cfg.set_main_option("script_location", "alembic")
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def test_migration_upgrade_and_downgrade(tmp_path: Path):
    db_url = f"sqlite:///{tmp_path/'mig.db'}"
    cfg = make_cfg(db_url)

    command.upgrade(cfg, "head")
    inspector = inspect(create_engine(db_url))
    assert "books" in inspector.get_table_names()
    migrated = {column["name"] for column in inspector.get_columns("books")}
    assert migrated == {column.key for column in BookRecord.__table__.columns}
    price = next(column for column in inspector.get_columns("books") if column["name"] == "price")
    assert isinstance(price["type"], Numeric)
    assert (price["type"].precision, price["type"].scale) == (10, 2)

    command.downgrade(cfg, "base")
    inspector = inspect(create_engine(db_url))
    assert "books" not in inspector.get_table_names()
