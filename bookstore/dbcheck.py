"""Connectivity smoke check: ``python -m bookstore.dbcheck``.

Opens the configured database, pings it once and exits 0 on success or 1
on failure.
"""

import logging
import sys
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from .config import Settings, get_settings
from .db import Database, open_database
from .otel import configure_logging

logger = logging.getLogger(__name__)


def check(settings: Optional[Settings] = None, database: Optional[Database] = None) -> bool:
    database = database or open_database(settings or get_settings())
    try:
        database.ping()
    except SQLAlchemyError as exc:
        logger.error("failed to connect to database: %s", exc)
        return False
    finally:
        database.dispose()
    logger.info("successfully connected to database")
    return True


def main() -> int:
    settings = get_settings()
    configure_logging(settings.log_level)
    return 0 if check(settings) else 1


if __name__ == "__main__":
    sys.exit(main())
