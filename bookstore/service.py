import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import Select, delete, func, insert, or_, select, update
from sqlalchemy.orm import Session

from .entities import BookRecord
from .models import Book, BookInput
from .projections import columns

logger = logging.getLogger(__name__)

books = BookRecord.__table__

FEATURED_MIN_RATING = 4.5
FEATURED_MIN_REVIEWS = 100
FEATURED_LIMIT = 20
NEW_BOOKS_WINDOW = timedelta(days=30)
NEW_BOOKS_LIMIT = 20


class BookNotFound(KeyError):
    pass


class BookService:
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> list[Book]:
        return self._fetch(select(*columns("summary")))

    def get(self, book_id: int) -> Book:
        row = self.session.execute(
            select(*columns("detail")).where(books.c.id == book_id)
        ).mappings().first()
        if row is None:
            raise BookNotFound(book_id)
        return Book.model_validate(dict(row))

    def create(self, payload: BookInput) -> Book:
        row = self.session.execute(
            insert(books)
            .values(**payload.persisted_fields())
            .returning(books.c.id, books.c.created_at, books.c.updated_at)
        ).mappings().one()
        self.session.commit()
        logger.info("book.created", extra={"book_id": row["id"]})
        return Book.model_validate({**payload.model_dump(), **row})

    def update(self, book_id: int, payload: BookInput) -> Book:
        row = self.session.execute(
            update(books)
            .where(books.c.id == book_id)
            .values(**payload.persisted_fields(), updated_at=func.now())
            .returning(books.c.id, books.c.created_at, books.c.updated_at)
        ).mappings().first()
        if row is None:
            raise BookNotFound(book_id)
        self.session.commit()
        logger.info("book.updated", extra={"book_id": book_id})
        return Book.model_validate({**payload.model_dump(), **row})

    def delete(self, book_id: int) -> None:
        result = self.session.execute(delete(books).where(books.c.id == book_id))
        if result.rowcount == 0:
            raise BookNotFound(book_id)
        self.session.commit()
        logger.info("book.deleted", extra={"book_id": book_id})

    def categories(self) -> list[str]:
        stmt = (
            select(books.c.category)
            .distinct()
            .where(books.c.category.is_not(None), books.c.category != "")
            .order_by(books.c.category)
        )
        return list(self.session.execute(stmt).scalars())

    def search(self, keyword: str) -> list[Book]:
        match = or_(
            books.c.title.icontains(keyword, autoescape=True),
            books.c.author.icontains(keyword, autoescape=True),
            books.c.description.icontains(keyword, autoescape=True),
        )
        return self._fetch(select(*columns("search")).where(match))

    def featured(self) -> list[Book]:
        stmt = (
            select(*columns("featured"))
            .where(or_(books.c.rating >= FEATURED_MIN_RATING, books.c.reviews_count >= FEATURED_MIN_REVIEWS))
            .order_by(books.c.rating.desc(), books.c.reviews_count.desc())
            .limit(FEATURED_LIMIT)
        )
        return self._fetch(stmt)

    def new_arrivals(self, now: datetime | None = None) -> list[Book]:
        cutoff = (now or datetime.now(timezone.utc)) - NEW_BOOKS_WINDOW
        stmt = (
            select(*columns("new"))
            .where(or_(books.c.is_new.is_(True), books.c.created_at >= cutoff))
            .order_by(books.c.created_at.desc())
            .limit(NEW_BOOKS_LIMIT)
        )
        return self._fetch(stmt)

    def discounted(self) -> list[Book]:
        stmt = (
            select(*columns("discounted"))
            .where(books.c.discount > 0)
            .order_by(books.c.discount.desc())
        )
        return self._fetch(stmt)

    def _fetch(self, stmt: Select) -> list[Book]:
        # A row that fails to map aborts the whole read.
        return [Book.model_validate(dict(row)) for row in self.session.execute(stmt).mappings()]
