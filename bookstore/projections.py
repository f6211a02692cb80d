"""Field selection per read endpoint.

Each read operation names one projection here instead of spelling out its
own column list, so the shape of every response is declared in one place.
"""

from sqlalchemy import Column

from .entities import BookRecord

SUMMARY = ("id", "title", "author", "isbn", "year", "price", "created_at", "updated_at")

DETAIL = tuple(column.key for column in BookRecord.__table__.columns)

PROJECTIONS: dict[str, tuple[str, ...]] = {
    "summary": SUMMARY,
    "detail": DETAIL,
    "search": SUMMARY[:6] + ("category", "rating", "reviews_count", "is_new") + SUMMARY[6:],
    "featured": (
        "id", "title", "author", "price", "rating", "reviews_count", "category", "created_at", "updated_at",
    ),
    "new": ("id", "title", "author", "price", "created_at", "is_new", "category", "updated_at"),
    "discounted": (
        "id", "title", "author", "price", "original_price", "discount", "category", "created_at", "updated_at",
    ),
}


def columns(name: str) -> list[Column]:
    table = BookRecord.__table__
    return [table.c[field] for field in PROJECTIONS[name]]
