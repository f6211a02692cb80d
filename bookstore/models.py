from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# NUMERIC(10, 2)
PRICE_LIMIT = 10**8


class Book(BaseModel):
    """Wire representation of a book.

    Every field is optional because each read endpoint returns one named
    projection (see ``projections.PROJECTIONS``); only fields that were
    actually selected are set and serialised.
    """

    id: Optional[int] = None
    title: Optional[str] = None
    author: Optional[str] = None
    isbn: Optional[str] = None
    year: Optional[int] = None
    price: Optional[float] = None
    category: Optional[str] = None
    original_price: Optional[float] = None
    discount: Optional[int] = None
    cover_image: Optional[str] = None
    rating: Optional[float] = None
    reviews_count: Optional[int] = None
    is_new: Optional[bool] = None
    pages: Optional[int] = None
    language: Optional[str] = None
    publisher: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BookInput(BaseModel):
    """Request body for create and update.

    Only types are checked; missing fields take zero values. The bounds
    below are the widths of the persisted columns.
    """

    title: str = Field(default="", max_length=255)
    author: str = Field(default="", max_length=255)
    isbn: str = Field(default="", max_length=20)
    year: int = 0
    price: float = Field(default=0, gt=-PRICE_LIMIT, lt=PRICE_LIMIT)

    # Accepted and echoed back, but not persisted by create/update.
    category: Optional[str] = None
    original_price: Optional[float] = None
    discount: int = 0
    cover_image: str = ""
    rating: float = 0
    reviews_count: int = 0
    is_new: bool = False
    pages: Optional[int] = None
    language: str = ""
    publisher: str = ""
    description: str = ""

    def persisted_fields(self) -> dict:
        return self.model_dump(include={"title", "author", "isbn", "year", "price"})


class ErrorResponse(BaseModel):
    error: str


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    message: str
    error: Optional[str] = None


class Reservation(BaseModel):
    id: str
    name: str
    room_id: str
    date: str
    time_start: str
    time_end: str
    purpose: str
