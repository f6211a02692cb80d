from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, Numeric, String, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class BookRecord(Base):
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    isbn: Mapped[str] = mapped_column(String(20), nullable=False, default="", server_default="")
    year: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, default=0, server_default="0"
    )

    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    original_price: Mapped[Optional[float]] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    discount: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    cover_image: Mapped[str] = mapped_column(String(500), nullable=False, default="", server_default="")
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0, server_default="0")
    reviews_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    is_new: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    pages: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    language: Mapped[str] = mapped_column(String(50), nullable=False, default="", server_default="")
    publisher: Mapped[str] = mapped_column(String(255), nullable=False, default="", server_default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
