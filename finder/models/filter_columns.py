"""Column mixin shared by every table that persists a filter state."""

from sqlalchemy import Boolean, Float, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column


class FilterColumnsMixin:
    """Range bounds, zero-inclusion flags, and native array selections."""

    min_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    min_size: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_size: Mapped[float | None] = mapped_column(Float, nullable=True)
    min_rooms: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_rooms: Mapped[float | None] = mapped_column(Float, nullable=True)
    neighborhoods: Mapped[list[str] | None] = mapped_column(
        ARRAY(Text), nullable=True
    )
    balcony: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    parking: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    furnished: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    agent: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    include_zero_price: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )
    include_zero_size: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )
    include_zero_rooms: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )
