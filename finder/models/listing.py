"""Processed listing table model."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, Index, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from finder.models.base import Base


class Listing(Base):
    """Rental post ingested and processed by the external pipeline.

    ``price``, ``size`` and ``num_rooms`` use 0 (or NULL) for "unknown".
    """

    __tablename__ = "processed_posts"
    __table_args__ = (
        Index("idx_processed_posts_created", "created_at"),
        Index("idx_processed_posts_neighborhood", "neighborhood"),
        Index("idx_processed_posts_price", "price"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    post_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    source_platform: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    detailed_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    size: Mapped[float | None] = mapped_column(Float, nullable=True)
    num_rooms: Mapped[float | None] = mapped_column(Float, nullable=True)
    balcony: Mapped[str | None] = mapped_column(Text, nullable=True)
    parking: Mapped[str | None] = mapped_column(Text, nullable=True)
    furnished: Mapped[str | None] = mapped_column(Text, nullable=True)
    agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    street: Mapped[str | None] = mapped_column(Text, nullable=True)
    house_number: Mapped[str | None] = mapped_column(Text, nullable=True)
    neighborhood: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    attachments: Mapped[list[str] | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=True
    )
    is_for_rent: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
