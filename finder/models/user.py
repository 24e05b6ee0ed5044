"""Account and per-account saved filter models."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from finder.models.base import Base
from finder.models.filter_columns import FilterColumnsMixin


class User(Base):
    """Authenticated account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    is_subscribed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    telegram_chat_id: Mapped[str | None] = mapped_column(Text, nullable=True)


class UserFilter(FilterColumnsMixin, Base):
    """Filter saved by an authenticated account."""

    __tablename__ = "user_filters"
    __table_args__ = (Index("idx_user_filters_user", "user_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
