"""Messaging subscription table models."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from finder.models.base import Base
from finder.models.filter_columns import FilterColumnsMixin


class TelegramSubscription(FilterColumnsMixin, Base):
    """Saved filter for a Telegram chat."""

    __tablename__ = "telegram_subscriptions"
    __table_args__ = (
        UniqueConstraint(
            "chat_id", "target_type", name="uq_telegram_subscriptions_chat_target"
        ),
        Index("idx_telegram_subscriptions_active", "active"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    chat_id: Mapped[str] = mapped_column(Text, nullable=False)
    target_type: Mapped[str] = mapped_column(
        Text, nullable=False, default="user", server_default="user"
    )
    active: Mapped[bool] = mapped_column(
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


class WhatsappSubscription(FilterColumnsMixin, Base):
    """Saved filter for a WhatsApp phone number."""

    __tablename__ = "whatsapp_subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    phone_number: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    active: Mapped[bool] = mapped_column(
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
