"""Activity log tables feeding admin statistics."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from finder.models.base import Base


class ListingView(Base):
    """Listing detail lookup attributed to a Telegram chat."""

    __tablename__ = "listing_views"
    __table_args__ = (
        Index("idx_listing_views_created", "created_at"),
        Index("idx_listing_views_chat", "telegram_chat_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    post_id: Mapped[str] = mapped_column(Text, nullable=False)
    telegram_chat_id: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class WhatsappMessageLog(Base):
    """Listing message delivered to a WhatsApp subscriber."""

    __tablename__ = "whatsapp_message_log"
    __table_args__ = (Index("idx_whatsapp_message_log_sent", "sent_at"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    phone_number: Mapped[str] = mapped_column(Text, nullable=False)
    post_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
