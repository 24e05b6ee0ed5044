"""Initial tables for listings, subscriptions, accounts, and activity logs.

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def _filter_columns() -> list[sa.Column]:
    columns: list[sa.Column] = []
    for name in ("price", "size", "rooms"):
        columns.append(sa.Column(f"min_{name}", sa.Float(), nullable=True))
        columns.append(sa.Column(f"max_{name}", sa.Float(), nullable=True))
    for name in ("neighborhoods", "balcony", "parking", "furnished", "agent"):
        columns.append(sa.Column(name, postgresql.ARRAY(sa.Text()), nullable=True))
    for name in ("price", "size", "rooms"):
        columns.append(
            sa.Column(
                f"include_zero_{name}",
                sa.Boolean(),
                server_default=sa.text("true"),
                nullable=False,
            )
        )
    return columns


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "processed_posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("source_platform", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("detailed_description", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("size", sa.Float(), nullable=True),
        sa.Column("num_rooms", sa.Float(), nullable=True),
        sa.Column("balcony", sa.Text(), nullable=True),
        sa.Column("parking", sa.Text(), nullable=True),
        sa.Column("furnished", sa.Text(), nullable=True),
        sa.Column("agent", sa.Text(), nullable=True),
        sa.Column("street", sa.Text(), nullable=True),
        sa.Column("house_number", sa.Text(), nullable=True),
        sa.Column("neighborhood", sa.Text(), nullable=True),
        sa.Column("city", sa.Text(), nullable=True),
        sa.Column("attachments", postgresql.JSONB(), nullable=True),
        sa.Column(
            "is_for_rent", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_processed_posts"),
        sa.UniqueConstraint("post_id", name="uq_processed_posts_post_id"),
    )
    op.create_index("idx_processed_posts_created", "processed_posts", ["created_at"])
    op.create_index(
        "idx_processed_posts_neighborhood", "processed_posts", ["neighborhood"]
    )
    op.create_index("idx_processed_posts_price", "processed_posts", ["price"])

    op.create_table(
        "telegram_subscriptions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("chat_id", sa.Text(), nullable=False),
        sa.Column("target_type", sa.Text(), server_default="user", nullable=False),
        sa.Column(
            "active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        *_filter_columns(),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_telegram_subscriptions"),
        sa.UniqueConstraint(
            "chat_id", "target_type", name="uq_telegram_subscriptions_chat_target"
        ),
    )
    op.create_index(
        "idx_telegram_subscriptions_active", "telegram_subscriptions", ["active"]
    )

    op.create_table(
        "whatsapp_subscriptions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("phone_number", sa.Text(), nullable=False),
        sa.Column(
            "active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        *_filter_columns(),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_whatsapp_subscriptions"),
        sa.UniqueConstraint(
            "phone_number", name="uq_whatsapp_subscriptions_phone_number"
        ),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column(
            "is_subscribed",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column("telegram_chat_id", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "user_filters",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_filter_columns(),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_user_filters_user_id_users"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_user_filters"),
    )
    op.create_index("idx_user_filters_user", "user_filters", ["user_id"])

    op.create_table(
        "listing_views",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Text(), nullable=False),
        sa.Column("telegram_chat_id", sa.Text(), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_listing_views"),
    )
    op.create_index("idx_listing_views_created", "listing_views", ["created_at"])
    op.create_index("idx_listing_views_chat", "listing_views", ["telegram_chat_id"])

    op.create_table(
        "whatsapp_message_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("phone_number", sa.Text(), nullable=False),
        sa.Column("post_id", sa.Text(), nullable=True),
        _timestamp("sent_at"),
        sa.PrimaryKeyConstraint("id", name="pk_whatsapp_message_log"),
    )
    op.create_index(
        "idx_whatsapp_message_log_sent", "whatsapp_message_log", ["sent_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("idx_whatsapp_message_log_sent", table_name="whatsapp_message_log")
    op.drop_table("whatsapp_message_log")

    op.drop_index("idx_listing_views_chat", table_name="listing_views")
    op.drop_index("idx_listing_views_created", table_name="listing_views")
    op.drop_table("listing_views")

    op.drop_index("idx_user_filters_user", table_name="user_filters")
    op.drop_table("user_filters")
    op.drop_table("users")

    op.drop_table("whatsapp_subscriptions")

    op.drop_index(
        "idx_telegram_subscriptions_active", table_name="telegram_subscriptions"
    )
    op.drop_table("telegram_subscriptions")

    op.drop_index("idx_processed_posts_price", table_name="processed_posts")
    op.drop_index("idx_processed_posts_neighborhood", table_name="processed_posts")
    op.drop_index("idx_processed_posts_created", table_name="processed_posts")
    op.drop_table("processed_posts")
