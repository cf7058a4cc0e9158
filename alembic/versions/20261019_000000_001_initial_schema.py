"""Initial storefront schema.

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    # Slug registry
    op.create_table(
        "store_names",
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("store_name", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("slug", name=op.f("pk_store_names")),
    )
    op.create_index(op.f("ix_store_names_owner_id"), "store_names", ["owner_id"])

    # Stores, keyed by owner id
    op.create_table(
        "stores",
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("store_name", sa.String(255), nullable=True),
        sa.Column("store_name_slug", sa.String(255), nullable=True),
        sa.Column("store_description", sa.Text(), nullable=False, server_default=""),
        sa.Column("store_category", sa.String(255), nullable=False, server_default=""),
        sa.Column("website", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("has_products", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("has_customized_store", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("owner_id", name=op.f("pk_stores")),
    )
    op.create_index(op.f("ix_stores_store_name_slug"), "stores", ["store_name_slug"])

    # Merchant profiles
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("store_name", sa.String(255), nullable=True),
        sa.Column("store_name_slug", sa.String(255), nullable=True),
        sa.Column("store_logo_url", sa.String(2048), nullable=True),
        sa.Column("subscription", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("onboarding", postgresql.JSONB(), nullable=False, server_default="{}"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )

    # Products
    op.create_table(
        "products",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("store_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(255), nullable=False, server_default=""),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(50), nullable=False, server_default="Active"),
        sa.Column("images", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("inventory", sa.Integer(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("low_stock_threshold", sa.Integer(), nullable=True),
        sa.Column("variant_stock", postgresql.JSONB(), nullable=True),
        sa.Column("variant_low_stock_threshold", postgresql.JSONB(), nullable=True),
        sa.Column(
            "notify_when_available", postgresql.JSONB(), nullable=False, server_default="[]"
        ),
        sa.Column("sales_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_products")),
    )
    op.create_index(op.f("ix_products_store_id"), "products", ["store_id"])

    # Orders
    op.create_table(
        "orders",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("store_id", sa.String(255), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=True),
        sa.Column("customer_name", sa.String(255), nullable=True),
        sa.Column("items", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("total", sa.Float(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(50), nullable=False, server_default="Pending"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_orders")),
    )
    op.create_index(op.f("ix_orders_store_id"), "orders", ["store_id"])

    # Dashboard notifications
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("store_id", sa.String(255), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("product_id", sa.String(64), nullable=True),
        sa.Column("product_name", sa.String(500), nullable=True),
        sa.Column("variant_key", sa.String(500), nullable=True),
        sa.Column("remaining_stock", sa.Integer(), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.String(500), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_notifications")),
    )
    op.create_index(op.f("ix_notifications_user_id"), "notifications", ["user_id"])
    op.create_index(
        "ix_notifications_user_product_type",
        "notifications",
        ["user_id", "product_id", "type"],
    )

    # Early-access promotion counter
    op.create_table(
        "promo_config",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("total_spots", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("used_spots", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_promo_config")),
    )


def downgrade() -> None:
    op.drop_table("promo_config")
    op.drop_index("ix_notifications_user_product_type", table_name="notifications")
    op.drop_index(op.f("ix_notifications_user_id"), table_name="notifications")
    op.drop_table("notifications")
    op.drop_index(op.f("ix_orders_store_id"), table_name="orders")
    op.drop_table("orders")
    op.drop_index(op.f("ix_products_store_id"), table_name="products")
    op.drop_table("products")
    op.drop_table("users")
    op.drop_index(op.f("ix_stores_store_name_slug"), table_name="stores")
    op.drop_table("stores")
    op.drop_index(op.f("ix_store_names_owner_id"), table_name="store_names")
    op.drop_table("store_names")
