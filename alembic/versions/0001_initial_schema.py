"""initial schema: catalog, users, orders, status history

Revision ID: 0001
Revises:
Create Date: 2026-02-06 00:00:00

"""
from datetime import datetime
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Копия сидов на момент ревизии: миграция не должна зависеть от текущего кода моделей
ORDER_STATUSES = [
    ("order_received", "Sipariş Alındı", "Order Received", "blue", 1),
    ("preparing", "Hazırlanıyor", "Preparing", "orange", 2),
    ("shipped", "Kargoya Verildi", "Shipped", "cyan", 3),
    ("returned", "İade Edildi", "Returned", "purple", 4),
    ("cancelled", "İptal", "Cancelled", "red", 5),
    ("completed", "Tamamlandı", "Completed", "green", 6),
]
BRANDS = ["SCHNEIDER ELECTRIC", "ABB", "SIEMENS", "LEGRAND", "EATON"]


def _timestamps(updated: bool = True) -> list[sa.Column]:
    cols = [sa.Column("created_at", sa.DateTime(), nullable=True)]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(), nullable=True))
    return cols


def upgrade() -> None:
    op.create_table(
        "brands",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_brands_name"),
    )
    op.create_index("ix_brands_id", "brands", ["id"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("sku", sa.String(100), nullable=False),
        sa.Column("brand", sa.String(100), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("original_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("current_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("stock_status", sa.String(20), nullable=False, server_default="in_stock"),
        sa.Column("stock_quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("rating", sa.Numeric(3, 2), nullable=True),
        sa.Column("review_count", sa.Integer(), nullable=True),
        sa.Column("technical_specs", sa.JSON(), nullable=True),
        sa.Column("reviews", sa.JSON(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_products_id", "products", ["id"])
    op.create_index("ix_products_sku", "products", ["sku"], unique=True)
    op.create_index("ix_products_brand", "products", ["brand"])
    op.create_index("ix_products_stock_status", "products", ["stock_status"])

    op.create_table(
        "product_features",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "product_id",
            sa.Integer(),
            sa.ForeignKey("products.id", ondelete="CASCADE", name="fk_product_features_product_id_products"),
            nullable=False,
        ),
        sa.Column("feature", sa.Text(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index("ix_product_features_id", "product_features", ["id"])
    op.create_index("ix_product_features_product_id", "product_features", ["product_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_number", sa.String(50), nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_orders_user_id_users"),
            nullable=True,
        ),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("kdv", sa.Numeric(10, 2), nullable=False),
        sa.Column("grand_total", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="order_received"),
        *_timestamps(),
    )
    op.create_index("ix_orders_id", "orders", ["id"])
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("ix_orders_user_id", "orders", ["user_id"])
    op.create_index("ix_orders_status", "orders", ["status"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "order_id",
            sa.Integer(),
            sa.ForeignKey("orders.id", ondelete="CASCADE", name="fk_order_items_order_id_orders"),
            nullable=False,
        ),
        sa.Column(
            "product_id",
            sa.Integer(),
            sa.ForeignKey("products.id", ondelete="SET NULL", name="fk_order_items_product_id_products"),
            nullable=True,
        ),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("product_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("product_image", sa.String(500), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_order_items_id", "order_items", ["id"])
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])
    op.create_index("ix_order_items_product_id", "order_items", ["product_id"])

    op.create_table(
        "delivery_addresses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "order_id",
            sa.Integer(),
            sa.ForeignKey("orders.id", ondelete="CASCADE", name="fk_delivery_addresses_order_id_orders"),
            nullable=False,
        ),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("district", sa.String(100), nullable=False),
        sa.Column("postal_code", sa.String(20), nullable=True),
        *_timestamps(updated=False),
        sa.UniqueConstraint("order_id", name="uq_delivery_addresses_order_id"),
    )
    op.create_index("ix_delivery_addresses_id", "delivery_addresses", ["id"])

    # Только статус оплаты: колонок с данными карты нет и не будет
    op.create_table(
        "payment_info",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "order_id",
            sa.Integer(),
            sa.ForeignKey("orders.id", ondelete="CASCADE", name="fk_payment_info_order_id_orders"),
            nullable=False,
        ),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        *_timestamps(updated=False),
        sa.UniqueConstraint("order_id", name="uq_payment_info_order_id"),
    )
    op.create_index("ix_payment_info_id", "payment_info", ["id"])

    op.create_table(
        "order_status_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "order_id",
            sa.Integer(),
            sa.ForeignKey("orders.id", ondelete="CASCADE", name="fk_order_status_history_order_id_orders"),
            nullable=False,
        ),
        sa.Column("old_status", sa.String(20), nullable=True),
        sa.Column("new_status", sa.String(20), nullable=False),
        sa.Column("changed_by", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_order_status_history_id", "order_status_history", ["id"])
    op.create_index("ix_order_status_history_order_id", "order_status_history", ["order_id"])

    statuses = op.create_table(
        "order_statuses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("value", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("name_en", sa.String(100), nullable=False),
        sa.Column("color", sa.String(20), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("value", name="uq_order_statuses_value"),
    )
    op.create_index("ix_order_statuses_id", "order_statuses", ["id"])

    now = datetime.utcnow()
    op.bulk_insert(
        statuses,
        [
            {
                "value": value,
                "name": name,
                "name_en": name_en,
                "color": color,
                "display_order": display_order,
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            }
            for value, name, name_en, color, display_order in ORDER_STATUSES
        ],
    )

    brands = sa.table(
        "brands",
        sa.column("name", sa.String),
        sa.column("is_deleted", sa.Boolean),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    op.bulk_insert(
        brands,
        [{"name": name, "is_deleted": False, "created_at": now, "updated_at": now} for name in BRANDS],
    )


def downgrade() -> None:
    for table in (
        "order_statuses",
        "order_status_history",
        "payment_info",
        "delivery_addresses",
        "order_items",
        "orders",
        "users",
        "product_features",
        "products",
        "brands",
    ):
        op.drop_table(table)
