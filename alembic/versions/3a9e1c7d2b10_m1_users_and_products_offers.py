"""m1_users_and_products_offers

Revision ID: 3a9e1c7d2b10
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "3a9e1c7d2b10"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("farm_location", sa.Text(), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("role IN ('farmer','customer')", name="ck_users_role"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("idx_users_role_phone", "users", ["role", "phone"])
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "products",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("farmer_user_id", sa.BigInteger(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'available'")),
        sa.Column("visibility", sa.String(16), nullable=False, server_default=sa.text("'visible'")),
        sa.Column("discount_percent", sa.SmallInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("offer_start_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("offer_end_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("offer_expired", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("sms_warning_sent", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("status IN ('available','out_of_stock')", name="ck_products_status"),
        sa.CheckConstraint("visibility IN ('visible','hidden')", name="ck_products_visibility"),
        sa.CheckConstraint(
            "discount_percent >= 0 AND discount_percent <= 100",
            name="ck_products_discount_percent_range",
        ),
        sa.CheckConstraint(
            "discount_percent = 0 OR offer_end_at IS NOT NULL",
            name="ck_products_discount_requires_offer_end",
        ),
        sa.CheckConstraint(
            "NOT offer_expired OR discount_percent = 0",
            name="ck_products_expired_offer_has_no_discount",
        ),
        sa.ForeignKeyConstraint(["farmer_user_id"], ["users.id"]),
    )
    op.create_index("idx_products_farmer", "products", ["farmer_user_id"])
    op.create_index(
        "idx_products_offer_open",
        "products",
        ["offer_end_at"],
        postgresql_where=sa.text("discount_percent > 0 AND offer_expired = false"),
    )


def downgrade() -> None:
    op.drop_index("idx_products_offer_open", table_name="products")
    op.drop_index("idx_products_farmer", table_name="products")
    op.drop_table("products")

    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_index("idx_users_role_phone", table_name="users")
    op.drop_table("users")
