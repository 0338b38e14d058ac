from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from farmconnect.db.models.base import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint(
            "status IN ('available','out_of_stock')",
            name="ck_products_status",
        ),
        CheckConstraint(
            "visibility IN ('visible','hidden')",
            name="ck_products_visibility",
        ),
        CheckConstraint(
            "discount_percent >= 0 AND discount_percent <= 100",
            name="ck_products_discount_percent_range",
        ),
        CheckConstraint(
            "discount_percent = 0 OR offer_end_at IS NOT NULL",
            name="ck_products_discount_requires_offer_end",
        ),
        CheckConstraint(
            "NOT offer_expired OR discount_percent = 0",
            name="ck_products_expired_offer_has_no_discount",
        ),
        Index("idx_products_farmer", "farmer_user_id"),
        Index(
            "idx_products_offer_open",
            "offer_end_at",
            postgresql_where=text("discount_percent > 0 AND offer_expired = false"),
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    farmer_user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        server_default=text("'available'"),
    )
    visibility: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        server_default=text("'visible'"),
    )

    discount_percent: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        server_default=text("0"),
    )
    offer_start_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    offer_end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    offer_expired: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
    )
    sms_warning_sent: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
