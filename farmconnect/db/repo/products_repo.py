from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from farmconnect.db.models.products import Product


class ProductsRepo:
    @staticmethod
    async def list_expiring_offers(
        session: AsyncSession,
        *,
        now_utc: datetime,
        warn_until_utc: datetime,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .where(
                Product.discount_percent > 0,
                Product.offer_end_at >= now_utc,
                Product.offer_end_at <= warn_until_utc,
                Product.sms_warning_sent.is_(False),
                Product.offer_expired.is_(False),
            )
            .order_by(Product.offer_end_at.asc(), Product.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_active_offers(
        session: AsyncSession,
        *,
        now_utc: datetime,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .where(
                Product.discount_percent > 0,
                Product.offer_end_at >= now_utc,
                Product.offer_expired.is_(False),
            )
            .order_by(Product.offer_end_at.asc(), Product.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def mark_warning_sent(
        session: AsyncSession,
        *,
        product_id: int,
        offer_end_at: datetime,
        now_utc: datetime,
    ) -> bool:
        """Flag the window ending at ``offer_end_at``; a reconfigured window is left alone."""
        stmt = (
            update(Product)
            .where(
                Product.id == product_id,
                Product.sms_warning_sent.is_(False),
                Product.offer_end_at == offer_end_at,
                Product.offer_expired.is_(False),
            )
            .values(sms_warning_sent=True, updated_at=now_utc)
            .returning(Product.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def expire_offers(
        session: AsyncSession,
        *,
        now_utc: datetime,
    ) -> list[tuple[int, str]]:
        stmt = (
            update(Product)
            .where(
                Product.discount_percent > 0,
                Product.offer_end_at < now_utc,
                Product.offer_expired.is_(False),
            )
            .values(offer_expired=True, discount_percent=0, updated_at=now_utc)
            .returning(Product.id, Product.title)
        )
        result = await session.execute(stmt)
        return [(int(product_id), str(title)) for product_id, title in result.all()]

    @staticmethod
    async def configure_offer_window(
        session: AsyncSession,
        *,
        product_id: int,
        discount_percent: int,
        offer_start_at: datetime,
        offer_end_at: datetime,
        now_utc: datetime,
    ) -> Product | None:
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(
                discount_percent=discount_percent,
                offer_start_at=offer_start_at,
                offer_end_at=offer_end_at,
                offer_expired=False,
                sms_warning_sent=False,
                updated_at=now_utc,
            )
            .returning(Product)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def clear_offer_window(
        session: AsyncSession,
        *,
        product_id: int,
        now_utc: datetime,
    ) -> bool:
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(
                discount_percent=0,
                offer_start_at=None,
                offer_end_at=None,
                offer_expired=False,
                sms_warning_sent=False,
                updated_at=now_utc,
            )
            .returning(Product.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
