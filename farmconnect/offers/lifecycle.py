from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import structlog

from farmconnect.core.config import Settings, get_settings
from farmconnect.db.repo.products_repo import ProductsRepo
from farmconnect.db.repo.users_repo import UsersRepo
from farmconnect.db.session import SessionLocal
from farmconnect.messaging.bulk import Heartbeat, send_bulk_sms
from farmconnect.messaging.pacing import PacedSender
from farmconnect.messaging.phone import is_valid_recipient_phone
from farmconnect.messaging.sms_gateway import SmsGateway
from farmconnect.messaging.texts import build_offer_expiry_sms
from farmconnect.offers.constants import DEFAULT_WARN_HORIZON
from farmconnect.offers.errors import (
    CatalogStoreError,
    OfferLifecycleError,
    OfferRunInterruptedError,
)
from farmconnect.offers.time_utils import format_time_left, utc_now
from farmconnect.offers.types import ExpiringOffer, SmsRecipient

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


@dataclass(slots=True)
class _WarningScanProgress:
    products_total: int = 0
    products_processed: int = 0
    products_marked: int = 0
    recipients_total: int = 0
    recipients_skipped: int = 0
    sent: int = 0
    failed: int = 0


def split_recipients(rows: list[tuple[int, str]]) -> tuple[list[SmsRecipient], int]:
    recipients: list[SmsRecipient] = []
    skipped = 0
    for user_id, phone in rows:
        if is_valid_recipient_phone(phone):
            recipients.append(SmsRecipient(user_id=user_id, phone=phone.strip()))
        else:
            skipped += 1
    return recipients, skipped


class OfferLifecycleMonitor:
    """Drives product discount windows through warning and expiry.

    Both entry points are safe to call on a fixed interval: products already
    warned or expired drop out of the underlying queries. Store failures end
    the run and come back as an ``error`` entry in the result; whatever was
    committed before the failure stays committed.

    ``heartbeat`` is awaited before every SMS so the caller can keep its
    run lease alive; if it raises, the scan stops after flagging the product
    being broadcast. The sweep never needs a gateway.
    """

    def __init__(
        self,
        *,
        session_factory: Any,
        gateway: SmsGateway | None = None,
        sender: PacedSender | None = None,
        warn_horizon: timedelta = DEFAULT_WARN_HORIZON,
        clock: Clock = utc_now,
        heartbeat: Heartbeat | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._gateway = gateway
        self._sender = sender or PacedSender()
        self._warn_horizon = warn_horizon
        self._clock = clock
        self._heartbeat = heartbeat

    async def _load_expiring_offers(self, *, now_utc: datetime) -> list[ExpiringOffer]:
        try:
            async with self._session_factory.begin() as session:
                products = await ProductsRepo.list_expiring_offers(
                    session,
                    now_utc=now_utc,
                    warn_until_utc=now_utc + self._warn_horizon,
                )
                return [
                    ExpiringOffer(
                        product_id=int(product.id),
                        title=str(product.title),
                        discount_percent=int(product.discount_percent),
                        offer_end_at=product.offer_end_at,
                    )
                    for product in products
                    if product.offer_end_at is not None
                ]
        except Exception as exc:
            raise CatalogStoreError("expiring_offers_query_failed") from exc

    async def _load_recipients(self) -> list[tuple[int, str]]:
        try:
            async with self._session_factory.begin() as session:
                return await UsersRepo.list_sms_recipients(session)
        except Exception as exc:
            raise CatalogStoreError("sms_recipients_query_failed") from exc

    async def _mark_warned(self, *, offer: ExpiringOffer, now_utc: datetime) -> bool:
        try:
            async with self._session_factory.begin() as session:
                return await ProductsRepo.mark_warning_sent(
                    session,
                    product_id=offer.product_id,
                    offer_end_at=offer.offer_end_at,
                    now_utc=now_utc,
                )
        except Exception as exc:
            raise CatalogStoreError("warning_flag_write_failed") from exc

    async def _keep_alive(self) -> None:
        if self._heartbeat is None:
            return
        try:
            await self._heartbeat()
        except Exception as exc:
            raise OfferRunInterruptedError("single_flight_lost") from exc

    async def _warn_product(
        self,
        *,
        gateway: SmsGateway,
        offer: ExpiringOffer,
        recipients: list[SmsRecipient],
        now_utc: datetime,
        progress: _WarningScanProgress,
    ) -> None:
        time_left = format_time_left(now_utc=now_utc, offer_end_at=offer.offer_end_at)
        message = build_offer_expiry_sms(
            product_name=offer.title,
            discount_percent=offer.discount_percent,
            time_left=time_left,
        )
        try:
            outcome = await send_bulk_sms(
                gateway=gateway,
                sender=self._sender,
                phones=[recipient.phone for recipient in recipients],
                message=message,
                heartbeat=self._keep_alive,
            )
        except OfferRunInterruptedError:
            # Customers reached before the interruption count as warned.
            marked = await self._mark_warned(offer=offer, now_utc=now_utc)
            progress.products_marked += int(marked)
            logger.warning(
                "offer_expiry_warning_interrupted",
                product_id=offer.product_id,
                warning_flag_set=marked,
            )
            raise

        sent = int(outcome["sent"])
        failed = int(outcome["failed"])
        progress.sent += sent
        progress.failed += failed

        # At most one warning per window, even if every send failed.
        marked = await self._mark_warned(offer=offer, now_utc=now_utc)
        progress.products_processed += 1
        progress.products_marked += int(marked)
        logger.info(
            "offer_expiry_warning_dispatched",
            product_id=offer.product_id,
            discount_percent=offer.discount_percent,
            time_left=time_left,
            sent=sent,
            failed=failed,
            warning_flag_set=marked,
        )

    async def scan_and_warn(self) -> dict[str, object]:
        gateway = self._gateway
        if gateway is None:
            raise OfferLifecycleError("sms_gateway_required")
        now_utc = self._clock()
        progress = _WarningScanProgress()

        try:
            offers = await self._load_expiring_offers(now_utc=now_utc)
            progress.products_total = len(offers)
            if offers:
                recipients, skipped = split_recipients(await self._load_recipients())
                progress.recipients_total = len(recipients)
                progress.recipients_skipped = skipped
                for offer in offers:
                    await self._warn_product(
                        gateway=gateway,
                        offer=offer,
                        recipients=recipients,
                        now_utc=now_utc,
                        progress=progress,
                    )
        except (CatalogStoreError, OfferRunInterruptedError) as exc:
            result = self._warning_result(now_utc=now_utc, progress=progress)
            result["error"] = str(exc)
            logger.exception("offer_expiry_warning_scan_failed", **result)
            return result

        result = self._warning_result(now_utc=now_utc, progress=progress)
        logger.info("offer_expiry_warning_scan_finished", **result)
        return result

    def _warning_result(
        self,
        *,
        now_utc: datetime,
        progress: _WarningScanProgress,
    ) -> dict[str, object]:
        return {
            "generated_at": now_utc.isoformat(),
            "warn_horizon_seconds": int(self._warn_horizon.total_seconds()),
            "products": progress.products_processed,
            "products_matched": progress.products_total,
            "products_marked": progress.products_marked,
            "recipients": progress.recipients_total,
            "skipped_recipients": progress.recipients_skipped,
            "sent": progress.sent,
            "failed": progress.failed,
        }

    async def sweep_expired(self) -> dict[str, object]:
        now_utc = self._clock()
        result: dict[str, object] = {"generated_at": now_utc.isoformat(), "expired": 0}

        try:
            async with self._session_factory.begin() as session:
                expired_rows = await ProductsRepo.expire_offers(session, now_utc=now_utc)
        except Exception as exc:
            result["error"] = str(CatalogStoreError("expired_offers_update_failed"))
            logger.exception("offer_expiry_sweep_failed", error_type=exc.__class__.__name__, **result)
            return result

        for product_id, title in expired_rows:
            logger.info("offer_expired", product_id=product_id, title=title)
        result["expired"] = len(expired_rows)
        logger.info("offer_expiry_sweep_finished", **result)
        return result


def build_offer_monitor(
    *,
    gateway: SmsGateway | None = None,
    heartbeat: Heartbeat | None = None,
    settings: Settings | None = None,
    session_factory: Any = None,
) -> OfferLifecycleMonitor:
    resolved = settings or get_settings()
    return OfferLifecycleMonitor(
        session_factory=session_factory or SessionLocal,
        gateway=gateway,
        sender=PacedSender(interval_seconds=max(0, int(resolved.sms_send_interval_ms)) / 1000),
        warn_horizon=timedelta(seconds=max(60, int(resolved.offer_warn_horizon_seconds))),
        heartbeat=heartbeat,
    )
