from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import structlog

from farmconnect.core.config import Settings, get_settings
from farmconnect.messaging.phone import DEFAULT_COUNTRY_CODE, normalize_phone

logger = structlog.get_logger(__name__)

ERROR_INVALID_PHONE = "invalid_phone_number"
ERROR_NOT_CONFIGURED = "sms_gateway_not_configured"


@dataclass(frozen=True, slots=True)
class SmsSendResult:
    success: bool
    sid: str | None = None
    status: str | None = None
    error: str | None = None
    code: int | str | None = None


class SmsGateway(Protocol):
    async def send(self, phone: str, message: str) -> SmsSendResult: ...


class SmsGatewayNotConfiguredError(Exception):
    pass


class TwilioSmsGateway:
    """Twilio Messages API client.

    The HTTP client is created on the first send. If the account settings are
    incomplete the gateway stays unconfigured for its whole lifetime and every
    send reports ``sms_gateway_not_configured`` without touching the network.
    """

    def __init__(
        self,
        *,
        account_sid: str,
        auth_token: str,
        from_number: str,
        api_base_url: str = "https://api.twilio.com/2010-04-01",
        default_country_code: str = DEFAULT_COUNTRY_CODE,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._api_base_url = api_base_url.rstrip("/")
        self._default_country_code = default_country_code
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._initialized: bool | None = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized is True

    def _assert_configured(self) -> None:
        missing = [
            name
            for name, value in (
                ("TWILIO_ACCOUNT_SID", self._account_sid),
                ("TWILIO_AUTH_TOKEN", self._auth_token),
                ("TWILIO_PHONE_NUMBER", self._from_number),
            )
            if not value
        ]
        if missing:
            raise SmsGatewayNotConfiguredError(",".join(missing))

    def initialize(self) -> bool:
        if self._initialized is not None:
            return self._initialized
        try:
            self._assert_configured()
        except SmsGatewayNotConfiguredError as exc:
            logger.warning("sms_gateway_not_configured", missing_settings=str(exc))
            self._initialized = False
            return False

        self._client = httpx.AsyncClient(
            base_url=self._api_base_url,
            auth=(self._account_sid, self._auth_token),
            timeout=self._timeout_seconds,
            transport=self._transport,
        )
        self._initialized = True
        logger.info("sms_gateway_initialized", from_phone=self._from_number)
        return True

    @staticmethod
    def _json_payload(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    async def send(self, phone: str, message: str) -> SmsSendResult:
        normalized_phone = normalize_phone(phone, default_country_code=self._default_country_code)
        if normalized_phone is None:
            logger.info("sms_send_rejected", phone=phone, reason=ERROR_INVALID_PHONE)
            return SmsSendResult(success=False, error=ERROR_INVALID_PHONE)

        if not self.initialize() or self._client is None:
            return SmsSendResult(success=False, error=ERROR_NOT_CONFIGURED)

        try:
            response = await self._client.post(
                f"/Accounts/{self._account_sid}/Messages.json",
                data={
                    "To": normalized_phone,
                    "From": self._from_number,
                    "Body": message,
                },
            )
        except httpx.HTTPError as exc:
            logger.warning("sms_send_failed", to_phone=normalized_phone, error=str(exc))
            return SmsSendResult(success=False, error=str(exc) or exc.__class__.__name__)

        if response.is_error:
            payload = self._json_payload(response)
            error = str(payload.get("message") or f"http_{response.status_code}")
            code = payload.get("code", response.status_code)
            logger.warning(
                "sms_send_failed",
                to_phone=normalized_phone,
                status_code=response.status_code,
                error=error,
                code=code,
            )
            return SmsSendResult(success=False, error=error, code=code)

        payload = self._json_payload(response)
        sid = payload.get("sid")
        status = payload.get("status")
        logger.info("sms_sent", to_phone=normalized_phone, sid=sid, status=status)
        return SmsSendResult(success=True, sid=sid, status=status)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def build_sms_gateway(settings: Settings | None = None) -> TwilioSmsGateway:
    resolved = settings or get_settings()
    return TwilioSmsGateway(
        account_sid=resolved.twilio_account_sid,
        auth_token=resolved.twilio_auth_token,
        from_number=resolved.twilio_phone_number,
        api_base_url=resolved.twilio_api_base_url,
        default_country_code=resolved.sms_default_country_code,
        timeout_seconds=resolved.sms_request_timeout_seconds,
    )
