from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from farmconnect.messaging.sms_gateway import (
    ERROR_INVALID_PHONE,
    ERROR_NOT_CONFIGURED,
    TwilioSmsGateway,
)


def _gateway(handler, **overrides) -> TwilioSmsGateway:
    params = {
        "account_sid": "AC123",
        "auth_token": "secret",
        "from_number": "+15005550006",
        "transport": httpx.MockTransport(handler),
    }
    params.update(overrides)
    return TwilioSmsGateway(**params)


def _form(request: httpx.Request) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


@pytest.mark.asyncio
async def test_send_prepends_default_country_code() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201, json={"sid": "SM1", "status": "queued"})

    gateway = _gateway(handler)
    result = await gateway.send("9876543210", "Offer ends soon")
    await gateway.aclose()

    assert result.success is True
    assert result.sid == "SM1"
    assert result.status == "queued"
    assert requests[0].url.path == "/2010-04-01/Accounts/AC123/Messages.json"
    assert requests[0].headers["Authorization"].startswith("Basic ")
    assert _form(requests[0]) == {
        "To": "+919876543210",
        "From": "+15005550006",
        "Body": "Offer ends soon",
    }


@pytest.mark.asyncio
async def test_send_passes_prefixed_number_through() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201, json={"sid": "SM2", "status": "queued"})

    gateway = _gateway(handler)
    await gateway.send("+14155550123", "hi")

    assert _form(requests[0])["To"] == "+14155550123"


@pytest.mark.asyncio
async def test_send_rejects_short_number_without_remote_call() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("gateway must not be called")

    gateway = _gateway(handler)
    result = await gateway.send("98765", "hi")

    assert result.success is False
    assert result.error == ERROR_INVALID_PHONE
    assert gateway.is_initialized is False


@pytest.mark.asyncio
async def test_send_rejects_overlong_local_number_without_remote_call() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("gateway must not be called")

    gateway = _gateway(handler)
    result = await gateway.send("98765432101234", "hi")

    assert result.error == ERROR_INVALID_PHONE


@pytest.mark.asyncio
async def test_send_reports_missing_configuration_once() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("gateway must not be called")

    gateway = _gateway(handler, account_sid="")

    first = await gateway.send("9876543210", "hi")
    second = await gateway.send("9876543211", "hi")

    assert first.error == ERROR_NOT_CONFIGURED
    assert second.error == ERROR_NOT_CONFIGURED
    assert gateway.initialize() is False


@pytest.mark.asyncio
async def test_send_reports_provider_rejection() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": 21211, "message": "Invalid 'To' Phone Number"})

    gateway = _gateway(handler)
    result = await gateway.send("9876543210", "hi")

    assert result.success is False
    assert result.code == 21211
    assert result.error == "Invalid 'To' Phone Number"


@pytest.mark.asyncio
async def test_send_reports_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    gateway = _gateway(handler)
    result = await gateway.send("9876543210", "hi")

    assert result.success is False
    assert result.error == "connection refused"
