from __future__ import annotations

from types import SimpleNamespace

from fastapi.testclient import TestClient

from farmconnect.api import internal_access
from farmconnect.main import app


def _settings(**overrides) -> SimpleNamespace:
    values = {
        "internal_api_token": "internal-secret",
        "internal_api_allowlist": "127.0.0.1/32",
        "internal_api_trusted_proxies": "",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def _request(*, peer: str | None, headers: dict[str, str] | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        client=SimpleNamespace(host=peer) if peer is not None else None,
        headers=headers or {},
    )


def test_internal_offers_rejects_missing_token(monkeypatch) -> None:
    monkeypatch.setattr(internal_access, "get_settings", lambda: _settings())

    client = TestClient(app)
    response = client.get("/internal/offers/active")

    assert response.status_code == 403
    assert response.json() == {"detail": {"code": "E_FORBIDDEN"}}


def test_internal_offers_rejects_disallowed_ip(monkeypatch) -> None:
    monkeypatch.setattr(
        internal_access,
        "get_settings",
        lambda: _settings(internal_api_allowlist="192.168.0.0/16"),
    )

    client = TestClient(app)
    response = client.post(
        "/internal/offers/jobs/sweep",
        headers={
            "X-Internal-Token": "internal-secret",
            "X-Forwarded-For": "10.0.0.25",
        },
    )

    assert response.status_code == 403
    assert response.json() == {"detail": {"code": "E_FORBIDDEN"}}


def test_require_internal_access_accepts_allowed_peer(monkeypatch) -> None:
    monkeypatch.setattr(internal_access, "get_settings", lambda: _settings())

    internal_access.require_internal_access(
        _request(peer="127.0.0.1", headers={"X-Internal-Token": "internal-secret"})
    )


def test_resolve_client_ip_ignores_forwarded_for_from_untrusted_peer() -> None:
    request = _request(peer="203.0.113.7", headers={"X-Forwarded-For": "127.0.0.1"})

    assert internal_access.resolve_client_ip(request, trusted_proxies="10.0.0.0/8") == "203.0.113.7"


def test_resolve_client_ip_uses_first_forwarded_hop_from_trusted_proxy() -> None:
    request = _request(peer="10.0.0.2", headers={"X-Forwarded-For": "198.51.100.4, 10.0.0.9"})

    assert internal_access.resolve_client_ip(request, trusted_proxies="10.0.0.0/8") == "198.51.100.4"


def test_token_matches_rejects_empty_expected_token() -> None:
    assert internal_access.token_matches(expected="", received="") is False
    assert internal_access.token_matches(expected="a", received="a") is True
    assert internal_access.token_matches(expected="a", received=None) is False
