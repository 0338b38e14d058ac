from __future__ import annotations

import ipaddress
import secrets
from functools import lru_cache

import structlog
from fastapi import HTTPException, Request

from farmconnect.core.config import get_settings

logger = structlog.get_logger(__name__)

INTERNAL_TOKEN_HEADER = "X-Internal-Token"

IpNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


@lru_cache(maxsize=32)
def parse_networks(raw: str) -> tuple[IpNetwork, ...]:
    networks: list[IpNetwork] = []
    for entry in (part.strip() for part in raw.split(",")):
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            logger.warning("internal_access_allowlist_entry_invalid", entry=entry)
    return tuple(networks)


def _parse_ip(value: str | None) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    if not value:
        return None
    try:
        return ipaddress.ip_address(value.strip())
    except ValueError:
        return None


def ip_in_networks(ip: str | None, networks_raw: str) -> bool:
    address = _parse_ip(ip)
    if address is None:
        return False
    return any(address in network for network in parse_networks(networks_raw))


def resolve_client_ip(request: Request, *, trusted_proxies: str = "") -> str | None:
    peer_ip = request.client.host if request.client is not None else None
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for and ip_in_networks(peer_ip, trusted_proxies):
        first_hop = forwarded_for.split(",", maxsplit=1)[0].strip()
        parsed = _parse_ip(first_hop)
        return str(parsed) if parsed is not None else None
    return peer_ip


def token_matches(*, expected: str, received: str | None) -> bool:
    if not expected or not received:
        return False
    return secrets.compare_digest(expected, received)


def require_internal_access(request: Request) -> None:
    settings = get_settings()
    client_ip = resolve_client_ip(
        request,
        trusted_proxies=getattr(settings, "internal_api_trusted_proxies", ""),
    )

    if not token_matches(
        expected=settings.internal_api_token,
        received=request.headers.get(INTERNAL_TOKEN_HEADER),
    ):
        logger.warning("internal_offers_auth_failed", reason="invalid_token", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})

    if not ip_in_networks(client_ip, settings.internal_api_allowlist):
        logger.warning("internal_offers_auth_failed", reason="ip_not_allowed", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})
