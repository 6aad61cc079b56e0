"""Shared httpx client for the ticketing API"""

from typing import Any, Optional

import httpx

from bus_booking.platform.config.core_setting import Settings, settings as default_settings


def create_api_client(
    config: Optional[Settings] = None, *, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    config = config or default_settings
    return httpx.AsyncClient(
        base_url=config.API_BASE_URL,
        timeout=httpx.Timeout(config.HTTP_TIMEOUT_SECONDS),
        headers={'Accept': 'application/json', 'Content-Type': 'application/json'},
        transport=transport,
    )


def unwrap(payload: Any) -> Any:
    """The API wraps most bodies as {"data": ...}; older endpoints return the body bare."""
    if isinstance(payload, dict) and 'data' in payload and payload['data'] is not None:
        return payload['data']
    return payload


def error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get('message'), str) and body['message']:
        return body['message']
    return default
