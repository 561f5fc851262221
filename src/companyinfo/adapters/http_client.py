"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and error reporting for every upstream.
- Eases testing: a `httpx.MockTransport` can be injected instead of the network.

Contract of `send`:
- Enforces the per-call timeout.
- Never raises for non-2xx: the status is returned for the caller to interpret.
- Raises `TransportError` for any request-level failure (DNS, refused, timeout,
  redirect loops, undecodable bodies).
- Single attempt: no retries here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from companyinfo.core.config import AppSettings
from companyinfo.core.errors import TransportError

logger = logging.getLogger(__name__)

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"


@dataclass(frozen=True)
class RawResponse:
    """Status + body of an upstream reply, uninterpreted."""

    status: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status == 200

    def json(self) -> Any:
        """Decode the body as JSON (raises `ValueError` on malformed payloads)."""

        return json.loads(self.body)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Shared `httpx.AsyncClient`: stable User-Agent, redirects followed.

    `transport` lets tests plug in `httpx.MockTransport`.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "*/*",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(max(settings.tax_timeout_seconds, settings.registry_timeout_seconds)),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    params: Mapping[str, str] | None = None,
    data: Mapping[str, str] | None = None,
    headers: Mapping[str, str] | None = None,
    timeout_seconds: float,
) -> RawResponse:
    """Issue one request and return its `RawResponse`.

    `params` are query-encoded; `data` is form-encoded (POST bodies).
    """

    try:
        resp = await client.request(
            method,
            url,
            params=params,
            data=data,
            headers=headers,
            timeout=httpx.Timeout(timeout_seconds),
        )
    except httpx.RequestError as exc:
        reason = str(exc) or exc.__class__.__name__
        logger.debug("%s %s failed: %s", method, url, reason)
        raise TransportError(url, reason) from exc

    logger.debug("%s %s -> %s", method, url, resp.status_code)
    return RawResponse(status=resp.status_code, body=resp.text or "")
