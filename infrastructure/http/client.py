"""Single-shot JSON-over-HTTP helper."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from core.exceptions import ProviderError, ValidationError

logger = logging.getLogger(__name__)

_JSON_BODY_METHODS = {"POST", "PUT"}


@dataclass(slots=True)
class HttpResponse:
    """Status, decoded body (JSON value or raw text) and raw bytes of a response."""

    status_code: int
    body: Any
    raw_body: bytes
    headers: dict[str, str] = field(default_factory=dict)


def _decode_body(raw_body: bytes) -> Any:
    try:
        return json.loads(raw_body)
    except ValueError:
        return raw_body.decode("utf-8", errors="replace")


async def make_http_request(
    url: str,
    method: str = "GET",
    headers: Mapping[str, str] | None = None,
    body: Any = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> HttpResponse:
    """Issue one request and return the response, parsed as JSON when possible.

    ``body`` is serialised to JSON when provided. Non-JSON responses are returned
    as text rather than raising. No retries are attempted.
    """

    method = method.upper()
    content: bytes | None = None
    if body is not None:
        try:
            content = json.dumps(body).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise ValidationError("failed to serialize request body", field="body") from exc

    request_headers = dict(headers or {})
    if body is not None and method in _JSON_BODY_METHODS:
        request_headers["Content-Type"] = "application/json"

    owns_client = client is None
    http_client = client or httpx.AsyncClient()
    try:
        response = await http_client.request(method, url, headers=request_headers, content=content)
    except httpx.InvalidURL as exc:
        logger.warning("HTTP %s %s rejected: %s", method, url, exc)
        raise ProviderError("failed to create HTTP request", provider="http", original_error=exc) from exc
    except httpx.HTTPError as exc:
        logger.warning("HTTP %s %s failed: %s", method, url, exc)
        raise ProviderError("failed to execute HTTP request", provider="http", original_error=exc) from exc
    finally:
        if owns_client:
            await http_client.aclose()

    raw_body = response.content
    logger.debug("HTTP %s %s -> %s (%d bytes)", method, url, response.status_code, len(raw_body))

    return HttpResponse(
        status_code=response.status_code,
        body=_decode_body(raw_body),
        raw_body=raw_body,
        headers=dict(response.headers),
    )


__all__ = ["HttpResponse", "make_http_request"]
