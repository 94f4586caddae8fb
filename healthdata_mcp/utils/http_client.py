# healthdata_mcp/utils/http_client.py
from __future__ import annotations

import json
import logging
from typing import Any, Sequence

import httpx

from ..config import Settings
from ..errors import UpstreamParseError, UpstreamTransportError

logger = logging.getLogger(__name__)

HEADERS = {"Accept": "application/json"}
BODY_SNIPPET = 200

QueryParams = Sequence[tuple[str, str]]


def _error_text(data: Any) -> str | None:
    """Pull a human-readable message out of a JSON error body, if any."""
    if isinstance(data, dict):
        for key in ("error", "message", "detail"):
            val = data.get(key)
            if isinstance(val, str) and val:
                return val
            if isinstance(val, dict) and isinstance(val.get("message"), str):
                return val["message"]
    return None


class UpstreamClient:
    """Single-shot JSON GETs against the public data APIs.

    No retries: a failed call fails the request that triggered it.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._transport = transport

    def build_url(self, url: str, params: QueryParams) -> httpx.URL:
        return httpx.URL(url, params=list(params))

    async def get_json(self, url: str, params: QueryParams, *, tool: str) -> Any:
        full_url = self.build_url(url, params)
        timeout = self.settings.timeout_for(tool)
        logger.debug("upstream request", extra={"tool": tool, "url": str(full_url)})

        try:
            async with httpx.AsyncClient(
                timeout=timeout, headers=HEADERS, transport=self._transport
            ) as client:
                resp = await client.get(full_url)
        except httpx.TimeoutException as e:
            raise UpstreamTransportError(
                f"Upstream request timed out after {timeout:g}s: {e}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(f"Upstream request failed: {e}") from e

        # some upstream errors still come back as structured JSON
        try:
            data = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            snippet = resp.text[:BODY_SNIPPET]
            raise UpstreamParseError(
                f"Upstream returned a non-JSON body (HTTP {resp.status_code}): {snippet!r}",
                status_code=resp.status_code,
            ) from e

        if not resp.is_success:
            detail = _error_text(data)
            msg = f"Upstream returned HTTP {resp.status_code}"
            raise UpstreamTransportError(
                f"{msg}: {detail}" if detail else msg, status_code=resp.status_code
            )

        logger.debug(
            "upstream response", extra={"tool": tool, "status": resp.status_code}
        )
        return data
