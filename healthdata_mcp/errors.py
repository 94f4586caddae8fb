# healthdata_mcp/errors.py
"""Error taxonomy shared by both transports.

Every error carries the message shown to the caller and the HTTP status the
raw HTTP router answers with. The MCP transport reuses the message verbatim.
"""
from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    code: int = 400

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code}


class ValidationError(GatewayError):
    """A required parameter is missing or a value cannot be coerced."""


class DispatchError(GatewayError):
    """Unknown tool name or route."""

    code = 404


class UpstreamError(GatewayError):
    """Base class for failures talking to an upstream data API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamTransportError(UpstreamError):
    """Network failure, timeout, or a non-2xx answer from upstream."""


class UpstreamParseError(UpstreamError):
    """Upstream answered with a body that is not JSON."""


class UpstreamShapeError(UpstreamError):
    """Upstream JSON parsed but does not have the expected top-level shape."""
