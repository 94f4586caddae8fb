# healthdata_mcp/dispatch.py
"""One pipeline behind both transports: look up the tool, run its handler."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from .config import Settings
from .errors import DispatchError, GatewayError, ValidationError
from .tools import ALL as ALL_TOOLS
from .tools.registry import TOOLS, ToolDescriptor, validate_registry
from .utils.http_client import UpstreamClient

logger = logging.getLogger(__name__)


class ToolDispatcher:
    def __init__(self, settings: Settings, client: UpstreamClient | None = None):
        validate_registry({name: entry.request_model for name, entry in ALL_TOOLS.items()})
        for tool_name in settings.enabled:
            if tool_name not in ALL_TOOLS:
                raise RuntimeError(
                    f"Unknown tool {tool_name!r} in tools.yaml (allowed: {sorted(ALL_TOOLS)})"
                )
        self.settings = settings
        self.client = client or UpstreamClient(settings)
        self._enabled = [t for t in TOOLS if t.name in settings.enabled]

    def list_tools(self) -> list[ToolDescriptor]:
        return list(self._enabled)

    def has_tool(self, name: str) -> bool:
        return any(t.name == name for t in self._enabled)

    async def call_tool(self, name: str, args: Mapping[str, Any] | None) -> dict[str, Any]:
        if not self.has_tool(name):
            raise DispatchError(f"Unknown tool: {name}")
        if args is None:
            args = {}
        if not isinstance(args, Mapping):
            raise ValidationError("Tool arguments must be a JSON object")

        logger.info("tool call", extra={"tool": name, "arg_names": sorted(args)})
        try:
            result = await ALL_TOOLS[name].handler(args, self.client, self.settings)
        except GatewayError as e:
            logger.warning(
                "tool call failed",
                extra={"tool": name, "error": e.message, "error_type": type(e).__name__},
            )
            raise
        except Exception:
            logger.exception("tool call crashed", extra={"tool": name})
            raise

        logger.debug("tool result", extra={"tool": name, "total": result.get("total")})
        return result
