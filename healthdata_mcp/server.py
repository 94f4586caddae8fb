# healthdata_mcp/server.py
from __future__ import annotations

import logging

import uvicorn

from .config import Settings, get_settings
from .dispatch import ToolDispatcher
from .http_app import create_http_app
from .mcp_app import build_mcp
from .utils.http_client import UpstreamClient
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


def run(settings: Settings) -> None:
    dispatcher = ToolDispatcher(settings, UpstreamClient(settings))
    tool_names = [t.name for t in dispatcher.list_tools()]

    if settings.use_http:
        logger.info(
            "starting HTTP server",
            extra={"host": settings.host, "port": settings.port, "tools": tool_names},
        )
        uvicorn.run(
            create_http_app(dispatcher),
            host=settings.host,
            port=settings.port,
            log_level="warning",
        )
        return

    mcp = build_mcp(dispatcher)
    logger.info("starting MCP server", extra={"transport": settings.transport, "tools": tool_names})
    if settings.transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.transport,
            host=settings.host,
            port=settings.port,
            path=settings.mcp_path,
        )


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, use_stdout=settings.use_http)
    try:
        run(settings)
    except Exception as e:
        logger.error("server error", extra={"error": str(e)})
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
