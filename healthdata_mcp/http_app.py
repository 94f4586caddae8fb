# healthdata_mcp/http_app.py
"""Plain HTTP front-end: ``POST /<tool_name>`` with a JSON body of arguments."""
from __future__ import annotations

import json
import logging

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .dispatch import ToolDispatcher
from .errors import DispatchError, GatewayError

logger = logging.getLogger(__name__)


def error_response(message: str, code: int = 400) -> JSONResponse:
    return JSONResponse({"error": message, "code": code}, status_code=code)


def create_http_app(dispatcher: ToolDispatcher) -> Starlette:
    async def health(_req: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    async def list_tools(_req: Request) -> JSONResponse:
        return JSONResponse({"tools": [t.to_dict() for t in dispatcher.list_tools()]})

    async def call_tool(req: Request) -> JSONResponse:
        tool_name = req.path_params["tool_name"]
        raw = await req.body()
        try:
            args = json.loads(raw) if raw.strip() else {}
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return error_response(f"Invalid JSON body: {e}")
        if not isinstance(args, dict):
            return error_response("Request body must be a JSON object")
        if not dispatcher.has_tool(tool_name):
            return error_response("Not found", 404)

        try:
            result = await dispatcher.call_tool(tool_name, args)
        except DispatchError as e:
            return error_response(e.message, 404)
        except GatewayError as e:
            return error_response(e.message, e.code)
        except Exception as e:
            logger.exception("http tool call crashed", extra={"tool": tool_name})
            return error_response(str(e) or type(e).__name__)
        return JSONResponse(result)

    async def not_found(_req: Request, exc: HTTPException) -> JSONResponse:
        return error_response("Not found", 404)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/list_tools", list_tools, methods=["POST"]),
        Route("/{tool_name}", call_tool, methods=["POST"]),
    ]
    # 404 and 405 both answer as an unknown route
    return Starlette(routes=routes, exception_handlers={404: not_found, 405: not_found})
