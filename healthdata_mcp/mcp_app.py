# healthdata_mcp/mcp_app.py
"""MCP (structured tool-call) front-end over the shared dispatcher.

Tools are registered with the registry's input schema and hand their raw
arguments straight to the dispatcher, so the request models are the only
validation layer on either transport.
"""
from __future__ import annotations

import logging
from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from .dispatch import ToolDispatcher
from .errors import GatewayError
from .tools.registry import ToolDescriptor

logger = logging.getLogger(__name__)

SERVER_NAME = "healthcare-data"


class GatewayTool(Tool):
    """A tool whose arguments go to ``ToolDispatcher.call_tool`` unvalidated."""

    dispatcher: Annotated[Any, Field(exclude=True)]

    @classmethod
    def from_descriptor(cls, desc: ToolDescriptor, dispatcher: ToolDispatcher) -> GatewayTool:
        return cls(
            name=desc.name,
            description=desc.render_description(),
            parameters=desc.input_schema,
            dispatcher=dispatcher,
        )

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            result = await self.dispatcher.call_tool(self.name, arguments)
        except GatewayError as e:
            raise ToolError(e.message) from e
        except Exception as e:
            # message passes through unchanged
            raise ToolError(str(e) or type(e).__name__) from e
        return ToolResult(structured_content=result)


def build_mcp(dispatcher: ToolDispatcher) -> FastMCP:
    mcp = FastMCP(SERVER_NAME)
    for desc in dispatcher.list_tools():
        mcp.add_tool(GatewayTool.from_descriptor(desc, dispatcher))
    logger.debug("mcp tools registered", extra={"tools": [t.name for t in dispatcher.list_tools()]})
    return mcp
