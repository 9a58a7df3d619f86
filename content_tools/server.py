"""
MCP Server

Exposes every registered content tool twice:
  - over the Model Context Protocol (FastMCP, stateless streamable HTTP), plus
    the ``show_ui`` widget tool and the widget HTML resource for hosts such as
    ChatGPT
  - over a small REST API (/tools, /tools/{name}/execute, /health)

Tools are automatically discovered via registry.py
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Any, Callable, Dict, Optional

from fastapi import APIRouter, HTTPException
from mcp import types
from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, Field

from . import config
from .base import ToolDefinition
from .registry import execute_tool, get_all_tools, get_tool_instance, list_tool_names

logger = logging.getLogger(__name__)

SERVER_NAME = "Multi Modal MCP"

# Internal widget tool; clients hide it from user-facing tool lists
WIDGET_TOOL_NAME = "show_ui"
WIDGET_URI = "ui://widget/content-template.html"
WIDGET_MIME_TYPE = "text/html+skybridge"
WIDGET_TITLE = "Multi Modal MCP UI"
WIDGET_DESCRIPTION = (
    "Interactive UI app for rendering widgets, charts, videos, images, and multimedia content"
)
WIDGET_DOMAIN = "https://github.com/Ashot72/Multi-Modal-MCP-Server-Client"


def widget_tool_meta() -> Dict[str, Any]:
    """Display hints attached to the widget tool (host-specific, no behavior)."""
    return {
        "openai/outputTemplate": WIDGET_URI,
        "openai/toolInvocation/invoking": "Loading UI...",
        "openai/toolInvocation/invoked": "UI ready",
        "openai/widgetAccessible": True,
        "openai/resultCanProduceWidget": True,
        "openai/widgetPrefersBorder": True,
    }


def widget_resource_meta() -> Dict[str, Any]:
    return {
        "openai/widgetDescription": WIDGET_DESCRIPTION,
        "openai/widgetPrefersBorder": True,
        "openai/resultCanProduceWidget": True,
        "openai/widgetAccessible": True,
        "openai/widgetDomain": WIDGET_DOMAIN,
    }


def _make_handler(definition: ToolDefinition, prompt_description: str):
    """Wrap a registry handler as a FastMCP tool returning one text block."""

    async def handler(
        prompt: Annotated[str, Field(description=prompt_description)],
    ) -> str:
        response = await definition.handler(prompt=prompt)
        return response["text"]

    return handler


def build_mcp_server(widget_html: Callable[[], str]) -> FastMCP:
    """
    Create the FastMCP server with all content tools, the widget tool and
    the widget resource registered.

    ``widget_html`` is called on every resource read and returns the UI page.
    """
    mcp = FastMCP(SERVER_NAME, host=config.HOST, stateless_http=True)

    @mcp.resource(
        WIDGET_URI,
        name="content-widget",
        title=WIDGET_TITLE,
        description=WIDGET_DESCRIPTION,
        mime_type=WIDGET_MIME_TYPE,
    )
    def content_widget() -> str:
        return f"<html>{widget_html()}</html>"

    # FastMCP does not support custom _meta on resource contents, so the
    # read handler is replaced after FastMCP registered its own
    async def _read_resource_with_meta(req: types.ReadResourceRequest):
        uri = str(req.params.uri)

        if uri == WIDGET_URI:
            # '_meta' key (not 'meta') because of the pydantic alias
            content = types.TextResourceContents.model_validate({
                "uri": WIDGET_URI,
                "mimeType": WIDGET_MIME_TYPE,
                "text": content_widget(),
                "_meta": widget_resource_meta(),
            })
            return types.ServerResult(types.ReadResourceResult(contents=[content]))

        return types.ServerResult(
            types.ReadResourceResult(
                contents=[
                    types.TextResourceContents(
                        uri=uri,
                        mimeType="text/plain",
                        text="Resource not found"
                    )
                ]
            )
        )

    mcp._mcp_server.request_handlers[types.ReadResourceRequest] = _read_resource_with_meta

    @mcp.tool(
        name=WIDGET_TOOL_NAME,
        title=WIDGET_TITLE,
        description=(
            "Interactive UI app that renders widgets, charts, videos, images, and multimedia "
            "content. Use this to display rich UI components in ChatGPT."
        ),
        annotations=types.ToolAnnotations(
            destructiveHint=False,
            openWorldHint=False,
            readOnlyHint=True,
        ),
        meta=widget_tool_meta(),
        structured_output=True,
    )
    async def show_ui(
        name: Annotated[
            str, Field(description="Optional identifier or label for the UI widget display")
        ] = "",
    ) -> dict[str, Any]:
        return {
            "name": name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    for tool_name, definition in get_all_tools().items():
        instance = get_tool_instance(tool_name)
        prompt_description = instance.prompt_description if instance else "Prompt for the tool"
        mcp.tool(
            name=definition.name,
            title=definition.title,
            description=definition.description,
            structured_output=False,
        )(_make_handler(definition, prompt_description))
        logger.info(f"MCP tool registered: {definition.name}")

    return mcp


# ============== REST API ==============

router = APIRouter()


class ToolRequest(BaseModel):
    """Request body for tool execution."""

    arguments: Dict[str, Any] = {}


class ToolResponse(BaseModel):
    """Response from tool execution."""

    success: bool
    tool: str
    result: Any = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    text: Optional[str] = None


@router.get("/health")
async def health():
    return {"status": "healthy", "tools_loaded": len(list_tool_names())}


@router.get("/tools")
async def list_tools():
    tools = get_all_tools()
    return {
        "total": len(tools),
        "tools": [
            {
                "name": name,
                "title": tool.title,
                "description": tool.description,
                "category": tool.category,
                "parameters": [
                    {
                        "name": p.name,
                        "type": p.type,
                        "description": p.description,
                        "required": p.required,
                    }
                    for p in tool.parameters
                ],
            }
            for name, tool in tools.items()
        ],
    }


@router.get("/tools/{tool_name}")
async def get_tool_info(tool_name: str):
    instance = get_tool_instance(tool_name)
    if instance is None:
        raise HTTPException(status_code=404, detail=f"Tool not found: {tool_name}")

    return {
        "name": instance.name,
        "title": instance.title,
        "description": instance.description,
        "category": instance.category,
        "input_schema": instance.input_schema(),
    }


@router.post("/tools/{tool_name}/execute", response_model=ToolResponse)
async def execute_tool_endpoint(tool_name: str, request: ToolRequest):
    result = await execute_tool(tool_name, **request.arguments)
    if result.get("error_type") == "not_found":
        raise HTTPException(status_code=404, detail=result["error"])
    return ToolResponse(**result)
