#!/usr/bin/env python3
"""
Unified Deployment Server

Combines the following into a single FastAPI application:
  - MCP endpoint  (/mcp, FastMCP streamable HTTP, stateless)
  - REST tool API  (/health, /tools, /tools/{name}, /tools/{name}/execute)
  - Widget page  (/ and the /ui/* form actions)
  - Generated audio  (/mp3/*)

The widget page talks to the MCP endpoint over HTTP like any other client,
so the synchronous client calls run in a worker thread.

Usage:
  uvicorn render_app:create_app --factory --host 0.0.0.0 --port $PORT
  python render_app.py
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Form
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from content_tools import config
from content_tools.server import build_mcp_server, router as tools_router
from widget.client import ToolsClient
from widget.page import render_page
from widget.session import WidgetSession

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
)
logger = logging.getLogger("render-app")


def create_app(client: Optional[ToolsClient] = None) -> FastAPI:
    """
    Build the application.

    Each call creates a fresh FastMCP server, whose session manager can only
    be run once, so tests create one app per test.
    """
    session = WidgetSession(client or ToolsClient())
    mcp = build_mcp_server(lambda: render_page(session, standalone=False))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with mcp.session_manager.run():
            logger.info(f"MCP endpoint ready at {config.MCP_SERVER_URL}")
            yield

    app = FastAPI(title="Multi Modal MCP", lifespan=lifespan)
    app.state.session = session
    app.state.mcp = mcp

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["mcp-session-id"],
    )

    app.include_router(tools_router)

    # ─── Widget page ────────────────────────────────────────────────────────

    def back_to_page() -> RedirectResponse:
        return RedirectResponse("/", status_code=303)

    @app.get("/", response_class=HTMLResponse)
    async def index():
        if not session.tools_loaded and not session.loading:
            await asyncio.to_thread(session.refresh_tools)
        return HTMLResponse(f"<!DOCTYPE html><html>{render_page(session)}</html>")

    @app.post("/ui/refresh")
    async def ui_refresh():
        await asyncio.to_thread(session.refresh_tools)
        return back_to_page()

    @app.post("/ui/toggle-tools")
    async def ui_toggle_tools():
        session.toggle_tools()
        return back_to_page()

    @app.post("/ui/select")
    async def ui_select(name: str = Form(...)):
        session.select_tool(name)
        return back_to_page()

    @app.post("/ui/submit")
    async def ui_submit(query: str = Form("")):
        session.set_query(query)
        await asyncio.to_thread(session.submit)
        return back_to_page()

    # ─── Static files (order: specific paths → MCP catch-all mount) ─────────

    audio_dir = config.PUBLIC_DIR / "mp3"
    audio_dir.mkdir(parents=True, exist_ok=True)
    app.mount(config.AUDIO_URL_PREFIX, StaticFiles(directory=str(audio_dir)), name="mp3-files")

    # Serves /mcp; MUST be last
    app.mount("/", mcp.streamable_http_app())

    return app


def main():
    uvicorn.run(create_app(), host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
