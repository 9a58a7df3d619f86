"""
Server-rendered widget page.

Produces the HTML for the current session state: connection status, the tool
list, the query form and every accumulated result. All user- and tool-supplied
text is escaped; result fragments come from the render views.
"""

from html import escape
from typing import List

from .client import ToolDescriptor
from .render import render_output
from .session import WidgetSession

PAGE_TITLE = "Multi Modal MCP"

STYLES = """
body { font-family: system-ui, sans-serif; max-width: 42rem; margin: 0 auto; padding: 1rem; }
header { text-align: center; margin-bottom: 2rem; }
.status-dot { display: inline-block; width: .5rem; height: .5rem; border-radius: 50%; }
.connected { background: #22c55e; }
.disconnected { background: #ef4444; }
.banner { background: #fef9c3; border: 1px solid #facc15; padding: .75rem; border-radius: .5rem; }
.tools { display: grid; grid-template-columns: 1fr 1fr; gap: 1rem; margin-bottom: 2rem; }
.tool { padding: 1rem; border: 1px solid #e5e7eb; border-radius: .5rem; background: #f9fafb; }
.tool.selected { background: #ccfbf1; border-color: #2dd4bf; }
.inline { display: inline; }
.query { width: 100%; height: 3rem; padding: 0 1rem; border-radius: 9999px; border: 1px solid #d1d5db; }
.result { margin-bottom: 1.5rem; }
.result-error, .error { color: #ef4444; }
.result-document { padding: 1rem; background: #f3f4f6; border-radius: .5rem; margin-bottom: 1rem; }
.result-image, .result-video img { max-width: 100%; height: auto; border-radius: .5rem; }
"""


def _render_tools(tools: List[ToolDescriptor], selected: str) -> str:
    cards = []
    for tool in tools:
        css = "tool selected" if tool.name == selected else "tool"
        cards.append(
            f'<div class="{css}">'
            f"<h3>{escape(tool.label)}</h3>"
            '<form method="post" action="/ui/select">'
            f'<input type="hidden" name="name" value="{escape(tool.name)}">'
            f'<button type="submit">{escape(tool.description or "No description available")}</button>'
            "</form></div>"
        )
    return (
        '<section class="tools-panel"><h2>Available Tools</h2>'
        f'<div class="tools">{"".join(cards)}</div></section>'
    )


def render_page(session: WidgetSession, standalone: bool = True) -> str:
    """Return the ``<head>`` and ``<body>`` markup for the session."""
    state = session.state
    connected = bool(state.get("client"))
    selected = state.get("selectedTool") or ""

    parts = []
    if standalone:
        parts.append(
            '<div class="banner">Running in standalone mode. '
            "This app is designed to run inside ChatGPT.</div>"
        )

    status_css = "connected" if connected else "disconnected"
    status_text = "Connected to MCP" if connected else "Connecting to MCP..."
    toggle_text = "Hide Tools" if state.get("showTools") else "Show Tools"
    parts.append(
        f"<header><h1>{PAGE_TITLE}</h1>"
        f'<span class="status-dot {status_css}"></span> <span>{status_text}</span> '
        f'<form class="inline" method="post" action="/ui/toggle-tools"><button type="submit">{toggle_text}</button></form> '
        '<form class="inline" method="post" action="/ui/refresh"><button type="submit">Refresh Tools</button></form>'
        "</header>"
    )

    if state.get("showTools"):
        parts.append(_render_tools(session.tools, selected))

    disabled = "" if connected else " disabled"
    parts.append(
        '<form method="post" action="/ui/submit">'
        f'<input class="query" type="text" name="query" placeholder="Search..." value="{escape(state.get("query") or "")}">'
        f'<button type="submit"{disabled}>Send</button>'
        "</form>"
    )

    if session.error:
        parts.append(f'<p class="error">{escape(session.error)}</p>')

    for item in state.get("results") or []:
        view = render_output(item["tool"], item["result"])
        parts.append(
            '<div class="result">'
            f'<div class="result-tool">{escape(item["tool"])}</div>'
            f"{view.to_html()}</div>"
        )

    return (
        f'<head><meta charset="utf-8"><title>{PAGE_TITLE}</title><style>{STYLES}</style></head>'
        f"<body>{''.join(parts)}</body>"
    )
