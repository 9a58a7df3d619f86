"""
Widget Layer

Client side of the demo: MCP tools client, state store, session controller
and the renderers used by the web page and the terminal front-end.
"""

from .client import ToolCallError, ToolDescriptor, ToolListError, ToolsClient
from .render import ToolKind, render_output
from .session import WidgetSession
from .state import DEFAULT_STATE, InMemoryStateStore, StateStore

__all__ = [
    "ToolsClient",
    "ToolDescriptor",
    "ToolListError",
    "ToolCallError",
    "ToolKind",
    "render_output",
    "WidgetSession",
    "StateStore",
    "InMemoryStateStore",
    "DEFAULT_STATE",
]
