"""
Widget session controller.

Holds the UI behaviour (tool refresh, selection, query, submit) on top of an
injected state store, so the web page and the terminal front-end share it.
"""

import logging
from typing import Any, Dict, List, Optional

from .client import MCPClientError, ToolDescriptor, ToolsClient
from .state import DEFAULT_STATE, InMemoryStateStore, StateStore

logger = logging.getLogger(__name__)

NO_TOOL_SELECTED = "No tool selected"


class WidgetSession:
    def __init__(self, client: ToolsClient, store: Optional[StateStore] = None):
        self.client = client
        self.store = store or InMemoryStateStore(DEFAULT_STATE)
        self.tools: List[ToolDescriptor] = []
        self.error: Optional[str] = None
        self.loading = False
        # Set after the first fetch attempt, successful or not
        self.tools_loaded = False
        self._fetch_error: Optional[str] = None

    @property
    def state(self) -> Dict[str, Any]:
        return self.store.get()

    def refresh_tools(self) -> bool:
        """
        Reload the tool list; returns True when the server answered.

        A successful refresh clears a previous fetch error only; errors from
        a tool call stay visible until the next call.
        """
        self.loading = True
        try:
            self.tools = self.client.fetch_tools()
        except MCPClientError as e:
            logger.error(f"Tool refresh failed: {e.message}")
            self.error = e.message
            self._fetch_error = e.message
            self.store.update(client=False)
            return False
        finally:
            self.loading = False
            self.tools_loaded = True

        if self.error is not None and self.error == self._fetch_error:
            self.error = None
        self._fetch_error = None
        self.store.update(client=True)
        return True

    def toggle_tools(self) -> None:
        self.store.update(lambda prev: {"showTools": not prev.get("showTools", False)})

    def select_tool(self, name: str) -> None:
        self.store.update(selectedTool=name)

    def set_query(self, text: str) -> None:
        self.store.update(query=text)

    def submit(self) -> Optional[str]:
        """
        Call the selected tool with the current query.

        Returns the tool's text on success, None otherwise (``self.error``
        says why). The query is cleared once a call was attempted.
        """
        state = self.store.get()
        tool_name = state.get("selectedTool")
        if not tool_name:
            self.error = NO_TOOL_SELECTED
            return None

        self.loading = True
        self.error = None
        try:
            result = self.client.call_tool(tool_name, {"prompt": state.get("query") or ""})
        except MCPClientError as e:
            logger.error(f"Tool call error: {e.message}")
            self.error = f"Tool call failed: {e.message}"
            return None
        else:
            self.store.update(lambda prev: {
                "results": [*(prev.get("results") or []), {"tool": tool_name, "result": result}],
            })
            return result
        finally:
            self.loading = False
            self.store.update(query="")
