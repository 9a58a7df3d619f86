"""
Unit tests for the widget state store and session controller.
"""

from unittest.mock import MagicMock

import pytest
import requests

from widget.client import ToolCallError, ToolDescriptor, ToolListError, ToolsClient
from widget.session import NO_TOOL_SELECTED, WidgetSession
from widget.state import DEFAULT_STATE, InMemoryStateStore


@pytest.fixture
def client() -> MagicMock:
    mock = MagicMock()
    mock.fetch_tools.return_value = [
        ToolDescriptor(name="chart_tool", title="Chart Tool"),
        ToolDescriptor(name="image_tool", title="Image Tool"),
    ]
    mock.call_tool.side_effect = lambda name, args: f"{name}:{args['prompt']}"
    return mock


@pytest.fixture
def session(client) -> WidgetSession:
    return WidgetSession(client)


class TestStateStore:

    def test_default_state_not_shared(self):
        first = InMemoryStateStore(DEFAULT_STATE)
        second = InMemoryStateStore(DEFAULT_STATE)
        first.update(lambda prev: {"results": prev["results"] + [{"tool": "t", "result": "r"}]})
        assert second.get()["results"] == []
        assert DEFAULT_STATE["results"] == []

    def test_shallow_merge(self):
        store = InMemoryStateStore({"a": 1, "b": 2})
        store.update({"a": 10})
        store.update(c=3)
        assert store.get() == {"a": 10, "b": 2, "c": 3}

    def test_set_replaces(self):
        store = InMemoryStateStore({"a": 1})
        store.set({"b": 2})
        assert store.get() == {"b": 2}


class TestRefresh:

    def test_success(self, session):
        assert session.refresh_tools() is True
        assert [t.name for t in session.tools] == ["chart_tool", "image_tool"]
        assert session.state["client"] is True
        assert session.error is None

    def test_failure(self, session, client):
        client.fetch_tools.side_effect = ToolListError("No tools found in server response.")
        assert session.refresh_tools() is False
        assert session.state["client"] is False
        assert session.error == "No tools found in server response."


class TestSubmit:

    def test_no_tool_selected(self, session, client):
        session.set_query("hello")
        assert session.submit() is None
        assert session.error == NO_TOOL_SELECTED
        client.call_tool.assert_not_called()
        assert session.state["query"] == "hello"

    def test_results_accumulate_in_order(self, session):
        session.select_tool("chart_tool")
        for prompt in ["one", "two", "three"]:
            session.set_query(prompt)
            session.submit()

        results = session.state["results"]
        assert len(results) == 3
        assert [r["result"] for r in results] == [
            "chart_tool:one",
            "chart_tool:two",
            "chart_tool:three",
        ]
        assert all(r["tool"] == "chart_tool" for r in results)

    def test_query_cleared_after_success(self, session):
        session.select_tool("image_tool")
        session.set_query("a cat")
        session.submit()
        assert session.state["query"] == ""
        assert session.error is None

    def test_failure_keeps_results_and_clears_query(self, session, client):
        session.select_tool("image_tool")
        session.set_query("first")
        session.submit()

        client.call_tool.side_effect = ToolCallError("Invalid response format")
        session.set_query("second")
        assert session.submit() is None

        assert session.error == "Tool call failed: Invalid response format"
        assert session.state["query"] == ""
        assert len(session.state["results"]) == 1

    def test_toggle_and_select(self, session):
        session.toggle_tools()
        assert session.state["showTools"] is True
        session.toggle_tools()
        assert session.state["showTools"] is False
        session.select_tool("image_tool")
        assert session.state["selectedTool"] == "image_tool"


class TestErrorVisibility:

    def test_refresh_keeps_submit_error(self, session, client):
        session.set_query("hello")
        session.submit()
        assert session.refresh_tools() is True
        assert session.error == NO_TOOL_SELECTED
        assert session.tools_loaded is True

    def test_refresh_clears_previous_fetch_error(self, session, client):
        client.fetch_tools.side_effect = ToolListError("Failed to fetch tools: 503 Service Unavailable")
        session.refresh_tools()
        client.fetch_tools.side_effect = None
        assert session.refresh_tools() is True
        assert session.error is None

    def test_transport_failure_during_submit(self):
        http = MagicMock()
        http.post.side_effect = requests.exceptions.ChunkedEncodingError("cut")
        session = WidgetSession(ToolsClient("http://mcp.test/mcp", http=http))
        session.select_tool("image_tool")
        session.set_query("a cat")

        assert session.submit() is None
        assert session.error == "Tool call failed: Request failed: cut"
        assert session.state["query"] == ""
        assert session.state["results"] == []
