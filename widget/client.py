"""
MCP Tools Client

Talks JSON-RPC to the MCP endpoint over plain HTTP:
- tools/list  -> list of ToolDescriptor (internal widget tool filtered out)
- tools/call  -> text of the first content block

The endpoint may answer with ``application/json`` or with a
``text/event-stream`` body framed as ``data: <json>`` lines; both are decoded
into a single JSON payload.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from content_tools.config import MCP_SERVER_URL

logger = logging.getLogger(__name__)

# Tool that only exists to render the host-side widget
HIDDEN_TOOL = "show_ui"

SSE_DATA_PREFIX = "data: "
NO_TOOLS_FOUND = "No tools found in server response."
FETCH_FAILED = "Failed to fetch tools. See server logs for details."
INVALID_RESPONSE = "Invalid response format"


class MCPClientError(Exception):
    """Base exception for client-side MCP errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ResponseDecodeError(MCPClientError):
    """Raised when no JSON payload can be extracted from a response body."""
    pass


class ToolListError(MCPClientError):
    """Raised when the tool list cannot be fetched or decoded."""
    pass


class ToolCallError(MCPClientError):
    """Raised when a tool call does not yield a usable result."""
    pass


@dataclass
class ToolDescriptor:
    name: str
    description: Optional[str] = None
    title: Optional[str] = None
    input_schema: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolDescriptor":
        return cls(
            name=data["name"],
            description=data.get("description"),
            title=data.get("title"),
            input_schema=data.get("inputSchema") or {},
        )

    @property
    def label(self) -> str:
        return self.title or self.name


def extract_sse_payload(body: str) -> Optional[Any]:
    """
    Return the JSON of the first ``data: `` line that parses, or None.

    Lines that carry the prefix but invalid JSON are skipped.
    """
    for line in body.splitlines():
        if not line.startswith(SSE_DATA_PREFIX):
            continue
        try:
            return json.loads(line[len(SSE_DATA_PREFIX):])
        except json.JSONDecodeError:
            continue
    return None


def decode_payload(
    content_type: Optional[str],
    body: str,
    missing_message: str = "No JSON payload found in server response.",
) -> Any:
    """
    Extract the single JSON payload from a JSON or event-stream body.

    Raises:
        ResponseDecodeError: unknown content type, invalid JSON, or an
            event stream without any parseable ``data: `` line
    """
    if content_type and "text/event-stream" in content_type:
        payload = extract_sse_payload(body)
        if payload is None:
            raise ResponseDecodeError(missing_message)
        return payload

    if content_type and "application/json" in content_type:
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise ResponseDecodeError(f"Invalid JSON in server response: {e}")

    raise ResponseDecodeError(f"Unknown content type: {content_type}")


def _status_line(response) -> str:
    # requests exposes ``reason``, httpx ``reason_phrase``
    reason = getattr(response, "reason", None) or getattr(response, "reason_phrase", "")
    return f"{response.status_code} {reason}".strip()


def _is_success(response) -> bool:
    return 200 <= response.status_code < 300


def parse_tools_response(response) -> List[ToolDescriptor]:
    """
    Decode a ``tools/list`` HTTP response into user-facing tool descriptors.

    Raises:
        ToolListError: with a status-, content-type- or shape-specific message
    """
    if not _is_success(response):
        raise ToolListError(f"Failed to fetch tools: {_status_line(response)}")

    content_type = response.headers.get("content-type")
    try:
        payload = decode_payload(content_type, response.text, missing_message=NO_TOOLS_FOUND)
    except ResponseDecodeError as e:
        raise ToolListError(e.message) from e

    result = payload.get("result") if isinstance(payload, dict) else None
    tools = result.get("tools") if isinstance(result, dict) else None
    if not isinstance(tools, list):
        logger.error(f"No tools found in server response: {payload}")
        raise ToolListError(NO_TOOLS_FOUND)

    descriptors = []
    for index, tool in enumerate(tools):
        if not isinstance(tool, dict) or not isinstance(tool.get("name"), str):
            logger.error(f"Malformed tool entry at index {index}: {tool!r}")
            raise ToolListError(
                f"Malformed tool entry in server response at index {index}: "
                "expected an object with a string 'name'."
            )
        if tool["name"] != HIDDEN_TOOL:
            descriptors.append(ToolDescriptor.from_dict(tool))
    return descriptors


def parse_call_response(response) -> str:
    """
    Decode a ``tools/call`` HTTP response into the tool's text result.

    Tool-level failures arrive as ordinary text ("Error generating chart: ...")
    and are returned as-is; only protocol problems raise.
    """
    if not _is_success(response):
        raise ToolCallError(f"HTTP {_status_line(response)}: {response.text}")

    content_type = response.headers.get("content-type")
    try:
        payload = decode_payload(content_type, response.text)
    except ResponseDecodeError as e:
        raise ToolCallError(e.message) from e

    if not isinstance(payload, dict):
        raise ToolCallError(INVALID_RESPONSE)

    error = payload.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise ToolCallError(message or "Unknown error")

    result = payload.get("result")
    if not isinstance(result, dict):
        raise ToolCallError(INVALID_RESPONSE)

    content = result.get("content")
    if not isinstance(content, list):
        raise ToolCallError(INVALID_RESPONSE)

    texts = [
        block.get("text")
        for block in content
        if isinstance(block, dict) and block.get("type") == "text"
    ]
    if not texts or not isinstance(texts[0], str) or not texts[0]:
        raise ToolCallError(INVALID_RESPONSE)

    return texts[0]


class ToolsClient:
    """
    Minimal MCP client for the widget.

    ``http`` is anything with a requests-style ``post`` (a requests.Session by
    default; tests pass a FastAPI TestClient).
    """

    def __init__(self, mcp_url: str = None, http=None, timeout: float = 120):
        self.mcp_url = mcp_url or MCP_SERVER_URL
        self.http = http or requests.Session()
        self.timeout = timeout
        self._request_id = 0

    def _post(self, method: str, params: Optional[Dict[str, Any]] = None):
        self._request_id += 1
        body: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method,
            "id": self._request_id,
        }
        if params is not None:
            body["params"] = params

        return self.http.post(
            self.mcp_url,
            json=body,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json, text/event-stream",
            },
            timeout=self.timeout,
        )

    def fetch_tools(self) -> List[ToolDescriptor]:
        """Fetch the user-facing tool list."""
        try:
            response = self._post("tools/list")
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch tools from {self.mcp_url}: {e}")
            raise ToolListError(FETCH_FAILED) from e

        tools = parse_tools_response(response)
        logger.info(f"Loaded {len(tools)} tools from MCP server")
        return tools

    def call_tool(self, name: str, arguments: Dict[str, Any]) -> str:
        """Invoke a tool and return its text result."""
        try:
            response = self._post("tools/call", {"name": name, "arguments": arguments})
        except requests.exceptions.ConnectionError as e:
            raise ToolCallError(f"Cannot connect to MCP server at {self.mcp_url}") from e
        except requests.exceptions.Timeout as e:
            raise ToolCallError("Request timed out") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Tool call to {self.mcp_url} failed: {e}")
            raise ToolCallError(f"Request failed: {e}") from e

        return parse_call_response(response)

    def check_server(self) -> bool:
        """Check if the MCP server answers a tools/list request."""
        try:
            self.fetch_tools()
            return True
        except ToolListError:
            return False
