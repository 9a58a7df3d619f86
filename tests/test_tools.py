"""
Unit tests for the content tools.

Upstream SDKs (OpenAI, Tavily, YouTube via requests) are mocked; the tests
cover validation, credential checks, response shaping and the tool ledger.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from content_tools import execute_tool
from content_tools.registry import get_tool_instance, list_tool_names
from content_tools.tools.chart import NO_CHART_DATA
from content_tools.tools.document import NO_DOCUMENTS
from content_tools.tools.video import NO_VIDEOS
from logs.tool_logger import LogCategory, get_logger

TOOL_NAMES = ["chart_tool", "document_tool", "video_tool", "image_tool", "audio_tool"]

CHART_JSON = '{"title": "Sales for Q1 2024", "type": "bar", "data": [{"label": "January", "value": 10000}]}'


def _youtube_response(payload, status_code=200, reason="OK"):
    response = MagicMock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.reason = reason
    response.text = json.dumps(payload)
    response.json.return_value = payload
    return response


class TestRegistry:
    """Tool discovery."""

    def test_all_tools_discovered(self):
        assert sorted(list_tool_names()) == sorted(TOOL_NAMES)

    def test_titles(self):
        titles = {name: get_tool_instance(name).title for name in TOOL_NAMES}
        assert titles["chart_tool"] == "Chart Tool"
        assert titles["audio_tool"] == "Audio Tool"

    def test_input_schema_has_single_prompt(self):
        schema = get_tool_instance("image_tool").input_schema()
        assert list(schema["properties"]) == ["prompt"]
        assert schema["required"] == ["prompt"]

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        result = await execute_tool("nope_tool", prompt="x")
        assert result["success"] is False
        assert result["error_type"] == "not_found"


class TestValidation:
    """Empty prompts never reach an upstream API."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name", TOOL_NAMES)
    @pytest.mark.parametrize("prompt", ["", "   ", "\n\t"])
    async def test_blank_prompt(self, tool_name, prompt, api_keys):
        prefix = get_tool_instance(tool_name).error_prefix
        with patch("content_tools.tools.chart.OpenAI") as chart_openai, \
             patch("content_tools.tools.document.TavilyClient") as tavily, \
             patch("content_tools.tools.video.requests.get") as youtube:
            result = await execute_tool(tool_name, prompt=prompt)

        assert result["success"] is False
        assert result["error_type"] == "validation"
        assert result["text"] == f"{prefix}: Prompt cannot be empty"
        chart_openai.assert_not_called()
        tavily.assert_not_called()
        youtube.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_prompt(self, api_keys):
        result = await execute_tool("image_tool")
        assert result["text"] == "Error generating image: Prompt cannot be empty"


class TestCredentials:
    """A missing key is a per-call configuration error."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name,expected", [
        ("chart_tool", "Error generating chart: OpenAI API key is not configured"),
        ("document_tool", "Error retrieving documents: Tavily API key is not configured"),
        ("video_tool", "Error retrieving YouTube video: YouTube Data API key is not configured"),
        ("image_tool", "Error generating image: OpenAI API key is not configured"),
        ("audio_tool", "Error generating audio: OpenAI API key is not configured"),
    ])
    async def test_missing_key(self, tool_name, expected, no_api_keys, public_dir):
        result = await execute_tool(tool_name, prompt="cats")
        assert result["success"] is False
        assert result["error_type"] == "configuration"
        assert result["text"] == expected


class TestChartTool:

    @pytest.mark.asyncio
    @patch("content_tools.tools.chart.OpenAI")
    async def test_returns_serialized_output_item(self, mock_openai, api_keys):
        item = MagicMock()
        item.model_dump_json.return_value = json.dumps(
            {"type": "message", "content": [{"type": "output_text", "text": CHART_JSON}]}
        )
        mock_openai.return_value.responses.create.return_value = MagicMock(output=[item])

        result = await execute_tool("chart_tool", prompt="Q1 sales")

        assert result["success"] is True
        assert json.loads(json.loads(result["text"])["content"][0]["text"])["title"] == "Sales for Q1 2024"
        kwargs = mock_openai.return_value.responses.create.call_args.kwargs
        assert kwargs["input"] == [{"role": "user", "content": "Q1 sales"}]

    @pytest.mark.asyncio
    @patch("content_tools.tools.chart.OpenAI")
    async def test_empty_output(self, mock_openai, api_keys):
        mock_openai.return_value.responses.create.return_value = MagicMock(output=[])
        result = await execute_tool("chart_tool", prompt="Q1 sales")
        assert result["text"] == NO_CHART_DATA

    @pytest.mark.asyncio
    @patch("content_tools.tools.chart.OpenAI")
    async def test_upstream_exception(self, mock_openai, api_keys):
        mock_openai.return_value.responses.create.side_effect = RuntimeError("rate limited")
        result = await execute_tool("chart_tool", prompt="Q1 sales")
        assert result["error_type"] == "unexpected"
        assert result["text"] == "Error generating chart: rate limited"


class TestDocumentTool:

    @pytest.mark.asyncio
    @patch("content_tools.tools.document.TavilyClient")
    async def test_documents_shape(self, mock_tavily, api_keys):
        mock_tavily.return_value.search.return_value = {
            "query": "python",
            "results": [
                {"title": "Python", "url": "https://python.org", "content": "Official site", "score": 0.9},
                {"title": "PyPI", "url": "https://pypi.org", "content": "Packages", "score": 0.8},
            ],
        }

        result = await execute_tool("document_tool", prompt="python")

        docs = json.loads(result["text"])
        assert len(docs) == 2
        assert docs[0]["pageContent"] == "Official site"
        assert docs[0]["metadata"]["source"] == "https://python.org"
        assert docs[0]["metadata"]["title"] == "Python"
        mock_tavily.return_value.search.assert_called_once_with(query="python", max_results=3)

    @pytest.mark.asyncio
    @patch("content_tools.tools.document.TavilyClient")
    async def test_no_results(self, mock_tavily, api_keys):
        mock_tavily.return_value.search.return_value = {"results": []}
        result = await execute_tool("document_tool", prompt="python")
        assert result["success"] is True
        assert result["text"] == NO_DOCUMENTS


class TestVideoTool:

    @pytest.mark.asyncio
    @patch("content_tools.tools.video.requests.get")
    async def test_first_video_id(self, mock_get, api_keys):
        mock_get.return_value = _youtube_response(
            {"items": [{"id": {"kind": "youtube#video", "videoId": "dQw4w9WgXcQ"}}]}
        )

        result = await execute_tool("video_tool", prompt="never gonna")

        assert result["text"] == "dQw4w9WgXcQ"
        params = mock_get.call_args.kwargs["params"]
        assert params["q"] == "never gonna"
        assert params["maxResults"] == 1

    @pytest.mark.asyncio
    @patch("content_tools.tools.video.requests.get")
    async def test_no_items(self, mock_get, api_keys):
        mock_get.return_value = _youtube_response({"items": []})
        result = await execute_tool("video_tool", prompt="zzz")
        assert result["text"] == NO_VIDEOS

    @pytest.mark.asyncio
    @patch("content_tools.tools.video.requests.get")
    async def test_http_error(self, mock_get, api_keys):
        mock_get.return_value = _youtube_response({}, status_code=403, reason="Forbidden")
        result = await execute_tool("video_tool", prompt="zzz")
        assert result["error_type"] == "execution"
        assert result["text"] == "Error retrieving YouTube video: YouTube API error: 403 Forbidden"

    @pytest.mark.asyncio
    @patch("content_tools.tools.video.requests.get")
    async def test_error_member_in_body(self, mock_get, api_keys):
        mock_get.return_value = _youtube_response(
            {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key."}}
        )
        result = await execute_tool("video_tool", prompt="zzz")
        assert result["error_type"] == "execution"
        assert result["text"] == (
            "Error retrieving YouTube video: YouTube API error: "
            "API key not valid. Please pass a valid API key."
        )


class TestImageTool:

    @pytest.mark.asyncio
    @patch("content_tools.tools.image.OpenAI")
    async def test_returns_url(self, mock_openai, api_keys):
        mock_openai.return_value.images.generate.return_value = MagicMock(
            data=[MagicMock(url="https://images.example/cat.png")]
        )
        result = await execute_tool("image_tool", prompt="a cat")
        assert result["text"] == "https://images.example/cat.png"

    @pytest.mark.asyncio
    @patch("content_tools.tools.image.OpenAI")
    async def test_no_data(self, mock_openai, api_keys):
        mock_openai.return_value.images.generate.return_value = MagicMock(data=[])
        result = await execute_tool("image_tool", prompt="a cat")
        assert result["text"] == "Error generating image: No image data received from DALL-E API"

    @pytest.mark.asyncio
    @patch("content_tools.tools.image.OpenAI")
    async def test_missing_url(self, mock_openai, api_keys):
        mock_openai.return_value.images.generate.return_value = MagicMock(
            data=[MagicMock(url=None)]
        )
        result = await execute_tool("image_tool", prompt="a cat")
        assert result["error_type"] == "execution"
        assert result["text"] == "Error generating image: Invalid image URL received from DALL-E API"


class TestAudioTool:

    @pytest.mark.asyncio
    @patch("content_tools.tools.audio.OpenAI")
    async def test_writes_mp3(self, mock_openai, api_keys, public_dir):
        def fake_write(path):
            path.write_bytes(b"ID3fake")

        mock_openai.return_value.audio.speech.create.return_value.write_to_file.side_effect = fake_write

        result = await execute_tool("audio_tool", prompt="hello there")

        assert result["success"] is True
        assert result["text"].startswith("/mp3/")
        assert result["text"].endswith(".mp3")
        filename = result["text"].rsplit("/", 1)[1]
        assert (public_dir / "mp3" / filename).read_bytes() == b"ID3fake"

        artifacts = get_logger().read_logs(LogCategory.ARTIFACT)
        assert artifacts[0]["public_url"] == result["text"]
        assert artifacts[0]["file_size_bytes"] == 7

    @pytest.mark.asyncio
    @patch("content_tools.tools.audio.OpenAI")
    async def test_unique_names(self, mock_openai, api_keys, public_dir):
        first = await execute_tool("audio_tool", prompt="one")
        second = await execute_tool("audio_tool", prompt="two")
        assert first["text"] != second["text"]


class TestToolLedger:

    @pytest.mark.asyncio
    async def test_every_call_logged(self, no_api_keys):
        await execute_tool("image_tool", prompt="")
        await execute_tool("image_tool", prompt="cat")

        calls = get_logger().read_logs(LogCategory.TOOL_CALL, tool_name="image_tool")
        assert [c["error_type"] for c in calls] == ["validation", "configuration"]
        assert calls[1]["arguments"] == {"prompt": "cat"}
        assert get_logger().get_session_stats()["log_counts"]["tool_call"] == 2
