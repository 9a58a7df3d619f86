"""
Video Tool

Looks up the best matching YouTube video for a prompt and returns its id.
Requires YOUTUBE_DATA_API_KEY in environment.
"""

import asyncio
import logging

import requests
from pydantic import ValidationError as SchemaError

from .. import config
from ..base import ExecutionError, PromptTool, require_api_key
from ..schemas import YouTubeSearchResponse

logger = logging.getLogger(__name__)

NO_VIDEOS = "No YouTube videos found for the given prompt. Please try with different keywords."
NO_VIDEO_ID = "No valid video ID found in the search results."


class VideoTool(PromptTool):
    """Search YouTube and return the first video id."""

    prompt_description = "Prompt to retrieve Youtube video id"

    @property
    def name(self) -> str:
        return "video_tool"

    @property
    def title(self) -> str:
        return "Video Tool"

    @property
    def description(self) -> str:
        return "Retrieves a Youtube video id based on the given prompt"

    @property
    def error_prefix(self) -> str:
        return "Error retrieving YouTube video"

    @property
    def category(self) -> str:
        return "video"

    def _search(self, prompt: str, api_key: str) -> YouTubeSearchResponse:
        response = requests.get(
            config.YOUTUBE_SEARCH_URL,
            params={"part": "id", "q": prompt, "maxResults": 1, "key": api_key},
            timeout=30,
        )

        if not response.ok:
            logger.error(f"YouTube API error: {response.status_code} {response.text}")
            raise ExecutionError(
                f"YouTube API error: {response.status_code} {response.reason}",
                tool_name=self.name
            )

        data = response.json()
        if data.get("error"):
            message = data["error"].get("message") or "Unknown error"
            raise ExecutionError(f"YouTube API error: {message}", tool_name=self.name)

        try:
            return YouTubeSearchResponse.model_validate(data)
        except SchemaError as e:
            raise ExecutionError(f"Unexpected YouTube response: {e}", tool_name=self.name)

    async def execute(self, prompt: str) -> str:
        api_key = require_api_key("YOUTUBE_DATA_API_KEY", "YouTube Data", self.name)

        logger.info(f"Searching YouTube for: {prompt}")
        search = await asyncio.to_thread(self._search, prompt, api_key)

        if not search.items:
            return NO_VIDEOS

        video_id = search.items[0].id.videoId
        if not video_id:
            return NO_VIDEO_ID

        logger.info(f"Found YouTube video with ID: {video_id}")
        return video_id
