"""
Image Tool

Generates one image with the OpenAI Images API and returns its URL.
Requires OPENAI_API_KEY in environment.
"""

import asyncio
import logging

from openai import OpenAI

from .. import config
from ..base import ExecutionError, PromptTool, require_api_key

logger = logging.getLogger(__name__)


class ImageTool(PromptTool):
    """Text-to-image generation."""

    prompt_description = "Prompt to generate an image"

    @property
    def name(self) -> str:
        return "image_tool"

    @property
    def title(self) -> str:
        return "Image Tool"

    @property
    def description(self) -> str:
        return "Generates an image based on the given text prompt using DALL-E"

    @property
    def error_prefix(self) -> str:
        return "Error generating image"

    @property
    def category(self) -> str:
        return "image"

    async def execute(self, prompt: str) -> str:
        api_key = require_api_key("OPENAI_API_KEY", "OpenAI", self.name)
        client = OpenAI(api_key=api_key)

        logger.info(f"Generating image with prompt: {prompt}")
        response = await asyncio.to_thread(
            client.images.generate,
            prompt=prompt,
            n=1,
            size=config.OPENAI_IMAGE_SIZE,
            model=config.OPENAI_IMAGE_MODEL,
        )

        if not response.data:
            raise ExecutionError("No image data received from DALL-E API", tool_name=self.name)

        image_url = response.data[0].url
        if not image_url or not isinstance(image_url, str):
            raise ExecutionError("Invalid image URL received from DALL-E API", tool_name=self.name)

        logger.info(f"Image generated successfully: {image_url}")
        return image_url
