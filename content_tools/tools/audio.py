"""
Audio Tool

Converts text to speech and stores the MP3 in the public directory, returning
the URL it is served under. Files are never cleaned up.
"""

import asyncio
import logging
import uuid
from pathlib import Path

from openai import OpenAI

from .. import config
from ..base import PromptTool, require_api_key
from logs.tool_logger import get_logger as get_tool_logger

logger = logging.getLogger(__name__)


def new_audio_id() -> str:
    """Short random identifier for a generated file."""
    return uuid.uuid4().hex[:10]


class AudioTool(PromptTool):
    """Text-to-speech synthesis."""

    prompt_description = "Prompt to generate audio"

    @property
    def name(self) -> str:
        return "audio_tool"

    @property
    def title(self) -> str:
        return "Audio Tool"

    @property
    def description(self) -> str:
        return "Text content to convert into an audio file"

    @property
    def error_prefix(self) -> str:
        return "Error generating audio"

    @property
    def category(self) -> str:
        return "audio"

    def _synthesize(self, client: OpenAI, prompt: str, audio_path: Path) -> None:
        response = client.audio.speech.create(
            model=config.OPENAI_TTS_MODEL,
            voice=config.OPENAI_TTS_VOICE,
            input=prompt,
        )
        response.write_to_file(audio_path)

    async def execute(self, prompt: str) -> str:
        api_key = require_api_key("OPENAI_API_KEY", "OpenAI", self.name)
        client = OpenAI(api_key=api_key)

        audio_dir = config.PUBLIC_DIR / "mp3"
        audio_dir.mkdir(parents=True, exist_ok=True)

        audio_id = new_audio_id()
        audio_path = audio_dir / f"{audio_id}.mp3"
        await asyncio.to_thread(self._synthesize, client, prompt, audio_path)

        public_url = f"{config.AUDIO_URL_PREFIX}/{audio_id}.mp3"
        get_tool_logger().log_artifact(
            artifact_type="audio_mp3",
            file_path=audio_path,
            public_url=public_url,
            tool_name=self.name,
            metadata={"model": config.OPENAI_TTS_MODEL, "voice": config.OPENAI_TTS_VOICE},
        )

        logger.info(f"Audio URL: {public_url}")
        return public_url
