"""
Runtime configuration.

All settings come from the environment (optionally seeded from a .env file).
API keys are deliberately NOT cached here: tools re-read them on every call so
a missing key is reported per call instead of failing at startup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# ─── Server ─────────────────────────────────────────────────────────────────

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
BASE_URL = os.getenv("BASE_URL", f"http://localhost:{PORT}")
MCP_SERVER_URL = os.getenv("MCP_SERVER_URL", f"{BASE_URL}/mcp")

# Web-servable directory; generated audio lands in PUBLIC_DIR / "mp3"
PUBLIC_DIR = Path(os.getenv("PUBLIC_DIR", str(PROJECT_ROOT / "public")))
AUDIO_URL_PREFIX = "/mp3"

TOOL_LOG_DIR = os.getenv("TOOL_LOG_DIR", str(PROJECT_ROOT / "logs" / "tool_calls"))

# ─── Upstream models ────────────────────────────────────────────────────────

OPENAI_CHART_MODEL = os.getenv("OPENAI_CHART_MODEL", "gpt-4o-mini")
OPENAI_IMAGE_MODEL = os.getenv("OPENAI_IMAGE_MODEL", "dall-e-2")
OPENAI_IMAGE_SIZE = os.getenv("OPENAI_IMAGE_SIZE", "512x512")
OPENAI_TTS_MODEL = os.getenv("OPENAI_TTS_MODEL", "tts-1")
OPENAI_TTS_VOICE = os.getenv("OPENAI_TTS_VOICE", "alloy")

TAVILY_MAX_RESULTS = int(os.getenv("TAVILY_MAX_RESULTS", "3"))

YOUTUBE_SEARCH_URL = os.getenv(
    "YOUTUBE_SEARCH_URL", "https://www.googleapis.com/youtube/v3/search"
)


def get_api_key(env_name: str) -> str:
    """Read a credential from the environment at call time ("" when unset)."""
    return (os.getenv(env_name) or "").strip()
