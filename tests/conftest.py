"""
Shared fixtures: every test writes its tool ledger and generated files under
its own tmp_path, and credentials are controlled per test.
"""

import pytest

from content_tools import config
from logs.tool_logger import reset_logger

API_KEY_VARS = ("OPENAI_API_KEY", "TAVILY_API_KEY", "YOUTUBE_DATA_API_KEY")


@pytest.fixture(autouse=True)
def isolated_tool_log(tmp_path, monkeypatch):
    """Point the JSONL tool ledger at a temporary directory."""
    monkeypatch.setattr(config, "TOOL_LOG_DIR", str(tmp_path / "tool_calls"))
    reset_logger()
    yield tmp_path / "tool_calls"
    reset_logger()


@pytest.fixture
def public_dir(tmp_path, monkeypatch):
    path = tmp_path / "public"
    monkeypatch.setattr(config, "PUBLIC_DIR", path)
    return path


@pytest.fixture
def no_api_keys(monkeypatch):
    for name in API_KEY_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def api_keys(monkeypatch):
    for name in API_KEY_VARS:
        monkeypatch.setenv(name, f"test-{name.lower()}")
