"""
Content Tools Layer

This layer handles actual side-effects: calls to OpenAI, Tavily and YouTube,
and writing generated audio files.
All tools are auto-discovered via registry.py
"""

from .registry import execute_tool, get_all_tools, get_tool
from .base import MCPTool, PromptTool

__all__ = ["execute_tool", "get_all_tools", "get_tool", "MCPTool", "PromptTool"]
