"""
Content Tools Package

All tools in this directory are auto-discovered by registry.py.
Each tool inherits from MCPTool (usually via PromptTool), takes a single
``prompt`` and calls exactly one upstream API.
"""

# Tools are auto-discovered, no explicit imports needed
