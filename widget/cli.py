#!/usr/bin/env python3
"""
Widget CLI - terminal front-end

Same session behaviour as the web page, driven from a prompt:
results are printed with the plain-text renderers.

Usage:
  python -m widget.cli                      # interactive
  python -m widget.cli chart_tool "prompt"  # single call
"""

import logging
import sys

from dotenv import load_dotenv

from content_tools.config import MCP_SERVER_URL
from .client import ToolsClient
from .render import render_output
from .session import WidgetSession

load_dotenv()

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_tools(session: WidgetSession):
    if not session.tools:
        print("No tools loaded. Is MCP server running?")
        return
    selected = session.state.get("selectedTool")
    print("Available tools:")
    for tool in session.tools:
        marker = "*" if tool.name == selected else " "
        print(f" {marker} {tool.name}: {tool.description or 'No description available'}")


def print_last_result(session: WidgetSession):
    results = session.state.get("results") or []
    if results:
        item = results[-1]
        print(render_output(item["tool"], item["result"]).to_text())


def interactive_mode(session: WidgetSession):
    """Run the widget in interactive mode."""
    print("=" * 60)
    print("Multi Modal MCP")
    print("=" * 60)
    print(f"MCP Server: {MCP_SERVER_URL}")
    print("-" * 60)
    print("Commands:")
    print("  /quit         - Exit")
    print("  /tools        - List available tools")
    print("  /refresh      - Reload tools from the server")
    print("  /use <tool>   - Select the tool for following prompts")
    print("  anything else - Send as prompt to the selected tool")
    print("-" * 60)

    print("Connecting to MCP server...", end=" ")
    if session.refresh_tools():
        print("OK")
        print(f"Loaded {len(session.tools)} tools")
    else:
        print("FAILED")
        print(f"Warning: {session.error}")
    print()

    while True:
        try:
            user_input = input("> ").strip()

            if not user_input:
                continue

            command = user_input.lower()
            if command == "/quit":
                print("Goodbye!")
                break

            if command == "/tools":
                print_tools(session)
                continue

            if command == "/refresh":
                if session.refresh_tools():
                    print(f"Loaded {len(session.tools)} tools")
                else:
                    print(f"Error: {session.error}")
                continue

            if command.startswith("/use "):
                session.select_tool(user_input[5:].strip())
                print(f"Selected {session.state['selectedTool']}")
                continue

            session.set_query(user_input)
            if session.submit() is None:
                print(f"Error: {session.error}")
            else:
                print_last_result(session)
            print()

        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            break


def single_command(session: WidgetSession, tool_name: str, prompt: str) -> int:
    """Call one tool, print the rendered result, return the exit code."""
    session.select_tool(tool_name)
    session.set_query(prompt)
    if session.submit() is None:
        print(f"Error: {session.error}")
        return 1
    print_last_result(session)
    return 0


def main():
    """Main entry point."""
    session = WidgetSession(ToolsClient())

    if len(sys.argv) > 2:
        sys.exit(single_command(session, sys.argv[1], " ".join(sys.argv[2:])))
    elif len(sys.argv) == 2:
        print("Usage: python -m widget.cli [<tool> <prompt>]")
        sys.exit(2)
    else:
        interactive_mode(session)


if __name__ == "__main__":
    main()
