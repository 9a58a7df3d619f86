"""
Tool Registry

Every concrete MCPTool subclass defined in a module of ``content_tools.tools``
is instantiated once and registered under its ``name``. The MCP server, the
REST API and the tests all look tools up here.
"""

import importlib
import inspect
import logging
import pkgutil
from typing import Dict, List, Optional

from . import tools as tools_package
from .base import MCPTool, ToolDefinition

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Lazily populated name -> tool mapping."""

    def __init__(self, package=tools_package):
        self.package = package
        self._instances: Dict[str, MCPTool] = {}
        self._definitions: Dict[str, ToolDefinition] = {}
        self._loaded = False

    def _register_module(self, module) -> None:
        for cls_name, cls in inspect.getmembers(module, inspect.isclass):
            # Skip imported base classes and abstract helpers
            if cls.__module__ != module.__name__ or not issubclass(cls, MCPTool):
                continue
            if inspect.isabstract(cls):
                continue
            try:
                tool = cls()
            except Exception as e:
                logger.error(f"Cannot instantiate {cls_name}: {e}")
                continue
            if tool.name in self._instances:
                logger.warning(f"Duplicate tool name {tool.name} in {module.__name__}, ignored")
                continue
            self._instances[tool.name] = tool
            self._definitions[tool.name] = tool.to_definition()
            logger.info(f"Registered tool: {tool.name}")

    def load(self) -> None:
        if self._loaded:
            return

        prefix = f"{self.package.__name__}."
        for module_info in pkgutil.iter_modules(self.package.__path__, prefix):
            if module_info.name.rsplit(".", 1)[-1].startswith("_"):
                continue
            try:
                module = importlib.import_module(module_info.name)
            except Exception as e:
                logger.error(f"Cannot import tool module {module_info.name}: {e}")
                continue
            self._register_module(module)

        self._loaded = True
        logger.info(f"{len(self._instances)} tools available")

    def definitions(self) -> Dict[str, ToolDefinition]:
        self.load()
        return dict(self._definitions)

    def instance(self, name: str) -> Optional[MCPTool]:
        self.load()
        return self._instances.get(name)

    def names(self) -> List[str]:
        self.load()
        return list(self._instances)

    def clear(self) -> None:
        self._instances.clear()
        self._definitions.clear()
        self._loaded = False


_registry = ToolRegistry()


def get_all_tools() -> Dict[str, ToolDefinition]:
    """Definitions of all registered tools, keyed by name."""
    return _registry.definitions()


def get_tool(name: str) -> Optional[ToolDefinition]:
    return _registry.definitions().get(name)


def get_tool_instance(name: str) -> Optional[MCPTool]:
    return _registry.instance(name)


def list_tool_names() -> List[str]:
    return _registry.names()


async def execute_tool(name: str, **kwargs) -> Dict:
    """
    Run a tool by name.

    Unknown names yield an envelope with ``error_type="not_found"`` instead of
    raising, matching the shape every tool returns.
    """
    tool = _registry.instance(name)
    if tool is None:
        message = f"Tool not found: {name}"
        return {
            "success": False,
            "tool": name,
            "error": message,
            "error_type": "not_found",
            "text": message,
        }
    return await tool.run(**kwargs)


def reset_registry() -> None:
    """Forget all registered tools; the next lookup rediscovers them."""
    _registry.clear()
