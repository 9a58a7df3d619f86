"""
MCP Tool Base Classes

Provides common wrapper, validation, and error handling for all content tools.

Every tool failure is turned into a *successful* response whose text explains
the problem ("Error generating chart: Prompt cannot be empty"), so hosts must
inspect the text rather than a status code.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from . import config
from logs.tool_logger import get_logger as get_tool_logger

logger = logging.getLogger(__name__)


@dataclass
class ToolParameter:
    """Definition of a tool parameter."""
    name: str
    type: str
    description: str
    required: bool = True
    default: Any = None


@dataclass
class ToolDefinition:
    """Complete definition of an MCP tool."""
    name: str
    title: str
    description: str
    parameters: List[ToolParameter] = field(default_factory=list)
    handler: Optional[Callable] = None
    category: str = "general"


class MCPToolError(Exception):
    """Base exception for MCP tool errors."""
    def __init__(self, message: str, tool_name: str = None, details: Dict = None):
        self.message = message
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(MCPToolError):
    """Raised when tool input validation fails."""
    pass


class ConfigurationError(MCPToolError):
    """Raised when a required credential is missing."""
    pass


class ExecutionError(MCPToolError):
    """Raised when the upstream call fails or returns an unusable payload."""
    pass


def require_api_key(env_name: str, label: str, tool_name: str = None) -> str:
    """Return the credential stored in ``env_name`` or raise ConfigurationError."""
    api_key = config.get_api_key(env_name)
    if not api_key:
        raise ConfigurationError(f"{label} API key is not configured", tool_name=tool_name)
    return api_key


class MCPTool(ABC):
    """
    Abstract base class for content tools.

    All tools must inherit from this class and implement:
    - name: Tool identifier
    - title: Display name shown by hosts
    - description: What the tool does
    - error_prefix: Leading text of the error report ("Error generating chart")
    - execute(): The actual tool logic, returning the text payload
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for the tool."""
        pass

    @property
    def title(self) -> str:
        return self.name

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        pass

    @property
    @abstractmethod
    def error_prefix(self) -> str:
        pass

    @property
    def parameters(self) -> List[ToolParameter]:
        """List of parameters the tool accepts."""
        return []

    @property
    def category(self) -> str:
        """Category for grouping tools."""
        return "general"

    def validate(self, **kwargs) -> Dict[str, Any]:
        """
        Validate input parameters.
        Returns validated/normalized parameters.
        Raises ValidationError if validation fails.
        """
        validated = {}

        for param in self.parameters:
            value = kwargs.get(param.name)

            # Missing and blank strings are the same error for the caller
            if param.type == "string" and param.required:
                if not isinstance(value, str) or not value.strip():
                    raise ValidationError(
                        f"{param.name.capitalize()} cannot be empty",
                        tool_name=self.name
                    )

            if value is None:
                if param.required:
                    raise ValidationError(
                        f"Missing required parameter: {param.name}",
                        tool_name=self.name
                    )
                value = param.default

            validated[param.name] = value

        return validated

    @abstractmethod
    async def execute(self, **kwargs) -> str:
        """
        Execute the tool with given parameters.
        This method should contain the actual tool logic.
        """
        pass

    def _failure(self, message: str, error_type: str) -> Dict[str, Any]:
        return {
            "success": False,
            "tool": self.name,
            "error": message,
            "error_type": error_type,
            "text": f"{self.error_prefix}: {message}",
        }

    async def run(self, **kwargs) -> Dict[str, Any]:
        """
        Public entry point: validate and execute.
        Returns standardized response format; ``text`` is what goes on the wire.
        """
        start_time = time.time()
        try:
            validated = self.validate(**kwargs)
            result = await self.execute(**validated)
            response = {
                "success": True,
                "tool": self.name,
                "result": result,
                "text": result,
            }
        except ValidationError as e:
            logger.error(f"Validation error in {self.name}: {e.message}")
            response = self._failure(e.message, "validation")
        except ConfigurationError as e:
            logger.error(f"Configuration error in {self.name}: {e.message}")
            response = self._failure(e.message, "configuration")
        except ExecutionError as e:
            logger.error(f"Execution error in {self.name}: {e.message}")
            response = self._failure(e.message, "execution")
        except Exception as e:
            logger.exception(f"Unexpected error in {self.name}")
            response = self._failure(str(e) or "Unknown error occurred", "unexpected")

        get_tool_logger().log_tool_call(
            tool_name=self.name,
            arguments=kwargs,
            success=response["success"],
            response=response["text"],
            error_type=response.get("error_type"),
            latency_ms=(time.time() - start_time) * 1000,
        )
        return response

    def input_schema(self) -> Dict[str, Any]:
        """JSON schema of the tool input, as advertised over MCP."""
        properties = {}
        required = []

        for param in self.parameters:
            properties[param.name] = {
                "type": param.type,
                "description": param.description
            }
            if param.required:
                required.append(param.name)

        return {
            "type": "object",
            "properties": properties,
            "required": required
        }

    def to_definition(self) -> ToolDefinition:
        """Convert tool to ToolDefinition for registry."""
        return ToolDefinition(
            name=self.name,
            title=self.title,
            description=self.description,
            parameters=self.parameters,
            handler=self.run,
            category=self.category
        )


class PromptTool(MCPTool):
    """A tool whose only input is a free-form ``prompt`` string."""

    prompt_description = "Prompt for the tool"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="prompt",
                type="string",
                description=self.prompt_description,
                required=True
            )
        ]
