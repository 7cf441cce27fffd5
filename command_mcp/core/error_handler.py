"""
Error handling module for the Command MCP Server.

Every failure that crosses the tool boundary is turned into an
EnhancedError, whose dictionary form always carries ``success: False``,
the message, and a machine-checkable category, optionally followed by
suggestions and related tools.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Sequence

logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Categories of errors surfaced to MCP clients."""
    NOT_ALLOWED = "not_allowed"
    UNKNOWN_TOOL = "unknown_tool"
    MISSING_PARAMETER = "missing_parameter"
    HOST_EXECUTION_FAILURE = "host_execution_failure"
    UNEXPECTED = "unexpected"


class CommandMCPError(Exception):
    """Base class for errors raised inside the command subsystem."""
    category = ErrorCategory.UNEXPECTED


class CommandNotFoundError(CommandMCPError):
    """Raised by a command host asked to run a command it does not know."""
    category = ErrorCategory.HOST_EXECUTION_FAILURE

    def __init__(self, command: str):
        super().__init__(f"Command '{command}' not found")
        self.command = command


class EnhancedError:
    """Error with category and suggestions."""

    def __init__(
        self,
        category: ErrorCategory,
        message: str,
        suggestions: List[str] = None,
        related_tools: List[str] = None,
    ):
        self.category = category
        self.message = message
        self.suggestions = suggestions or []
        self.related_tools = related_tools or []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for MCP response."""
        result = {
            "success": False,
            "error": self.message,
            "category": self.category.value,
        }

        if self.suggestions:
            result["suggestions"] = self.suggestions

        if self.related_tools:
            result["related_tools"] = self.related_tools

        return result

    def __repr__(self) -> str:
        return f"EnhancedError({self.category.value}: {self.message})"


class ErrorEnhancer:
    """Builds category-specific errors with suggestions."""

    def enhance_not_allowed_error(self, command: str, allowed_commands: Sequence[str] = ()) -> EnhancedError:
        """Create error for a command rejected by the allow-list."""
        suggestions = [
            "Use list_commands to see which commands may be executed",
            "Ask the operator to add the command (or a 'prefix.*' pattern) to allowedCommands",
        ]
        if allowed_commands:
            preview = ", ".join(list(allowed_commands)[:5])
            suggestions.append(f"Allowed patterns include: {preview}")

        return EnhancedError(
            category=ErrorCategory.NOT_ALLOWED,
            message=f"Command '{command}' is not allowed",
            suggestions=suggestions,
            related_tools=["list_commands"],
        )

    def enhance_unknown_tool_error(self, tool_name: str, known_tools: Sequence[str] = ()) -> EnhancedError:
        """Create error for an unrecognized tool name."""
        suggestions = []
        if known_tools:
            suggestions.append(f"Available tools: {', '.join(known_tools)}")

        return EnhancedError(
            category=ErrorCategory.UNKNOWN_TOOL,
            message=f"Unknown tool: {tool_name}",
            suggestions=suggestions,
        )

    def enhance_parameter_error(self, tool_name: str, param: str, detail: str = "") -> EnhancedError:
        """Create error for missing/invalid parameters."""
        message = detail or f"Missing required parameter: {param}"
        return EnhancedError(
            category=ErrorCategory.MISSING_PARAMETER,
            message=message,
            suggestions=self._get_parameter_suggestions(param),
            related_tools=self._get_related_tools(tool_name),
        )

    def enhance_execution_error(self, command: str, original_error: str) -> EnhancedError:
        """Create error for a command host failure."""
        return EnhancedError(
            category=ErrorCategory.HOST_EXECUTION_FAILURE,
            message=original_error or f"Command '{command}' failed",
            suggestions=[
                "Check that the command exists with list_commands",
                "Verify the arguments expected by the command",
            ],
            related_tools=["list_commands"],
        )

    def enhance_unexpected_error(self, tool_name: str, original_error: str) -> EnhancedError:
        """Create error for anything a collaborator raised unexpectedly."""
        prefix = f"{tool_name} failed" if tool_name else "Unexpected error"
        return EnhancedError(
            category=ErrorCategory.UNEXPECTED,
            message=f"{prefix}: {original_error}",
        )

    def _get_parameter_suggestions(self, param: str) -> List[str]:
        suggestions_map = {
            "command": [
                "Specify the command to execute",
                "Examples: 'host.echo', 'workspace.listFolder'",
                "Use list_commands to discover command names",
            ],
            "arguments": [
                "Pass arguments as a list, e.g. ['first', 'second']",
            ],
            "task_id": [
                "Task ids are returned by execute_command when async execution is enabled",
            ],
        }
        return suggestions_map.get(param, [f"Parameter '{param}' is required for this operation"])

    def _get_related_tools(self, tool_name: str) -> List[str]:
        related_map = {
            "execute_command": ["list_commands", "background_tasks"],
            "background_tasks": ["execute_command"],
        }
        return related_map.get(tool_name, [])


# Global instance for use across the application
error_enhancer = ErrorEnhancer()


def enhance_error(error_type: str, **kwargs) -> EnhancedError:
    """Convenience function to create categorized errors."""
    if error_type == "not_allowed":
        return error_enhancer.enhance_not_allowed_error(
            kwargs.get("command", ""),
            kwargs.get("allowed_commands", ()),
        )
    elif error_type == "unknown_tool":
        return error_enhancer.enhance_unknown_tool_error(
            kwargs.get("tool_name", ""),
            kwargs.get("known_tools", ()),
        )
    elif error_type == "parameter":
        return error_enhancer.enhance_parameter_error(
            kwargs.get("tool_name", ""),
            kwargs.get("missing_param", ""),
            kwargs.get("detail", ""),
        )
    elif error_type == "execution":
        return error_enhancer.enhance_execution_error(
            kwargs.get("command", ""),
            kwargs.get("original_error", ""),
        )
    else:
        return error_enhancer.enhance_unexpected_error(
            kwargs.get("tool_name", ""),
            kwargs.get("original_error", "Unknown error"),
        )


def describe_exception(error: BaseException) -> str:
    """Return a non-empty message for an exception."""
    message = str(error)
    return message if message else error.__class__.__name__
