"""
Parameter hints and validation package for Command MCP tools.

The package is organized into focused modules:
- data_structures.py: Core data classes (ParameterInfo, ActionInfo, ToolInfo)
- definitions.py: Tool definitions and metadata
- validator.py: Parameter validation, schemas and help generation
"""

from .data_structures import ParameterInfo, ActionInfo, ToolInfo
from .validator import ParameterHints

# Global instance for use across the application
parameter_hints = ParameterHints()

def get_parameter_help(tool_name: str, action: str = ""):
    """Get parameter help for a tool and action."""
    return parameter_hints.get_parameter_suggestions(tool_name, action)

def validate_tool_parameters(tool_name: str, action: str, parameters: dict):
    """Validate tool parameters."""
    return parameter_hints.validate_parameters(tool_name, action, parameters)

def get_input_schema(tool_name: str, action: str = ""):
    """Get the JSON input schema for a tool action."""
    return parameter_hints.get_input_schema(tool_name, action)

__all__ = [
    "ParameterInfo",
    "ActionInfo",
    "ToolInfo",
    "ParameterHints",
    "parameter_hints",
    "get_parameter_help",
    "validate_tool_parameters",
    "get_input_schema"
]
