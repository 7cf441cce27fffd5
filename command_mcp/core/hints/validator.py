"""
Parameter validation and help generation for Command MCP tools.

This module provides the ParameterHints class that handles parameter
validation, help generation, and input schema construction.
"""
import logging
from typing import Dict, Any, List, Optional, Tuple

from .data_structures import ActionInfo, ToolInfo
from .definitions import get_tool_definitions

logger = logging.getLogger(__name__)

_JSON_TYPES = {
    "string": str,
    "integer": int,
    "boolean": bool,
    "array": (list, tuple),
    "object": dict,
}

class ParameterHints:
    """Provides parameter hints and validation for MCP tools."""

    def __init__(self):
        self.tools = get_tool_definitions()

    def get_tool_info(self, tool_name: str) -> Optional[ToolInfo]:
        """Get complete information about a tool."""
        return self.tools.get(tool_name)

    def get_action_info(self, tool_name: str, action: str) -> Optional[ActionInfo]:
        """Get information about a specific tool action."""
        tool = self.get_tool_info(tool_name)
        if tool:
            return tool.actions.get(action)
        return None

    def validate_parameters(self, tool_name: str, action: str, parameters: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate parameters for a tool action.

        None values count as absent.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        action_info = self.get_action_info(tool_name, action)
        if not action_info:
            return False, [f"Unknown action '{action}' for tool '{tool_name}'"]

        errors = []

        for param_info in action_info.parameters:
            if param_info.required and parameters.get(param_info.name) is None:
                errors.append(f"Missing required parameter: {param_info.name}")

        for param_name, param_value in parameters.items():
            if param_value is None:
                continue
            param_info = next((p for p in action_info.parameters if p.name == param_name), None)
            if not param_info:
                continue

            expected = _JSON_TYPES.get(param_info.type)
            if param_info.type == "integer" and isinstance(param_value, bool):
                errors.append(f"Parameter '{param_name}' must be an integer")
            elif expected and not isinstance(param_value, expected):
                article = "an" if param_info.type[0] in "aeiou" else "a"
                errors.append(f"Parameter '{param_name}' must be {article} {param_info.type}")

        return len(errors) == 0, errors

    def get_parameter_suggestions(self, tool_name: str, action: str = "") -> Dict[str, Any]:
        """Get parameter suggestions and examples for a tool/action."""
        action_info = self.get_action_info(tool_name, action)
        if action_info:
            return {
                "description": action_info.description,
                "parameters": [
                    {
                        "name": p.name,
                        "type": p.type,
                        "required": p.required,
                        "description": p.description,
                        "examples": p.examples,
                        "default": p.default_value
                    }
                    for p in action_info.parameters
                ],
                "examples": action_info.examples,
                "next_steps": action_info.next_steps or []
            }

        tool_info = self.get_tool_info(tool_name)
        if tool_info:
            return {
                "description": tool_info.description,
                "actions": {
                    name: {
                        "description": info.description,
                        "examples": info.examples[:2]
                    }
                    for name, info in tool_info.actions.items()
                },
                "common_workflows": tool_info.common_workflows
            }

        return {}

    def get_input_schema(self, tool_name: str, action: str = "") -> Dict[str, Any]:
        """Build a JSON schema describing the parameters of a tool action."""
        action_info = self.get_action_info(tool_name, action)
        schema: Dict[str, Any] = {"type": "object", "properties": {}}
        if not action_info:
            return schema

        required = []
        for p in action_info.parameters:
            prop: Dict[str, Any] = {"type": p.type, "description": p.description}
            if p.type == "array" and p.item_type:
                prop["items"] = {"type": p.item_type}
            schema["properties"][p.name] = prop
            if p.required:
                required.append(p.name)

        if required:
            schema["required"] = required
        return schema

    def get_quick_help(self, tool_name: str) -> str:
        """
        One line per action with its parameters, e.g.
        ``background_tasks(action='cancel', task_id) - Cancel a task``.
        """
        tool_info = self.get_tool_info(tool_name)
        if not tool_info:
            return f"Unknown tool: {tool_name}"

        lines = [f"{tool_name}: {tool_info.description}"]
        for action_name, action_info in tool_info.actions.items():
            params = [p.name if p.required else f"[{p.name}]" for p in action_info.parameters]
            if action_name:
                params.insert(0, f"action='{action_name}'")
            lines.append(f"  {tool_name}({', '.join(params)}) - {action_info.description}")
        return "\n".join(lines)
