"""
Tool dispatcher for the Command MCP Server.

ToolDispatcher is the single synchronous entry point used by the transport
layer. It maps a tool name to one of three behaviours and always returns a
dictionary with a ``success`` flag; exceptions raised by collaborators are
converted into structured failures and never propagate past ``invoke``.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from command_mcp.config import COMMAND_PREVIEW_LIMIT
from command_mcp.core.error_handler import ErrorCategory, describe_exception, enhance_error
from command_mcp.core.execution import CommandGateway
from command_mcp.core.hints import get_input_schema, get_parameter_help, validate_tool_parameters, parameter_hints
from command_mcp.core.host import CommandHost
from command_mcp.core.validation import validate_command_name

logger = logging.getLogger(__name__)

EXECUTE_COMMAND = "execute_command"
LIST_COMMANDS = "list_commands"
GET_WORKSPACE_INFO = "get_workspace_info"

DISPATCHER_TOOLS = (EXECUTE_COMMAND, LIST_COMMANDS, GET_WORKSPACE_INFO)


class ToolDispatcher:
    """Routes tool invocations to the command gateway and host."""

    def __init__(self, gateway: CommandGateway, host: CommandHost, preview_limit: int = COMMAND_PREVIEW_LIMIT):
        self.gateway = gateway
        self.host = host
        self.preview_limit = preview_limit
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            EXECUTE_COMMAND: self._execute_command,
            LIST_COMMANDS: self._list_commands,
            GET_WORKSPACE_INFO: self._get_workspace_info,
        }

    def invoke(self, tool_name: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Invoke a tool.

        Args:
            tool_name: One of execute_command, list_commands, get_workspace_info
            params: Tool parameters

        Returns:
            Result dictionary; ``success`` is False for every failure
        """
        handler = self._handlers.get(tool_name)
        if handler is None:
            logger.warning(f"Unknown tool requested: {tool_name}")
            return enhance_error("unknown_tool", tool_name=tool_name, known_tools=DISPATCHER_TOOLS).to_dict()

        if params is None:
            params = {}
        if not isinstance(params, dict):
            return enhance_error("parameter",
                                 tool_name=tool_name,
                                 missing_param="params",
                                 detail="Tool parameters must be an object").to_dict()

        try:
            return handler(params)
        except Exception as e:
            logger.error(f"Tool {tool_name} failed: {e}")
            return enhance_error("unexpected", tool_name=tool_name, original_error=describe_exception(e)).to_dict()

    def get_tool_definitions(self) -> List[Dict[str, Any]]:
        """Name, description and input schema of each dispatcher tool."""
        definitions = []
        for name in DISPATCHER_TOOLS:
            info = parameter_hints.get_tool_info(name)
            definitions.append({
                "name": name,
                "description": info.description if info else name,
                "inputSchema": get_input_schema(name),
            })
        return definitions

    # ------------------------------------------------------------------
    # Tool handlers
    # ------------------------------------------------------------------

    def _execute_command(self, params: Dict[str, Any]) -> Dict[str, Any]:
        command = params.get("command")
        arguments = params.get("arguments")

        is_valid, errors = validate_tool_parameters(EXECUTE_COMMAND, "", {
            "command": command,
            "arguments": arguments,
        })
        if is_valid:
            is_valid, name_error = validate_command_name(command)
            errors = [name_error] if name_error else []

        if not is_valid:
            missing = "arguments" if errors and "arguments" in errors[0] else "command"
            error_dict = enhance_error("parameter",
                                       tool_name=EXECUTE_COMMAND,
                                       missing_param=missing,
                                       detail="; ".join(errors)).to_dict()
            error_dict.update({
                "async": False,
                "command": command if isinstance(command, str) else None,
                "arguments": list(arguments) if isinstance(arguments, (list, tuple)) else [],
                "help": get_parameter_help(EXECUTE_COMMAND),
            })
            return error_dict

        logger.debug(f"Executing command: {command}, arguments: {arguments}")
        outcome = self.gateway.submit(command, list(arguments or []))
        result = outcome.to_dict()

        if outcome.error_category == ErrorCategory.NOT_ALLOWED:
            enhanced = enhance_error("not_allowed", command=command,
                                     allowed_commands=self.gateway.allowed_commands)
            result["suggestions"] = enhanced.suggestions

        return result

    def _list_commands(self, params: Dict[str, Any]) -> Dict[str, Any]:
        commands = self.gateway.get_available_commands()
        preview = commands[:self.preview_limit]

        return {
            "success": True,
            "total": len(commands),
            "commands": preview,
            "truncated": len(commands) > len(preview),
            "filtered": not self.gateway.allow_list.is_empty,
        }

    def _get_workspace_info(self, params: Dict[str, Any]) -> Dict[str, Any]:
        info = self.host.get_workspace_info().to_dict()
        info["success"] = True
        return info
