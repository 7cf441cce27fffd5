"""
Command tools for the Command MCP server.

This module exposes the dispatcher's three tools (execute_command,
list_commands, get_workspace_info) over MCP. Each tool runs the blocking
dispatcher call on a worker thread so a synchronous host command never
stalls the event loop.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastmcp import FastMCP, Context

from command_mcp.core.dispatcher import EXECUTE_COMMAND, GET_WORKSPACE_INFO, LIST_COMMANDS, ToolDispatcher

logger = logging.getLogger(__name__)


def register_command_tools(mcp: FastMCP, dispatcher: ToolDispatcher):
    """Register the command execution and discovery tools."""

    @mcp.tool()
    async def execute_command(ctx: Context, command: str = "", arguments: Optional[List[Any]] = None) -> Dict[str, Any]:
        """
        Execute a host command by name.

        When async execution is enabled the command is queued and a task_id
        is returned immediately; otherwise the command runs and its result
        (or error) is returned. Commands outside the allow-list are refused.

        Args:
            ctx: The MCP context
            command: Name of the command to execute (e.g. "host.echo")
            arguments: Positional arguments passed to the command

        Returns:
            Execution result, task handle, or error information
        """
        logger.debug(f"execute_command: {command}")
        params: Dict[str, Any] = {"command": command}
        if arguments is not None:
            params["arguments"] = arguments
        return await asyncio.to_thread(dispatcher.invoke, EXECUTE_COMMAND, params)

    @mcp.tool()
    async def list_commands(ctx: Context) -> Dict[str, Any]:
        """
        List the host commands that may be executed.

        Only commands permitted by the allow-list are included. The list is
        sorted and capped; "truncated" tells whether more exist.

        Args:
            ctx: The MCP context

        Returns:
            Total count and a preview of command names
        """
        return await asyncio.to_thread(dispatcher.invoke, LIST_COMMANDS, {})

    @mcp.tool()
    async def get_workspace_info(ctx: Context) -> Dict[str, Any]:
        """
        Get the host workspace name, folders and active file.

        Args:
            ctx: The MCP context

        Returns:
            Workspace information
        """
        return await asyncio.to_thread(dispatcher.invoke, GET_WORKSPACE_INFO, {})
