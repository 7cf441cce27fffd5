"""
Tool registry for the Command MCP server.

This module provides the central registration system for all MCP tools,
organized into logical categories.
"""
import logging
from fastmcp import FastMCP

from command_mcp.core.server_initialization import ServerComponents

from .command_tools import register_command_tools
from .task_tools import register_task_tools

logger = logging.getLogger(__name__)

def register_all_tools(mcp: FastMCP, components: ServerComponents) -> None:
    """
    Register all MCP tools with the FastMCP server.

    This function orchestrates the registration of all tool categories:
    - Command tools (execute_command, list_commands, get_workspace_info)
    - Task management tools (background_tasks)

    Args:
        mcp: The FastMCP server instance
        components: Wired server components the tools delegate to
    """
    logger.info("Starting tool registration for Command MCP server")

    try:
        logger.debug("Registering command tools...")
        register_command_tools(mcp, components.dispatcher)

        logger.debug("Registering task management tools...")
        register_task_tools(mcp, components)

        logger.info("Successfully registered all MCP tools")

    except Exception as e:
        logger.error(f"Failed to register tools: {e}")
        raise

# Tool categories for reference
TOOL_CATEGORIES = {
    "commands": {
        "tools": ["execute_command", "list_commands", "get_workspace_info"],
        "description": "Tools for executing allow-listed host commands and inspecting the workspace"
    },
    "task_management": {
        "tools": ["background_tasks"],
        "description": "Tools for inspecting, cancelling and clearing background command tasks"
    }
}

def get_tool_info() -> dict:
    """
    Get information about all available tools.

    Returns:
        Dictionary containing tool categories and descriptions
    """
    return {
        "categories": TOOL_CATEGORIES,
        "total_tools": sum(len(cat["tools"]) for cat in TOOL_CATEGORIES.values()),
        "architecture": "Dispatcher-backed command tools plus an operator task tool"
    }
