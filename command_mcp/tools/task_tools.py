"""
Background task tools for the Command MCP server.

This module contains the operator tool for inspecting and managing queued
commands and for reloading the execution configuration.
"""
import logging
from typing import Any, Dict

from fastmcp import FastMCP, Context

from command_mcp.config import ConfigurationError
from command_mcp.core.error_handler import describe_exception, enhance_error
from command_mcp.core.hints import parameter_hints
from command_mcp.core.server_initialization import ServerComponents

from .tool_utilities import get_task_insights, summarize_tasks

logger = logging.getLogger(__name__)

TASK_ACTIONS = list(parameter_hints.get_tool_info("background_tasks").actions)


def handle_task_action(components: ServerComponents, action: str, task_id: str = "") -> Dict[str, Any]:
    """
    Perform one background_tasks action.

    Args:
        components: Wired server components
        action: One of TASK_ACTIONS
        task_id: Task id for status/cancel

    Returns:
        Action result
    """
    gateway = components.gateway
    scheduler = components.scheduler

    if action == "status":
        if task_id:
            task = gateway.get_task(task_id)
            if task is None:
                return {"success": False, "error": f"Task {task_id} not found", "task_id": task_id}
            return {"success": True, "task": task.to_dict()}

        return {
            "success": True,
            "scheduler_running": scheduler.is_running,
            "in_flight": scheduler.in_flight_count(),
            "task_stats": gateway.get_stats(),
            "async_execution": gateway.async_execution,
        }

    elif action == "list":
        tasks = gateway.get_all_tasks()
        return {
            "success": True,
            "tasks": [task.to_dict() for task in tasks],
            "summary": summarize_tasks(tasks),
        }

    elif action == "stats":
        stats = gateway.get_stats()
        return {
            "success": True,
            "task_stats": stats,
            "insights": get_task_insights(stats),
        }

    elif action == "cancel":
        if not task_id:
            return enhance_error("parameter", tool_name="background_tasks", missing_param="task_id").to_dict()
        cancelled = gateway.cancel(task_id)
        return {
            "success": cancelled,
            "task_id": task_id,
            "status": "cancelled" if cancelled else "not cancellable (unknown or already finished)",
        }

    elif action == "clear_completed":
        return {"success": True, "cleared": gateway.clear_completed()}

    elif action == "clear_all":
        return {"success": True, "cleared": gateway.clear_all()}

    elif action == "health":
        report = components.monitor.get_report()
        report["success"] = True
        return report

    elif action == "config":
        return {"success": True, "settings": gateway.settings.to_dict()}

    elif action == "reload_config":
        try:
            summary = components.reload_configuration()
        except ConfigurationError as e:
            logger.error(f"Configuration reload failed: {e}")
            return {"success": False, "error": f"Configuration reload failed: {describe_exception(e)}"}
        summary["success"] = True
        return summary

    return {
        "success": False,
        "error": f"Unknown action: {action}",
        "available_actions": TASK_ACTIONS,
        "help": parameter_hints.get_quick_help("background_tasks"),
        "usage": "background_tasks(action='status')",
    }


def register_task_tools(mcp: FastMCP, components: ServerComponents):
    """Register the background task management tool."""

    @mcp.tool()
    async def background_tasks(ctx: Context, action: str = "status", task_id: str = "") -> Dict[str, Any]:
        """
        Inspect and manage background command tasks.

        Args:
            ctx: The MCP context
            action: Action to perform - "status", "list", "stats", "cancel",
                "clear_completed", "clear_all", "health", "config", "reload_config"
            task_id: Task ID for status/cancel actions

        Returns:
            Task management results
        """
        logger.debug(f"Background tasks action: {action}")

        try:
            return handle_task_action(components, action, task_id)
        except Exception as e:
            logger.error(f"Background tasks error: {e}")
            return enhance_error("unexpected", tool_name="background_tasks",
                                 original_error=describe_exception(e)).to_dict()
