"""
Shared utilities for Command MCP tools.

This module contains helper functions used by the tool modules.
"""
from collections import Counter
from typing import Any, Dict, List

from command_mcp.config import HIGH_PENDING_TASKS_THRESHOLD
from command_mcp.core.async_ops import BackgroundTask, TaskStatus


def summarize_tasks(tasks: List[BackgroundTask]) -> Dict[str, Any]:
    """Count tasks per command and report the oldest pending one."""
    by_command = Counter(task.command for task in tasks)
    pending = sorted((t for t in tasks if t.status == TaskStatus.PENDING),
                     key=lambda t: (t.created_at, t.sequence))

    return {
        "count": len(tasks),
        "by_command": dict(by_command.most_common()),
        "oldest_pending": pending[0].task_id if pending else None,
    }


def get_task_insights(stats: Dict[str, int]) -> List[str]:
    """Generate short observations from task statistics."""
    insights: List[str] = []

    if stats.get("total", 0) == 0:
        insights.append("No background tasks recorded")
        return insights

    finished = stats.get("completed", 0) + stats.get("failed", 0)
    if finished:
        rate = stats.get("completed", 0) / finished
        insights.append(f"Success rate: {rate:.0%} of {finished} finished task(s)")

    if stats.get("running", 0):
        insights.append(f"{stats['running']} task(s) currently running")

    if stats.get("pending", 0) > HIGH_PENDING_TASKS_THRESHOLD:
        insights.append("Many tasks are waiting; consider a shorter executionDelay")

    if stats.get("cancelled", 0):
        insights.append(f"{stats['cancelled']} task(s) were cancelled")

    return insights
