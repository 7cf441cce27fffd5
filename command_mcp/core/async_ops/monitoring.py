"""
Health reporting for background tasks.

This module provides the TaskMonitor class that turns the task store's
contents into a health assessment. Commands that never return leave their
task running forever; the report lists such stuck tasks so an operator can
notice them.
"""
import logging
from typing import Any, Dict, List

from command_mcp.config import (
    HIGH_PENDING_TASKS_THRESHOLD,
    LOW_SUCCESS_RATE_THRESHOLD,
    STUCK_TASK_THRESHOLD_SECONDS,
    WARNING_SUCCESS_RATE_THRESHOLD,
)

from .task_store import TaskStatus, TaskStore

logger = logging.getLogger(__name__)


class TaskMonitor:
    """Builds health reports for a TaskStore."""

    def __init__(self, store: TaskStore, stuck_threshold_seconds: float = STUCK_TASK_THRESHOLD_SECONDS):
        self.store = store
        self.stuck_threshold_seconds = stuck_threshold_seconds

    def get_report(self) -> Dict[str, Any]:
        """Get a health report for the current task population."""
        stats = self.store.get_stats()
        finished = stats["completed"] + stats["failed"]
        success_rate = stats["completed"] / finished if finished else 1.0

        stuck = self.find_stuck_tasks()
        health = self._assess_health(stats, success_rate, stuck)

        return {
            "statistics": stats,
            "success_rate": success_rate,
            "stuck_tasks": stuck,
            "health_assessment": health,
            "recommendations": self._get_recommendations(stats, health, stuck),
        }

    def find_stuck_tasks(self) -> List[Dict[str, Any]]:
        """Running tasks older than the stuck threshold."""
        now = self.store.now()
        stuck = []
        for task in self.store.by_status(TaskStatus.RUNNING):
            running_for = now - (task.started_at or task.created_at)
            if running_for >= self.stuck_threshold_seconds:
                stuck.append({
                    "task_id": task.task_id,
                    "command": task.command,
                    "running_for_seconds": round(running_for, 3),
                })
        if stuck:
            logger.warning(f"{len(stuck)} background task(s) running longer than "
                           f"{self.stuck_threshold_seconds}s")
        return stuck

    def _assess_health(self, stats: Dict[str, int], success_rate: float,
                       stuck: List[Dict[str, Any]]) -> Dict[str, Any]:
        health = {
            "overall": "healthy",
            "issues": [],
            "warnings": []
        }

        if success_rate < LOW_SUCCESS_RATE_THRESHOLD:
            health["issues"].append(f"Low success rate (< {LOW_SUCCESS_RATE_THRESHOLD:.0%})")
            health["overall"] = "unhealthy"
        elif success_rate < WARNING_SUCCESS_RATE_THRESHOLD:
            health["warnings"].append(f"Moderate success rate (< {WARNING_SUCCESS_RATE_THRESHOLD:.0%})")

        if stuck:
            health["issues"].append(f"{len(stuck)} task(s) appear stuck in running state")
            health["overall"] = "unhealthy"

        if stats["pending"] > HIGH_PENDING_TASKS_THRESHOLD:
            health["warnings"].append(f"High pending task count (> {HIGH_PENDING_TASKS_THRESHOLD})")

        if health["overall"] == "healthy" and health["warnings"]:
            health["overall"] = "warning"

        return health

    def _get_recommendations(self, stats: Dict[str, int], health: Dict[str, Any],
                             stuck: List[Dict[str, Any]]) -> List[str]:
        recommendations = []

        if stuck:
            recommendations.append("Stuck commands cannot be interrupted; restart the host "
                                   "application if they hold resources")
        if stats["failed"] > 0:
            recommendations.append("Inspect failed tasks with background_tasks(action='list')")
        if stats["completed"] + stats["failed"] + stats["cancelled"] > 50:
            recommendations.append("Run background_tasks(action='clear_completed') to drop finished tasks")
        if not recommendations and health["overall"] == "healthy":
            recommendations.append("No specific recommendations at this time")

        return recommendations
