"""
Background execution package for the Command MCP Server.

The package is organized into focused modules:
- task_store.py: BackgroundTask, TaskStatus and the in-memory TaskStore
- task_manager.py: BackgroundTaskScheduler, the tick loop and per-task worker threads
- monitoring.py: TaskMonitor health reports
"""

from .task_store import BackgroundTask, TaskStatus, TaskStore, TERMINAL_STATUSES
from .task_manager import BackgroundTaskScheduler
from .monitoring import TaskMonitor

__all__ = [
    "BackgroundTask",
    "TaskStatus",
    "TaskStore",
    "TERMINAL_STATUSES",
    "BackgroundTaskScheduler",
    "TaskMonitor",
]
