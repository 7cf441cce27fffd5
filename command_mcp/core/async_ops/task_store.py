"""
In-memory registry of background command tasks.

The TaskStore owns every BackgroundTask and performs all lifecycle
transitions under a single lock. The lock guards map operations only and
is never held while a command runs.
"""
import logging
import threading
import time
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class TaskStatus(Enum):
    """Status of background tasks."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.CANCELLED})


def _iso(timestamp: Optional[float]) -> Optional[str]:
    return datetime.fromtimestamp(timestamp).isoformat() if timestamp is not None else None


@dataclass
class BackgroundTask:
    """Represents one deferred command execution."""
    task_id: str
    command: str
    arguments: Tuple[Any, ...]
    delay_ms: int
    status: TaskStatus
    created_at: float
    sequence: int
    started_at: Optional[float] = None
    completed_at: Optional[float] = None
    result: Any = None
    error: Optional[str] = None

    def is_due(self, now: float) -> bool:
        """True once ``delay_ms`` has elapsed since creation."""
        return (now - self.created_at) * 1000.0 >= self.delay_ms

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        """Convert task to dictionary for MCP responses."""
        data = {
            "task_id": self.task_id,
            "command": self.command,
            "arguments": list(self.arguments),
            "delay_ms": self.delay_ms,
            "status": self.status.value,
            "created_at": _iso(self.created_at),
            "started_at": _iso(self.started_at),
            "completed_at": _iso(self.completed_at),
        }
        if self.status == TaskStatus.COMPLETED:
            data["result"] = self.result
        if self.status == TaskStatus.FAILED:
            data["error"] = self.error
        if self.started_at is not None and self.completed_at is not None:
            data["execution_time"] = self.completed_at - self.started_at
        return data


class TaskStore:
    """
    Thread-safe mapping of task id to BackgroundTask.

    Reads return copies, so callers never observe a task mid-transition.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._tasks: Dict[str, BackgroundTask] = {}
        self._task_counter = 0
        self._lock = threading.Lock()
        self._listeners: List[Callable[[], None]] = []

    def now(self) -> float:
        return self._clock()

    def subscribe(self, listener: Callable[[], None]) -> None:
        """Call ``listener`` (with no arguments) after every new task."""
        self._listeners.append(listener)

    def add(self, command: str, arguments: Sequence[Any] = (), delay_ms: int = 0) -> BackgroundTask:
        """
        Create a pending task.

        Args:
            command: Command name to execute
            arguments: Positional arguments for the command
            delay_ms: Milliseconds that must pass before execution

        Returns:
            Copy of the created task
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")

        with self._lock:
            self._task_counter += 1
            created_at = self._clock()
            task = BackgroundTask(
                task_id=f"bg_task_{self._task_counter}_{int(created_at * 1000)}",
                command=command,
                arguments=tuple(arguments or ()),
                delay_ms=int(delay_ms),
                status=TaskStatus.PENDING,
                created_at=created_at,
                sequence=self._task_counter,
            )
            self._tasks[task.task_id] = task
            total = len(self._tasks)

        logger.info(f"Background task submitted: {task.task_id} - {command}, delay: {delay_ms}ms")
        logger.debug(f"Total tasks in store: {total}")
        for listener in list(self._listeners):
            listener()
        return replace(task)

    def get(self, task_id: str) -> Optional[BackgroundTask]:
        with self._lock:
            task = self._tasks.get(task_id)
            return replace(task) if task else None

    def contains(self, task_id: str) -> bool:
        with self._lock:
            return task_id in self._tasks

    def all(self) -> List[BackgroundTask]:
        with self._lock:
            return [replace(t) for t in self._tasks.values()]

    def by_status(self, status: TaskStatus) -> List[BackgroundTask]:
        with self._lock:
            return [replace(t) for t in self._tasks.values() if t.status == status]

    def pending_in_order(self) -> List[BackgroundTask]:
        """Pending tasks, oldest first; creation order breaks ties."""
        tasks = self.by_status(TaskStatus.PENDING)
        tasks.sort(key=lambda t: (t.created_at, t.sequence))
        return tasks

    def next_due_at(self) -> Optional[float]:
        """Earliest time at which a pending task becomes due, or None."""
        with self._lock:
            due = [t.created_at + t.delay_ms / 1000.0
                   for t in self._tasks.values() if t.status == TaskStatus.PENDING]
        return min(due) if due else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def claim(self, task_id: str) -> Optional[BackgroundTask]:
        """
        Move a pending task to running.

        Returns:
            Copy of the claimed task, or None if the task is gone or no
            longer pending
        """
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None or task.status != TaskStatus.PENDING:
                return None
            task.status = TaskStatus.RUNNING
            task.started_at = self._clock()
            return replace(task)

    def complete(self, task_id: str, result: Any) -> Optional[BackgroundTask]:
        """Record a successful result; no-op unless the task is still running."""
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None or task.status != TaskStatus.RUNNING:
                return None
            task.status = TaskStatus.COMPLETED
            task.completed_at = self._clock()
            task.result = result
            return replace(task)

    def fail(self, task_id: str, error: str) -> Optional[BackgroundTask]:
        """Record a failure; no-op unless the task is still running."""
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None or task.status != TaskStatus.RUNNING:
                return None
            task.status = TaskStatus.FAILED
            task.completed_at = self._clock()
            task.error = error
            return replace(task)

    def cancel(self, task_id: str) -> bool:
        """Mark a pending or running task cancelled."""
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None or task.status not in (TaskStatus.PENDING, TaskStatus.RUNNING):
                return False
            task.status = TaskStatus.CANCELLED
            task.completed_at = self._clock()

        logger.info(f"Background task cancelled: {task_id}")
        return True

    def purge_pending(self, predicate: Callable[[BackgroundTask], bool] = None) -> List[BackgroundTask]:
        """
        Cancel and remove pending tasks in one step.

        Args:
            predicate: Only purge pending tasks for which this returns True

        Returns:
            The purged tasks, marked cancelled
        """
        purged = []
        with self._lock:
            for task_id, task in list(self._tasks.items()):
                if task.status != TaskStatus.PENDING:
                    continue
                if predicate is not None and not predicate(task):
                    continue
                task.status = TaskStatus.CANCELLED
                task.completed_at = self._clock()
                purged.append(self._tasks.pop(task_id))
        return purged

    def clear_completed(self) -> int:
        """Remove completed, failed and cancelled tasks."""
        with self._lock:
            finished = [tid for tid, t in self._tasks.items() if t.is_terminal]
            for task_id in finished:
                del self._tasks[task_id]

        logger.info(f"Cleared {len(finished)} completed background tasks")
        return len(finished)

    def clear_all(self) -> int:
        """Remove every task regardless of status."""
        with self._lock:
            count = len(self._tasks)
            self._tasks.clear()

        logger.info(f"Cleared all {count} background tasks")
        return count

    def get_stats(self) -> Dict[str, int]:
        """Count tasks per status. The per-status counts sum to ``total``."""
        with self._lock:
            statuses = [t.status for t in self._tasks.values()]

        stats = {"total": len(statuses)}
        for status in TaskStatus:
            stats[status.value] = sum(1 for s in statuses if s == status)
        return stats
