"""
Background task scheduling for host commands.

This module provides the BackgroundTaskScheduler that scans the TaskStore,
starts a worker thread for each due task, and records its outcome. The tick thread
sleeps until the earliest pending task is due and is woken early whenever a
new task is added, so an idle scheduler does no work.
Execution is fire-and-forget: a tick never waits for a command to finish,
so several tasks can be running at once. There is no cap on concurrent
commands; a host call that never returns occupies only its own thread.

Cancellation is best-effort. Cancelling a running task only changes its
recorded status; the command already handed to the host keeps running and
its outcome is discarded.
"""
import logging
import threading
from concurrent.futures import Future, wait
from typing import Dict, List, Optional

from command_mcp.config import SCHEDULER_ERROR_BACKOFF_SECONDS
from command_mcp.core.error_handler import describe_exception
from command_mcp.core.host import CommandHost
from command_mcp.core.notifications import Notifier

from .task_store import BackgroundTask, TaskStatus, TaskStore

logger = logging.getLogger(__name__)


class BackgroundTaskScheduler:
    """Runs pending tasks from a TaskStore once their delay has elapsed."""

    def __init__(
        self,
        store: TaskStore,
        host: CommandHost,
        notifier: Notifier = None,
        show_completion_notifications: bool = False,
    ):
        self.store = store
        self.host = host
        self.notifier = notifier or Notifier()
        self.show_completion_notifications = show_completion_notifications

        self.running_tasks: Dict[str, Future] = {}
        self._running_lock = threading.Lock()
        self._tick_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._shut_down = False

        store.subscribe(self.wake)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the tick thread if not already running."""
        if self._shut_down:
            raise RuntimeError("Scheduler has been shut down")
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._tick_loop,
            daemon=True,
            name="TaskScheduler"
        )
        self._thread.start()
        logger.info("Background task processor started")

    def stop(self) -> None:
        """Stop ticking. Tasks in the store are kept."""
        self._stop_event.set()
        self._wake_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=5.0)
        self._thread = None
        logger.info("Background task processor stopped")

    def shutdown(self) -> None:
        """
        Stop ticking and drop every task.

        Commands still running on the host are not waited for; when they
        finish, their outcome is discarded because the task is gone.
        """
        self.stop()
        self.store.clear_all()
        self._shut_down = True
        with self._running_lock:
            self.running_tasks.clear()

    def tick(self) -> List[str]:
        """
        Run one scan of the store.

        Pending tasks are visited oldest first. Each task whose delay has
        elapsed is claimed (pending -> running) and handed to its own worker
        thread. A tick that starts while another is in progress does nothing.

        Returns:
            Ids of the dispatched tasks, in dispatch order
        """
        if not self._tick_lock.acquire(blocking=False):
            logger.debug("Skipping tick: previous tick still in progress")
            return []

        try:
            if self._shut_down:
                return []

            pending = self.store.pending_in_order()
            if pending:
                logger.debug(f"Processing {len(pending)} pending tasks")

            dispatched = []
            for task in pending:
                now = self.store.now()
                if not task.is_due(now):
                    continue

                claimed = self.store.claim(task.task_id)
                if claimed is None:
                    # Cancelled or purged since the scan
                    continue

                self._dispatch(claimed)
                dispatched.append(claimed.task_id)

            return dispatched
        finally:
            self._tick_lock.release()

    def drain(self, timeout: float = None) -> bool:
        """
        Wait for dispatched commands to finish.

        Returns:
            True if nothing is left in flight
        """
        with self._running_lock:
            futures = list(self.running_tasks.values())
        if not futures:
            return True
        _, not_done = wait(futures, timeout=timeout)
        return not not_done

    def in_flight_count(self) -> int:
        with self._running_lock:
            return len(self.running_tasks)

    def wake(self) -> None:
        """Make the tick thread rescan the store now."""
        self._wake_event.set()

    def _next_wait(self) -> Optional[float]:
        """Seconds until the earliest pending task is due; None when idle."""
        due_at = self.store.next_due_at()
        if due_at is None:
            return None
        return max(0.0, due_at - self.store.now())

    def _tick_loop(self):
        while not self._stop_event.is_set():
            # Cleared before the scan so a task added mid-tick still wakes us
            self._wake_event.clear()
            try:
                self.tick()
                timeout = self._next_wait()
            except Exception as e:
                logger.error(f"Error in task processor: {e}")
                timeout = SCHEDULER_ERROR_BACKOFF_SECONDS
            self._wake_event.wait(timeout)

    def _dispatch(self, task: BackgroundTask):
        logger.debug(f"Executing background task: {task.task_id} - {task.command}")
        future: Future = Future()
        with self._running_lock:
            self.running_tasks[task.task_id] = future
        future.add_done_callback(lambda f, task_id=task.task_id: self._forget(task_id))

        worker = threading.Thread(
            target=self._worker,
            args=(task, future),
            daemon=True,
            name=f"CommandTask-{task.task_id}"
        )
        try:
            worker.start()
        except RuntimeError as e:
            self.store.fail(task.task_id, describe_exception(e))
            future.set_result(None)

    def _forget(self, task_id: str):
        with self._running_lock:
            self.running_tasks.pop(task_id, None)

    def _worker(self, task: BackgroundTask, future: Future):
        try:
            self._run_command(task)
        finally:
            future.set_result(None)

    def _run_command(self, task: BackgroundTask):
        current = self.store.get(task.task_id)
        if current is None or current.status != TaskStatus.RUNNING:
            logger.debug(f"Skipping {task.task_id}: task cancelled or cleared before it started")
            return

        try:
            result = self.host.execute(task.command, list(task.arguments))
        except Exception as e:
            self._task_failed(task, describe_exception(e))
            return
        self._task_completed(task, result)

    def _task_completed(self, task: BackgroundTask, result):
        updated = self.store.complete(task.task_id, result)
        if updated is None:
            logger.debug(f"Discarding result of {task.task_id}: task cancelled or cleared")
            return

        logger.info(f"Background task completed: {task.task_id}")
        if self.show_completion_notifications:
            self.notifier.info(f"{task.command} done")

    def _task_failed(self, task: BackgroundTask, error: str):
        updated = self.store.fail(task.task_id, error)
        if updated is None:
            logger.debug(f"Discarding failure of {task.task_id}: task cancelled or cleared")
            return

        logger.warning(f"Background task failed: {task.task_id} - {error}")
        self.notifier.error(f"Background task failed: {task.command} - {error}")
