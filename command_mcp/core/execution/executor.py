"""
Command gateway for the Command MCP Server.

This module provides the CommandGateway class, the single entry point for
command submission. It checks the allow-list, then either runs the command
synchronously on the host or queues it for the background scheduler,
depending on the current execution settings.
"""
import logging
import threading
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from command_mcp.config import ExecutionSettings
from command_mcp.core.async_ops import BackgroundTask, BackgroundTaskScheduler, TaskStatus, TaskStore
from command_mcp.core.error_handler import ErrorCategory, describe_exception, enhance_error
from command_mcp.core.host import CommandHost
from command_mcp.core.notifications import Notifier
from command_mcp.core.validation import CommandAllowList

from .result import ExecutionContext, ExecutionOutcome, create_failure_result
from .strategies import QueuedStrategy, SynchronousStrategy

logger = logging.getLogger(__name__)


class _GatewayConfig(NamedTuple):
    settings: ExecutionSettings
    allow_list: CommandAllowList


class CommandGateway:
    """
    Routes command submissions to synchronous or background execution.

    Settings and the allow-list built from them are held as one pair and
    swapped in a single assignment, so a submission sees either the old or
    the new configuration, never a mix. Queueing and the refresh purge are
    serialized, so no task is queued under a configuration that has
    already been purged.
    """

    def __init__(
        self,
        host: CommandHost,
        store: TaskStore,
        scheduler: BackgroundTaskScheduler,
        settings: ExecutionSettings = None,
        notifier: Notifier = None,
    ):
        self.host = host
        self.store = store
        self.scheduler = scheduler
        self.notifier = notifier or Notifier()

        self._sync_strategy = SynchronousStrategy(host)
        self._queued_strategy = QueuedStrategy(store)

        settings = settings or ExecutionSettings()
        self._config = _GatewayConfig(settings, CommandAllowList(settings.allowed_commands))
        self._config_lock = threading.Lock()
        self.scheduler.show_completion_notifications = settings.show_completion_notifications

        logger.info(f"Command gateway initialized: async_execution={settings.async_execution}, "
                    f"execution_delay={settings.execution_delay}ms, "
                    f"allowed_commands={len(self._config.allow_list)}")

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def settings(self) -> ExecutionSettings:
        return self._config.settings

    @property
    def allow_list(self) -> CommandAllowList:
        return self._config.allow_list

    @property
    def allowed_commands(self) -> List[str]:
        return list(self._config.allow_list.patterns)

    @property
    def async_execution(self) -> bool:
        return self._config.settings.async_execution

    @property
    def execution_delay(self) -> int:
        return self._config.settings.execution_delay

    def is_allowed(self, command: str) -> bool:
        return self._config.allow_list.is_allowed(command)

    def apply_settings(self, settings: ExecutionSettings) -> Dict[str, Any]:
        """
        Apply a refreshed configuration snapshot.

        If async execution is now disabled, every pending task is cancelled
        and removed. Otherwise, pending tasks the new allow-list rejects are
        cancelled and removed. Either way the operator gets one warning.
        Running tasks are never touched.

        Returns:
            Summary with the number of purged tasks
        """
        new_config = _GatewayConfig(settings, CommandAllowList(settings.allowed_commands))

        purged: List[BackgroundTask] = []
        with self._config_lock:
            old = self._config
            self._config = new_config
            self.scheduler.show_completion_notifications = settings.show_completion_notifications

            if not settings.async_execution:
                purged = self.store.purge_pending()
            elif new_config.allow_list != old.allow_list:
                purged = self.store.purge_pending(
                    lambda task: not new_config.allow_list.is_allowed(task.command)
                )

        logger.info(f"Execution config updated: "
                    f"async_execution={old.settings.async_execution}->{settings.async_execution}, "
                    f"execution_delay={old.settings.execution_delay}->{settings.execution_delay}")

        if purged and not settings.async_execution:
            self.notifier.warning(
                f"Async execution disabled, cleared {len(purged)} pending task(s)"
            )
        elif purged:
            self.notifier.warning(
                f"Allowed commands changed, cleared {len(purged)} pending task(s) "
                f"that are no longer allowed"
            )

        return {
            "settings": settings.to_dict(),
            "purged_tasks": [task.task_id for task in purged],
        }

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(self, command: str, arguments: Optional[Sequence[Any]] = None) -> ExecutionOutcome:
        """
        Submit a command for execution.

        Args:
            command: Command name
            arguments: Positional arguments for the command

        Returns:
            ExecutionOutcome: an immediate result or error when async
            execution is disabled, a task handle when it is enabled, or a
            not-allowed failure
        """
        with self._config_lock:
            settings, allow_list = self._config

            context = ExecutionContext(
                command=command,
                arguments=list(arguments or []),
                execution_delay=settings.execution_delay,
            )

            if not allow_list.is_allowed(command):
                logger.warning(f"Rejected command not in allow-list: {command}")
                error = enhance_error("not_allowed", command=command)
                return create_failure_result(context, error.message, ErrorCategory.NOT_ALLOWED)

            # No refresh purge runs between this check and the add
            if settings.async_execution:
                return self._queued_strategy.execute(context)

        return self._sync_strategy.execute(context)

    # ------------------------------------------------------------------
    # Command discovery
    # ------------------------------------------------------------------

    def get_available_commands(self) -> List[str]:
        """Host commands permitted by the allow-list, sorted."""
        commands = self.host.get_commands()
        return sorted(self._config.allow_list.filter(commands))

    def get_command_info(self, command: str) -> Dict[str, Any]:
        """Report whether a command exists on the host and is allowed."""
        try:
            exists = command in self.host.get_commands()
        except Exception as e:
            return {
                "command": command,
                "exists": False,
                "allowed": False,
                "error": describe_exception(e),
            }
        return {
            "command": command,
            "exists": exists,
            "allowed": self.is_allowed(command),
        }

    # ------------------------------------------------------------------
    # Task query surface
    # ------------------------------------------------------------------

    def get_task(self, task_id: str) -> Optional[BackgroundTask]:
        return self.store.get(task_id)

    def get_all_tasks(self) -> List[BackgroundTask]:
        return self.store.all()

    def get_tasks_by_status(self, status: TaskStatus) -> List[BackgroundTask]:
        return self.store.by_status(status)

    def get_stats(self) -> Dict[str, int]:
        return self.store.get_stats()

    def cancel(self, task_id: str) -> bool:
        """Best-effort cancellation; a running command is not interrupted."""
        return self.store.cancel(task_id)

    def clear_completed(self) -> int:
        return self.store.clear_completed()

    def clear_all(self) -> int:
        return self.store.clear_all()
