"""
Execution strategies for the command gateway.

The gateway picks one strategy per submission: run the command on the
host and wait for it, or queue it as a background task and return at once.
"""
import logging
from abc import ABC, abstractmethod

from command_mcp.core.async_ops import TaskStore
from command_mcp.core.error_handler import ErrorCategory, describe_exception
from command_mcp.core.host import CommandHost

from .result import (
    ExecutionContext,
    ExecutionMode,
    ExecutionOutcome,
    create_failure_result,
    create_success_result,
)

logger = logging.getLogger(__name__)


class ExecutionStrategy(ABC):
    """Abstract base class for execution strategies."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> ExecutionOutcome:
        """
        Execute a command with this strategy.

        Args:
            context: Execution context with command and arguments

        Returns:
            ExecutionOutcome describing what happened
        """
        pass


class SynchronousStrategy(ExecutionStrategy):
    """
    Run the command on the host and wait for it.

    The caller is blocked for the full duration of the command.
    """

    def __init__(self, host: CommandHost):
        self.host = host

    def execute(self, context: ExecutionContext) -> ExecutionOutcome:
        logger.debug(f"Synchronous execution: {context.command}")
        try:
            result = self.host.execute(context.command, list(context.arguments))
        except Exception as e:
            error = describe_exception(e)
            logger.warning(f"Command '{context.command}' failed: {error}")
            return create_failure_result(context, error, ErrorCategory.HOST_EXECUTION_FAILURE)

        return create_success_result(context, result)


class QueuedStrategy(ExecutionStrategy):
    """Queue the command as a background task and return immediately."""

    def __init__(self, store: TaskStore):
        self.store = store

    def execute(self, context: ExecutionContext) -> ExecutionOutcome:
        task = self.store.add(context.command, context.arguments, context.execution_delay)
        stats = self.store.get_stats()

        message = f"Command '{context.command}' submitted for background execution"
        if context.execution_delay > 0:
            message += f", will run in {context.execution_delay}ms"

        return ExecutionOutcome(
            success=True,
            command=context.command,
            arguments=list(context.arguments),
            execution_mode=ExecutionMode.ASYNC,
            task_id=task.task_id,
            message=message,
            queue_length=stats["pending"] + stats["running"],
            task_stats=stats,
            execution_delay=context.execution_delay,
        )
