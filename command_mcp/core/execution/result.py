"""
Execution outcome and context classes for the command gateway.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from command_mcp.core.error_handler import ErrorCategory


class ExecutionMode(Enum):
    """Execution mode enumeration."""
    SYNC = "sync"
    ASYNC = "async"


@dataclass
class ExecutionContext:
    """Context for a single command submission."""
    command: str
    arguments: List[Any] = field(default_factory=list)
    execution_delay: int = 0


@dataclass
class ExecutionOutcome:
    """
    Result of submitting a command to the gateway.

    A synchronous outcome carries ``result`` or ``error``; an asynchronous
    one carries the task handle (``task_id``) plus queue information.
    """
    success: bool
    command: str
    arguments: List[Any] = field(default_factory=list)
    execution_mode: ExecutionMode = ExecutionMode.SYNC

    # Synchronous result
    result: Any = None

    # Failure
    error: Optional[str] = None
    error_category: Optional[ErrorCategory] = None

    # Asynchronous handle
    task_id: Optional[str] = None
    message: Optional[str] = None
    queue_length: int = 0
    task_stats: Dict[str, int] = field(default_factory=dict)
    execution_delay: int = 0

    @property
    def is_async(self) -> bool:
        return self.execution_mode == ExecutionMode.ASYNC

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the uniform payload returned by execute_command."""
        data: Dict[str, Any] = {
            "success": self.success,
            "async": self.is_async,
            "command": self.command,
            "arguments": list(self.arguments),
        }

        if not self.success:
            data["error"] = self.error
            if self.error_category is not None:
                data["category"] = self.error_category.value
        elif self.is_async:
            data.update({
                "task_id": self.task_id,
                "message": self.message,
                "execution_delay": self.execution_delay,
                "queue_length": self.queue_length,
                "task_stats": dict(self.task_stats),
            })
        else:
            data["result"] = self.result

        return data


def create_success_result(context: ExecutionContext, result: Any) -> ExecutionOutcome:
    """Create a successful synchronous outcome."""
    return ExecutionOutcome(
        success=True,
        command=context.command,
        arguments=list(context.arguments),
        execution_mode=ExecutionMode.SYNC,
        result=result,
    )


def create_failure_result(
    context: ExecutionContext,
    error: str,
    category: ErrorCategory,
    execution_mode: ExecutionMode = ExecutionMode.SYNC,
) -> ExecutionOutcome:
    """Create a failed outcome."""
    return ExecutionOutcome(
        success=False,
        command=context.command,
        arguments=list(context.arguments),
        execution_mode=execution_mode,
        error=error,
        error_category=category,
    )
