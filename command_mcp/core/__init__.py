"""
Core functionality for the Command MCP Server.

This package provides the allow-list gate, the command host abstraction,
background task scheduling, the command gateway, error handling, parameter
hints, and the tool dispatcher.
"""

from .error_handler import (
    enhance_error,
    error_enhancer,
    EnhancedError,
    ErrorEnhancer,
    ErrorCategory,
    CommandMCPError,
    CommandNotFoundError
)

from .validation import (
    CommandAllowList,
    validate_command_name
)

from .host import (
    CommandHost,
    CommandRegistryHost,
    WorkspaceFolder,
    WorkspaceInfo
)

from .notifications import Notifier

from .async_ops import (
    BackgroundTask,
    BackgroundTaskScheduler,
    TaskMonitor,
    TaskStatus,
    TaskStore
)

from .execution import (
    CommandGateway,
    ExecutionOutcome,
    ExecutionMode
)

from .dispatcher import (
    ToolDispatcher,
    DISPATCHER_TOOLS
)

__all__ = [
    # Error handling
    "enhance_error",
    "error_enhancer",
    "EnhancedError",
    "ErrorEnhancer",
    "ErrorCategory",
    "CommandMCPError",
    "CommandNotFoundError",

    # Validation
    "CommandAllowList",
    "validate_command_name",

    # Host
    "CommandHost",
    "CommandRegistryHost",
    "WorkspaceFolder",
    "WorkspaceInfo",
    "Notifier",

    # Background execution
    "BackgroundTask",
    "BackgroundTaskScheduler",
    "TaskMonitor",
    "TaskStatus",
    "TaskStore",

    # Gateway and dispatcher
    "CommandGateway",
    "ExecutionOutcome",
    "ExecutionMode",
    "ToolDispatcher",
    "DISPATCHER_TOOLS"
]
