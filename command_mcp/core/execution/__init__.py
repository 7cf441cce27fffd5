"""
Command execution package for the Command MCP Server.

The package is organized into focused modules:
- result.py: ExecutionContext, ExecutionOutcome and result factories
- strategies.py: synchronous and queued execution strategies
- executor.py: CommandGateway, the allow-list checked entry point
"""

from .result import (
    ExecutionContext,
    ExecutionMode,
    ExecutionOutcome,
    create_failure_result,
    create_success_result,
)
from .strategies import ExecutionStrategy, QueuedStrategy, SynchronousStrategy
from .executor import CommandGateway

__all__ = [
    "ExecutionContext",
    "ExecutionMode",
    "ExecutionOutcome",
    "create_failure_result",
    "create_success_result",
    "ExecutionStrategy",
    "QueuedStrategy",
    "SynchronousStrategy",
    "CommandGateway",
]
