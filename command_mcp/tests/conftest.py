"""
Shared fixtures for the Command MCP tests.
"""
import threading
from typing import Any, Dict, List, Optional, Sequence

import pytest

from command_mcp.config import (
    ENV_ALLOWED_COMMANDS,
    ENV_ASYNC_EXECUTION,
    ENV_CONFIG_FILE,
    ENV_EXECUTION_DELAY,
    ENV_SHOW_NOTIFICATIONS,
    ExecutionSettings,
)
from command_mcp.core.async_ops import BackgroundTaskScheduler, TaskStore
from command_mcp.core.execution import CommandGateway
from command_mcp.core.host import CommandHost, WorkspaceInfo
from command_mcp.core.notifications import Notifier


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float):
        self.now += ms / 1000.0


class FakeCommandHost(CommandHost):
    """
    Command host with scripted commands.

    ``noop.success`` returns "ok", ``noop.fail`` raises, and ``noop.block``
    waits until ``release`` is set.
    """

    def __init__(self, commands: Optional[List[str]] = None):
        self.calls: List[tuple] = []
        self.release = threading.Event()
        self.started = threading.Event()
        self.workspace = WorkspaceInfo()
        self._lock = threading.Lock()
        self._commands = list(commands) if commands is not None else [
            "noop.success", "noop.fail", "noop.block"
        ]

    def execute(self, command: str, args: Sequence[Any]) -> Any:
        with self._lock:
            self.calls.append((command, list(args)))
        if command == "noop.fail":
            raise RuntimeError("boom")
        if command == "noop.block":
            self.started.set()
            self.release.wait(timeout=5.0)
            return "unblocked"
        return "ok"

    def get_commands(self) -> List[str]:
        return list(self._commands)

    def get_workspace_info(self) -> WorkspaceInfo:
        return self.workspace


class RecordingNotifier(Notifier):
    """Notifier that keeps every message."""

    def __init__(self):
        self.messages: Dict[str, List[str]] = {"info": [], "warning": [], "error": []}

    def info(self, message: str) -> None:
        self.messages["info"].append(message)

    def warning(self, message: str) -> None:
        self.messages["warning"].append(message)

    def error(self, message: str) -> None:
        self.messages["error"].append(message)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep the caller's COMMAND_MCP_* variables out of the tests."""
    for name in (ENV_CONFIG_FILE, ENV_ALLOWED_COMMANDS, ENV_ASYNC_EXECUTION,
                 ENV_EXECUTION_DELAY, ENV_SHOW_NOTIFICATIONS):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def host():
    fake = FakeCommandHost()
    yield fake
    fake.release.set()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store(clock):
    return TaskStore(clock=clock)


@pytest.fixture
def scheduler(store, host, notifier):
    sched = BackgroundTaskScheduler(store, host, notifier=notifier)
    yield sched
    host.release.set()
    sched.shutdown()


@pytest.fixture
def make_gateway(host, store, scheduler, notifier):
    """Factory building a gateway with the given settings."""

    def _make(**settings) -> CommandGateway:
        return CommandGateway(host, store, scheduler, settings=ExecutionSettings(**settings), notifier=notifier)

    return _make
