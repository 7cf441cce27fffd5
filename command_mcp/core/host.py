"""
Command host abstraction for the Command MCP Server.

The command host is the application capability that actually runs a named
command. The server never inspects how a command is executed; it only
calls ``execute`` and reports what comes back.
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from command_mcp.core.error_handler import CommandNotFoundError

logger = logging.getLogger(__name__)

UNTITLED_WORKSPACE = "Untitled workspace"
NO_ACTIVE_EDITOR = "No active editor"


@dataclass
class WorkspaceFolder:
    """A folder that is part of the host workspace."""
    name: str
    uri: str

    @classmethod
    def from_path(cls, path: str) -> "WorkspaceFolder":
        resolved = Path(path).expanduser().resolve()
        return cls(name=resolved.name or str(resolved), uri=resolved.as_uri())


@dataclass
class WorkspaceInfo:
    """Read-only snapshot of the host workspace context."""
    name: Optional[str] = None
    folders: List[WorkspaceFolder] = field(default_factory=list)
    active_file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dictionary reported by get_workspace_info."""
        return {
            "name": self.name or UNTITLED_WORKSPACE,
            "folders": [{"name": f.name, "uri": f.uri} for f in self.folders],
            "active_file": self.active_file or NO_ACTIVE_EDITOR,
            "has_active_file": self.active_file is not None,
        }


class CommandHost(ABC):
    """Capability that executes named commands."""

    @abstractmethod
    def execute(self, command: str, args: Sequence[Any]) -> Any:
        """
        Execute a command.

        Args:
            command: Command name
            args: Positional arguments passed to the command

        Returns:
            Whatever the command returns

        Raises:
            Exception: Any error raised by the command
        """
        pass

    @abstractmethod
    def get_commands(self) -> List[str]:
        """Return all command names known to the host."""
        pass

    @abstractmethod
    def get_workspace_info(self) -> WorkspaceInfo:
        """Return the current workspace context."""
        pass


CommandHandler = Callable[..., Any]


class CommandRegistryHost(CommandHost):
    """
    In-process command host backed by a registry of Python callables.

    Handlers are called with the command arguments as positional
    parameters. Registration is thread-safe; handlers themselves may run
    concurrently on scheduler worker threads.
    """

    def __init__(self, workspace_name: Optional[str] = None, workspace_folders: Sequence[str] = ()):
        self._commands: Dict[str, CommandHandler] = {}
        self._lock = threading.Lock()
        self.workspace_name = workspace_name
        self.workspace_folders: List[str] = list(workspace_folders)
        self._active_file: Optional[str] = None

    def register_command(self, name: str, handler: CommandHandler) -> None:
        """Register (or replace) a command handler."""
        if not callable(handler):
            raise TypeError(f"Handler for '{name}' must be callable")
        with self._lock:
            if name in self._commands:
                logger.debug(f"Replacing handler for command: {name}")
            self._commands[name] = handler

    def unregister_command(self, name: str) -> bool:
        """Remove a command. Returns True if it was registered."""
        with self._lock:
            return self._commands.pop(name, None) is not None

    def has_command(self, name: str) -> bool:
        with self._lock:
            return name in self._commands

    def set_workspace(self, name: Optional[str], folders: Sequence[str]) -> None:
        """Replace the workspace name and folders reported by get_workspace_info."""
        self.workspace_name = name
        self.workspace_folders = list(folders)

    def set_active_file(self, path: Optional[str]) -> None:
        """Set the file reported as active by get_workspace_info."""
        self._active_file = path

    def execute(self, command: str, args: Sequence[Any]) -> Any:
        with self._lock:
            handler = self._commands.get(command)
        if handler is None:
            raise CommandNotFoundError(command)

        logger.debug(f"Host executing: {command} args={list(args)!r}")
        return handler(*args)

    def get_commands(self) -> List[str]:
        with self._lock:
            return list(self._commands)

    def get_workspace_info(self) -> WorkspaceInfo:
        return WorkspaceInfo(
            name=self.workspace_name,
            folders=[WorkspaceFolder.from_path(p) for p in self.workspace_folders],
            active_file=self._active_file,
        )
