"""
Built-in commands for the in-process command host.

These give a stand-alone server something to run. Applications that embed
the server register their own commands next to (or instead of) these.
"""
import logging
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Union

from command_mcp.core.host import CommandRegistryHost

logger = logging.getLogger(__name__)

# Upper bound for host.sleep (in milliseconds)
MAX_SLEEP_MS = 60000


class BuiltinCommandError(Exception):
    """Raised by built-in commands on bad input."""


def echo(*args: Any) -> Union[Any, List[Any], None]:
    """Return the arguments: the single argument itself, or a list."""
    if not args:
        return None
    if len(args) == 1:
        return args[0]
    return list(args)


def sleep(duration_ms: Any = 1000) -> Dict[str, Any]:
    """Block for ``duration_ms`` milliseconds."""
    try:
        duration = int(duration_ms)
    except (TypeError, ValueError):
        raise BuiltinCommandError(f"Duration must be a number of milliseconds, got {duration_ms!r}")
    if duration < 0 or duration > MAX_SLEEP_MS:
        raise BuiltinCommandError(f"Duration must be between 0 and {MAX_SLEEP_MS}ms")

    time.sleep(duration / 1000.0)
    return {"slept_ms": duration}


def current_time() -> str:
    return datetime.now().isoformat()


def fail(message: str = "Command failed on request") -> None:
    """Always raise; useful for checking failure reporting."""
    raise BuiltinCommandError(message)


def list_folder(path: str = ".") -> List[Dict[str, Any]]:
    """List the entries of a directory, directories first."""
    folder = Path(path).expanduser()
    if not folder.is_dir():
        raise BuiltinCommandError(f"Not a directory: {folder}")

    entries = []
    with os.scandir(folder) as it:
        for entry in it:
            entries.append({"name": entry.name, "is_dir": entry.is_dir()})
    entries.sort(key=lambda e: (not e["is_dir"], e["name"]))
    return entries


BUILTIN_COMMANDS = {
    "host.echo": echo,
    "host.sleep": sleep,
    "host.time": current_time,
    "host.fail": fail,
    "workspace.listFolder": list_folder,
}


def register_builtin_commands(host: CommandRegistryHost) -> List[str]:
    """
    Register the built-in commands with a registry host.

    Returns:
        Names of the registered commands
    """
    for name, handler in BUILTIN_COMMANDS.items():
        host.register_command(name, handler)
    logger.debug(f"Registered {len(BUILTIN_COMMANDS)} built-in commands")
    return list(BUILTIN_COMMANDS)
