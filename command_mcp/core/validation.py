"""
Command allow-list validation for the Command MCP Server.

This module decides which command names may be executed. An allow-list
entry is either an exact command name or a prefix pattern ending in the
wildcard marker (``editor.*``).

An EMPTY allow-list permits every command. This fail-open posture is
intentional and is exercised by the tests; configure at least one entry to
restrict execution.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from command_mcp.config import MAX_COMMAND_LENGTH, WILDCARD_MARKER

logger = logging.getLogger(__name__)


class CommandAllowList:
    """Immutable allow-list snapshot."""

    def __init__(self, patterns: Sequence[str] = ()):
        self._patterns: Tuple[str, ...] = tuple(patterns)
        self._exact = frozenset(p for p in self._patterns if not p.endswith(WILDCARD_MARKER))
        self._prefixes: Tuple[str, ...] = tuple(
            p[:-len(WILDCARD_MARKER)] for p in self._patterns if p.endswith(WILDCARD_MARKER)
        )

    @property
    def patterns(self) -> Tuple[str, ...]:
        return self._patterns

    @property
    def is_empty(self) -> bool:
        return not self._patterns

    def is_allowed(self, command: str) -> bool:
        """
        Check whether a command may be executed.

        Args:
            command: Command name to check

        Returns:
            True if the allow-list is empty, the command matches an exact
            entry, or it starts with the prefix of a wildcard entry
        """
        if not self._patterns:
            return True

        if command in self._exact:
            return True

        return any(command.startswith(prefix) for prefix in self._prefixes)

    def filter(self, commands: Iterable[str]) -> List[str]:
        """Return the allowed commands, preserving input order."""
        if not self._patterns:
            return list(commands)
        return [command for command in commands if self.is_allowed(command)]

    def __len__(self) -> int:
        return len(self._patterns)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CommandAllowList):
            return NotImplemented
        return self._patterns == other._patterns

    def __repr__(self) -> str:
        return f"CommandAllowList({list(self._patterns)!r})"


def validate_command_name(command: str) -> Tuple[bool, Optional[str]]:
    """
    Validate the shape of a command name.

    Args:
        command: The command name to validate

    Returns:
        Tuple of (is_valid, error_message) where error_message is None
        if the name is valid
    """
    if not isinstance(command, str):
        return False, f"Command must be a string, got {type(command).__name__}"

    if not command or not command.strip():
        return False, "Empty command"

    if len(command) > MAX_COMMAND_LENGTH:
        return False, f"Command too long ({len(command)} chars, max {MAX_COMMAND_LENGTH})"

    return True, None
