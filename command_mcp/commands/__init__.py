"""
Built-in commands for the Command MCP Server.
"""

from .builtin import (
    BUILTIN_COMMANDS,
    BuiltinCommandError,
    register_builtin_commands
)

__all__ = [
    "BUILTIN_COMMANDS",
    "BuiltinCommandError",
    "register_builtin_commands"
]
