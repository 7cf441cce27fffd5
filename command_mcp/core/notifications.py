"""
Operator notifications.

The scheduler and gateway report noteworthy events (task completion,
task failure, purged tasks) through a Notifier. The default implementation
writes to the logging system; host applications can route messages to
their own UI instead.
"""
import logging

logger = logging.getLogger("command_mcp.notifications")


class Notifier:
    """Routes operator-facing messages to the log."""

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)

    def error(self, message: str) -> None:
        logger.error(message)
