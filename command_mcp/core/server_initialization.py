"""
Server initialization module for the Command MCP Server.

Builds the command subsystem (settings, host, task store, scheduler,
gateway, dispatcher) and logs a summary of what was configured.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from command_mcp.config import (
    ConfigurationSource,
    ExecutionSettings,
    get_workspace_folders,
)
from command_mcp.core.async_ops import BackgroundTaskScheduler, TaskMonitor, TaskStore
from command_mcp.core.dispatcher import ToolDispatcher
from command_mcp.core.execution import CommandGateway
from command_mcp.core.host import CommandHost, CommandRegistryHost
from command_mcp.core.notifications import Notifier

logger = logging.getLogger(__name__)


@dataclass
class InitializationConfig:
    """Configuration for server initialization."""
    config_path: Optional[str] = None
    register_builtin_commands: bool = True
    start_scheduler: bool = True


@dataclass
class ServerComponents:
    """The wired command subsystem."""
    config_source: ConfigurationSource
    settings: ExecutionSettings
    host: CommandHost
    store: TaskStore
    scheduler: BackgroundTaskScheduler
    gateway: CommandGateway
    dispatcher: ToolDispatcher
    monitor: TaskMonitor
    notifier: Notifier = field(default_factory=Notifier)

    def reload_configuration(self):
        """
        Re-read the configuration source and apply the new snapshot.

        The workspace name and folders are pushed to a CommandRegistryHost;
        any other host owns its workspace and is left alone.
        """
        self.settings = self.config_source.snapshot()
        if isinstance(self.host, CommandRegistryHost):
            self.host.set_workspace(self.settings.workspace_name, get_workspace_folders(self.settings))
        return self.gateway.apply_settings(self.settings)

    def shutdown(self):
        self.scheduler.shutdown()


class ServerInitializer:
    """Handles the initialization sequence for the Command MCP Server."""

    def __init__(self, config: Optional[InitializationConfig] = None):
        self.config = config or InitializationConfig()

    def initialize(
        self,
        host: Optional[CommandHost] = None,
        notifier: Optional[Notifier] = None,
        config_source: Optional[ConfigurationSource] = None,
    ) -> ServerComponents:
        """
        Build the command subsystem.

        Args:
            host: Command host to use; a CommandRegistryHost is created
                when omitted
            notifier: Operator notification sink
            config_source: Source of execution settings

        Returns:
            ServerComponents with every part wired together
        """
        logger.info("Starting Command MCP Server initialization")

        config_source = config_source or ConfigurationSource(self.config.config_path)
        settings = config_source.snapshot()
        notifier = notifier or Notifier()

        if host is None:
            host = self._create_default_host(settings)

        store = TaskStore()
        scheduler = BackgroundTaskScheduler(store, host, notifier=notifier)
        gateway = CommandGateway(host, store, scheduler, settings=settings, notifier=notifier)
        dispatcher = ToolDispatcher(gateway, host)
        monitor = TaskMonitor(store)

        if self.config.start_scheduler:
            scheduler.start()

        components = ServerComponents(
            config_source=config_source,
            settings=settings,
            host=host,
            store=store,
            scheduler=scheduler,
            gateway=gateway,
            dispatcher=dispatcher,
            monitor=monitor,
            notifier=notifier,
        )
        self._log_summary(components)
        logger.info("Server initialization completed successfully")
        return components

    def _create_default_host(self, settings: ExecutionSettings) -> CommandRegistryHost:
        host = CommandRegistryHost(
            workspace_name=settings.workspace_name,
            workspace_folders=get_workspace_folders(settings),
        )
        if self.config.register_builtin_commands:
            from command_mcp.commands import register_builtin_commands
            register_builtin_commands(host)
        return host

    def _log_summary(self, components: ServerComponents):
        settings = components.settings
        logger.info("Execution configuration summary:")
        if settings.allowed_commands:
            logger.info(f"  - Allowed commands: {', '.join(settings.allowed_commands)}")
        else:
            logger.info("  - Allowed commands: all commands allowed (empty allow-list)")
        logger.info(f"  - Async execution: {'enabled' if settings.async_execution else 'disabled'}")
        logger.info(f"  - Execution delay: {settings.execution_delay}ms")
        logger.info(f"  - Completion notifications: {settings.show_completion_notifications}")
        logger.info(f"  - Host commands: {len(components.host.get_commands())}")
