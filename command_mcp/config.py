"""
Centralized configuration for the Command MCP Server.

This module contains all configuration constants, defaults, and the
execution settings snapshot consumed by the command gateway, so the
values used throughout the application stay consistent.
"""
import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# ====================================================================
# SERVER SETTINGS
# ====================================================================

SERVER_NAME = "command-mcp"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
DEFAULT_TRANSPORT = "stdio"
SUPPORTED_TRANSPORTS = ("stdio", "http", "sse")

# Liveness endpoint served alongside the http/sse transports
HEALTH_PATH = "/health"

# ====================================================================
# SCHEDULER SETTINGS
# ====================================================================

# Pause before the tick thread retries after an unexpected error (in seconds)
SCHEDULER_ERROR_BACKOFF_SECONDS = 1.0

# Running longer than this is reported as stuck by the health report
STUCK_TASK_THRESHOLD_SECONDS = 300

# Health thresholds
LOW_SUCCESS_RATE_THRESHOLD = 0.5
WARNING_SUCCESS_RATE_THRESHOLD = 0.8
HIGH_PENDING_TASKS_THRESHOLD = 10

# ====================================================================
# COMMAND SETTINGS
# ====================================================================

# Longest command name accepted by the gateway
MAX_COMMAND_LENGTH = 256

# Number of command names returned by list_commands
COMMAND_PREVIEW_LIMIT = 20

# Trailing marker that turns an allow-list entry into a prefix pattern
WILDCARD_MARKER = "*"

# ====================================================================
# LOGGING CONFIGURATION
# ====================================================================

LOG_LEVEL = "INFO"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Debug mode settings
DEBUG_ENABLED = False
VERBOSE_LOGGING = False

# ====================================================================
# ENVIRONMENT VARIABLES
# ====================================================================

ENV_CONFIG_FILE = "COMMAND_MCP_CONFIG"
ENV_ALLOWED_COMMANDS = "COMMAND_MCP_ALLOWED_COMMANDS"
ENV_ASYNC_EXECUTION = "COMMAND_MCP_ASYNC_EXECUTION"
ENV_EXECUTION_DELAY = "COMMAND_MCP_EXECUTION_DELAY"
ENV_SHOW_NOTIFICATIONS = "COMMAND_MCP_SHOW_NOTIFICATIONS"


class ConfigurationError(ValueError):
    """Raised when a configuration value cannot be used."""


@dataclass(frozen=True)
class ExecutionSettings:
    """
    Immutable snapshot of the execution configuration.

    A new snapshot replaces the old one as a whole on refresh, so readers
    never observe a partially updated allow-list.
    """
    allowed_commands: Tuple[str, ...] = ()
    async_execution: bool = True
    execution_delay: int = 0
    show_completion_notifications: bool = False
    workspace_name: Optional[str] = None
    workspace_folders: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.execution_delay < 0:
            raise ConfigurationError(
                f"executionDelay must be >= 0, got {self.execution_delay}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to the dictionary shape reported to clients."""
        return {
            "allowed_commands": list(self.allowed_commands),
            "async_execution": self.async_execution,
            "execution_delay": self.execution_delay,
            "show_completion_notifications": self.show_completion_notifications,
            "workspace_name": self.workspace_name,
            "workspace_folders": list(self.workspace_folders),
        }


# Keys accepted in the JSON settings file
_FILE_KEYS = {
    "allowedCommands": "allowed_commands",
    "asyncExecution": "async_execution",
    "executionDelay": "execution_delay",
    "showCompletionNotifications": "show_completion_notifications",
    "workspaceName": "workspace_name",
    "workspaceFolders": "workspace_folders",
}


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _parse_delay(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        delay = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if delay < 0:
        raise ConfigurationError(f"{name} must be >= 0, got {delay}")
    return delay


def _parse_string_list(name: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"{name} must be a list of strings, got {value!r}")
    return tuple(value)


def settings_from_mapping(data: Dict[str, Any], base: ExecutionSettings = None) -> ExecutionSettings:
    """
    Build settings from a mapping using the settings-file key names.

    Args:
        data: Mapping with camelCase keys (``allowedCommands`` etc.)
        base: Settings providing values for keys missing from ``data``

    Returns:
        New ExecutionSettings snapshot
    """
    base = base or ExecutionSettings()
    changes: Dict[str, Any] = {}

    for key, value in data.items():
        attr = _FILE_KEYS.get(key)
        if attr is None:
            logger.debug(f"Ignoring unknown settings key: {key}")
            continue
        if attr in ("allowed_commands", "workspace_folders"):
            changes[attr] = _parse_string_list(key, value)
        elif attr in ("async_execution", "show_completion_notifications"):
            changes[attr] = _parse_bool(key, value)
        elif attr == "execution_delay":
            changes[attr] = _parse_delay(key, value)
        else:
            changes[attr] = value if value is None else str(value)

    return replace(base, **changes)


class ConfigurationSource:
    """
    Produces execution settings snapshots from a JSON file and environment.

    Precedence (lowest to highest): defaults, settings file, environment.
    The source is read on every call to ``snapshot()``; the core decides
    when to refresh.
    """

    def __init__(self, config_path: Optional[str] = None, environ: Dict[str, str] = None):
        self.config_path = config_path or os.environ.get(ENV_CONFIG_FILE) or None
        self._environ = environ if environ is not None else os.environ

    def snapshot(self) -> ExecutionSettings:
        """Read the current configuration into a new snapshot."""
        settings = ExecutionSettings()

        if self.config_path:
            settings = settings_from_mapping(self._read_file(), settings)

        env_values: Dict[str, Any] = {}
        if ENV_ALLOWED_COMMANDS in self._environ:
            env_values["allowedCommands"] = self._environ[ENV_ALLOWED_COMMANDS]
        if ENV_ASYNC_EXECUTION in self._environ:
            env_values["asyncExecution"] = self._environ[ENV_ASYNC_EXECUTION]
        if ENV_EXECUTION_DELAY in self._environ:
            env_values["executionDelay"] = self._environ[ENV_EXECUTION_DELAY]
        if ENV_SHOW_NOTIFICATIONS in self._environ:
            env_values["showCompletionNotifications"] = self._environ[ENV_SHOW_NOTIFICATIONS]

        if env_values:
            settings = settings_from_mapping(env_values, settings)

        logger.debug(f"Configuration snapshot: {settings.to_dict()}")
        return settings

    def _read_file(self) -> Dict[str, Any]:
        path = Path(self.config_path).expanduser()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Settings file not found: {path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Settings file {path} is not valid JSON: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {path} must contain a JSON object")
        return data


def get_workspace_folders(settings: ExecutionSettings) -> List[str]:
    """Return configured workspace folders, defaulting to the current directory."""
    if settings.workspace_folders:
        return [str(Path(folder).expanduser().resolve()) for folder in settings.workspace_folders]
    return [str(Path.cwd())]

# ====================================================================
# ENVIRONMENT DETECTION
# ====================================================================

def load_environment_config():
    """Load logging configuration from environment variables."""
    global DEBUG_ENABLED, VERBOSE_LOGGING, LOG_LEVEL

    DEBUG_ENABLED = os.environ.get("DEBUG", "false").lower() == "true"
    VERBOSE_LOGGING = os.environ.get("VERBOSE", "false").lower() == "true"

    if DEBUG_ENABLED:
        LOG_LEVEL = "DEBUG"
    elif VERBOSE_LOGGING:
        LOG_LEVEL = "INFO"
