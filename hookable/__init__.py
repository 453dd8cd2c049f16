"""
hookable - named, priority-ordered callback registry with filter and action dispatch.
"""

__version__ = "0.1.0"

from hookable.config import ConfigManager, LoggingConfig, RegistryConfig
from hookable.context import MutableContext
from hookable.exceptions import (
    ConfigError,
    HookableError,
    InvalidCallableError,
    InvalidHookNameError,
    InvalidPriorityError,
    PluginError,
)
from hookable.logger import get_logger, setup_logging
from hookable.registry import (
    ALL_PRIORITIES,
    NOT_GIVEN,
    CallStatus,
    Hookable,
    Registration,
    create_registry,
    sanitize_hook_name,
)

__all__ = [
    "ALL_PRIORITIES",
    "NOT_GIVEN",
    "CallStatus",
    "ConfigError",
    "ConfigManager",
    "HookableError",
    "Hookable",
    "InvalidCallableError",
    "InvalidHookNameError",
    "InvalidPriorityError",
    "LoggingConfig",
    "MutableContext",
    "PluginError",
    "Registration",
    "RegistryConfig",
    "create_registry",
    "get_logger",
    "sanitize_hook_name",
    "setup_logging",
]
