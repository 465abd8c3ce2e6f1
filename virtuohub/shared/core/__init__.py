"""
Shared Core Module
==================

Event system, background tasks, configuration and service registry.
"""

# Event System
from .event_bus import EventBus, EventPayload
from .tasks import BackgroundTasks
from . import events

# Service Registry
from .service_registry import register_cleanup_handler, run_cleanup_handlers

# Configuration
from .configuration import (
    ConfigManager,
    SystemConfig,
    get_config_manager,
    get_config,
    validate_critical_config,
    ValidationLevel,
)

__all__ = [
    # Event System
    "EventBus",
    "EventPayload",
    "BackgroundTasks",
    "events",
    # Service Registry
    "register_cleanup_handler",
    "run_cleanup_handlers",
    # Configuration
    "ConfigManager",
    "SystemConfig",
    "get_config_manager",
    "get_config",
    "validate_critical_config",
    "ValidationLevel",
]
