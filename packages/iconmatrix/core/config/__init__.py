"""Configuration management for iconmatrix."""

from iconmatrix.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
)
from iconmatrix.core.config.models import (
    AppConfig,
    LayoutConfig,
    LoggingConfig,
    PriorityConfig,
)

__all__ = [
    # Loaders
    "detect_format",
    "load_config",
    "load_app_config",
    "configure_logging",
    # Models
    "AppConfig",
    "LayoutConfig",
    "LoggingConfig",
    "PriorityConfig",
]
