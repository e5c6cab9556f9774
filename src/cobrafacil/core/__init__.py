"""
Core module for CobraFácil Push.

Contains configuration and shared exceptions used across all modules.
"""

from cobrafacil.core.config import AppConfig, get_config, reload_config
from cobrafacil.core.exceptions import (
    CobraFacilError,
    InvalidSubscriptionError,
    VapidNotConfiguredError,
)

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "CobraFacilError",
    "InvalidSubscriptionError",
    "VapidNotConfiguredError",
]
