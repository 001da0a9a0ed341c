"""
Runtime Configuration Module

Provides configuration loading for the HTTP facade.
"""

from .runtime import (
    DEFAULT_TIMEOUT_MS,
    ClientConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "ClientConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
