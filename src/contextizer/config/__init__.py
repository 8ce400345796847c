"""
Configuration management.

Configuration file parsing, environment resolution and the global config.
"""

from contextizer.config.loader import Config, load_config
from contextizer.config.resolver import resolve_config
from contextizer.config.singleton import GlobalConfig, get_config

__all__ = [
    "load_config",
    "Config",
    "resolve_config",
    "GlobalConfig",
    "get_config",
]
