"""
Configuration management: config.yaml loading, placeholder resolution, global config.
"""

from modelmap.config.loader import Config, load_config
from modelmap.config.resolver import resolve_config
from modelmap.config.singleton import GlobalConfig, get_config, set_config

__all__ = [
    "load_config",
    "Config",
    "resolve_config",
    "GlobalConfig",
    "get_config",
    "set_config",
]
