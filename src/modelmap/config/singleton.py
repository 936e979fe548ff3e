"""
Global configuration singleton.

Holds the configuration loaded for the current process so loggers and
sessions created later pick it up without threading it through every call.
"""

import threading

from modelmap.config.loader import Config


class GlobalConfig:
    """Global configuration singleton manager."""

    _instance: Config | None = None
    _lock = threading.Lock()

    @classmethod
    def set_config(cls, config: Config):
        with cls._lock:
            cls._instance = config

    @classmethod
    def get_config(cls) -> Config | None:
        return cls._instance

    @classmethod
    def reset_config(cls):
        """Reset the global config instance (for testing)."""
        with cls._lock:
            cls._instance = None


def get_config() -> Config | None:
    """Get the global Config instance, or None if none was set."""
    return GlobalConfig.get_config()


def set_config(config: Config) -> None:
    GlobalConfig.set_config(config)

