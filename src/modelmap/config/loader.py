"""
Configuration file loading.

Loads ``config.yaml`` (and an optional ``config.<env>.yaml`` overlay) from a
project directory.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from modelmap.config.resolver import resolve_config
from modelmap.exceptions import ConfigurationError

DEFAULT_ACCEPTED_EXTENSIONS = (".xlsx", ".xls")


class Config:
    """modelmap configuration container with dict-like access."""

    def __init__(self, data: dict[str, Any]):
        self.data = data
        # Convenience properties for common config sections
        self.logging = data.get("logging", {}) if isinstance(data, dict) else {}
        self.ingestion = data.get("ingestion", {}) if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        value = self.data
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def __getitem__(self, key: str) -> Any:
        """Dict-like access: config['key'] or config['nested.key']."""
        if isinstance(key, str) and "." in key:
            return self.get(key)
        if key in self.data:
            value = self.data[key]
            # Nested dicts come back as Config objects for chaining
            if isinstance(value, dict):
                return Config(value)
            return value
        raise KeyError(f"Config key '{key}' not found")

    def __contains__(self, key: str) -> bool:
        if isinstance(key, str) and "." in key:
            value = self.data
            for k in key.split("."):
                if not isinstance(value, dict) or k not in value:
                    return False
                value = value[k]
            return True
        return key in self.data

    def __iter__(self) -> "Iterator[str]":
        return iter(self.data)

    def keys(self):
        return self.data.keys()

    def values(self):
        return self.data.values()

    def items(self):
        return self.data.items()

    @property
    def accepted_extensions(self) -> tuple[str, ...]:
        """Lower-cased file extensions the ingestion gate lets through."""
        extensions = self.get("ingestion.accepted_extensions") or DEFAULT_ACCEPTED_EXTENSIONS
        return tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions)

    def validate(self) -> None:
        """Validate configuration structure and content."""
        errors = []

        if not isinstance(self.data, dict):
            errors.append(f"Configuration must be a dictionary/mapping, got {type(self.data).__name__}")
            raise ConfigurationError("\n".join(errors))

        for section in ("logging", "ingestion"):
            value = self.data.get(section)
            if value is not None and not isinstance(value, dict):
                errors.append(f"Configuration '{section}' must be a dictionary, got {type(value).__name__}")

        extensions = self.get("ingestion.accepted_extensions")
        if extensions is not None:
            if not isinstance(extensions, list) or not all(isinstance(ext, str) and ext for ext in extensions):
                errors.append("Configuration 'ingestion.accepted_extensions' must be a list of non-empty strings")

        if errors:
            raise ConfigurationError("\n".join(errors), details={"errors": errors})


def load_config(project_path: Path | None = None, env: str | None = None) -> Config:
    """
    Load modelmap configuration.

    Args:
        project_path: Path to project root (default: current directory)
        env: Environment name (dev, staging, prod)

    Returns:
        Validated Config instance with merged configuration

    Raises:
        ConfigurationError: If config.yaml is missing, unreadable or invalid
    """
    if project_path is None:
        project_path = Path.cwd()

    base_config_path = project_path / "config.yaml"
    if not base_config_path.is_file():
        raise ConfigurationError(
            f"Configuration file not found: {base_config_path}\n"
            f"  Suggestion: Create a config.yaml file in your project root",
            details={"path": str(base_config_path)},
        )

    config_data = _read_yaml(base_config_path)

    if env:
        env_config_path = project_path / f"config.{env}.yaml"
        if env_config_path.exists():
            _merge_dict(config_data, _read_yaml(env_config_path))

    config_data = resolve_config(config_data, env or "dev")

    config = Config(config_data)
    config.validate()
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        if hasattr(e, "problem_mark"):
            mark = e.problem_mark
            raise ConfigurationError(
                f"Error parsing {path.name} at line {mark.line + 1}, column {mark.column + 1}:\n"
                f"  {e}\n"
                f"  File: {path}\n"
                f"  Suggestion: Check YAML syntax, ensure proper indentation and quotes",
                details={"path": str(path)},
            ) from e
        raise ConfigurationError(f"Error parsing {path.name}: {e}\n  File: {path}", details={"path": str(path)}) from e
    except OSError as e:
        raise ConfigurationError(f"Could not read {path}: {e}", details={"path": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration must be a dictionary/mapping, got {type(data).__name__}\n  File: {path}",
            details={"path": str(path)},
        )
    return data


def _merge_dict(base: dict, override: dict):
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value
