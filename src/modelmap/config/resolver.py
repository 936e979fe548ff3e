"""
Placeholder expansion for loaded configuration.

Two kinds of placeholder are recognised inside string values:

- ``${NAME}`` is replaced by the environment variable ``NAME``; when it is
  unset the placeholder stays in the text so the problem is visible later.
- ``{env}`` is replaced by the active environment name (``dev``, ``prod``...).

Mappings and lists are walked recursively. Other scalars pass through.
"""

import os
import re
from typing import Any

_ENV_VAR = re.compile(r"\$\{([^}]+)\}")
ENV_PLACEHOLDER = "{env}"


def _expand(text: str, env: str) -> str:
    text = _ENV_VAR.sub(lambda match: os.environ.get(match.group(1), match.group(0)), text)
    return text.replace(ENV_PLACEHOLDER, env)


def resolve_config(config_data: dict[str, Any], env: str = "dev") -> dict[str, Any]:
    """Return a copy of ``config_data`` with every placeholder expanded for ``env``."""
    return _resolve(config_data, env)


def _resolve(value: Any, env: str) -> Any:
    if isinstance(value, str):
        return _expand(value, env)
    if isinstance(value, dict):
        return {key: _resolve(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve(item, env) for item in value]
    return value
