"""
Placeholder substitution for loaded configuration.

String values may reference environment variables and the active
environment name:

- ``${VAR}``            value of VAR; left as written when VAR is unset
- ``${VAR:-fallback}``  value of VAR, or ``fallback`` when VAR is unset or empty
- ``{env}``             the environment passed to ``load_config`` (default ``dev``)
"""

import os
import re
from typing import Any

_ENV_VAR = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def resolve_config(config_data: dict[str, Any], env: str = "dev") -> dict[str, Any]:
    """
    Return a copy of ``config_data`` with every placeholder substituted.

    Args:
        config_data: Parsed configuration
        env: Current environment name

    Returns:
        Resolved configuration; non-string values are kept as they are
    """
    return _resolve_value(config_data, env)


def _substitute(match: re.Match) -> str:
    name, fallback = match.group(1), match.group(2)
    value = os.environ.get(name)
    if fallback is not None:
        return value or fallback
    return match.group(0) if value is None else value


def _resolve_value(value: Any, env: str) -> Any:
    if isinstance(value, dict):
        return {k: _resolve_value(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_value(item, env) for item in value]
    if isinstance(value, str):
        return _ENV_VAR.sub(_substitute, value).replace("{env}", env)
    return value
