"""
Configuration file loading.

Load and parse contextizer.yaml files.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from contextizer.config.resolver import resolve_config
from contextizer.exceptions import ConfigurationError

CONFIG_FILENAME = "contextizer.yaml"

# Accepted values for engine.cached_failures
CACHED_FAILURE_POLICIES = ("pin", "evict")


class Config:
    """Contextizer configuration container with dict-like access."""

    def __init__(self, data: dict[str, Any]):
        self.data = data
        # Convenience properties for common config sections
        sections = data if isinstance(data, dict) else {}
        self.engine = sections.get("engine") or {}
        self.logging = sections.get("logging") or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.data
        for k in keys:
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
            if key not in self:
                raise KeyError(f"Config key '{key}' not found")
            return self.get(key)
        if key in self.data:
            value = self.data[key]
            # Return nested dicts as Config objects for chaining
            if isinstance(value, dict):
                return Config(value)
            return value
        raise KeyError(f"Config key '{key}' not found")

    def __contains__(self, key: str) -> bool:
        """Check if key exists in config."""
        if isinstance(key, str) and "." in key:
            value = self.data
            for k in key.split("."):
                if not isinstance(value, dict) or k not in value:
                    return False
                value = value[k]
            return True
        return key in self.data

    def __iter__(self) -> Iterator[str]:
        """Iterate over top-level keys."""
        return iter(self.data)

    def keys(self):
        """Get top-level keys."""
        return self.data.keys()

    def items(self):
        """Get top-level items."""
        return self.data.items()

    def validate(self) -> None:
        """Validate configuration structure and content."""
        if not isinstance(self.data, dict):
            raise ConfigurationError(
                f"Configuration must be a dictionary/mapping, got {type(self.data).__name__}"
            )

        errors = []
        for section in ("engine", "logging"):
            value = self.data.get(section)
            if value is not None and not isinstance(value, dict):
                errors.append(f"Configuration '{section}' must be a dictionary, got {type(value).__name__}")

        policy = self.get("engine.cached_failures", "pin")
        if policy not in CACHED_FAILURE_POLICIES:
            errors.append(
                f"Configuration 'engine.cached_failures' must be one of {', '.join(CACHED_FAILURE_POLICIES)}, "
                f"got {policy!r}"
            )

        if errors:
            raise ConfigurationError("\n".join(errors), details={"errors": errors})


def load_config(project_path: Path | None = None, env: str | None = None) -> Config:
    """
    Load Contextizer configuration.

    Loads contextizer.yaml and contextizer.{env}.yaml, then resolves
    ${VAR} and {env} placeholders.

    Args:
        project_path: Path to project root (default: current directory)
        env: Environment name (dev, staging, prod)

    Returns:
        Validated Config instance with merged configuration
    """
    if project_path is None:
        project_path = Path.cwd()
    project_path = Path(project_path)

    base_config_path = project_path / CONFIG_FILENAME
    if not base_config_path.is_file():
        raise FileNotFoundError(
            f"Configuration file not found: {base_config_path}\n"
            f"  Suggestion: Create a {CONFIG_FILENAME} file in your project root"
        )

    config_data = _read_yaml(base_config_path)

    if env:
        env_config_path = project_path / f"contextizer.{env}.yaml"
        if env_config_path.is_file():
            # Env overrides base
            _merge_dict(config_data, _read_yaml(env_config_path))

    config = Config(resolve_config(config_data, env or "dev"))
    config.validate()
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    """Parse one YAML file, reporting the position of syntax errors."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                raise ConfigurationError(
                    f"Error parsing {path.name} at line {mark.line + 1}, column {mark.column + 1}:\n"
                    f"  {e}\n"
                    f"  File: {path}",
                    details={"file": str(path)},
                ) from e
            raise ConfigurationError(f"Error parsing {path.name}: {e}", details={"file": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{path.name} must contain a mapping, got {type(data).__name__}", details={"file": str(path)}
        )
    return data


def _merge_dict(base: dict, override: dict):
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value
