"""
Process-wide configuration installed by ``Contextizer.from_project``.

Logging auto-setup reads it to configure the ``contextizer`` logger the
first time a module asks for one, resolving relative log file paths
against the project the config was loaded from.
"""

import threading
from pathlib import Path

from contextizer.config.loader import Config


class GlobalConfig:
    """Global configuration and the project directory it came from."""

    _instance: Config | None = None
    _project_dir: Path | None = None
    _lock = threading.Lock()

    @classmethod
    def set_config(cls, config: Config, project_dir: Path | str | None = None):
        """Install ``config``; ``project_dir`` anchors relative paths in it."""
        with cls._lock:
            cls._instance = config
            cls._project_dir = Path(project_dir) if project_dir is not None else None

    @classmethod
    def get_config(cls) -> Config | None:
        return cls._instance

    @classmethod
    def get_project_dir(cls) -> Path | None:
        return cls._project_dir

    @classmethod
    def reset_config(cls):
        """Forget the installed config (for testing)."""
        with cls._lock:
            cls._instance = None
            cls._project_dir = None


def get_config() -> Config | None:
    """The installed Config, or None when no project was loaded."""
    return GlobalConfig.get_config()
