"""Configuration management for nexplore."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_THEME = "nexplore-tokyo-night"
DEFAULT_LOG_LEVEL = "WARNING"


def get_nexplore_dir() -> Path:
    """Get the nexplore data directory."""
    if env_dir := os.environ.get("NEXPLORE_DIR"):
        return Path(env_dir)
    return Path.home() / ".nexplore"


def get_config_path() -> Path:
    return get_nexplore_dir() / "config.json"


@dataclass
class Config:
    """nexplore configuration."""

    theme: str = DEFAULT_THEME
    keys: dict[str, str] = field(default_factory=dict)
    log_file: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file, falling back to defaults."""
        config_path = get_config_path()
        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                keys = data.get("keys") or {}
                if not isinstance(keys, dict):
                    logger.warning("ignoring non-object 'keys' in %s", config_path)
                    keys = {}
                return cls(
                    theme=data.get("theme", DEFAULT_THEME),
                    keys={str(k): str(v) for k, v in keys.items()},
                    log_file=data.get("logFile"),
                    log_level=str(data.get("logLevel", DEFAULT_LOG_LEVEL)).upper(),
                )
            except (json.JSONDecodeError, AttributeError, IOError) as e:
                logger.warning("ignoring unreadable config %s: %s", config_path, e)
        return cls()

    def save(self) -> None:
        """Save configuration to file."""
        config_path = get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        data: dict = {
            "theme": self.theme,
            "keys": self.keys,
            "logLevel": self.log_level,
        }
        if self.log_file:
            data["logFile"] = self.log_file
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
