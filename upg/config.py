"""Shared constants and the environment-profile configuration loader."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_UPG_VERSION = "0.1.0"

MIN_SEED = 1
MAX_SEED = 2**53 - 1

PROJECT_NAME_ADJECTIVES: tuple[str, ...] = (
    "swift", "quick", "rapid", "nimble", "agile", "bright", "clever", "sharp",
)
PROJECT_NAME_NOUNS: tuple[str, ...] = (
    "api", "app", "service", "hub", "core", "base", "kit", "lab",
)

# All known configuration keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "UPG_ENV": {"default": "development", "description": "Environment profile"},
    "UPG_LOG_LEVEL": {"default": "INFO", "description": "Logging level for the upg logger"},
    "UPG_ENRICH_DEPTH": {"default": "standard", "description": "Enrichment depth (minimal|standard|full)"},
    "UPG_VERSION": {"default": DEFAULT_UPG_VERSION, "description": "Version stamped into project metadata"},
    "UPG_DEFAULT_SEED": {"default": "", "description": "Seed used when none is given (empty = required)"},
}

_PROFILES: dict[str, dict[str, str]] = {
    "development": {
        "UPG_ENV": "development",
        "UPG_LOG_LEVEL": "DEBUG",
    },
    "production": {
        "UPG_ENV": "production",
        "UPG_LOG_LEVEL": "WARNING",
    },
    "testing": {
        "UPG_ENV": "testing",
        "UPG_LOG_LEVEL": "DEBUG",
        "UPG_ENRICH_DEPTH": "minimal",
    },
}


class ConfigManager:
    """Load generator settings across environments.

    Parameters
    ----------
    project_path:
        Directory holding an optional ``.upg/config.json``.  ``None`` skips
        the file layer entirely.
    """

    def __init__(self, project_path: str | Path | None = None) -> None:
        self._root = Path(project_path) if project_path is not None else None

    def generate_env_template(self, project_path: str | Path) -> Path:
        """Create .env.example with all config keys.

        Returns the path to the generated file.
        """
        env_path = Path(project_path) / ".env.example"

        lines = ["# UPG Configuration Template", "# Copy to .env and fill in values", ""]
        for key, info in _CONFIG_KEYS.items():
            lines.append(f"# {info['description']}")
            lines.append(f"{key}={info['default']}")
            lines.append("")

        env_path.write_text("\n".join(lines), encoding="utf-8")
        return env_path

    def load_config(self) -> dict[str, str]:
        """Load merged config: defaults -> profile -> config.json -> env vars."""
        config: dict[str, str] = {}

        # 1. Defaults
        for key, info in _CONFIG_KEYS.items():
            config[key] = str(info["default"])

        # 2. Profile overrides
        env_name = os.environ.get("UPG_ENV", config["UPG_ENV"])
        profile = _PROFILES.get(env_name)
        if profile is None:
            logger.warning("Unknown UPG_ENV profile %r; using defaults", env_name)
        else:
            config.update(profile)

        # 3. .upg/config.json
        if self._root is not None:
            config_json = self._root / ".upg" / "config.json"
            if config_json.is_file():
                try:
                    data = json.loads(config_json.read_text(encoding="utf-8"))
                    for k, v in data.items():
                        config[k] = str(v)
                except (json.JSONDecodeError, OSError):
                    logger.debug("Could not read config.json", exc_info=True)

        # 4. Environment variables override all
        for key in _CONFIG_KEYS:
            env_val = os.environ.get(key)
            if env_val is not None:
                config[key] = env_val

        return config


def configure_logging(level: str | int) -> None:
    """Set the level of the ``upg`` logger only.  Handlers are left alone."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            logger.warning("Unknown log level %r; leaving logger unchanged", level)
            return
        level = resolved
    logging.getLogger("upg").setLevel(level)
