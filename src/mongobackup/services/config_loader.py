"""Configuration loader for mongobackup."""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from mongobackup.constants import ENV_BUCKET, ENV_PASSWORD, ENV_USER
from mongobackup.errors import BackupError


class ConfigLoader:
    """Loads YAML configuration files and environment settings."""

    SUPPORTED_KEYS = {
        "host",
        "port",
        "database",
        "user",
        "bucket",
        "staging_dir",
        "upload_timeout_minutes",
        "verbose",
        "log_file",
        "dry_run",
    }

    ENVIRONMENT_KEYS = {
        "user": ENV_USER,
        "password": ENV_PASSWORD,
        "bucket": ENV_BUCKET,
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise BackupError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise BackupError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise BackupError("Config file must contain a YAML mapping at the root.")

        if "password" in parsed:
            raise BackupError(
                f"The MongoDB password cannot be stored in the config file. Use {ENV_PASSWORD}."
            )

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise BackupError(f"Unknown configuration keys: {unknown_list}")

        return parsed

    def load_environment(self, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Returns the environment-backed settings that are set and non-empty."""
        if environ is None:
            environ = os.environ

        values = {}
        for key, variable in self.ENVIRONMENT_KEYS.items():
            value = environ.get(variable, "")
            if value:
                values[key] = value
        return values
