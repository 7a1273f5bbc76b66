"""
drivefs Configuration Manager.

Centralized configuration with:
- Schema-driven validation
- Environment variable fallback
- Persistent JSON storage
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from drivefs.shared.gate import GateLogger

_log = GateLogger.get("Config")

from drivefs.Config.schema import (
    CONFIG_SCHEMA,
    ConfigField,
    ConfigType,
    ConfigCategory,
    get_schema_by_key,
    get_required_fields,
    schema_to_dict,
)


# Config file paths
PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = PROJECT_ROOT / ".env"
CONFIG_JSON = PROJECT_ROOT / "data" / "config.json"


class ConfigManager:
    """
    Manages drivefs configuration.

    Priority order:
    1. Environment variables
    2. config.json
    3. Schema defaults
    """

    def __init__(self, env_file: Optional[Path] = None, config_json: Optional[Path] = None):
        self.env_file = Path(env_file) if env_file else ENV_FILE
        self.config_json = Path(config_json) if config_json else CONFIG_JSON
        self._cache: Dict[str, Any] = {}
        self._loaded = False
        self._load()

    def _load(self):
        """Load configuration from all sources."""
        load_dotenv(self.env_file)

        json_config = {}
        if self.config_json.exists():
            try:
                with open(self.config_json, encoding="utf-8") as f:
                    json_config = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                _log.warning(f"Ignoring unreadable config file {self.config_json}: {e}")

        for field in CONFIG_SCHEMA:
            # Priority: env var > json config > default
            value = os.environ.get(field.env_var)

            if value is None and field.key in json_config:
                value = json_config[field.key]

            if value is None:
                value = field.default

            self._cache[field.key] = self._convert(value, field)

        self._loaded = True

    def _convert(self, value: Any, field: ConfigField) -> Any:
        """Convert a raw value for a field, falling back to its default."""
        try:
            return self._convert_type(value, field.config_type)
        except (ValueError, TypeError):
            shown = "***" if field.sensitive else repr(value)
            _log.warning(f"Invalid value {shown} for {field.key}; using default {field.default!r}")
            return field.default

    def _convert_type(self, value: Any, config_type: ConfigType) -> Any:
        """Convert value to appropriate type."""
        if value is None:
            return None

        if config_type == ConfigType.INTEGER:
            return int(value)
        elif config_type == ConfigType.FLOAT:
            return float(value)
        elif config_type == ConfigType.BOOLEAN:
            if isinstance(value, bool):
                return value
            return str(value).lower() in ("true", "1", "yes", "on")
        else:
            return str(value) if value else None

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        if not self._loaded:
            self._load()
        value = self._cache.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any, persist: bool = True) -> bool:
        """
        Set a configuration value.

        Args:
            key: Config key
            value: New value
            persist: Whether to save to config.json

        Returns:
            True if successful
        """
        field = get_schema_by_key(key)
        if not field:
            return False

        self._cache[key] = self._convert(value, field)

        if persist:
            self._save_json()

        return True

    def _save_json(self):
        """Save non-secret, non-default values to JSON."""
        to_save = {}
        for field in CONFIG_SCHEMA:
            value = self._cache.get(field.key)
            # Secrets stay in the environment / .env
            if field.sensitive:
                continue
            if value == field.default or value is None:
                continue
            to_save[field.key] = value

        self.config_json.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_json, "w", encoding="utf-8") as f:
            json.dump(to_save, f, indent=2)

    def get_all(self, include_secrets: bool = False) -> Dict[str, Any]:
        """Get all configuration values."""
        result = {}
        for field in CONFIG_SCHEMA:
            value = self._cache.get(field.key)
            if field.sensitive and not include_secrets:
                if value:
                    str_value = str(value)
                    if len(str_value) > 12:
                        result[field.key] = "***" + str_value[-4:]
                    else:
                        result[field.key] = "****"
                else:
                    result[field.key] = None
            else:
                result[field.key] = value
        return result

    def get_status(self) -> Dict[str, Any]:
        """Get configuration status with missing/invalid checks."""
        missing = []
        invalid = []
        configured = []

        for field in CONFIG_SCHEMA:
            value = self._cache.get(field.key)

            if value is None or value == "":
                if field.required:
                    missing.append({
                        "key": field.key,
                        "description": field.description,
                        "category": field.category.value,
                    })
            elif field.validation and not re.match(field.validation, str(value)):
                invalid.append({
                    "key": field.key,
                    "value": "***" if field.sensitive else value,
                    "pattern": field.validation,
                })
            else:
                configured.append(field.key)

        return {
            "status": "ok" if not missing else "incomplete",
            "missing": missing,
            "invalid": invalid,
            "configured_count": len(configured),
            "total_count": len(CONFIG_SCHEMA),
        }

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate configuration.

        Returns:
            (is_valid, list of error messages)
        """
        errors = []

        for field in CONFIG_SCHEMA:
            value = self._cache.get(field.key)

            if field.required and (value is None or value == ""):
                errors.append(f"Required config missing: {field.key}")
                continue

            if value and field.validation and not re.match(field.validation, str(value)):
                errors.append(f"Invalid format for {field.key}")

        return len(errors) == 0, errors


# Global instance
_manager: Optional[ConfigManager] = None


def get_manager() -> ConfigManager:
    """Get or create the global ConfigManager."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager


def reload():
    """Reload configuration from files."""
    global _manager
    _manager = ConfigManager()


# Convenience functions
def get(key: str, default: Any = None) -> Any:
    """Get a config value."""
    return get_manager().get(key, default)


def set(key: str, value: Any, persist: bool = True) -> bool:
    """Set a config value."""
    return get_manager().set(key, value, persist)


def get_status() -> Dict[str, Any]:
    """Get configuration status."""
    return get_manager().get_status()


def validate() -> Tuple[bool, List[str]]:
    """Validate the current configuration."""
    return get_manager().validate()


__all__ = [
    "ConfigManager",
    "ConfigField",
    "ConfigType",
    "ConfigCategory",
    "CONFIG_SCHEMA",
    "get_manager",
    "reload",
    "get",
    "set",
    "get_status",
    "validate",
    "get_required_fields",
    "schema_to_dict",
]
