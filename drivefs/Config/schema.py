"""
Configuration schema for drivefs.

Defines all configurable options with metadata for validation
and documentation.
"""

from enum import Enum
from typing import Optional, List, Any
from dataclasses import dataclass


class ConfigType(Enum):
    """Configuration value types."""
    STRING = "string"
    SECRET = "secret"      # Masked in output, never logged
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    URL = "url"


class ConfigCategory(Enum):
    """Configuration categories for grouping."""
    API = "api"
    NETWORK = "network"
    RETRY = "retry"


@dataclass
class ConfigField:
    """Definition of a configuration field."""
    key: str
    description: str
    config_type: ConfigType
    category: ConfigCategory
    required: bool = False
    default: Any = None
    env_var: str = None          # Override env var name (defaults to key)
    validation: str = None       # Regex pattern
    sensitive: bool = False

    def __post_init__(self):
        if self.env_var is None:
            self.env_var = self.key
        if self.config_type == ConfigType.SECRET:
            self.sensitive = True


# ==================== Schema Definition ====================

CONFIG_SCHEMA: List[ConfigField] = [
    # === API ===
    ConfigField(
        key="DRIVE_API_URL",
        description="Base URL of the Drive REST API",
        config_type=ConfigType.URL,
        category=ConfigCategory.API,
        default="https://www.googleapis.com",
        validation=r"^https?://.*",
    ),
    ConfigField(
        key="DRIVE_ACCESS_TOKEN",
        description="OAuth bearer token used for Drive requests",
        config_type=ConfigType.SECRET,
        category=ConfigCategory.API,
        required=True,
    ),

    # === Network ===
    ConfigField(
        key="DRIVE_TIMEOUT",
        description="Per-request timeout in seconds",
        config_type=ConfigType.FLOAT,
        category=ConfigCategory.NETWORK,
        default=30.0,
    ),

    # === Retry ===
    ConfigField(
        key="DRIVE_MAX_API_REQUESTS",
        description="Maximum attempts for a rate-limited request",
        config_type=ConfigType.INTEGER,
        category=ConfigCategory.RETRY,
        default=7,
    ),
    ConfigField(
        key="DRIVE_INITIAL_DELAY_MS",
        description="Delay before the first retry, in milliseconds",
        config_type=ConfigType.FLOAT,
        category=ConfigCategory.RETRY,
        default=250.0,
    ),
    ConfigField(
        key="DRIVE_BACKOFF_FACTOR",
        description="Multiplier applied to the retry delay after each attempt",
        config_type=ConfigType.FLOAT,
        category=ConfigCategory.RETRY,
        default=2.0,
    ),
]


def get_schema_by_key(key: str) -> Optional[ConfigField]:
    """Get a schema field by its key."""
    for field in CONFIG_SCHEMA:
        if field.key == key:
            return field
    return None


def get_schema_by_category(category: ConfigCategory) -> List[ConfigField]:
    """Get all fields in a category."""
    return [f for f in CONFIG_SCHEMA if f.category == category]


def get_required_fields() -> List[ConfigField]:
    """Get all required fields."""
    return [f for f in CONFIG_SCHEMA if f.required]


def schema_to_dict() -> dict:
    """Export the schema grouped by category."""
    result = {}
    for category in ConfigCategory:
        fields = get_schema_by_category(category)
        result[category.value] = [
            {
                "key": f.key,
                "description": f.description,
                "type": f.config_type.value,
                "required": f.required,
                "default": None if f.sensitive else f.default,
                "env_var": f.env_var,
                "sensitive": f.sensitive,
            }
            for f in fields
        ]
    return result
