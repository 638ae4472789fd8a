"""Application settings loader from YAML configuration."""
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass

from budgetrules.utils.exceptions import ConfigError

CONFIG_ENV_VAR = "BUDGETRULES_CONFIG"
DEFAULT_CONFIG_FILE = "budgetrules.yaml"


@dataclass
class AppSettings:
    """Application-wide settings loaded from budgetrules.yaml."""

    # App info
    app_name: str = "BudgetRules"
    app_version: str = "0.1.0"

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    log_max_file_size_mb: int = 10
    log_backup_count: int = 30

    # Rules
    rules_path: Optional[str] = None  # None = bundled example rules
    rules_strict: bool = True  # False = skip invalid rules with a warning

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None) -> "AppSettings":
        """
        Load settings from a YAML file.

        Lookup order: explicit path, $BUDGETRULES_CONFIG, ./budgetrules.yaml.
        Without any file the built-in defaults are returned.
        """
        if config_path is None:
            env_path = os.getenv(CONFIG_ENV_VAR)
            if env_path:
                config_path = env_path
            elif Path(DEFAULT_CONFIG_FILE).exists():
                config_path = DEFAULT_CONFIG_FILE
            else:
                return cls()

        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration must be a mapping: {config_path}")

        return cls.from_dict(config, base_dir=config_path.parent)

    @classmethod
    def from_dict(cls, config: Dict[str, Any], base_dir: Optional[Path] = None) -> "AppSettings":
        """Build settings from parsed YAML; missing keys keep their defaults."""
        defaults = cls()
        app = _section(config, "app")
        logging_cfg = _section(config, "logging")
        rules = _section(config, "rules")

        rules_path = _as_str(rules, "rules", "path", defaults.rules_path, optional=True)
        # Relative rule paths are resolved against the config file
        if rules_path and base_dir is not None and not Path(rules_path).is_absolute():
            rules_path = str(base_dir / rules_path)

        return cls(
            app_name=str(app.get("name", defaults.app_name)),
            app_version=str(app.get("version", defaults.app_version)),
            log_level=_as_str(logging_cfg, "logging", "level", defaults.log_level),
            log_dir=_as_str(logging_cfg, "logging", "dir", defaults.log_dir, optional=True),
            log_max_file_size_mb=_as_int(
                logging_cfg, "logging", "max_file_size_mb", defaults.log_max_file_size_mb
            ),
            log_backup_count=_as_int(logging_cfg, "logging", "backup_count", defaults.log_backup_count),
            rules_path=rules_path,
            rules_strict=_as_bool(rules, "rules", "strict", defaults.rules_strict)
        )

    def validate(self) -> tuple[bool, str]:
        """Validate settings values."""
        levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in levels:
            return False, f"Unknown log level: {self.log_level}"

        if self.log_max_file_size_mb < 1:
            return False, "Log file size must be at least 1 MB"

        if self.log_backup_count < 0:
            return False, "Log backup count cannot be negative"

        if self.rules_path and not Path(self.rules_path).exists():
            return False, f"Rule file not found: {self.rules_path}"

        return True, "Configuration is valid"


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Configuration section '{name}' must be a mapping")
    return section


def _as_str(
    section: Dict[str, Any],
    prefix: str,
    key: str,
    default: Optional[str],
    optional: bool = False
) -> Optional[str]:
    value = section.get(key, default)
    if value is None and optional:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{prefix}.{key} must be a string, got {value!r}")
    return value


def _as_int(section: Dict[str, Any], prefix: str, key: str, default: int) -> int:
    value = section.get(key, default)
    # YAML booleans are ints in Python
    if isinstance(value, bool):
        raise ConfigError(f"{prefix}.{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{prefix}.{key} must be an integer, got {value!r}") from None


def _as_bool(section: Dict[str, Any], prefix: str, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigError(f"{prefix}.{key} must be true or false, got {value!r}")
