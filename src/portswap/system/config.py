"""
System configuration for portswap.

One configuration for the whole process, loaded from YAML:

    logging:
      level: INFO
      format: console
    account:
      margin: false
      non_taxable: false

Lookup order for the file: explicit path, then $PORTSWAP_CONFIG, then
./portswap.yaml. Missing files and missing keys fall back to the defaults
below. String values may reference environment variables as ${VAR}.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from portswap.system.log_system import LoggingConfig as LoggerConfig

CONFIG_ENV_VAR = "PORTSWAP_CONFIG"
DEFAULT_CONFIG_PATH = Path("portswap.yaml")

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


@dataclass
class LoggingConfig:
    """Logging section of the system configuration."""

    level: str = "INFO"
    format: str = "console"
    timestamp_format: str = "compact"
    enable_file: bool = False
    file_path: str = "logs/portswap.log"
    file_level: str = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the log system's LoggingConfig model."""
        return LoggerConfig(
            level=self.level,  # type: ignore[arg-type]
            format=self.format,  # type: ignore[arg-type]
            timestamp_format=self.timestamp_format,  # type: ignore[arg-type]
            enable_file=self.enable_file,
            file_path=Path(self.file_path),
            file_level=self.file_level,  # type: ignore[arg-type]
            file_rotation=self.file_rotation,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
        )


@dataclass
class AccountConfig:
    """Defaults for accounts created with Account.from_config()."""

    margin: bool = False
    non_taxable: bool = False


@dataclass
class SystemConfig:
    """Complete system configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    account: AccountConfig = field(default_factory=AccountConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load configuration from YAML, merged over the defaults.

        Args:
            path: Config file. If None, uses $PORTSWAP_CONFIG or ./portswap.yaml.

        Returns:
            SystemConfig (defaults only if the file does not exist)

        Raises:
            yaml.YAMLError: If the file is not valid YAML
            ValueError: If the file does not contain a mapping
        """
        if path is None:
            path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
        path = Path(path)

        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}

        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

        merged = _deep_merge(cls._defaults(), _substitute_env_vars(loaded))
        return cls._from_dict(merged)

    @staticmethod
    def _defaults() -> dict[str, Any]:
        defaults = SystemConfig()
        return {
            "logging": dict(vars(defaults.logging)),
            "account": dict(vars(defaults.account)),
        }

    @classmethod
    def _from_dict(cls, config: dict[str, Any]) -> "SystemConfig":
        """Build SystemConfig from a dict, using defaults for missing keys."""
        return cls(
            logging=LoggingConfig(**(config.get("logging") or {})),
            account=AccountConfig(**(config.get("account") or {})),
        )


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base; override wins on conflict."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Replace ${VAR} in strings (recursively); undefined variables keep the placeholder."""
    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    return value


_system_config: SystemConfig | None = None


def get_system_config(path: Path | str | None = None) -> SystemConfig:
    """
    Get the system configuration singleton.

    Args:
        path: Config file used on first load (ignored once cached)
    """
    global _system_config
    if _system_config is None:
        _system_config = SystemConfig.load(path)
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Discard the cached configuration and load it again."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
