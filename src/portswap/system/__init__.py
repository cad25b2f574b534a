"""
System configuration package.

Exports:
    - SystemConfig: Complete system configuration dataclass
    - AccountConfig: Defaults for new accounts
    - get_system_config: Get system config singleton
    - reload_system_config: Force reload system config
    - LoggerFactory: Factory for creating configured loggers
    - LoggingConfig: Logging configuration model
"""

from portswap.system.log_system import LoggerFactory, LoggingConfig
from portswap.system.config import AccountConfig, SystemConfig, get_system_config, reload_system_config

__all__ = [
    "SystemConfig",
    "AccountConfig",
    "get_system_config",
    "reload_system_config",
    "LoggerFactory",
    "LoggingConfig",
]
