"""
portswap - Brokerage account position sets

Validated, thread-safe actual and desired positions with exact arithmetic,
the input to a rebalancing decision.
"""

from importlib.metadata import version
from pathlib import Path

from portswap.portfolio import CASH_SYMBOL, Account, AccountState, Position, PortfolioError, SecurityType
from portswap.system import LoggerFactory, SystemConfig, reload_system_config

try:
    __version__ = version("portfolio-swap")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


def configure(path: Path | str | None = None) -> SystemConfig:
    """
    Load system configuration and apply its logging section.

    Call once at application startup.

    Args:
        path: Config file. If None, uses $PORTSWAP_CONFIG or ./portswap.yaml.
    """
    config = reload_system_config(path)
    LoggerFactory.configure(config.logging.to_logger_config())
    return config


__all__ = [
    "__version__",
    "configure",
    "Account",
    "AccountState",
    "Position",
    "SecurityType",
    "CASH_SYMBOL",
    "PortfolioError",
]
