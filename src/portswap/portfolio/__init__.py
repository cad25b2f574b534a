"""Validated, thread-safe actual/desired position sets for one account.

Key components:
- Account: Lock-protected container for both position sets
- IAccount: Protocol interface
- Models: Position, SecurityType, ValidationMode, AccountState
- Errors: PortfolioError hierarchy (identity, magnitude, aggregate)

Example:
    >>> from decimal import Decimal
    >>> from portswap.portfolio import Account, Position
    >>>
    >>> account = Account(margin=False, non_taxable=True)
    >>> account.set_desired([
    ...     Position(symbol="AAA", percentage=Decimal("40")),
    ...     Position(symbol="BBB", percentage=Decimal("60")),
    ... ])
    >>> account.set_price_from_text("AAA", "1.50")
    >>> account.desired()["AAA"].price
    Decimal('1.50')
"""

from portswap.portfolio.account import Account
from portswap.portfolio.errors import (
    AggregateError,
    BadPercentageError,
    BadPriceError,
    BadSecurityTypeError,
    BadShareCountError,
    BadSymbolError,
    DuplicateSymbolError,
    IdentityError,
    MagnitudeError,
    PercentageOverflowError,
    PercentageUnderflowError,
    PortfolioError,
    SymbolNotFoundError,
)
from portswap.portfolio.interface import IAccount
from portswap.portfolio.models import (
    CASH_SYMBOL,
    AccountState,
    Position,
    SecurityType,
    ValidationMode,
    parse_price,
    validate_position,
)

__all__ = [
    # Account
    "IAccount",
    "Account",
    # Models
    "CASH_SYMBOL",
    "SecurityType",
    "ValidationMode",
    "Position",
    "AccountState",
    "validate_position",
    "parse_price",
    # Errors
    "PortfolioError",
    "IdentityError",
    "MagnitudeError",
    "AggregateError",
    "BadSymbolError",
    "BadSecurityTypeError",
    "DuplicateSymbolError",
    "SymbolNotFoundError",
    "BadShareCountError",
    "BadPriceError",
    "BadPercentageError",
    "PercentageOverflowError",
    "PercentageUnderflowError",
]
