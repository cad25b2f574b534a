"""Account interface (Protocol).

Defines the contract that account implementations must satisfy so that
collaborators (brokerage feeds, rebalancing strategies, displays) can depend
on the surface rather than on Account itself.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Protocol

from portswap.portfolio.models import AccountState, Position


class IAccount(Protocol):
    """
    Account interface holding actual and desired position sets.

    Core responsibilities:
    - Replace either position set with a validated batch
    - Propagate price updates to both sets
    - Provide snapshot copies that are safe to read without the lock

    Example:
        >>> account: IAccount = Account(margin=False, non_taxable=True)
        >>> account.set_desired([
        ...     Position(symbol="VTI", percentage=Decimal("60")),
        ...     Position(symbol="BND", percentage=Decimal("40")),
        ... ])
        >>> account.set_price_from_text("VTI", "231.17")
    """

    @property
    def margin(self) -> bool:
        """Whether the account is margin-enabled."""
        ...

    @property
    def non_taxable(self) -> bool:
        """Whether the account is tax-exempt."""
        ...

    # ==================== Batch Replacement ====================

    def set_actual(self, positions: Iterable[Position]) -> None:
        """
        Replace the actual position set.

        Each position must pass ACTUAL validation (shares > 0) and symbols
        must be unique. The set is replaced only if the whole batch is valid.

        Raises:
            BadSymbolError, BadSecurityTypeError, BadShareCountError,
            DuplicateSymbolError
        """
        ...

    def set_desired(self, positions: Iterable[Position]) -> None:
        """
        Replace the desired position set.

        Each position must pass DESIRED validation, symbols must be unique and
        a non-empty batch must total exactly 100%.

        Raises:
            BadSymbolError, BadSecurityTypeError, BadPercentageError,
            DuplicateSymbolError, PercentageOverflowError,
            PercentageUnderflowError
        """
        ...

    # ==================== Prices ====================

    def set_price(self, symbol: str, price: Decimal) -> None:
        """
        Set the price of a symbol in whichever sets contain it.

        Raises:
            BadSymbolError: Empty or cash symbol
            BadPriceError: Price not positive or not exact
            SymbolNotFoundError: Symbol in neither set
        """
        ...

    def set_price_from_text(self, symbol: str, price: str) -> None:
        """Parse price text exactly, then behave as set_price()."""
        ...

    # ==================== Queries ====================

    def actual(self) -> dict[str, Position]:
        """Copy of the actual positions by symbol."""
        ...

    def desired(self) -> dict[str, Position]:
        """Copy of the desired positions by symbol."""
        ...

    def snapshot(self) -> AccountState:
        """Both sets and account flags, captured atomically."""
        ...
