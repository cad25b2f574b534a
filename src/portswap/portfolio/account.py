"""Account implementation.

Thread-safe container for an account's actual and desired position sets.
"""

import threading
from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from portswap.portfolio.errors import (
    BadPriceError,
    BadSymbolError,
    DuplicateSymbolError,
    PercentageOverflowError,
    PercentageUnderflowError,
    PortfolioError,
    SymbolNotFoundError,
)
from portswap.portfolio.models import (
    CASH_SYMBOL,
    ONE,
    ONE_HUNDRED,
    ZERO,
    AccountState,
    Position,
    ValidationMode,
    exact_add,
    parse_price,
    to_price,
    validate_position,
)
from portswap.system import LoggerFactory

if TYPE_CHECKING:
    from portswap.system.config import AccountConfig

logger = LoggerFactory.get_logger()


def _build_set(positions: Iterable[Position], mode: ValidationMode) -> dict[str, Position]:
    """
    Validate a batch into a fresh symbol -> position mapping.

    Processing (in input order):
    1. Validate each position for the mode
    2. Reject a symbol already seen in this batch
    3. DESIRED: add to the running total and fail as soon as it passes 100
    4. Pin cash positions to a price of exactly 1

    After the loop a non-empty DESIRED batch must total exactly 100.

    Raises:
        PortfolioError: First validation failure in the batch
    """
    built: dict[str, Position] = {}
    total = ZERO

    for position in positions:
        if not isinstance(position, Position):
            raise TypeError(f"Expected Position, got {type(position).__name__}")
        validate_position(position, mode)
        if position.symbol in built:
            raise DuplicateSymbolError(symbol=position.symbol)
        if mode == ValidationMode.DESIRED:
            total = exact_add(total, position.percentage)
            if total > ONE_HUNDRED:
                raise PercentageOverflowError(symbol=position.symbol)
        if position.is_cash:
            position = position.with_price(ONE)
        built[position.symbol] = position

    # Empty DESIRED batch clears the target allocation
    if mode == ValidationMode.DESIRED and built and total < ONE_HUNDRED:
        raise PercentageUnderflowError()

    return built


def _reprice(positions: dict[str, Position], symbol: str, price: Decimal) -> bool:
    current = positions.get(symbol)
    if current is None:
        return False
    positions[symbol] = current.with_price(price)
    return True


class Account:
    """
    Brokerage account holding actual and desired position sets.

    A single lock serializes every mutation and every read, so the two sets
    are always observed consistently with each other. Batch replacement is
    all-or-nothing: a rejected batch leaves the previous set in place.

    Attributes:
        margin: Account is margin-enabled (fixed at creation)
        non_taxable: Account is tax-exempt (fixed at creation)
        _actual: Current holdings by symbol
        _desired: Target allocation by symbol

    Example:
        >>> account = Account(margin=False, non_taxable=False)
        >>> account.set_actual([
        ...     Position(symbol="AAA", shares=Decimal("10")),
        ...     Position(symbol=CASH_SYMBOL, security_type=SecurityType.CASH, shares=Decimal("250.00")),
        ... ])
        >>> account.set_desired([
        ...     Position(symbol="AAA", percentage=Decimal("40")),
        ...     Position(symbol="BBB", percentage=Decimal("60")),
        ... ])
        >>> account.set_price("AAA", Decimal("1.50"))
        >>> account.desired()["AAA"].price
        Decimal('1.50')
    """

    def __init__(self, margin: bool = False, non_taxable: bool = False) -> None:
        """Create an account with both position sets empty."""
        self._margin = margin
        self._non_taxable = non_taxable

        self._actual: dict[str, Position] = {}
        self._desired: dict[str, Position] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: "AccountConfig | None" = None) -> "Account":
        """
        Create an account from configured defaults.

        Args:
            config: Account defaults. If None, uses the system configuration.
        """
        if config is None:
            from portswap.system.config import get_system_config

            config = get_system_config().account
        return cls(margin=config.margin, non_taxable=config.non_taxable)

    def __repr__(self) -> str:
        with self._lock:
            return (
                f"Account(margin={self._margin}, non_taxable={self._non_taxable}, "
                f"actual={len(self._actual)}, desired={len(self._desired)})"
            )

    @property
    def margin(self) -> bool:
        return self._margin

    @property
    def non_taxable(self) -> bool:
        return self._non_taxable

    # ==================== Batch Replacement ====================

    def set_actual(self, positions: Iterable[Position]) -> None:
        """
        Replace the actual position set.

        Args:
            positions: Holdings in the order they should be validated

        Raises:
            PortfolioError: Batch rejected; the previous set is kept
        """
        self._replace(positions, ValidationMode.ACTUAL)

    def set_desired(self, positions: Iterable[Position]) -> None:
        """
        Replace the desired position set.

        A non-empty batch must total exactly 100%. An empty batch clears the
        target allocation.

        Args:
            positions: Targets in the order they should be validated

        Raises:
            PortfolioError: Batch rejected; the previous set is kept
        """
        self._replace(positions, ValidationMode.DESIRED)

    def _replace(self, positions: Iterable[Position], mode: ValidationMode) -> None:
        try:
            with self._lock:
                built = _build_set(positions, mode)
                if mode == ValidationMode.ACTUAL:
                    self._actual = built
                else:
                    self._desired = built
        except PortfolioError as e:
            logger.warning(
                f"account.{mode.value}.rejected",
                error=type(e).__name__,
                symbol=e.symbol,
                reason=str(e),
            )
            raise

        logger.info(
            f"account.{mode.value}.replaced",
            positions=len(built),
            symbols=sorted(built),
        )

    # ==================== Prices ====================

    def set_price(self, symbol: str, price: Any) -> None:
        """
        Set the price of a symbol in the actual and desired sets.

        The symbol only has to exist in one of the two sets; every set that
        holds it is updated. Shares and percentages are unchanged.

        Args:
            symbol: Ticker symbol (cash is fixed at 1 and cannot be priced)
            price: New price, an exact Decimal or int greater than zero

        Raises:
            BadSymbolError: Empty or cash symbol
            BadPriceError: Price not exact or not greater than zero
            SymbolNotFoundError: Symbol in neither set
        """
        if not symbol or symbol == CASH_SYMBOL:
            raise BadSymbolError(symbol=symbol)
        price = to_price(price)
        if price <= ZERO:
            raise BadPriceError(symbol=symbol)

        with self._lock:
            in_actual = _reprice(self._actual, symbol, price)
            in_desired = _reprice(self._desired, symbol, price)

        if not in_actual and not in_desired:
            raise SymbolNotFoundError(symbol=symbol)

        logger.debug(
            "account.price.updated",
            symbol=symbol,
            price=str(price),
            actual=in_actual,
            desired=in_desired,
        )

    def set_price_from_text(self, symbol: str, price: str) -> None:
        """
        Set a price given as text, e.g. from a quote feed.

        The text is parsed before the symbol is checked, so unparsable text
        reports BadPriceError even for a bad symbol.

        Raises:
            BadPriceError: Text is not a finite decimal, or not greater than zero
            BadSymbolError: Empty or cash symbol
            SymbolNotFoundError: Symbol in neither set
        """
        self.set_price(symbol, parse_price(price))

    # ==================== Queries ====================

    def actual(self) -> dict[str, Position]:
        """Copy of the actual positions, independent of later changes."""
        with self._lock:
            return dict(self._actual)

    def desired(self) -> dict[str, Position]:
        """Copy of the desired positions, independent of later changes."""
        with self._lock:
            return dict(self._desired)

    def snapshot(self) -> AccountState:
        """Both sets and the account flags from a single lock acquisition."""
        with self._lock:
            return AccountState(
                actual=dict(self._actual),
                desired=dict(self._desired),
                margin=self._margin,
                non_taxable=self._non_taxable,
            )
