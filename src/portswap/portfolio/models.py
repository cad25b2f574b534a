"""Data models for the portfolio package.

Defines the value types held by an Account:
- SecurityType: Stock, fund or cash
- ValidationMode: Which set a position is being validated for
- Position: One holding (actual) or target (desired)
- AccountState: Consistent snapshot of both position sets

All numeric fields are Decimal. Binary floats are refused at the boundary so
percentage totals compare equal to 100 without any tolerance.
"""

from collections.abc import Iterable
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal, Inexact, InvalidOperation, Overflow
from enum import Enum
from fractions import Fraction
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from portswap.portfolio.errors import (
    BadPercentageError,
    BadPriceError,
    BadSecurityTypeError,
    BadShareCountError,
    BadSymbolError,
)

CASH_SYMBOL = "*CASH*"

ZERO = Decimal("0")
ONE = Decimal("1")
ONE_HUNDRED = Decimal("100")

# Accepted magnitude for every numeric field: at most 28 digits each side of the point
MAX_SCALE = 28
MAX_INTEGER_DIGITS = 28

# Unbounded precision with Inexact trapped: any rounding raises instead of drifting.
_EXACT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[InvalidOperation, Inexact, Overflow],
)


class SecurityType(str, Enum):
    """Kind of security a position holds."""

    STOCK = "stock"
    FUND = "fund"
    CASH = "cash"


class ValidationMode(str, Enum):
    """Which position set a position is validated against."""

    ACTUAL = "actual"
    DESIRED = "desired"


class Position(BaseModel):
    """
    A single actual holding or desired target.

    Construction only enforces types. Symbol, share and percentage rules
    depend on the set the position is destined for and are checked by
    validate_position().

    Attributes:
        symbol: Ticker symbol, or CASH_SYMBOL for the cash balance
        security_type: Stock, fund or cash
        shares: Shares held (actual positions)
        price: Last known price per share
        percentage: Target share of the account in percent (desired positions)

    Example:
        >>> position = Position(
        ...     symbol="VTI",
        ...     security_type=SecurityType.FUND,
        ...     percentage=Decimal("60"),
        ... )
    """

    symbol: str
    security_type: SecurityType = SecurityType.STOCK
    shares: Decimal = ZERO
    price: Decimal = ZERO
    percentage: Decimal = ZERO

    @field_validator("shares", "price", "percentage", mode="before")
    @classmethod
    def reject_inexact(cls, v: Any) -> Any:
        """Refuse binary floats and bools before Decimal coercion."""
        if isinstance(v, (float, bool)):
            raise ValueError(f"Exact numeric value required, got {type(v).__name__} {v!r}")
        return v

    @field_validator("shares", "price", "percentage")
    @classmethod
    def require_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError(f"Value must be finite, got {v}")
        if not within_bounds(v):
            raise ValueError(
                f"Value out of range: at most {MAX_INTEGER_DIGITS} integer digits and {MAX_SCALE} decimal places"
            )
        return v

    @property
    def is_cash(self) -> bool:
        """True if this position is the account's cash balance."""
        return self.symbol == CASH_SYMBOL

    def with_price(self, price: Decimal) -> "Position":
        """Return a copy of this position carrying a new price."""
        return self.model_copy(update={"price": price})

    model_config = ConfigDict(frozen=True)  # Immutable after creation


class AccountState(BaseModel):
    """
    Snapshot of an account taken under a single lock acquisition.

    Attributes:
        actual: Current holdings by symbol
        desired: Target allocation by symbol
        margin: Account is margin-enabled
        non_taxable: Account is tax-exempt
    """

    actual: dict[str, Position]
    desired: dict[str, Position]
    margin: bool = False
    non_taxable: bool = False

    @property
    def desired_total(self) -> Decimal:
        """Sum of desired percentages (100 when set, 0 when empty)."""
        return exact_sum(p.percentage for p in self.desired.values())

    model_config = ConfigDict(frozen=True)  # Immutable snapshot


def within_bounds(value: Decimal) -> bool:
    """True if a finite decimal fits in MAX_INTEGER_DIGITS.MAX_SCALE digits."""
    _, digits, exponent = value.as_tuple()
    return -MAX_SCALE <= exponent and len(digits) + exponent <= MAX_INTEGER_DIGITS


def exact_add(a: Decimal, b: Decimal) -> Decimal:
    """Add two decimals without rounding."""
    return _EXACT.add(a, b)


def exact_sum(values: Iterable[Decimal]) -> Decimal:
    total = ZERO
    for value in values:
        total = exact_add(total, value)
    return total


def validate_position(position: Position, mode: ValidationMode) -> None:
    """
    Check a position against the rules for the given set.

    Checks run in a fixed order and the first failure is raised.

    Args:
        position: Position to check
        mode: ACTUAL requires shares, DESIRED requires a percentage

    Raises:
        BadSymbolError: Empty symbol, or cash type with a non-cash symbol
        BadSecurityTypeError: Cash symbol with a non-cash type
        BadShareCountError: Actual position with shares <= 0
        BadPercentageError: Desired position with percentage outside (0, 100]
    """
    symbol = position.symbol
    if not symbol or (position.security_type == SecurityType.CASH and symbol != CASH_SYMBOL):
        raise BadSymbolError(symbol=symbol)
    if symbol == CASH_SYMBOL and position.security_type != SecurityType.CASH:
        raise BadSecurityTypeError(symbol=symbol)

    if mode == ValidationMode.ACTUAL:
        if position.shares <= ZERO:
            raise BadShareCountError(symbol=symbol)
    elif position.percentage <= ZERO or position.percentage > ONE_HUNDRED:
        raise BadPercentageError(symbol=symbol)


def parse_price(text: str) -> Decimal:
    """
    Parse a price from text without going through float.

    Accepts decimal literals ("12.345", "1e2") and ratios whose decimal
    expansion terminates ("3/2" -> 1.5). Ratios such as "1/3" have no exact
    Decimal form and are refused.

    Args:
        text: Price text (surrounding whitespace allowed)

    Returns:
        Exact Decimal value

    Raises:
        BadPriceError: Text is not a finite, exactly representable number
    """
    if not isinstance(text, str):
        raise BadPriceError(f"Price text must be a string, got {type(text).__name__}")
    text = text.strip()
    if "/" in text:
        value = _parse_ratio(text)
    else:
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise BadPriceError(f"Price is not a number: {text[:40]!r}") from None
    if not value.is_finite():
        raise BadPriceError(f"Price must be finite: {text[:40]!r}")
    if not within_bounds(value):
        raise BadPriceError(f"Price out of range: {text[:40]!r}")
    return value


def _parse_ratio(text: str) -> Decimal:
    try:
        ratio = Fraction(text)
    except (ValueError, ZeroDivisionError):
        raise BadPriceError(f"Price is not a number: {text[:40]!r}") from None

    if ratio.numerator.bit_length() > 256:
        raise BadPriceError(f"Price out of range: {text[:40]!r}")

    # Terminating iff the reduced denominator is 2**a * 5**b
    denominator = ratio.denominator
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    if denominator != 1:
        raise BadPriceError(f"Price has no exact decimal form: {text[:40]!r}")

    places = max(twos, fives)
    if places > MAX_SCALE:
        raise BadPriceError(f"Price out of range: {text[:40]!r}")
    scaled = ratio.numerator * (10**places // ratio.denominator)
    digits = tuple(int(d) for d in str(abs(scaled)))
    return Decimal((int(scaled < 0), digits, -places))


def to_price(value: Any) -> Decimal:
    """Coerce an exact numeric price to Decimal, refusing floats and non-numbers."""
    if isinstance(value, bool) or not isinstance(value, (Decimal, int)):
        raise BadPriceError(f"Price must be an exact Decimal or int, got {type(value).__name__}")
    if isinstance(value, int) and value.bit_length() > 128:
        raise BadPriceError("Price out of range")
    price = Decimal(value)
    if not price.is_finite():
        raise BadPriceError(f"Price must be finite, got {price}")
    if not within_bounds(price):
        raise BadPriceError("Price out of range")
    return price
