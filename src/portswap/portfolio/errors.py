"""Error taxonomy for position and account operations.

Every failure raised by the portfolio package derives from PortfolioError
and falls into one of three families:

- IdentityError: the symbol or security type is wrong, duplicated or unknown
- MagnitudeError: a share count, price or percentage is out of range
- AggregateError: a batch of desired positions does not total 100%
"""


class PortfolioError(Exception):
    """Base exception for portfolio errors."""

    default_message = "Portfolio error"

    def __init__(self, message: str | None = None, *, symbol: str | None = None) -> None:
        self.symbol = symbol
        text = message or self.default_message
        if symbol is not None:
            text = f"{text}: {symbol!r}"
        super().__init__(text)


class IdentityError(PortfolioError):
    """Symbol or security type problem."""

    pass


class MagnitudeError(PortfolioError):
    """Numeric field out of range."""

    pass


class AggregateError(PortfolioError):
    """Batch-level invariant violated."""

    pass


class BadSymbolError(IdentityError):
    default_message = "Symbol must be set to a valid value"


class BadSecurityTypeError(IdentityError):
    default_message = "Invalid security type for the given symbol"


class DuplicateSymbolError(IdentityError):
    default_message = "Duplicate symbol"


class SymbolNotFoundError(IdentityError):
    default_message = "The specified symbol could not be found"


class BadShareCountError(MagnitudeError):
    default_message = "Actual positions require shares to be set"


class BadPriceError(MagnitudeError):
    default_message = "Price must be greater than zero"


class BadPercentageError(MagnitudeError):
    default_message = "Percent must be set for a desired position"


class PercentageOverflowError(AggregateError):
    default_message = "Total position percentage cannot exceed 100"


class PercentageUnderflowError(AggregateError):
    default_message = "Total position percentage must add up to 100"
