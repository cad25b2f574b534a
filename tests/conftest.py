"""Root conftest - shared account and position fixtures."""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Make src/ importable without an editable install
src_root = Path(__file__).parent.parent / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from portswap.portfolio import CASH_SYMBOL, Account, Position, SecurityType  # noqa: E402


@pytest.fixture
def account() -> Account:
    """Fresh account with both sets empty."""
    return Account(margin=False, non_taxable=False)


@pytest.fixture
def good_actual() -> list[Position]:
    return [
        Position(symbol="AAA", security_type=SecurityType.STOCK, shares=Decimal("100")),
        Position(symbol="BBB", security_type=SecurityType.STOCK, shares=Decimal("100")),
    ]


@pytest.fixture
def good_desired() -> list[Position]:
    return [
        Position(symbol="AAA", security_type=SecurityType.STOCK, percentage=Decimal("40")),
        Position(symbol="BBB", security_type=SecurityType.STOCK, percentage=Decimal("60")),
    ]


@pytest.fixture
def cash_actual() -> Position:
    return Position(
        symbol=CASH_SYMBOL,
        security_type=SecurityType.CASH,
        shares=Decimal("2500.00"),
        price=Decimal("7"),
    )
