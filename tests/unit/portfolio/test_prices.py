"""Unit tests for Account price propagation."""

from decimal import Decimal

import pytest

from portswap.portfolio import (
    CASH_SYMBOL,
    BadPriceError,
    BadSymbolError,
    Position,
    SymbolNotFoundError,
)


@pytest.fixture
def priced_account(account, good_desired):
    """Account with AAA/BBB desired and BBB/CCC actual."""
    account.set_desired(good_desired)
    account.set_actual(
        [
            Position(symbol="BBB", shares=Decimal("10"), price=Decimal("5")),
            Position(symbol="CCC", shares=Decimal("20"), price=Decimal("7")),
        ]
    )
    return account


class TestSetPrice:
    """Test set_price() propagation and validation."""

    def test_desired_only(self, priced_account):
        """Test a symbol held only in desired updates desired and leaves actual alone."""
        # Arrange
        actual_before = priced_account.actual()

        # Act
        priced_account.set_price("AAA", Decimal("1.50"))

        # Assert
        assert priced_account.desired()["AAA"].price == Decimal("1.50")
        assert priced_account.actual() == actual_before

    def test_actual_only(self, priced_account):
        """Test a symbol held only in actual updates actual and leaves desired alone."""
        # Arrange
        desired_before = priced_account.desired()

        # Act
        priced_account.set_price("CCC", Decimal("8.25"))

        # Assert
        assert priced_account.actual()["CCC"].price == Decimal("8.25")
        assert priced_account.desired() == desired_before

    def test_both_sets(self, priced_account):
        """Test a symbol held in both sets is repriced in both."""
        # Arrange & Act
        priced_account.set_price("BBB", Decimal("6"))

        # Assert
        assert priced_account.actual()["BBB"].price == Decimal("6")
        assert priced_account.desired()["BBB"].price == Decimal("6")

    def test_other_fields_unchanged(self, priced_account):
        """Test shares and percentage survive a price update."""
        # Arrange & Act
        priced_account.set_price("BBB", Decimal("6"))

        # Assert
        assert priced_account.actual()["BBB"].shares == Decimal("10")
        assert priced_account.desired()["BBB"].percentage == Decimal("60")

    def test_accepts_int(self, priced_account):
        """Test an int price is stored as Decimal."""
        # Arrange & Act
        priced_account.set_price("AAA", 3)

        # Assert
        assert priced_account.desired()["AAA"].price == Decimal("3")

    def test_symbol_not_found(self, priced_account):
        """Test an unknown symbol raises with the symbol attached."""
        # Arrange & Act
        with pytest.raises(SymbolNotFoundError) as exc_info:
            priced_account.set_price("ZZZ", Decimal("1.0"))

        # Assert
        assert exc_info.value.symbol == "ZZZ"

    def test_symbol_not_found_on_empty_account(self, account):
        """Test pricing on an empty account reports the symbol as missing."""
        # Arrange & Act & Assert
        with pytest.raises(SymbolNotFoundError):
            account.set_price("AAA", Decimal("1"))

    @pytest.mark.parametrize("symbol", ["", CASH_SYMBOL])
    def test_bad_symbol(self, priced_account, symbol):
        """Test empty and cash symbols cannot be priced."""
        # Arrange & Act & Assert
        with pytest.raises(BadSymbolError):
            priced_account.set_price(symbol, Decimal("1.0"))

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("0.0"), Decimal("-1"), -5])
    def test_non_positive_price(self, priced_account, price):
        """Test zero and negative prices are refused."""
        # Arrange & Act & Assert
        with pytest.raises(BadPriceError):
            priced_account.set_price("AAA", price)

    @pytest.mark.parametrize("price", [1.5, "1.5", None])
    def test_inexact_price(self, priced_account, price):
        """Test floats and non-numbers are refused."""
        # Arrange & Act & Assert
        with pytest.raises(BadPriceError):
            priced_account.set_price("AAA", price)

    def test_out_of_range_price(self, priced_account):
        """Test a price with an extreme exponent is refused and nothing changes."""
        # Arrange
        before = priced_account.snapshot()

        # Act
        with pytest.raises(BadPriceError, match="out of range"):
            priced_account.set_price("AAA", Decimal("1E-100000000000000"))

        # Assert
        assert priced_account.snapshot() == before

    def test_cash_price_stays_one(self, account, cash_actual):
        """Test the cash price cannot be changed."""
        # Arrange
        account.set_actual([cash_actual])

        # Act
        with pytest.raises(BadSymbolError):
            account.set_price(CASH_SYMBOL, Decimal("2"))

        # Assert
        assert account.actual()[CASH_SYMBOL].price == Decimal("1")

    def test_failed_update_changes_nothing(self, priced_account):
        """Test a rejected price leaves both sets untouched."""
        # Arrange
        before = priced_account.snapshot()

        # Act
        with pytest.raises(BadPriceError):
            priced_account.set_price("BBB", Decimal("-1"))

        # Assert
        assert priced_account.snapshot() == before


class TestSetPriceFromText:
    """Test set_price_from_text() parsing and delegation."""

    @pytest.mark.parametrize(
        "symbol,price,error",
        [
            ("AAA", "not_a_price", BadPriceError),
            ("AAA", "-1.0", BadPriceError),
            ("AAA", "0.0", BadPriceError),
            ("AAA", "1/3", BadPriceError),
            ("", "1.0", BadSymbolError),
            (CASH_SYMBOL, "1.0", BadSymbolError),
            ("bogus3", "1.0", SymbolNotFoundError),
        ],
        ids=["BadPrice", "BadPrice2", "BadPrice3", "NonTerminatingRatio", "BadSym1", "BadSym2", "SymNotFound"],
    )
    def test_rejected(self, priced_account, symbol, price, error):
        """Test each bad input raises its own error type."""
        # Arrange & Act & Assert
        with pytest.raises(error):
            priced_account.set_price_from_text(symbol, price)

    def test_good(self, priced_account, good_desired):
        """Test a valid text price updates only the price of the symbol."""
        # Arrange
        expected = {p.symbol: p for p in good_desired}
        expected["AAA"] = expected["AAA"].with_price(Decimal("1.0"))

        # Act
        priced_account.set_price_from_text("AAA", "1.0")

        # Assert
        assert priced_account.desired() == expected

    def test_parsed_exactly(self, priced_account):
        """Test text is parsed without passing through float."""
        # Arrange & Act
        priced_account.set_price_from_text("AAA", "0.1")

        # Assert
        assert priced_account.desired()["AAA"].price == Decimal("0.1")

    @pytest.mark.parametrize("text,expected", [("3/2", Decimal("1.5")), ("1/8", Decimal("0.125"))])
    def test_terminating_ratio(self, priced_account, text, expected):
        """Test a ratio with a finite decimal expansion is stored exactly."""
        # Arrange & Act
        priced_account.set_price_from_text("BBB", text)

        # Assert
        assert priced_account.actual()["BBB"].price == expected
        assert priced_account.desired()["BBB"].price == expected

    def test_parse_checked_before_symbol(self, priced_account):
        """Test unparsable text reports BadPriceError even for a bad symbol."""
        # Arrange & Act & Assert
        with pytest.raises(BadPriceError):
            priced_account.set_price_from_text("", "abc")
