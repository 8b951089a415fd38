"""Money arithmetic and formatting"""

from decimal import Decimal

import pytest

from acme_csr.domain.value_objects.money import Money

pytestmark = pytest.mark.unit


class TestMoney:

    def test_amount_is_rounded_to_cents(self):
        assert Money("10.005", "EUR").amount == Decimal("10.01")

    def test_currency_is_upper_cased(self):
        assert Money(5, "usd").currency == "USD"

    def test_negative_amount_is_rejected(self):
        with pytest.raises(ValueError):
            Money(-1, "EUR")

    def test_unsupported_currency_is_rejected(self):
        with pytest.raises(ValueError, match="Unsupported currency"):
            Money(1, "XYZ")

    def test_add_requires_same_currency(self):
        with pytest.raises(ValueError, match="Currency mismatch"):
            Money(1, "EUR").add(Money(1, "USD"))

    def test_subtract_cannot_go_negative(self):
        with pytest.raises(ValueError):
            Money(1, "EUR").subtract(Money(2, "EUR"))

    def test_percentage_bounds(self):
        assert Money(200, "EUR").percentage(25) == Money(50, "EUR")
        with pytest.raises(ValueError):
            Money(200, "EUR").percentage(101)

    def test_divide_by_zero_is_rejected(self):
        with pytest.raises(ValueError):
            Money(10, "EUR").divide(0)

    def test_cents_conversion(self):
        assert Money.from_cents(1999, "USD") == Money("19.99", "USD")
        assert Money("19.99", "USD").to_cents() == 1999

    def test_format_uses_currency_conventions(self):
        assert Money("1234.50", "EUR").format() == "€1.234,50"
        assert Money("1234.50", "USD").format() == "$1,234.50"
        assert Money("10", "JPY").format() == "JPY 10.00"
