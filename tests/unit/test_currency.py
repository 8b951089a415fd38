"""Currency formatting and conversion"""

from decimal import Decimal

import pytest

from acme_csr.domain.entities.currency import Currency
from acme_csr.domain.enums import SymbolPosition

pytestmark = pytest.mark.unit


def _euro():
    return Currency(
        "EUR", "Euro", "€",
        decimal_separator=",", thousands_separator=".", symbol_position=SymbolPosition.AFTER,
    )


def _dollar():
    return Currency("USD", "US Dollar", "$", exchange_rate=Decimal("1.10"))


def _yen():
    return Currency("JPY", "Yen", "¥", decimal_places=0, exchange_rate=Decimal("160"))


class TestFormatAmount:

    def test_symbol_after_with_european_separators(self):
        assert _euro().format_amount(Decimal("1234567.891")) == "1.234.567,89 €"

    def test_negative_amount_keeps_sign_before_symbol(self):
        assert _dollar().format_amount(-1234.5) == "-$1,234.50"

    def test_zero_decimal_places_round_half_up(self):
        assert _yen().format_amount(Decimal("1234.5")) == "¥1,235"

    def test_small_amounts_have_no_separator(self):
        assert _dollar().format_amount(7) == "$7.00"


class TestConvertTo:

    def test_goes_through_the_base_currency(self):
        assert _dollar().convert_to(Decimal("110"), _euro()) == Decimal("100.00")

    def test_uses_target_decimal_places(self):
        assert _dollar().convert_to(11, _yen()) == Decimal("1600")

    def test_same_currency_is_identity(self):
        assert _euro().convert_to("19.99", _euro()) == Decimal("19.99")


class TestValidation:

    def test_code_is_uppercased(self):
        assert Currency("gbp", "Pound", "£").code == "GBP"

    @pytest.mark.parametrize("kwargs", [{"code": "EURO"}, {"decimal_places": 5}, {"exchange_rate": 0}])
    def test_invalid_currencies(self, kwargs):
        params = {"code": "EUR", "name": "Euro", "symbol": "€", **kwargs}

        with pytest.raises(ValueError):
            Currency(**params)

    def test_rate_update_must_be_positive(self):
        currency = _dollar()

        with pytest.raises(ValueError):
            currency.update_exchange_rate("-1")

        currency.update_exchange_rate("1.2")
        assert currency.exchange_rate == Decimal("1.2")
        assert currency.rate_updated_at is not None
