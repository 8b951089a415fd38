"""Money value object with currency"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

SUPPORTED_CURRENCIES = ("EUR", "USD", "GBP", "JPY", "CAD", "AUD", "CHF", "CNY")

_CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # floats go through str to avoid binary artefacts
    return Decimal(str(value))


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = "EUR"

    def __post_init__(self):
        object.__setattr__(self, "amount", _to_decimal(self.amount).quantize(_CENT, rounding=ROUND_HALF_UP))
        object.__setattr__(self, "currency", (self.currency or "").upper())
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency required")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    @classmethod
    def zero(cls, currency: str = "EUR") -> "Money":
        return cls(Decimal("0"), currency)

    @classmethod
    def from_cents(cls, cents: int, currency: str = "EUR") -> "Money":
        return cls(amount=Decimal(cents) / 100, currency=currency)

    def to_cents(self) -> int:
        return int(self.amount * 100)

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValueError(f"Currency mismatch: {self.currency} and {other.currency}")

    def add(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise ValueError("Subtraction would result in negative amount")
        return Money(result, self.currency)

    def multiply(self, factor: Number) -> "Money":
        factor = _to_decimal(factor)
        if factor < 0:
            raise ValueError("Cannot multiply by negative factor")
        return Money(self.amount * factor, self.currency)

    def divide(self, divisor: Number) -> "Money":
        divisor = _to_decimal(divisor)
        if divisor <= 0:
            raise ValueError("Divisor must be greater than zero")
        return Money(self.amount / divisor, self.currency)

    def percentage(self, percent: Number) -> "Money":
        percent = _to_decimal(percent)
        if percent < 0 or percent > 100:
            raise ValueError("Percentage must be between 0 and 100")
        return Money(self.amount * percent / 100, self.currency)

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_greater_than(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def is_greater_than_or_equal(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def format(self) -> str:
        whole, fraction = f"{self.amount:,.2f}".split(".")
        if self.currency == "EUR":
            return f"€{whole.replace(',', '.')},{fraction}"
        symbol = {"USD": "$", "GBP": "£", "CAD": "C$", "AUD": "A$"}.get(self.currency)
        if symbol:
            return f"{symbol}{whole}.{fraction}"
        return f"{self.currency} {whole}.{fraction}"

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"
