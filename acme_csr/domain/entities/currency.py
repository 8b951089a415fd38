"""Currency entity"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ..enums import SymbolPosition

_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")


@dataclass
class Currency:
    code: str
    name: str
    symbol: str
    flag: Optional[str] = None
    decimal_places: int = 2
    decimal_separator: str = "."
    thousands_separator: str = ","
    symbol_position: SymbolPosition = SymbolPosition.BEFORE
    is_active: bool = True
    is_default: bool = False
    exchange_rate: Decimal = Decimal("1")
    sort_order: int = 0
    rate_updated_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        self.code = (self.code or "").upper()
        if not _CODE_PATTERN.match(self.code):
            raise ValueError(f"Invalid currency code: {self.code}")
        if self.decimal_places < 0 or self.decimal_places > 4:
            raise ValueError("Decimal places must be between 0 and 4")
        self.exchange_rate = Decimal(str(self.exchange_rate))
        if self.exchange_rate <= 0:
            raise ValueError("Exchange rate must be positive")

    def format_amount(self, amount) -> str:
        quantum = Decimal(1).scaleb(-self.decimal_places)
        value = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP)
        sign = "-" if value < 0 else ""
        whole, _, fraction = f"{abs(value):.{self.decimal_places}f}".partition(".")
        groups = []
        while len(whole) > 3:
            groups.insert(0, whole[-3:])
            whole = whole[:-3]
        groups.insert(0, whole)
        number = self.thousands_separator.join(groups)
        if fraction:
            number = f"{number}{self.decimal_separator}{fraction}"
        if self.symbol_position == SymbolPosition.BEFORE:
            return f"{sign}{self.symbol}{number}"
        return f"{sign}{number} {self.symbol}"

    def convert_to(self, amount, target: "Currency") -> Decimal:
        """Rates are relative to the base currency, so go through it"""
        base_amount = Decimal(str(amount)) / self.exchange_rate
        converted = base_amount * target.exchange_rate
        quantum = Decimal(1).scaleb(-target.decimal_places)
        return converted.quantize(quantum, rounding=ROUND_HALF_UP)

    def update_exchange_rate(self, rate) -> None:
        rate = Decimal(str(rate))
        if rate <= 0:
            raise ValueError("Exchange rate must be positive")
        self.exchange_rate = rate
        self.rate_updated_at = datetime.utcnow()
        self.updated_at = datetime.utcnow()

    @property
    def display_name(self) -> str:
        prefix = f"{self.flag} " if self.flag else ""
        return f"{prefix}{self.code} - {self.name}"
