"""Currency DTOs"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class CurrencyDTO(BaseModel):
    code: str
    name: str
    symbol: str
    flag: Optional[str] = None
    display_name: str
    decimal_places: int
    decimal_separator: str
    thousands_separator: str
    symbol_position: str
    is_active: bool
    is_default: bool
    exchange_rate: Decimal
    rate_updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, currency):
        return cls(
            code=currency.code,
            name=currency.name,
            symbol=currency.symbol,
            flag=currency.flag,
            display_name=currency.display_name,
            decimal_places=currency.decimal_places,
            decimal_separator=currency.decimal_separator,
            thousands_separator=currency.thousands_separator,
            symbol_position=currency.symbol_position.value,
            is_active=currency.is_active,
            is_default=currency.is_default,
            exchange_rate=currency.exchange_rate,
            rate_updated_at=currency.rate_updated_at,
        )


class ConvertCurrencyDTO(BaseModel):
    amount: Decimal = Field(..., ge=0)
    from_currency: str = Field(..., min_length=3, max_length=3)
    to_currency: str = Field(..., min_length=3, max_length=3)


class ConversionResultDTO(BaseModel):
    amount: Decimal
    from_currency: str
    to_currency: str
    converted_amount: Decimal
    formatted: str
    rate: Decimal


class ExchangeRateUpdateResultDTO(BaseModel):
    updated: List[str] = []
    failed: List[str] = []
    skipped: List[str] = []
