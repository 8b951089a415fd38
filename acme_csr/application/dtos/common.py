"""Shared DTO helpers"""

from decimal import Decimal
from typing import Dict, Optional, Union

from pydantic import BaseModel

from ...domain.value_objects.money import Money
from ...domain.value_objects.translatable import TranslatableText

# Translatable inputs accept a plain string (stored under the request locale) or a locale map
TranslatableInput = Union[str, Dict[str, str]]


def to_translatable(value: Optional[TranslatableInput], locale: str) -> Optional[TranslatableText]:
    if value is None:
        return None
    return TranslatableText.of(value, locale)


class MoneyDTO(BaseModel):
    amount: Decimal
    currency: str
    formatted: str

    @classmethod
    def from_money(cls, money: Money):
        return cls(amount=money.amount, currency=money.currency, formatted=money.format())


class MessageResponse(BaseModel):
    message: str
    success: bool = True
