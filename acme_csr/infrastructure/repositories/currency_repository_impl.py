"""Currency repository implementation"""

from decimal import Decimal
from typing import Optional, List
from sqlalchemy.orm import Session

from ...domain.entities.currency import Currency
from ...domain.enums import SymbolPosition
from ...domain.repositories.currency_repository import ICurrencyRepository
from ..orm.currency_model import CurrencyModel

_PLAIN_FIELDS = (
    "name", "symbol", "flag", "decimal_places", "decimal_separator", "thousands_separator",
    "is_active", "is_default", "sort_order", "rate_updated_at",
)


class CurrencyRepositoryImpl(ICurrencyRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_code(self, code: str) -> Optional[Currency]:
        model = self.session.query(CurrencyModel).filter(CurrencyModel.code == code.upper()).first()
        return self._map_to_entity(model) if model else None

    async def get_default(self) -> Optional[Currency]:
        model = self.session.query(CurrencyModel).filter(CurrencyModel.is_default.is_(True)).first()
        return self._map_to_entity(model) if model else None

    async def add(self, currency: Currency) -> Currency:
        model = CurrencyModel(code=currency.code, created_at=currency.created_at)
        self._update_model_from_entity(model, currency)
        self.session.add(model)
        self.session.flush()
        return currency

    async def update(self, currency: Currency) -> Currency:
        model = self.session.query(CurrencyModel).filter(CurrencyModel.code == currency.code).first()
        if model:
            self._update_model_from_entity(model, currency)
            self.session.flush()
        return currency

    async def list(self, active_only: bool = True) -> List[Currency]:
        query = self.session.query(CurrencyModel)
        if active_only:
            query = query.filter(CurrencyModel.is_active.is_(True))
        models = query.order_by(CurrencyModel.sort_order.asc(), CurrencyModel.code.asc()).all()
        return [self._map_to_entity(model) for model in models]

    def _update_model_from_entity(self, model: CurrencyModel, currency: Currency) -> None:
        for attribute in _PLAIN_FIELDS:
            setattr(model, attribute, getattr(currency, attribute))
        model.symbol_position = currency.symbol_position.value
        model.exchange_rate = currency.exchange_rate
        model.updated_at = currency.updated_at

    def _map_to_entity(self, model: CurrencyModel) -> Currency:
        return Currency(
            code=model.code,
            symbol_position=SymbolPosition(model.symbol_position),
            exchange_rate=Decimal(str(model.exchange_rate)),
            created_at=model.created_at,
            updated_at=model.updated_at,
            **{attribute: getattr(model, attribute) for attribute in _PLAIN_FIELDS},
        )
