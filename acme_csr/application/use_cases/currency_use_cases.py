"""Currency use cases"""

import logging
from typing import List

from ...core.config import settings
from ...domain.entities.currency import Currency
from ...domain.exceptions import CurrencyException
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.currency_dtos import ConversionResultDTO, ConvertCurrencyDTO, CurrencyDTO, ExchangeRateUpdateResultDTO
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)


async def _get_active_currency(unit_of_work: IUnitOfWork, code: str) -> Currency:
    currency = await unit_of_work.currencies.get_by_code(code.upper())
    if not currency:
        raise CurrencyException.not_found(code)
    if not currency.is_active:
        raise CurrencyException.inactive(code)
    return currency


class ListCurrenciesUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, active_only: bool = True) -> List[CurrencyDTO]:
        async with self.unit_of_work:
            return [CurrencyDTO.from_entity(currency) for currency in await self.unit_of_work.currencies.list(active_only)]


class GetCurrencyUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, code: str) -> CurrencyDTO:
        async with self.unit_of_work:
            currency = await self.unit_of_work.currencies.get_by_code(code.upper())
            if not currency:
                raise CurrencyException.not_found(code)
            return CurrencyDTO.from_entity(currency)


class SetDefaultCurrencyUseCase:
    """Exactly one currency is the default"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, code: str) -> CurrencyDTO:
        async with self.unit_of_work:
            target = await _get_active_currency(self.unit_of_work, code)
            previous = await self.unit_of_work.currencies.get_default()
            if previous and previous.code != target.code:
                previous.is_default = False
                await self.unit_of_work.currencies.update(previous)
            target.is_default = True
            await self.unit_of_work.currencies.update(target)
            await AuditService(self.unit_of_work).log(
                "currency.default_changed", "currency", target.code,
                {"default": previous.code if previous else None}, {"default": target.code},
            )
            await self.unit_of_work.commit()
            return CurrencyDTO.from_entity(target)


class ConvertCurrencyUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: ConvertCurrencyDTO) -> ConversionResultDTO:
        async with self.unit_of_work:
            source = await _get_active_currency(self.unit_of_work, request.from_currency)
            target = await _get_active_currency(self.unit_of_work, request.to_currency)
            converted = source.convert_to(request.amount, target)
            return ConversionResultDTO(
                amount=request.amount,
                from_currency=source.code,
                to_currency=target.code,
                converted_amount=converted,
                formatted=target.format_amount(converted),
                rate=target.exchange_rate / source.exchange_rate,
            )


class UpdateExchangeRatesUseCase:
    """Pulls rates from the provider for every active non-base currency"""

    def __init__(self, unit_of_work: IUnitOfWork, rate_service):
        self.unit_of_work = unit_of_work
        self.rate_service = rate_service

    async def execute(self) -> ExchangeRateUpdateResultDTO:
        base = settings.BASE_CURRENCY
        rates = await self.rate_service.fetch_rates(base)
        result = ExchangeRateUpdateResultDTO()

        async with self.unit_of_work:
            for currency in await self.unit_of_work.currencies.list(active_only=True):
                if currency.code == base:
                    result.skipped.append(currency.code)
                    continue
                rate = rates.get(currency.code)
                if rate is None:
                    logger.warning(f"No exchange rate returned for {currency.code}")
                    result.failed.append(currency.code)
                    continue
                try:
                    currency.update_exchange_rate(rate)
                except ValueError as e:
                    logger.warning(f"Rejected exchange rate for {currency.code}: {e}")
                    result.failed.append(currency.code)
                    continue
                await self.unit_of_work.currencies.update(currency)
                result.updated.append(currency.code)

            await AuditService(self.unit_of_work).log_system_action("exchange_rates_updated", "currency", data=result.model_dump())
            await self.unit_of_work.commit()

        logger.info(
            f"Exchange rates updated: {len(result.updated)} updated, {len(result.failed)} failed, {len(result.skipped)} skipped"
        )
        return result
