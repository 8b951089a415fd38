"""Exchange rate provider client"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

import httpx

from ...core.config import settings
from ...domain.exceptions import CurrencyException

logger = logging.getLogger(__name__)


class ExchangeRateService:
    """Fetches rates relative to the base currency from an HTTP provider"""

    def __init__(self, api_url: Optional[str] = None, api_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_url = api_url or settings.EXCHANGE_RATE_API_URL
        self.api_key = api_key if api_key is not None else settings.EXCHANGE_RATE_API_KEY
        self.transport = transport

    async def fetch_rates(self, base: Optional[str] = None) -> Dict[str, Decimal]:
        base = (base or settings.BASE_CURRENCY).upper()
        params = {"base": base}
        if self.api_key:
            params["access_key"] = self.api_key
        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self.transport) as client:
                response = await client.get(self.api_url, params=params)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Exchange rate request failed: {e}")
            raise CurrencyException.rate_provider_failed(str(e))

        raw_rates = payload.get("rates") or payload.get("conversion_rates")
        if not isinstance(raw_rates, dict):
            raise CurrencyException.rate_provider_failed("response has no rates")

        rates: Dict[str, Decimal] = {}
        for code, value in raw_rates.items():
            try:
                rate = Decimal(str(value))
            except InvalidOperation:
                logger.warning(f"Ignoring malformed rate for {code}: {value!r}")
                continue
            if rate > 0:
                rates[code.upper()] = rate
        rates[base] = Decimal("1")
        return rates
