# app/services/currency.py
"""
Currency conversion through a USD-based rate table.

`RateCache` is the only shared mutable state in the app. It is created once
at startup and injected into request handlers. Concurrent requests may both
decide the cache is stale and refresh it; refreshing is idempotent and a failed
refresh keeps the current rates, so no lock is taken.
"""
import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional

import httpx

from app.core.exceptions import RateSourceError, UnsupportedCurrencyError
from app.schemas.currency import CurrencyConversion
from app.utils.money import to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrencyRate:
    code: str
    rate: float  # units of this currency per 1 unit of the base currency
    symbol: str
    name: str


DEFAULT_RATES = (
    CurrencyRate("USD", 1, "$", "US Dollar"),
    CurrencyRate("EUR", 0.85, "€", "Euro"),
    CurrencyRate("GBP", 0.73, "£", "British Pound"),
    CurrencyRate("JPY", 110, "¥", "Japanese Yen"),
    CurrencyRate("CAD", 1.25, "C$", "Canadian Dollar"),
    CurrencyRate("AUD", 1.35, "A$", "Australian Dollar"),
    CurrencyRate("CHF", 0.92, "Fr", "Swiss Franc"),
    CurrencyRate("CNY", 6.45, "¥", "Chinese Yuan"),
)


class RateCache:
    """Rate table plus the wall-clock time of the last successful refresh."""

    def __init__(
        self,
        rates: Iterable[CurrencyRate] = DEFAULT_RATES,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self._rates: Dict[str, CurrencyRate] = {r.code: r for r in rates}
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.last_refreshed: Optional[float] = None

    def is_stale(self) -> bool:
        if self.last_refreshed is None:
            return True
        return self.clock() - self.last_refreshed > self.ttl_seconds

    def get(self, code: str) -> Optional[CurrencyRate]:
        return self._rates.get(code.upper())

    def all(self) -> List[CurrencyRate]:
        return list(self._rates.values())

    def update(self, fresh_rates: Dict[str, float]) -> int:
        """
        Apply fetched rates to the currencies already in the table and stamp
        the refresh time. Unknown codes are ignored. Returns the number updated.
        """
        updated = 0
        for code, rate in fresh_rates.items():
            existing = self._rates.get(code)
            if existing is None:
                continue
            try:
                value = float(rate)
            except (TypeError, ValueError):
                continue
            if value <= 0:
                continue
            self._rates[code] = replace(existing, rate=value)
            updated += 1
        self.last_refreshed = self.clock()
        return updated


class ExchangeRateSource:
    """exchangerate-api.com style endpoint: GET -> {"rates": {"EUR": 0.92, ...}}"""

    def __init__(self, url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> Dict[str, float]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                rates = response.json().get("rates")
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            raise RateSourceError(f"Failed to fetch currency rates: {e!r}") from e

        if not isinstance(rates, dict) or not rates:
            raise RateSourceError("Rate source returned no rates")
        return rates


class CurrencyConverter:
    def __init__(self, cache: RateCache, source: Optional[ExchangeRateSource] = None):
        self.cache = cache
        self.source = source

    async def refresh_if_stale(self) -> bool:
        """Refresh from the source when the TTL has passed. Never raises."""
        if self.source is None or not self.cache.is_stale():
            return False
        try:
            fresh = await self.source.fetch()
        except RateSourceError as e:
            logger.warning(f"{e} - using cached rates")
            return False
        updated = self.cache.update(fresh)
        logger.info(f"Refreshed {updated} currency rates")
        return True

    async def convert(self, amount, from_code: str, to_code: str) -> CurrencyConversion:
        """
        Convert via the base currency. The returned rate is the effective
        cross rate (target rate / source rate).
        """
        await self.refresh_if_stale()

        from_rate = self.cache.get(from_code)
        if from_rate is None:
            raise UnsupportedCurrencyError(from_code)
        to_rate = self.cache.get(to_code)
        if to_rate is None:
            raise UnsupportedCurrencyError(to_code)

        amount = to_decimal(amount)
        source_rate = to_decimal(from_rate.rate)
        target_rate = to_decimal(to_rate.rate)

        base_amount = amount / source_rate
        converted = base_amount * target_rate

        return CurrencyConversion(
            from_currency=from_rate.code,
            to_currency=to_rate.code,
            amount=float(amount),
            converted_amount=round(float(converted), 2),
            rate=round(float(target_rate / source_rate), 6),
            formatted=self.format_amount(converted, to_rate.code),
        )

    def supported_currencies(self) -> List[CurrencyRate]:
        return sorted(self.cache.all(), key=lambda r: r.name)

    def format_amount(self, amount, code: str) -> str:
        value = to_decimal(amount)
        rate = self.cache.get(code)
        if rate is None:
            return f"{value:.2f} {code}"
        sign = "-" if value < 0 else ""
        return f"{sign}{rate.symbol}{abs(value):,.2f}"


def build_currency_converter(settings) -> CurrencyConverter:
    return CurrencyConverter(
        RateCache(DEFAULT_RATES, ttl_seconds=settings.CURRENCY_CACHE_TTL_SECONDS),
        ExchangeRateSource(settings.EXCHANGE_RATE_API_URL, timeout=settings.RATE_SOURCE_TIMEOUT_SECONDS),
    )
