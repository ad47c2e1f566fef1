"""Exchange rate service.

Fetches the current conversion rate between the storefront's native currency
(VND) and the display currency (USD) from open.er-api.com. The rate is
fetched fresh on every call; there is no cache and no retry. Any failure is
reported as None so callers can degrade instead of aborting.
"""

import logging
from typing import Any
from urllib.parse import urlparse

import aiohttp

from ..config import RateSourceConfig
from ..models import ExchangeRate, is_number

logger = logging.getLogger(__name__)


class ExchangeRateService:
    """Reads one currency entry from the rate source's conversion table."""

    def __init__(self, settings: RateSourceConfig, timeout: float = 10.0):
        """Initialize exchange rate service.

        Args:
            settings: Rate source endpoint and currency pair.
            timeout: Total timeout in seconds for the rate request.
        """
        self.settings = settings
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def source_name(self) -> str:
        return urlparse(self.settings.endpoint).netloc or self.settings.endpoint

    async def fetch_rate(self, session: aiohttp.ClientSession) -> ExchangeRate | None:
        """Get the native-per-display currency rate.

        Args:
            session: HTTP session for requests.

        Returns:
            ExchangeRate, or None when the source is unreachable, the body is
            not JSON, or it lacks a positive numeric entry for the target currency.
        """
        base = self.settings.base_currency
        target = self.settings.target_currency
        try:
            logger.info(f"Fetching {base}/{target} rate from {self.source_name}")
            async with session.get(self.settings.endpoint, timeout=self.timeout) as response:
                response.raise_for_status()
                data = await response.json(content_type=None)
        except Exception as e:
            logger.warning(f"Rate source unavailable for {base}/{target}: {e!r}")
            return None

        rate = self._extract_rate(data, target)
        if rate is None:
            logger.warning(f"{target} rate missing or invalid in {self.source_name} response")
            return None

        updated = data.get("time_last_update_utc")
        logger.info(f"{base}/{target} rate: {rate} (updated {updated})")
        return ExchangeRate(
            rate=rate,
            base_currency=base,
            target_currency=target,
            source=self.source_name,
            updated=updated if isinstance(updated, str) else None,
        )

    @staticmethod
    def _extract_rate(data: Any, currency: str) -> float | None:
        if not isinstance(data, dict):
            return None
        rates = data.get("rates")
        if not isinstance(rates, dict):
            return None
        value = rates.get(currency)
        if not is_number(value) or value <= 0:
            return None
        return float(value)
