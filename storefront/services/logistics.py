"""GHN logistics provider API client.

Thin async wrapper over the provider's public API: location master data,
available shipping services for a route and fee calculation. Responses are
returned as the provider's JSON envelope (``code``, ``message``, ``data``)
without reinterpretation. Every failure, whether an error status, an
unparseable body or a transport problem, is raised as ProviderError.
"""

import asyncio
import json
import logging
from typing import Any

import aiohttp

from ..config import LogisticsConfig
from ..errors import ProviderError

logger = logging.getLogger(__name__)


class LogisticsClient:
    """Async client for the GHN shipping API."""

    def __init__(self, settings: LogisticsConfig, timeout: float = 10.0):
        """Initialize client.

        Args:
            settings: Provider credentials and endpoint layout.
            timeout: Total timeout in seconds for each request.
        """
        self.settings = settings
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self, with_shop: bool = False) -> dict[str, str]:
        headers = {
            "Token": self.settings.token,
            "Content-Type": "application/json",
        }
        if with_shop:
            headers["ShopId"] = str(self.settings.shop_id)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        session: aiohttp.ClientSession,
        payload: dict[str, Any] | None = None,
        with_shop: bool = False,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON envelope.

        Raises:
            ProviderError: On error status, non-JSON body or transport failure.
        """
        url = self._url(path)
        try:
            async with session.request(
                method,
                url,
                json=payload,
                headers=self._headers(with_shop),
                timeout=self.timeout,
            ) as response:
                status = response.status
                body = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"GHN {method} {path} failed: {message}")
            raise ProviderError(message) from e

        try:
            data = json.loads(body)
        except ValueError:
            data = None

        if status >= 400:
            logger.error(f"GHN {method} {path} returned {status}: {body[:500]}")
            raise ProviderError(data if data is not None else body, status=status)

        if not isinstance(data, dict):
            logger.error(f"GHN {method} {path} returned a non-JSON body")
            raise ProviderError(body, status=status)

        return data

    async def get_provinces(self, session: aiohttp.ClientSession) -> dict[str, Any]:
        """List provinces."""
        return await self._request("GET", self.settings.provinces_path, session)

    async def get_districts(
        self, province_id: int, session: aiohttp.ClientSession
    ) -> dict[str, Any]:
        """List districts of a province."""
        return await self._request(
            "POST", self.settings.districts_path, session, payload={"province_id": province_id}
        )

    async def get_wards(self, district_id: int, session: aiohttp.ClientSession) -> dict[str, Any]:
        """List wards of a district."""
        return await self._request(
            "POST", self.settings.wards_path, session, payload={"district_id": district_id}
        )

    async def get_available_services(
        self, from_district: int, to_district: int, session: aiohttp.ClientSession
    ) -> dict[str, Any]:
        """List shipping services offered between two districts for the configured shop.

        Args:
            from_district: Origin district id.
            to_district: Destination district id.
            session: HTTP session for requests.

        Returns:
            Provider envelope whose ``data`` is a list of services or null.
        """
        payload = {
            "shop_id": self.settings.shop_id,
            "from_district": from_district,
            "to_district": to_district,
        }
        return await self._request("POST", self.settings.services_path, session, payload=payload)

    async def calculate_fee(
        self, params: dict[str, Any], session: aiohttp.ClientSession
    ) -> dict[str, Any]:
        """Request a shipping fee quote.

        Args:
            params: Fee request body (service id, route and shipment attributes).
            session: HTTP session for requests.

        Returns:
            Provider envelope with the fee breakdown in ``data``.
        """
        return await self._request(
            "POST", self.settings.fee_path, session, payload=params, with_shop=True
        )
