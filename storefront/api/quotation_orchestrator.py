"""Shipping quotation orchestration.

Composes service resolution, fee quotation and currency conversion into a
single simplified quote. Steps run strictly in sequence with one upstream
call each and no retries:

1. merge shipment overrides onto defaults
2. resolve the shipping service (abort if none)
3. quote the fee (abort on provider error)
4. fetch the exchange rate (degrade to no conversion on failure)
5. convert ``total`` and ``service_fee`` and build the response
"""

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from ..models import ShipmentSpec, SimplifiedFeeResponse
from ..services.exchange_rate import ExchangeRateService
from ..services.shipping import ShippingService

logger = logging.getLogger(__name__)

# Rate reported when no conversion was applied.
NO_CONVERSION_RATE = 0


class QuotationOrchestrator:
    """Builds simplified, currency converted shipping quotes."""

    def __init__(self, shipping_service: ShippingService, exchange_rate_service: ExchangeRateService):
        self.shipping_service = shipping_service
        self.exchange_rate_service = exchange_rate_service

    async def simplified_quote(
        self,
        from_district_id: int,
        to_district_id: int,
        to_ward_code: str,
        shipment_overrides: Mapping[str, Any] | None,
        session: aiohttp.ClientSession,
    ) -> SimplifiedFeeResponse:
        """Quote shipping for a route and re-denominate it into the display currency.

        Args:
            from_district_id: Origin district id.
            to_district_id: Destination district id.
            to_ward_code: Destination ward code.
            shipment_overrides: Caller supplied shipment attributes; omitted
                ones take the documented defaults.
            session: HTTP session shared by all upstream calls.

        Returns:
            SimplifiedFeeResponse. ``usd_rate`` is 0 and fee fields stay in the
            native currency when the rate source was unavailable.

        Raises:
            NoServiceAvailable: No shipping product exists for the route; no
                fee request is made.
            ProviderError: The service lookup or fee request failed.
        """
        shipment = ShipmentSpec.from_overrides(shipment_overrides)

        service = await self.shipping_service.resolve_service(
            from_district_id, to_district_id, session
        )

        fee = await self.shipping_service.quote_fee(
            service.service_id,
            from_district_id,
            to_district_id,
            to_ward_code,
            shipment,
            session,
        )

        exchange_rate = await self.exchange_rate_service.fetch_rate(session)
        if exchange_rate is None:
            logger.warning("Exchange rate unavailable, returning fee in native currency")
            usd_rate: float = NO_CONVERSION_RATE
            data = fee.data
        else:
            usd_rate = exchange_rate.rate
            data = fee.data.converted(usd_rate)

        return SimplifiedFeeResponse(
            code=fee.code,
            message=fee.message,
            usd_rate=usd_rate,
            data=data,
        )
