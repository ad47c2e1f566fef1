"""Shipping service resolution and fee quotation.

Picks the shipping product for a route from the provider's service listing
and requests a fee quote for a shipment on the chosen product.
"""

import logging
from collections.abc import Iterable
from typing import Any

import aiohttp
from pydantic import ValidationError

from ..errors import NoServiceAvailable, ProviderError
from ..models import FeeQuote, ServiceDescriptor, ShipmentSpec
from .logistics import LogisticsClient

logger = logging.getLogger(__name__)


def select_service(services: Iterable[ServiceDescriptor]) -> ServiceDescriptor | None:
    """Pick the shipping product for a route.

    Prefers the first standard-tier entry (``service_type_id == 2``), then
    falls back to the first entry in provider order. Provider order is kept
    as-is; no cost or speed ranking is applied.

    Args:
        services: Services in the order the provider returned them.

    Returns:
        Selected service, None if the listing is empty.
    """
    services = list(services)
    if not services:
        return None

    for service in services:
        if service.is_standard:
            return service

    return services[0]


class ShippingService:
    def __init__(self, client: LogisticsClient):
        self.client = client

    async def list_services(
        self, from_district_id: int, to_district_id: int, session: aiohttp.ClientSession
    ) -> list[ServiceDescriptor]:
        """Fetch and parse the provider's service listing for a route.

        Raises:
            ProviderError: If the provider call fails or returns malformed entries.
        """
        envelope = await self.client.get_available_services(
            from_district_id, to_district_id, session
        )
        raw_services = envelope.get("data") or []
        if not isinstance(raw_services, list):
            raise ProviderError(envelope)

        try:
            return [ServiceDescriptor.model_validate(item) for item in raw_services]
        except ValidationError as e:
            logger.error(f"Malformed service listing for {from_district_id}->{to_district_id}: {e}")
            raise ProviderError(envelope) from e

    async def resolve_service(
        self, from_district_id: int, to_district_id: int, session: aiohttp.ClientSession
    ) -> ServiceDescriptor:
        """Resolve the shipping product used for a route.

        Args:
            from_district_id: Origin district id.
            to_district_id: Destination district id.
            session: HTTP session for requests.

        Returns:
            Selected ServiceDescriptor.

        Raises:
            NoServiceAvailable: If the provider offers nothing for the route.
            ProviderError: If the provider call fails.
        """
        services = await self.list_services(from_district_id, to_district_id, session)
        service = select_service(services)
        if service is None:
            logger.warning(f"No shipping service for route {from_district_id}->{to_district_id}")
            raise NoServiceAvailable(from_district_id, to_district_id)

        logger.info(
            f"Route {from_district_id}->{to_district_id}: service {service.service_id} "
            f"(type {service.service_type_id}) out of {len(services)}"
        )
        return service

    async def quote_fee(
        self,
        service_id: int,
        from_district_id: int,
        to_district_id: int,
        to_ward_code: str,
        shipment: ShipmentSpec,
        session: aiohttp.ClientSession,
    ) -> FeeQuote:
        """Request a fee quote for a shipment on a resolved service.

        The provider envelope is returned unchanged; provider status codes
        inside a successful response are not reinterpreted.

        Raises:
            ProviderError: If the provider call fails.
        """
        params: dict[str, Any] = {
            "service_id": service_id,
            "from_district_id": from_district_id,
            "to_district_id": to_district_id,
            "to_ward_code": to_ward_code,
            **shipment.model_dump(),
        }
        envelope = await self.client.calculate_fee(params, session)
        return FeeQuote.model_validate(envelope)
