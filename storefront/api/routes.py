"""Storefront shipping API routes.

Exposes the simplified quote together with thin pass-through endpoints for
the logistics provider's master data, service listing and raw fee lookup,
and the current exchange rate. Errors are turned into responses by the
application-level handlers in ``storefront.main``.
"""

import logging
from typing import Any

import aiohttp
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..core.container import Container
from ..models import FeeRequest, QuoteRequest, ShipmentSpec
from .messages import RATE_UNAVAILABLE
from .utils import get_container, get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ghn", tags=["shipping"])


@router.get("/provinces")
async def list_provinces(
    container: Container = Depends(get_container),
    session: aiohttp.ClientSession = Depends(get_session),
) -> dict[str, Any]:
    return await container.logistics_client().get_provinces(session)


@router.get("/districts")
async def list_districts(
    province_id: int = Query(...),
    container: Container = Depends(get_container),
    session: aiohttp.ClientSession = Depends(get_session),
) -> dict[str, Any]:
    return await container.logistics_client().get_districts(province_id, session)


@router.get("/wards")
async def list_wards(
    district_id: int = Query(...),
    container: Container = Depends(get_container),
    session: aiohttp.ClientSession = Depends(get_session),
) -> dict[str, Any]:
    return await container.logistics_client().get_wards(district_id, session)


@router.get("/services")
async def list_services(
    from_district: int = Query(...),
    to_district: int = Query(...),
    container: Container = Depends(get_container),
    session: aiohttp.ClientSession = Depends(get_session),
) -> dict[str, Any]:
    return await container.logistics_client().get_available_services(
        from_district, to_district, session
    )


@router.post("/fee")
async def calculate_fee(
    body: FeeRequest,
    container: Container = Depends(get_container),
    session: aiohttp.ClientSession = Depends(get_session),
) -> dict[str, Any]:
    """Fee lookup for a caller-chosen service, shipment defaults applied."""
    fee = await container.shipping_service().quote_fee(
        body.service_id,
        body.from_district_id,
        body.to_district_id,
        body.to_ward_code,
        ShipmentSpec.from_overrides(body.shipment_overrides()),
        session,
    )
    return fee.as_payload()


@router.post("/quote-simplified")
@router.post("/calc-fee-simple")
async def quote_simplified(
    body: QuoteRequest,
    container: Container = Depends(get_container),
    session: aiohttp.ClientSession = Depends(get_session),
) -> dict[str, Any]:
    """Shipping fee for a route, converted to USD when a rate is available.

    Responds 400 when no shipping service exists for the route and 500 for
    any other failure.
    """
    quote = await container.quotation_orchestrator().simplified_quote(
        body.from_district_id,
        body.to_district_id,
        body.to_ward_code,
        body.shipment_overrides(),
        session,
    )
    return quote.to_payload()


@router.get("/exchange-rate")
async def exchange_rate(
    container: Container = Depends(get_container),
    session: aiohttp.ClientSession = Depends(get_session),
) -> Any:
    service = container.exchange_rate_service()
    rate = await service.fetch_rate(session)
    if rate is None:
        error = RATE_UNAVAILABLE.format(target=service.settings.target_currency)
        return JSONResponse(status_code=500, content={"success": False, "error": error})

    return {
        "success": True,
        "rate": rate.rate,
        "source": rate.source,
        "updated": rate.updated,
    }
