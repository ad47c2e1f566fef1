"""Tests for the simplified quote pipeline.

Upstream services are mocked; the orchestrator itself runs for real.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.api.quotation_orchestrator import QuotationOrchestrator
from storefront.errors import NoServiceAvailable, ProviderError
from storefront.models import ExchangeRate, FeeQuote, ServiceDescriptor, ShipmentSpec


def _rate(value: float) -> ExchangeRate:
    return ExchangeRate(rate=value, base_currency="USD", target_currency="VND", source="rates.test")


@pytest.fixture
def calls():
    """Records the order in which upstream steps run."""
    return MagicMock()


@pytest.fixture
def shipping_service(calls, sample_fee_payload):
    service = MagicMock()
    service.resolve_service = AsyncMock(
        return_value=ServiceDescriptor(service_id=53320, service_type_id=2)
    )
    service.quote_fee = AsyncMock(return_value=FeeQuote.model_validate(sample_fee_payload))
    calls.attach_mock(service.resolve_service, "resolve_service")
    calls.attach_mock(service.quote_fee, "quote_fee")
    return service


@pytest.fixture
def exchange_rate_service(calls):
    service = MagicMock()
    service.fetch_rate = AsyncMock(return_value=_rate(20))
    calls.attach_mock(service.fetch_rate, "fetch_rate")
    return service


@pytest.fixture
def orchestrator(shipping_service, exchange_rate_service):
    return QuotationOrchestrator(shipping_service, exchange_rate_service)


@pytest.mark.asyncio
async def test_converts_total_and_service_fee(orchestrator):
    """total=100, service_fee=20 at rate 20 become 5.00 and 1.00."""
    response = await orchestrator.simplified_quote(1442, 1820, "030712", {}, MagicMock())

    payload = response.to_payload()
    assert payload["code"] == 200
    assert payload["message"] == "Success"
    assert payload["usdRate"] == 20
    assert payload["data"]["total"] == 5.00
    assert payload["data"]["service_fee"] == 1.00
    # other fee fields untouched
    assert payload["data"]["insurance_fee"] == 5000
    assert payload["data"]["pick_station_fee"] == 0


@pytest.mark.asyncio
async def test_steps_run_in_order(orchestrator, calls):
    session = MagicMock()

    await orchestrator.simplified_quote(1442, 1820, "030712", None, session)

    assert [name for name, _args, _kwargs in calls.mock_calls] == [
        "resolve_service",
        "quote_fee",
        "fetch_rate",
    ]


@pytest.mark.asyncio
async def test_defaults_merged_before_fee_call(orchestrator, shipping_service):
    session = MagicMock()

    await orchestrator.simplified_quote(
        1442, 1820, "030712", {"weight": 300, "coupon": None}, session
    )

    shipping_service.resolve_service.assert_awaited_once_with(1442, 1820, session)
    shipping_service.quote_fee.assert_awaited_once_with(
        53320,
        1442,
        1820,
        "030712",
        ShipmentSpec(weight=300),
        session,
    )


@pytest.mark.asyncio
async def test_no_service_aborts_before_fee_call(
    orchestrator, shipping_service, exchange_rate_service
):
    shipping_service.resolve_service.side_effect = NoServiceAvailable(1442, 3695)

    with pytest.raises(NoServiceAvailable):
        await orchestrator.simplified_quote(1442, 3695, "030712", {}, MagicMock())

    shipping_service.quote_fee.assert_not_awaited()
    exchange_rate_service.fetch_rate.assert_not_awaited()


@pytest.mark.asyncio
async def test_fee_error_propagates_without_rate_lookup(
    orchestrator, shipping_service, exchange_rate_service
):
    error_body = {"code": 400, "message": "Wrong ward code", "data": None}
    shipping_service.quote_fee.side_effect = ProviderError(error_body, status=400)

    with pytest.raises(ProviderError) as exc_info:
        await orchestrator.simplified_quote(1442, 1820, "bad", {}, MagicMock())

    assert exc_info.value.payload == error_body
    exchange_rate_service.fetch_rate.assert_not_awaited()


@pytest.mark.asyncio
async def test_rate_unavailable_degrades_to_native_currency(orchestrator, exchange_rate_service):
    exchange_rate_service.fetch_rate.return_value = None

    response = await orchestrator.simplified_quote(1442, 1820, "030712", {}, MagicMock())

    payload = response.to_payload()
    assert payload["usdRate"] == 0
    assert payload["data"]["total"] == 100
    assert payload["data"]["service_fee"] == 20
    assert payload["code"] == 200
    exchange_rate_service.fetch_rate.assert_awaited_once()


@pytest.mark.asyncio
async def test_rate_fetched_once_per_quote(orchestrator, exchange_rate_service):
    await orchestrator.simplified_quote(1442, 1820, "030712", {}, MagicMock())

    assert exchange_rate_service.fetch_rate.await_count == 1


@pytest.mark.asyncio
async def test_same_inputs_give_identical_output(orchestrator, exchange_rate_service):
    exchange_rate_service.fetch_rate.return_value = _rate(26345.5)

    first = await orchestrator.simplified_quote(1442, 1820, "030712", {"weight": 500}, MagicMock())
    second = await orchestrator.simplified_quote(1442, 1820, "030712", {"weight": 500}, MagicMock())

    assert first.to_payload() == second.to_payload()


@pytest.mark.asyncio
async def test_non_numeric_total_passes_through(orchestrator, shipping_service):
    shipping_service.quote_fee.return_value = FeeQuote.model_validate(
        {"code": 200, "message": "Success", "data": {"total": "pending", "service_fee": 60}}
    )

    response = await orchestrator.simplified_quote(1442, 1820, "030712", {}, MagicMock())

    data = response.to_payload()["data"]
    assert data["total"] == "pending"
    assert data["service_fee"] == 3.00


@pytest.mark.asyncio
async def test_missing_fee_data(orchestrator, shipping_service):
    shipping_service.quote_fee.return_value = FeeQuote.model_validate(
        {"code": 200, "message": "Success", "data": None}
    )

    response = await orchestrator.simplified_quote(1442, 1820, "030712", {}, MagicMock())

    assert response.to_payload() == {
        "code": 200,
        "message": "Success",
        "usdRate": 20,
        "data": {},
    }
