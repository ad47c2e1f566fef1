"""Global test configuration and fixtures.

Provides shared fixtures for all test levels including environment setup,
mocked aiohttp sessions and sample provider payloads. Ensures test isolation
and consistency.
"""

import json
import os
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

# Test constants
TEST_GHN_TOKEN = "test-ghn-token"
TEST_SHOP_ID = 885
TEST_GHN_BASE_URL = "https://ghn.test/shiip/public-api"
TEST_RATE_URL = "https://rates.test/v6/latest"


@pytest.fixture(autouse=True)
def test_environment():
    """Setup test environment variables for all tests."""
    test_env = {
        "GHN_TOKEN": TEST_GHN_TOKEN,
        "GHN_SHOP_ID": str(TEST_SHOP_ID),
        "GHN_BASE_URL": TEST_GHN_BASE_URL,
        "EXCHANGE_RATE_URL": TEST_RATE_URL,
        "EXCHANGE_RATE_BASE": "USD",
        "EXCHANGE_RATE_TARGET": "VND",
        "LOG_LEVEL": "DEBUG",
    }

    # Store original values
    original_env = {}
    for key, value in test_env.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield

    # Restore original values
    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value


def build_response(
    status: int = 200, json_data: Any = None, text: str | None = None
) -> MagicMock:
    """Build a mocked aiohttp response usable inside ``async with``."""
    response = MagicMock()
    response.status = status
    body = text if text is not None else json.dumps(json_data)
    response.text = AsyncMock(return_value=body)
    response.json = AsyncMock(return_value=json_data)
    return response


@pytest.fixture
def http_response():
    """Factory for mocked aiohttp responses."""
    return build_response


@pytest.fixture
def mock_http_session():
    """Mock aiohttp.ClientSession for testing HTTP requests.

    Both ``get`` and ``request`` return a successful empty JSON response
    until a test replaces it.
    """
    session = MagicMock(spec=aiohttp.ClientSession)
    response = build_response(json_data={})
    session.get.return_value.__aenter__.return_value = response
    session.request.return_value.__aenter__.return_value = response
    return session


@pytest.fixture
def sample_services_payload():
    """GHN available-services envelope with the standard tier listed second."""
    return {
        "code": 200,
        "message": "Success",
        "data": [
            {"service_id": 53319, "short_name": "Express", "service_type_id": 1},
            {"service_id": 53320, "short_name": "Standard", "service_type_id": 2},
            {"service_id": 53330, "short_name": "Saving", "service_type_id": 3},
        ],
    }


@pytest.fixture
def sample_fee_payload():
    """GHN fee envelope in VND."""
    return {
        "code": 200,
        "message": "Success",
        "data": {
            "total": 100,
            "service_fee": 20,
            "insurance_fee": 5000,
            "pick_station_fee": 0,
            "coupon_value": 0,
            "r2s_fee": 0,
        },
    }


@pytest.fixture
def sample_rate_payload():
    """open.er-api.com style conversion table anchored at USD."""
    return {
        "result": "success",
        "base_code": "USD",
        "time_last_update_utc": "Mon, 19 Oct 2026 00:02:31 +0000",
        "rates": {"USD": 1, "EUR": 0.92, "VND": 20},
    }
