"""Error taxonomy for the quotation pipeline.

Rate source failures are deliberately absent: the exchange-rate adapter
returns None instead of raising, and the response reports a zero rate.
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for errors surfaced to storefront API callers."""


class NoServiceAvailable(StorefrontError):
    """The logistics provider offers no shipping product for the route."""

    def __init__(self, from_district_id: int, to_district_id: int):
        self.from_district_id = from_district_id
        self.to_district_id = to_district_id
        super().__init__(
            f"No shipping service available from district {from_district_id} "
            f"to district {to_district_id}"
        )


class ProviderError(StorefrontError):
    """The logistics provider rejected a request or could not be reached.

    Attributes:
        payload: Provider error body when it was returned, otherwise the
            transport error text.
        status: HTTP status of the provider response, None for transport errors.
    """

    def __init__(self, payload: Any, status: int | None = None):
        self.payload = payload
        self.status = status
        super().__init__(f"Logistics provider error (status={status}): {payload}")
