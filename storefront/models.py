"""Data models for the storefront shipping quotation pipeline.

Defines Pydantic models for the transient values that flow through a single
quotation request: shipment attributes, provider service descriptors, fee
quotes, exchange rates and the simplified (currency converted) response.
Nothing here is persisted; every instance lives for one request.
"""

from collections.abc import Mapping
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Provider "standard" tier marker in service listings.
STANDARD_SERVICE_TYPE_ID = 2

# Fee fields re-denominated into the target currency when a rate is known.
CONVERTIBLE_FEE_FIELDS = ("total", "service_fee")


def is_number(value: Any) -> bool:
    """Return True for real JSON numbers (bool is not a number here)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def convert_amount(amount: int | float, rate: float) -> float:
    """Divide a native-currency amount by a native-per-target rate.

    The result is rounded half-up to exactly two decimal places.
    """
    value = Decimal(str(amount)) / Decimal(str(rate))
    return float(value.quantize(Decimal("0.01"), ROUND_HALF_UP))


class ShipmentSpec(BaseModel):
    """Physical and declared attributes of a package.

    Attributes:
        height: Package height, provider units.
        length: Package length, provider units.
        width: Package width, provider units.
        weight: Package weight in grams.
        insurance_value: Declared value in the provider's native currency.
        coupon: Optional promotion code.
    """

    model_config = ConfigDict(populate_by_name=True)

    height: int = Field(default=15, gt=0)
    length: int = Field(default=15, gt=0)
    width: int = Field(default=15, gt=0)
    weight: int = Field(default=1000, gt=0)
    insurance_value: int = Field(
        default=500000,
        ge=0,
        validation_alias=AliasChoices("insurance_value", "insuranceValue"),
    )
    coupon: str | None = None

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any] | None = None) -> "ShipmentSpec":
        """Merge caller overrides onto the documented defaults.

        Keys that are absent or None fall back to the default value.
        """
        values = {key: value for key, value in (overrides or {}).items() if value is not None}
        return cls.model_validate(values)


class ServiceDescriptor(BaseModel):
    """One shipping product offered by the provider on a route."""

    model_config = ConfigDict(extra="allow")

    service_id: int
    service_type_id: int | None = None
    short_name: str | None = None

    @property
    def is_standard(self) -> bool:
        return self.service_type_id == STANDARD_SERVICE_TYPE_ID


class FeeData(BaseModel):
    """Fee breakdown returned by the provider.

    Only ``total`` and ``service_fee`` are interpreted; every other field the
    provider sends is carried through untouched. Both interpreted fields keep
    whatever value the provider sent and are only replaced when they are
    numbers and a conversion rate is available.
    """

    model_config = ConfigDict(extra="allow")

    total: Any = None
    service_fee: Any = None

    def converted(self, rate: float) -> "FeeData":
        """Return a copy with numeric convertible fields divided by ``rate``."""
        updates: dict[str, Any] = {}
        for name in CONVERTIBLE_FEE_FIELDS:
            value = getattr(self, name)
            if name in self.model_fields_set and is_number(value):
                updates[name] = convert_amount(value, rate)
        return self.model_copy(update=updates)

    def as_payload(self) -> dict[str, Any]:
        """Serialize back to the provider's shape, omitting fields it never sent."""
        payload = dict(self.model_extra or {})
        for name in CONVERTIBLE_FEE_FIELDS:
            if name in self.model_fields_set:
                payload[name] = getattr(self, name)
        return payload


class FeeQuote(BaseModel):
    """Provider response envelope for a fee calculation.

    Attributes:
        code: Provider status code, passed through unchanged.
        message: Provider status message, passed through unchanged.
        data: Fee breakdown; empty when the provider sent none.
    """

    model_config = ConfigDict(extra="allow")

    code: Any = None
    message: Any = None
    data: FeeData = Field(default_factory=FeeData)

    @field_validator("data", mode="before")
    @classmethod
    def _empty_data(cls, value: Any) -> Any:
        if not isinstance(value, (Mapping, FeeData)):
            return {}
        return value

    def as_payload(self) -> dict[str, Any]:
        return {
            **(self.model_extra or {}),
            "code": self.code,
            "message": self.message,
            "data": self.data.as_payload(),
        }


class ExchangeRate(BaseModel):
    """Conversion rate from the rate source.

    Attributes:
        rate: Native currency units per one target currency unit.
        base_currency: Currency the source table is anchored at (e.g. 'USD').
        target_currency: Native currency read from the table (e.g. 'VND').
        source: Host the rate came from.
        updated: Freshness timestamp reported by the source.
        fetched_at: When the rate was retrieved.
    """

    rate: float = Field(gt=0)
    base_currency: str
    target_currency: str
    source: str
    updated: str | None = None
    fetched_at: datetime = Field(default_factory=datetime.now)


class QuoteRequest(BaseModel):
    """Inbound simplified quote request.

    Accepts both the snake_case field names used by the storefront frontend
    and camelCase equivalents.
    """

    model_config = ConfigDict(populate_by_name=True)

    from_district_id: int = Field(validation_alias=AliasChoices("from_district_id", "fromDistrictId"))
    to_district_id: int = Field(validation_alias=AliasChoices("to_district_id", "toDistrictId"))
    to_ward_code: str = Field(validation_alias=AliasChoices("to_ward_code", "toWardCode"))
    height: int | None = None
    length: int | None = None
    width: int | None = None
    weight: int | None = None
    insurance_value: int | None = Field(
        default=None, validation_alias=AliasChoices("insurance_value", "insuranceValue")
    )
    coupon: str | None = None

    def shipment_overrides(self) -> dict[str, Any]:
        """Shipment attributes supplied by the caller, without route fields."""
        return self.model_dump(
            include={"height", "length", "width", "weight", "insurance_value", "coupon"},
            exclude_none=True,
        )


class FeeRequest(QuoteRequest):
    """Raw fee request where the caller already picked the service."""

    service_id: int = Field(validation_alias=AliasChoices("service_id", "serviceId"))


class SimplifiedFeeResponse(BaseModel):
    """Normalized, optionally currency converted fee quote.

    Attributes:
        code: Provider status code from the fee quote.
        message: Provider status message from the fee quote.
        usd_rate: Rate actually used for conversion, 0 when none was applied.
        data: Fee breakdown, converted when ``usd_rate`` is non-zero.
    """

    code: Any = None
    message: Any = None
    usd_rate: float = 0
    data: FeeData = Field(default_factory=FeeData)

    @property
    def converted(self) -> bool:
        return self.usd_rate > 0

    def to_payload(self) -> dict[str, Any]:
        """JSON body returned to storefront clients."""
        return {
            "code": self.code,
            "message": self.message,
            "usdRate": self.usd_rate,
            "data": self.data.as_payload(),
        }
