"""Pydantic models for fulfillment requests and responses.

Requests are projected from a shipment view by RequestBuilder; results are
produced by FulfillmentClient from the service's XML responses. All models
are transient and built per workflow step.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShippingSpeed(str, Enum):
    """Shipping speed categories accepted by the fulfillment service."""

    STANDARD = "Standard"
    EXPEDITED = "Expedited"
    PRIORITY = "Priority"


class Address(BaseModel):
    """Destination address sent with a fulfillment order.

    Attributes:
        name: Recipient full name
        address1: First street line
        address2: Second street line (optional)
        city: City name
        state: State/province code
        country: ISO country code
        zip: Postal code
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    address1: str = Field(..., min_length=1)
    address2: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    zip: str = Field(..., min_length=1)


class LineItem(BaseModel):
    """One SKU and its (possibly capped) quantity."""

    model_config = ConfigDict(frozen=True)

    sku: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class FulfillmentOptions(BaseModel):
    """Order-level options passed alongside address and line items."""

    model_config = ConfigDict(frozen=True)

    shipping_method: ShippingSpeed = ShippingSpeed.STANDARD
    order_date: datetime
    comment: str
    email: Optional[str] = None


class FulfillmentRequest(BaseModel):
    """Everything needed to submit one shipment to the service."""

    model_config = ConfigDict(frozen=True)

    order_id: str = Field(..., min_length=1)
    address: Address
    line_items: list[LineItem]
    options: FulfillmentOptions


class TrackingDetails(BaseModel):
    """Tracking data for one fulfillment order.

    Optional fields are only set when the service reported them; use
    ``as_dict()`` to get a mapping without the unreported keys.
    """

    tracking_number: str
    carrier: Optional[str] = None
    ship_time: Optional[str] = None
    eta: Optional[str] = None

    def as_dict(self) -> dict[str, str]:
        """Return the reported fields only."""
        return self.model_dump(exclude_unset=True)


class TrackingInfo(BaseModel):
    """Tracking details keyed by merchant fulfillment order id.

    An empty mapping means tracking has not been generated yet.
    """

    entries: dict[str, TrackingDetails] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def tracking_numbers(self) -> dict[str, str]:
        return {oid: d.tracking_number for oid, d in self.entries.items()}

    def get(self, order_id: str) -> TrackingDetails | None:
        return self.entries.get(order_id)

    def as_dict(self) -> dict[str, dict[str, str]]:
        return {oid: d.as_dict() for oid, d in self.entries.items()}


class FulfillmentResult(BaseModel):
    """Normalized result of one fulfillment service call.

    Attributes:
        success: Whether the service accepted the call
        params: Raw response parameters (response_status, faultcode,
            faultstring, http_code, tracking_numbers, fulfillment_info)
        faultstring: Fault text on failure, the single source of truth
            for fault classification
        tracking: Parsed tracking info (tracking calls only)
    """

    success: bool
    params: dict[str, Any] = Field(default_factory=dict)
    faultstring: Optional[str] = None
    tracking: Optional[TrackingInfo] = None

    @property
    def has_tracking(self) -> bool:
        return self.tracking is not None and not self.tracking.is_empty
