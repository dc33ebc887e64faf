"""Fulfillment request builder.

Projects a storefront shipment into the address, line items and options
the fulfillment service expects. Data defects (missing SKU or address
field) raise ValidationError subclasses and are never swallowed: they
indicate upstream corruption, not a transient condition.

Example:
    builder = RequestBuilder(max_quantity_failsafe=5)
    request = builder.build(shipment)
    result = client.submit_order(request)
"""

import logging
from typing import Optional

from src.errors.domain import MissingAddressFieldError, MissingSkuError
from src.services.fulfillment_models import (
    Address,
    FulfillmentOptions,
    FulfillmentRequest,
    LineItem,
    ShippingSpeed,
)
from src.services.shipment_view import (
    AddressView,
    InventoryUnitView,
    ShipmentView,
    ShippingMethodView,
)

logger = logging.getLogger(__name__)

DEFAULT_ORDER_COMMENT = "Thank you for your order."

# Substring (lowercased) -> speed. Checked in order.
_SPEED_KEYWORDS: list[tuple[str, ShippingSpeed]] = [
    ("expedited", ShippingSpeed.EXPEDITED),
    ("priority", ShippingSpeed.PRIORITY),
]


def map_shipping_speed(shipping_method: ShippingMethodView | str | None) -> ShippingSpeed:
    """Map a storefront shipping method to a service speed category.

    Args:
        shipping_method: Shipping method (or its name), or None.

    Returns:
        EXPEDITED if the name contains "expedited", PRIORITY if it contains
        "priority" (case-insensitive), STANDARD otherwise.
    """
    if shipping_method is None:
        return ShippingSpeed.STANDARD
    name = shipping_method if isinstance(shipping_method, str) else shipping_method.name
    lowered = (name or "").lower()
    for keyword, speed in _SPEED_KEYWORDS:
        if keyword in lowered:
            return speed
    return ShippingSpeed.STANDARD


def build_address(addr: AddressView) -> Address:
    """Map the order's ship address to a service Address.

    Raises:
        MissingAddressFieldError: If a required field is unset or blank.
    """
    name = " ".join(part for part in (addr.firstname, addr.lastname) if part)
    values = {
        "name": name,
        "address1": addr.address1,
        "city": addr.city,
        "state": addr.state_code,
        "country": addr.country_code,
        "zip": addr.zipcode,
    }
    for field, value in values.items():
        if not value or not str(value).strip():
            raise MissingAddressFieldError(field)

    return Address(address2=addr.address2 or None, **values)


def cap_quantity(quantity: int, max_quantity: Optional[int]) -> int:
    """Apply the failsafe cap. None means no cap."""
    if max_quantity is None:
        return quantity
    return min(max_quantity, quantity)


def build_line_items(
    inventory_units: list[InventoryUnitView] | tuple[InventoryUnitView, ...],
    max_quantity: Optional[int] = None,
) -> list[LineItem]:
    """Collapse inventory units into one line item per SKU.

    Order of first appearance is preserved. Counts are summed before the
    failsafe cap is applied.

    Args:
        inventory_units: One entry per physical unit.
        max_quantity: Optional per-SKU quantity cap.

    Returns:
        Deduplicated line items.

    Raises:
        MissingSkuError: On the first unit without a SKU.
    """
    counts: dict[str, int] = {}
    for unit in inventory_units:
        sku = unit.sku
        if not sku:
            raise MissingSkuError(unit.variant_name or "unknown variant")
        counts[sku] = counts.get(sku, 0) + 1

    items = []
    for sku, count in counts.items():
        quantity = cap_quantity(count, max_quantity)
        if quantity != count:
            logger.warning(
                "Capping quantity for %s from %d to %d (max_quantity_failsafe)",
                sku, count, quantity,
            )
        items.append(LineItem(sku=sku, quantity=quantity))
    return items


class RequestBuilder:
    """Builds FulfillmentRequests from shipment views.

    Attributes:
        _max_quantity_failsafe: Per-SKU quantity cap, or None.
        _comment: Customer-facing comment printed on the packing slip.
    """

    def __init__(
        self,
        max_quantity_failsafe: Optional[int] = None,
        comment: str = DEFAULT_ORDER_COMMENT,
    ) -> None:
        self._max_quantity_failsafe = max_quantity_failsafe
        self._comment = comment

    def build_options(self, shipment: ShipmentView) -> FulfillmentOptions:
        return FulfillmentOptions(
            shipping_method=map_shipping_speed(shipment.shipping_method),
            order_date=shipment.order.created_at,
            comment=self._comment,
            email=shipment.order.email,
        )

    def build(self, shipment: ShipmentView) -> FulfillmentRequest:
        """Build the full request for a shipment.

        Args:
            shipment: Shipment to fulfill.

        Returns:
            FulfillmentRequest keyed by the shipment number.

        Raises:
            ValidationError: On a missing SKU or address field.
        """
        return FulfillmentRequest(
            order_id=shipment.number,
            address=build_address(shipment.order.ship_address),
            line_items=build_line_items(
                shipment.inventory_units, self._max_quantity_failsafe
            ),
            options=self.build_options(shipment),
        )
