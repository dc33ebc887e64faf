"""Read-only views of the storefront's shipment model.

The storefront owns persistence; this package only reads a handful of
attributes. The Protocols describe what is read, and the frozen snapshot
dataclasses implement them for the CLI and for tests.

Example:
    shipment = load_shipment("shipments/H123.yaml")
    result = submitter.submit(shipment)
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence

import yaml

READY_STATE = "ready"


class AddressView(Protocol):
    firstname: Optional[str]
    lastname: Optional[str]
    address1: Optional[str]
    address2: Optional[str]
    city: Optional[str]
    state_code: Optional[str]
    country_code: Optional[str]
    zipcode: Optional[str]


class OrderView(Protocol):
    created_at: datetime
    email: Optional[str]
    ship_address: AddressView


class InventoryUnitView(Protocol):
    sku: Optional[str]
    variant_name: str


class ShippingMethodView(Protocol):
    name: str


class ShipmentView(Protocol):
    number: str
    state: str
    order: OrderView
    shipping_method: Optional[ShippingMethodView]
    inventory_units: Sequence[InventoryUnitView]

    @property
    def is_ready(self) -> bool: ...


@dataclass(frozen=True)
class AddressSnapshot:
    """Ship-to address as stored on the order."""

    firstname: Optional[str] = None
    lastname: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state_code: Optional[str] = None
    country_code: Optional[str] = None
    zipcode: Optional[str] = None


@dataclass(frozen=True)
class OrderSnapshot:
    created_at: datetime
    ship_address: AddressSnapshot
    email: Optional[str] = None


@dataclass(frozen=True)
class InventoryUnitSnapshot:
    """One physical unit. Repeated SKUs mean quantity > 1."""

    sku: Optional[str]
    variant_name: str = ""


@dataclass(frozen=True)
class ShippingMethodSnapshot:
    name: str


@dataclass(frozen=True)
class ShipmentSnapshot:
    """Point-in-time copy of a shipment and the parts of its order we read."""

    number: str
    state: str
    order: OrderSnapshot
    shipping_method: Optional[ShippingMethodSnapshot] = None
    inventory_units: tuple[InventoryUnitSnapshot, ...] = field(default_factory=tuple)

    @property
    def is_ready(self) -> bool:
        return self.state == READY_STATE


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def shipment_from_dict(data: dict[str, Any]) -> ShipmentSnapshot:
    """Build a ShipmentSnapshot from a plain mapping.

    Inventory units may be given as SKUs or as mappings with ``sku`` and
    ``variant_name`` keys. The shipping method may be a name or a mapping
    with a ``name`` key. Scalar values (an unquoted YAML zipcode, a numeric
    SKU) are coerced to strings.

    Args:
        data: Mapping with number, state, order, shipping_method and
            inventory_units keys.

    Returns:
        The snapshot.

    Raises:
        KeyError: If number, state or order is missing.
    """
    order_data = data["order"]
    address = AddressSnapshot(**{
        key: _optional_str(value)
        for key, value in (order_data.get("ship_address") or {}).items()
    })
    order = OrderSnapshot(
        created_at=_parse_datetime(order_data["created_at"]),
        email=_optional_str(order_data.get("email")),
        ship_address=address,
    )

    units = []
    for unit in data.get("inventory_units") or []:
        if isinstance(unit, dict):
            units.append(InventoryUnitSnapshot(
                sku=_optional_str(unit.get("sku")),
                variant_name=str(unit.get("variant_name", "")),
            ))
        else:
            units.append(InventoryUnitSnapshot(sku=_optional_str(unit)))

    method = data.get("shipping_method")
    if isinstance(method, dict):
        method = method.get("name")
    method_name = _optional_str(method)
    return ShipmentSnapshot(
        number=str(data["number"]),
        state=str(data["state"]),
        order=order,
        shipping_method=ShippingMethodSnapshot(name=method_name) if method_name else None,
        inventory_units=tuple(units),
    )


def load_shipment(path: str | Path) -> ShipmentSnapshot:
    """Load a shipment snapshot from a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Shipment file not found: {path}")

    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f) or {}
    return shipment_from_dict(data)
