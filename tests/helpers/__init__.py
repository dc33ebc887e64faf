"""Test helper utilities for fulfillment workflow tests."""

from tests.helpers.fake_fulfillment import FakeFulfillmentRemote, RemoteCall
from tests.helpers.shipments import build_shipment

__all__ = [
    "FakeFulfillmentRemote",
    "RemoteCall",
    "build_shipment",
]
