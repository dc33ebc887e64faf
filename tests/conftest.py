"""Root-level pytest fixtures for all tests.

Provides shared fixtures for:
- Shipment snapshots (ready by default, overridable per test)
- A fake fulfillment service
- Pacers that record instead of sleeping
"""

import pytest

from src.services.shipment_view import ShipmentSnapshot
from src.utils.pacing import Pacer
from tests.helpers.fake_fulfillment import FakeFulfillmentRemote
from tests.helpers.shipments import build_shipment


# ============================================================================
# Pytest Markers
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external services"
    )


# ============================================================================
# Shipment Fixtures
# ============================================================================


@pytest.fixture
def shipment() -> ShipmentSnapshot:
    """A ready shipment with units [SKU-A, SKU-A, SKU-B]."""
    return build_shipment()


@pytest.fixture
def fake_remote() -> FakeFulfillmentRemote:
    """Fake fulfillment service returning success by default."""
    return FakeFulfillmentRemote()


# ============================================================================
# Pacing Fixtures
# ============================================================================


class RecordingSleep:
    """Sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def pacer(recording_sleep: RecordingSleep) -> Pacer:
    """One-second pacer that records instead of sleeping."""
    return Pacer(1.0, sleep=recording_sleep)
