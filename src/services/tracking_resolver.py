"""Poll step of the fulfillment workflow: fetch tracking for a shipment.

The caller polls until it gets FOUND or PERMANENT_FAILURE. PENDING means
"ask again later" and covers both the normal not-shipped-yet state and
transient service trouble.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.errors.fault_translation import FaultKind, classify_fault
from src.services.fulfillment_client import FulfillmentRemote
from src.services.fulfillment_models import TrackingDetails
from src.services.shipment_view import ShipmentView
from src.utils.pacing import Pacer
from src.utils.redaction import mask_emails, redact_for_logging

logger = logging.getLogger(__name__)


class TrackingStatus(str, Enum):
    FOUND = "found"
    PENDING = "pending"
    PERMANENT_FAILURE = "permanent_failure"


@dataclass(frozen=True)
class TrackingOutcome:
    """Classification of one tracking poll.

    Attributes:
        status: FOUND, PENDING or PERMANENT_FAILURE.
        details: Tracking details when FOUND.
        reason: Explanation for PENDING/PERMANENT_FAILURE.
    """

    status: TrackingStatus
    details: Optional[TrackingDetails] = None
    reason: str = ""

    @property
    def should_stop_polling(self) -> bool:
        return self.status is not TrackingStatus.PENDING


class TrackingResolver:
    """Resolves a shipment's tracking info from the fulfillment service."""

    def __init__(self, client: FulfillmentRemote, pacer: Optional[Pacer] = None) -> None:
        self._client = client
        self._pacer = pacer or Pacer()

    def resolve(self, shipment: ShipmentView) -> TrackingOutcome:
        """Fetch and classify tracking for a shipment.

        Args:
            shipment: A shipment previously submitted by number.

        Returns:
            TrackingOutcome. Never raises for service-side failures.
        """
        order_id = shipment.number
        self._pacer.pause()
        logger.info("fulfillment order id %s", order_id)

        try:
            response = self._client.fetch_tracking(order_id)
        except Exception as e:
            logger.warning("Tracking fetch for %s failed, will retry on next poll: %s", order_id, e)
            return TrackingOutcome(status=TrackingStatus.PENDING, reason=str(e))
        logger.info("Response params: %s", redact_for_logging(response.params))

        # Happens when the order was never accepted, e.g. an unknown SKU
        if not response.success and classify_fault(response.faultstring) is FaultKind.PERMANENT:
            return TrackingOutcome(
                status=TrackingStatus.PERMANENT_FAILURE,
                reason=mask_emails(response.faultstring) or "",
            )

        if not response.success:
            logger.info("Tracking not available for %s: %s", order_id, mask_emails(response.faultstring))
            return TrackingOutcome(
                status=TrackingStatus.PENDING,
                reason=response.faultstring or "unparseable response",
            )

        if not response.has_tracking:
            return TrackingOutcome(status=TrackingStatus.PENDING, reason="tracking not generated yet")

        details = response.tracking.get(order_id)
        if details is None:
            logger.warning(
                "Tracking returned for %s but not for %s",
                list(response.tracking.entries), order_id,
            )
            return TrackingOutcome(status=TrackingStatus.PENDING, reason="tracking keyed by another order")

        return TrackingOutcome(status=TrackingStatus.FOUND, details=details)
