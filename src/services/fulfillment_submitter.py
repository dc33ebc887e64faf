"""Submit step of the fulfillment workflow.

Runs as a callback of the storefront's shipment state machine. The step
either completes (OK) or tells the engine to halt the transition (ABORT).
Remote failures never escape as exceptions; only shipment data defects
(ValidationError) do.

Example:
    submitter = FulfillmentSubmitter(client, pacer=Pacer(1.0))
    result = submitter.submit(shipment)
    if result.aborted:
        halt_transition(result.reason)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.errors.fault_translation import FaultKind, classify_fault, translate_fault
from src.errors.registry import format_error_message
from src.services.errors import FulfillmentServiceError
from src.services.fulfillment_client import FulfillmentRemote
from src.services.fulfillment_models import FulfillmentResult
from src.services.request_builder import RequestBuilder
from src.services.shipment_view import ShipmentView
from src.utils.pacing import Pacer
from src.utils.redaction import mask_emails, redact_for_logging

logger = logging.getLogger(__name__)


class SubmitOutcome(str, Enum):
    OK = "ok"
    ABORT = "abort"


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of one submit step.

    Attributes:
        outcome: OK to continue the transition, ABORT to halt it.
        reason: Human-readable explanation (empty on a clean OK).
        code: Registry error code for aborts and ignored faults.
        response: The service result, when a call was made.
    """

    outcome: SubmitOutcome
    reason: str = ""
    code: Optional[str] = None
    response: Optional[FulfillmentResult] = None

    @property
    def aborted(self) -> bool:
        return self.outcome is SubmitOutcome.ABORT


class FulfillmentSubmitter:
    """Sends ready shipments to the fulfillment service."""

    def __init__(
        self,
        client: FulfillmentRemote,
        builder: Optional[RequestBuilder] = None,
        pacer: Optional[Pacer] = None,
        development_mode: bool = False,
    ) -> None:
        """Initialize the submit step.

        Args:
            client: Fulfillment service client.
            builder: Request builder (default: no quantity cap).
            pacer: Pre-call pacer (default: 1 second).
            development_mode: Treat missing-catalog faults as success.
                Only for testing against non-production catalogs.
        """
        self._client = client
        self._builder = builder or RequestBuilder()
        self._pacer = pacer or Pacer()
        self._development_mode = development_mode

    def submit(self, shipment: ShipmentView) -> SubmitResult:
        """Submit a shipment for fulfillment.

        Args:
            shipment: Shipment to fulfill; must be in the ready state.

        Returns:
            SubmitResult with OK or ABORT.

        Raises:
            ValidationError: If the shipment has a missing SKU or address field.
        """
        logger.info("Fulfillment submit start for %s", shipment.number)

        if not shipment.is_ready:
            logger.info("wrong state: %s", shipment.state)
            return SubmitResult(
                outcome=SubmitOutcome.ABORT,
                reason=format_error_message("E-2001", number=shipment.number, state=shipment.state),
                code="E-2001",
            )

        request = self._builder.build(shipment)
        logger.info(
            "Submitting %s: %s",
            request.order_id,
            redact_for_logging(request.model_dump(mode="json")),
        )

        self._pacer.pause()
        try:
            response = self._client.submit_order(request)
        except Exception as e:
            logger.error("failed - %s", e)
            return SubmitResult(
                outcome=SubmitOutcome.ABORT,
                reason=f"Fulfillment service call failed: {e}",
                code=e.code if isinstance(e, FulfillmentServiceError) else "E-3001",
            )
        logger.info("Response params: %s", redact_for_logging(response.params))

        if not response.success:
            return self._handle_failure(response)

        logger.info("Fulfillment submit end for %s", shipment.number)
        return SubmitResult(outcome=SubmitOutcome.OK, response=response)

    def _handle_failure(self, response: FulfillmentResult) -> SubmitResult:
        code, message, _ = translate_fault(response.faultstring)

        if self._development_mode and classify_fault(response.faultstring) is FaultKind.IGNORABLE:
            logger.warning(
                "ignoring missing catalog item (development_mode; should not happen in production): %s",
                mask_emails(response.faultstring),
            )
            return SubmitResult(
                outcome=SubmitOutcome.OK,
                reason=message,
                code=code,
                response=response,
            )

        if response.faultstring is None:
            # Body could not be parsed at all
            code, message = "E-3006", format_error_message("E-3006")

        logger.error("abort - response was in error: %s", mask_emails(response.faultstring))
        return SubmitResult(
            outcome=SubmitOutcome.ABORT,
            reason=message,
            code=code,
            response=response,
        )
