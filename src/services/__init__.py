"""Service layer for the fulfillment adapter.

Provides request building, the fulfillment service client, and the two
workflow steps: submit and tracking resolution.
"""

from src.services.fulfillment_client import (
    FulfillmentClient,
    HttpFulfillmentTransport,
)
from src.services.fulfillment_submitter import (
    FulfillmentSubmitter,
    SubmitOutcome,
    SubmitResult,
)
from src.services.request_builder import RequestBuilder
from src.services.tracking_resolver import (
    TrackingOutcome,
    TrackingResolver,
    TrackingStatus,
)

__all__ = [
    "FulfillmentClient",
    "HttpFulfillmentTransport",
    "FulfillmentSubmitter",
    "SubmitOutcome",
    "SubmitResult",
    "RequestBuilder",
    "TrackingResolver",
    "TrackingOutcome",
    "TrackingStatus",
]
