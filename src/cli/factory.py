"""Factories that wire configuration into the workflow steps.

CLI commands never construct transports or steps directly, so tests can
swap the client by patching ``create_client``.
"""

from src.cli.config import AppConfig
from src.services.fulfillment_client import FulfillmentClient, HttpFulfillmentTransport
from src.services.fulfillment_submitter import FulfillmentSubmitter
from src.services.request_builder import RequestBuilder
from src.services.tracking_resolver import TrackingResolver
from src.utils.pacing import Pacer


def create_client(config: AppConfig) -> FulfillmentClient:
    """Create a FulfillmentClient backed by the HTTP transport."""
    transport = HttpFulfillmentTransport(
        endpoint=config.amazon.endpoint,
        api_key=config.amazon.api_key,
        secret_key=config.amazon.secret_key,
        timeout=config.amazon.timeout_seconds,
    )
    return FulfillmentClient(transport)


def create_submitter(config: AppConfig, client: FulfillmentClient) -> FulfillmentSubmitter:
    """Create the submit step with the configured cap, comment and pacing."""
    settings = config.fulfillment
    return FulfillmentSubmitter(
        client=client,
        builder=RequestBuilder(
            max_quantity_failsafe=settings.max_quantity_failsafe,
            comment=settings.order_comment,
        ),
        pacer=Pacer(settings.pacing_delay_seconds),
        development_mode=settings.development_mode,
    )


def create_resolver(config: AppConfig, client: FulfillmentClient) -> TrackingResolver:
    """Create the tracking step with the configured pacing."""
    return TrackingResolver(
        client=client,
        pacer=Pacer(config.fulfillment.pacing_delay_seconds),
    )
