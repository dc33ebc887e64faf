"""Fulfillment service client: HTTP transport and response normalization.

Two layers:
- ``HttpFulfillmentTransport`` posts SOAP XML with httpx and returns the
  raw status code and body bytes. It knows nothing about response content.
- ``FulfillmentClient`` wraps any FulfillmentTransport. It encodes the
  request, then repairs the response encoding, parses the XML, extracts
  faults and tracking info, and returns a FulfillmentResult.

Example:
    transport = HttpFulfillmentTransport(endpoint=url, api_key=k, secret_key=s)
    with FulfillmentClient(transport) as client:
        result = client.submit_order(request)
        tracking = client.fetch_tracking("H123")
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx
import xmltodict

from src.errors.registry import format_error_message, get_error
from src.services.encoding import normalize_encoding
from src.services.errors import FulfillmentServiceError, ResponseParseError
from src.services.fulfillment_models import FulfillmentRequest, FulfillmentResult
from src.services.response_parser import parse_document, parse_fault, parse_tracking

logger = logging.getLogger(__name__)

SOAP_ENVELOPE_NS = "http://schemas.xmlsoap.org/soap/envelope/"
OUTBOUND_NS = "http://fba-outbound.amazonaws.com/doc/2007-08-02/"

CREATE_ORDER = "CreateFulfillmentOrder"
GET_ORDER = "GetFulfillmentOrder"

SUCCESS = "Accepted"
FAILURE = "Failure"

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class RawResponse:
    """Undecoded response from the fulfillment service."""

    status_code: int
    content: bytes


class FulfillmentTransport(Protocol):
    """Sends one SOAP operation and returns the raw response."""

    def send(self, operation: str, body: str) -> RawResponse: ...

    def close(self) -> None: ...


class FulfillmentRemote(Protocol):
    """The two operations the workflow steps consume."""

    def submit_order(self, request: FulfillmentRequest) -> FulfillmentResult: ...

    def fetch_tracking(self, order_id: str) -> FulfillmentResult: ...


# ── Wire encoding ─────────────────────────────────────────────────────


def _envelope(operation: str, payload: dict[str, Any]) -> str:
    return xmltodict.unparse({
        "soapenv:Envelope": {
            "@xmlns:soapenv": SOAP_ENVELOPE_NS,
            "soapenv:Body": {
                operation: {"@xmlns": OUTBOUND_NS, **payload},
            },
        }
    })


def build_create_order_body(request: FulfillmentRequest) -> str:
    """Encode a FulfillmentRequest as a CreateFulfillmentOrder envelope."""
    address = request.address
    destination = {
        "Name": address.name,
        "Line1": address.address1,
        "Line2": address.address2,
        "City": address.city,
        "StateOrProvinceCode": address.state,
        "CountryCode": address.country,
        "PostalCode": address.zip,
    }
    options = request.options
    payload: dict[str, Any] = {
        "MerchantFulfillmentOrderId": request.order_id,
        "DisplayableOrderId": request.order_id,
        "DisplayableOrderDateTime": options.order_date.isoformat(),
        "DisplayableOrderComment": options.comment,
        "ShippingSpeedCategory": options.shipping_method.value,
        "DestinationAddress": {k: v for k, v in destination.items() if v is not None},
    }
    if options.email:
        payload["NotificationEmailList"] = {"member": [options.email]}
    payload["Item"] = [
        {
            "MerchantSKU": item.sku,
            "MerchantFulfillmentOrderItemId": str(index),
            "Quantity": str(item.quantity),
        }
        for index, item in enumerate(request.line_items)
    ]
    return _envelope(CREATE_ORDER, payload)


def build_get_order_body(order_id: str) -> str:
    """Encode a GetFulfillmentOrder envelope for one order id."""
    return _envelope(GET_ORDER, {"MerchantFulfillmentOrderId": order_id})


# ── Transport ─────────────────────────────────────────────────────────


class HttpFulfillmentTransport:
    """FulfillmentTransport that posts SOAP requests over HTTP with httpx.

    HTTP error statuses are returned, not raised: the service reports
    faults in the body of 4xx/5xx responses. Only connection-level
    failures raise.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str = "",
        secret_key: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize with service endpoint and credentials.

        Args:
            endpoint: Fulfillment service URL.
            api_key: Access key, sent as the basic-auth user.
            secret_key: Secret key, sent as the basic-auth password.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._endpoint = endpoint
        self._client = httpx.Client(
            timeout=timeout,
            auth=(api_key, secret_key) if api_key else None,
            transport=transport,
        )

    def send(self, operation: str, body: str) -> RawResponse:
        """POST one SOAP operation.

        Raises:
            FulfillmentServiceError: On timeout or connection failure.
        """
        try:
            resp = self._client.post(
                self._endpoint,
                content=body.encode("utf-8"),
                headers={
                    "Content-Type": "text/xml; charset=utf-8",
                    "SOAPAction": operation,
                },
            )
        except httpx.HTTPError as e:
            raise _transport_error(operation, e) from e
        return RawResponse(status_code=resp.status_code, content=resp.content)

    def close(self) -> None:
        self._client.close()


def _transport_error(operation: str, error: httpx.HTTPError) -> FulfillmentServiceError:
    details = f"{operation}: {type(error).__name__}: {error}"
    err = get_error("E-3001")
    return FulfillmentServiceError(
        code="E-3001",
        message=format_error_message("E-3001", details=details),
        remediation=err.remediation if err else "",
        details={"operation": operation, "error": str(error)},
    )


# ── Normalizing client ────────────────────────────────────────────────


class FulfillmentClient:
    """Normalizing wrapper around a FulfillmentTransport.

    Attributes:
        _transport: Underlying transport (owned; closed by close()).
    """

    def __init__(self, transport: FulfillmentTransport) -> None:
        self._transport = transport

    def __enter__(self) -> "FulfillmentClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    def submit_order(self, request: FulfillmentRequest) -> FulfillmentResult:
        """Create a fulfillment order.

        Args:
            request: Built request, keyed by request.order_id.

        Returns:
            FulfillmentResult; success is False on a fault.

        Raises:
            FulfillmentServiceError: On transport failure.
        """
        raw = self._transport.send(CREATE_ORDER, build_create_order_body(request))
        return self._normalize(CREATE_ORDER, raw)

    def fetch_tracking(self, order_id: str) -> FulfillmentResult:
        """Fetch an order's status, including tracking once shipped.

        Unlike a plain tracking lookup this surfaces the service's fault
        when the order does not exist, so pollers can stop.

        Raises:
            FulfillmentServiceError: On transport failure.
        """
        raw = self._transport.send(GET_ORDER, build_get_order_body(order_id))
        return self._normalize(GET_ORDER, raw)

    # ── Response normalization ────────────────────────────────────────

    def _normalize(self, operation: str, raw: RawResponse) -> FulfillmentResult:
        text = normalize_encoding(raw.content)
        try:
            document = parse_document(text)
        except ResponseParseError as e:
            if raw.status_code >= 400:
                return self._fault_result(raw.status_code, None)
            logger.info("%s xml parse error (%s): %s", "*" * 20, operation, e)
            logger.info(text)
            return FulfillmentResult(success=False, params={"response_status": FAILURE})

        fault = parse_fault(document)
        if fault is not None or raw.status_code >= 400:
            return self._fault_result(raw.status_code, fault)

        if operation == GET_ORDER:
            return self._normalize_tracking_response(document)
        return FulfillmentResult(success=True, params={"response_status": SUCCESS})

    def _fault_result(self, status_code: int, fault: tuple[str, str] | None) -> FulfillmentResult:
        faultcode, faultstring = fault or ("", f"HTTP {status_code}")
        return FulfillmentResult(
            success=False,
            params={
                "response_status": FAILURE,
                "http_code": status_code,
                "faultcode": faultcode,
                "faultstring": faultstring,
            },
            faultstring=faultstring,
        )

    def _normalize_tracking_response(self, document: dict[str, Any]) -> FulfillmentResult:
        info = parse_tracking(document)
        params: dict[str, Any] = {"response_status": SUCCESS}
        if not info.is_empty:
            params["tracking_numbers"] = info.tracking_numbers
            params["fulfillment_info"] = info.as_dict()
        return FulfillmentResult(success=True, params=params, tracking=info)
