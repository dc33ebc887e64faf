"""Tests for the fulfillment client and its HTTP transport.

HTTP traffic is served by httpx.MockTransport, so the full path from
request encoding through response normalization is exercised offline.
"""

import logging

import httpx
import pytest

from src.services.errors import FulfillmentServiceError
from src.services.fulfillment_client import (
    CREATE_ORDER,
    GET_ORDER,
    FulfillmentClient,
    HttpFulfillmentTransport,
    RawResponse,
    build_create_order_body,
    build_get_order_body,
)
from src.services.request_builder import RequestBuilder
from src.services.response_parser import parse_document
from tests.helpers.responses import (
    CATALOG_MISSING_FAULT,
    CREATE_ORDER_OK,
    ORDER_NOT_FOUND_FAULT,
    TRACKING_CARRIER_ONLY,
    TRACKING_FULL,
    TRACKING_NOT_SHIPPED,
)
from tests.helpers.shipments import build_shipment

ENDPOINT = "https://fulfillment.test/"


def _client(status_code=200, body=b"", seen=None, **transport_kwargs):
    """Build a FulfillmentClient over a MockTransport returning one canned body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        content = body.encode("utf-8") if isinstance(body, str) else body
        return httpx.Response(status_code, content=content)

    transport = HttpFulfillmentTransport(
        endpoint=ENDPOINT,
        transport=httpx.MockTransport(handler),
        **transport_kwargs,
    )
    return FulfillmentClient(transport)


def _request(**kwargs):
    return RequestBuilder().build(build_shipment(**kwargs))


class TestBuildCreateOrderBody:
    """Test CreateFulfillmentOrder envelope encoding."""

    def _operation(self, body):
        return parse_document(body)["Envelope"]["Body"][CREATE_ORDER]

    def test_order_fields(self):
        op = self._operation(build_create_order_body(_request()))
        assert op["MerchantFulfillmentOrderId"] == "H123"
        assert op["DisplayableOrderId"] == "H123"
        assert op["DisplayableOrderDateTime"] == "2024-03-01T12:30:00"
        assert op["DisplayableOrderComment"] == "Thank you for your order."
        assert op["ShippingSpeedCategory"] == "Standard"

    def test_destination_address(self):
        op = self._operation(build_create_order_body(_request()))
        assert op["DestinationAddress"] == {
            "Name": "Alice Johnson",
            "Line1": "123 Main St",
            "Line2": "Apt 4",
            "City": "Los Angeles",
            "StateOrProvinceCode": "CA",
            "CountryCode": "US",
            "PostalCode": "90001",
        }

    def test_line2_omitted_when_absent(self):
        op = self._operation(build_create_order_body(_request(address2=None)))
        assert "Line2" not in op["DestinationAddress"]

    def test_items_in_order(self):
        op = self._operation(build_create_order_body(_request()))
        assert op["Item"] == [
            {"MerchantSKU": "SKU-A", "MerchantFulfillmentOrderItemId": "0", "Quantity": "2"},
            {"MerchantSKU": "SKU-B", "MerchantFulfillmentOrderItemId": "1", "Quantity": "1"},
        ]

    def test_notification_email(self):
        op = self._operation(build_create_order_body(_request()))
        assert op["NotificationEmailList"] == {"member": "alice@example.com"}

    def test_no_email_no_notification_list(self):
        op = self._operation(build_create_order_body(_request(email=None)))
        assert "NotificationEmailList" not in op

    def test_get_order_body(self):
        doc = parse_document(build_get_order_body("H123"))
        assert doc["Envelope"]["Body"][GET_ORDER] == {"MerchantFulfillmentOrderId": "H123"}


class TestHttpFulfillmentTransport:
    """Test the httpx transport layer."""

    def test_posts_soap_headers(self):
        seen = []
        client = _client(body=CREATE_ORDER_OK, seen=seen)
        client.submit_order(_request())

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == ENDPOINT
        assert request.headers["SOAPAction"] == CREATE_ORDER
        assert request.headers["Content-Type"].startswith("text/xml")
        assert b"<MerchantSKU>SKU-A</MerchantSKU>" in request.content

    def test_basic_auth_when_api_key_set(self):
        seen = []
        client = _client(body=CREATE_ORDER_OK, seen=seen, api_key="AKID", secret_key="s3cr3t")
        client.submit_order(_request())
        assert seen[0].headers["Authorization"].startswith("Basic ")

    def test_no_auth_without_api_key(self):
        seen = []
        client = _client(body=CREATE_ORDER_OK, seen=seen)
        client.submit_order(_request())
        assert "Authorization" not in seen[0].headers

    def test_error_status_is_returned_not_raised(self):
        transport = HttpFulfillmentTransport(
            endpoint=ENDPOINT,
            transport=httpx.MockTransport(lambda r: httpx.Response(500, content=b"boom")),
        )
        raw = transport.send(GET_ORDER, build_get_order_body("H123"))
        assert raw == RawResponse(status_code=500, content=b"boom")

    def test_connect_error_raises_service_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        transport = HttpFulfillmentTransport(
            endpoint=ENDPOINT, transport=httpx.MockTransport(handler)
        )
        with pytest.raises(FulfillmentServiceError) as exc_info:
            transport.send(CREATE_ORDER, "<x/>")
        assert exc_info.value.code == "E-3001"
        assert exc_info.value.details["operation"] == CREATE_ORDER
        assert "connection refused" in exc_info.value.message


class TestSubmitOrder:
    """Test CreateFulfillmentOrder response normalization."""

    def test_success(self):
        result = _client(body=CREATE_ORDER_OK).submit_order(_request())
        assert result.success is True
        assert result.params == {"response_status": "Accepted"}
        assert result.faultstring is None

    def test_fault_in_error_response(self):
        result = _client(500, CATALOG_MISSING_FAULT).submit_order(_request())
        assert result.success is False
        assert result.faultstring == "ItemMissingCatalogData: SKU-A is not listed"
        assert result.params["response_status"] == "Failure"
        assert result.params["http_code"] == 500
        assert result.params["faultcode"] == "aws:Client.InvalidParameterValue"
        assert result.params["faultstring"] == result.faultstring

    def test_fault_with_ok_status(self):
        result = _client(200, CATALOG_MISSING_FAULT).submit_order(_request())
        assert result.success is False
        assert "ItemMissingCatalogData" in result.faultstring

    def test_non_xml_error_body(self):
        result = _client(503, "<html>Service Unavailable").submit_order(_request())
        assert result.success is False
        assert result.faultstring == "HTTP 503"
        assert result.params["http_code"] == 503

    def test_parse_error_logs_diagnostic(self, caplog):
        """An unparseable 200 body is logged and reported as a failure."""
        caplog.set_level(logging.INFO, logger="src.services.fulfillment_client")
        result = _client(200, "this is not xml").submit_order(_request())

        assert result.success is False
        assert result.params == {"response_status": "Failure"}
        assert result.faultstring is None
        assert "xml parse error" in caplog.text
        assert "this is not xml" in caplog.text

    def test_context_manager_closes_transport(self):
        class ClosingTransport:
            closed = False

            def send(self, operation, body):
                return RawResponse(200, CREATE_ORDER_OK.encode("utf-8"))

            def close(self):
                self.closed = True

        transport = ClosingTransport()
        with FulfillmentClient(transport) as client:
            assert client.submit_order(_request()).success
        assert transport.closed


class TestFetchTracking:
    """Test GetFulfillmentOrder response normalization."""

    def test_sends_order_id(self):
        seen = []
        _client(body=TRACKING_NOT_SHIPPED, seen=seen).fetch_tracking("H123")
        assert seen[0].headers["SOAPAction"] == GET_ORDER
        assert b"<MerchantFulfillmentOrderId>H123</MerchantFulfillmentOrderId>" in seen[0].content

    def test_tracking_found(self):
        result = _client(body=TRACKING_FULL).fetch_tracking("H123")
        assert result.success is True
        assert result.has_tracking
        assert result.tracking.tracking_numbers == {"H123": "1Z999AA10123456784"}
        assert result.params["tracking_numbers"] == {"H123": "1Z999AA10123456784"}
        assert result.params["fulfillment_info"]["H123"]["carrier"] == "UPS"

    def test_not_shipped_yet(self):
        result = _client(body=TRACKING_NOT_SHIPPED).fetch_tracking("H123")
        assert result.success is True
        assert not result.has_tracking
        assert "tracking_numbers" not in result.params

    def test_order_not_found(self):
        result = _client(500, ORDER_NOT_FOUND_FAULT).fetch_tracking("NOPE")
        assert result.success is False
        assert "requested order not found" in result.faultstring

    def test_invalid_bytes_are_repaired(self):
        """Invalid UTF-8 in the body does not prevent parsing."""
        body = TRACKING_CARRIER_ONLY.encode("utf-8").replace(b">UPS<", b">UP\xffS<")
        result = _client(body=body).fetch_tracking("ORD1")
        assert result.success is True
        details = result.tracking.get("ORD1")
        assert details.tracking_number == "1Z123"
        assert details.carrier == "UP�S"
