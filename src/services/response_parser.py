"""Fulfillment service XML response parsing.

Uses xmltodict to convert the response to a dict, strips namespace
prefixes and attributes, then extracts tracking info and SOAP faults.
Lookups search the whole document (like an XPath ``//A/B``); the
position of nodes varies between response types.

Optional nodes are probed independently: a missing carrier, ship date or
arrival estimate never fails the parse.
"""

import logging
from typing import Any, Iterator
from xml.parsers.expat import ExpatError

import xmltodict

from src.services.errors import ResponseParseError
from src.services.fulfillment_models import TrackingDetails, TrackingInfo

logger = logging.getLogger(__name__)

TRACKING_NUMBER_PATH = ("FulfillmentShipmentPackage", "TrackingNumber")
ORDER_ID_PATH = ("MerchantFulfillmentOrderId",)
CARRIER_PATH = ("FulfillmentShipmentPackage", "CarrierCode")
SHIP_TIME_PATH = ("FulfillmentShipment", "ShippingDateTime")
ETA_PATH = ("FulfillmentShipmentPackage", "EstimatedArrivalDateTime")


def parse_document(text: str) -> dict[str, Any]:
    """Parse XML text into a namespace-free dict.

    Args:
        text: XML response body (already encoding-normalized).

    Returns:
        Nested dict keyed by local element names.

    Raises:
        ResponseParseError: If the text is not well-formed XML.
    """
    try:
        raw = xmltodict.parse(text)
    except ExpatError as e:
        raise ResponseParseError(str(e)) from e
    return _clean_element(raw) or {}


def _clean_element(element: Any) -> Any:
    """Strip namespace prefixes and drop attributes from a parsed element."""
    if isinstance(element, list):
        return [_clean_element(item) for item in element]
    if not isinstance(element, dict):
        return element

    cleaned: dict[str, Any] = {}
    for key, value in element.items():
        if key.startswith("@"):
            continue
        # "ns1:TrackingNumber" -> "TrackingNumber"
        local = key.split(":")[-1]
        cleaned[local] = _clean_element(value)

    # Element with attributes and text only: keep the text
    if set(cleaned) == {"#text"}:
        return cleaned["#text"]
    return cleaned


def _iter_elements(node: Any, name: str) -> Iterator[Any]:
    """Yield every element called ``name`` below ``node`` in document order."""
    if isinstance(node, list):
        for item in node:
            yield from _iter_elements(item, name)
        return
    if not isinstance(node, dict):
        return
    for key, value in node.items():
        if key == name:
            if isinstance(value, list):
                for item in value:
                    yield item
                    yield from _iter_elements(item, name)
                continue
            yield value
        yield from _iter_elements(value, name)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("#text", ""))
    if isinstance(value, list):
        return _text(value[0]) if value else ""
    return str(value)


def find_text(document: dict[str, Any], *path: str) -> str | None:
    """Return the text of the first ``//path[0]/path[1]/...`` match.

    Args:
        document: Parsed document from parse_document().
        *path: Element names. The first is searched at any depth, the
            rest must be direct children.

    Returns:
        The node text ("" for an empty element), or None if absent.
    """
    head, *rest = path
    for candidate in _iter_elements(document, head):
        node = candidate
        for name in rest:
            if isinstance(node, list):
                node = node[0] if node else None
            if not isinstance(node, dict) or name not in node:
                break
            node = node[name]
        else:
            return _text(node)
    return None


def parse_tracking(document: dict[str, Any]) -> TrackingInfo:
    """Extract tracking info from a GetFulfillmentOrder response.

    A document without a package tracking number is the normal state of
    an order that has not shipped yet and yields an empty TrackingInfo.

    Args:
        document: Parsed document from parse_document().

    Returns:
        TrackingInfo keyed by merchant fulfillment order id.
    """
    tracking_number = find_text(document, *TRACKING_NUMBER_PATH)
    if tracking_number is None:
        return TrackingInfo()

    order_id = find_text(document, *ORDER_ID_PATH)
    if not order_id:
        logger.warning(
            "Tracking number %s reported without MerchantFulfillmentOrderId; ignoring",
            tracking_number,
        )
        return TrackingInfo()

    fields: dict[str, str] = {"tracking_number": tracking_number}
    carrier = find_text(document, *CARRIER_PATH)
    if carrier is not None:
        fields["carrier"] = carrier
    ship_time = find_text(document, *SHIP_TIME_PATH)
    if ship_time is not None:
        fields["ship_time"] = ship_time
    eta = find_text(document, *ETA_PATH)
    if eta is not None:
        fields["eta"] = eta

    return TrackingInfo(entries={order_id: TrackingDetails(**fields)})


def parse_fault(document: dict[str, Any]) -> tuple[str, str] | None:
    """Extract (faultcode, faultstring) from a SOAP fault, if any."""
    for fault in _iter_elements(document, "Fault"):
        if not isinstance(fault, dict):
            return ("", _text(fault))
        return (_text(fault.get("faultcode")), _text(fault.get("faultstring")))
    return None
