"""Fault string classification for fulfillment service responses.

The fulfillment service reports failures as a free-text SOAP fault string.
This module maps those strings to a FaultKind (how the workflow should react)
and to an E-XXXX code from the registry (what to tell the operator). Both
come from one pattern table, and the workflow steps branch on FaultKind.
"""

from enum import Enum

from src.errors.registry import format_error_message, get_error


class FaultKind(str, Enum):
    """How a workflow step should react to a fault."""

    IGNORABLE = "ignorable"  # only in development mode
    PERMANENT = "permanent"  # stop polling, will never self-resolve
    TRANSIENT = "transient"  # try again later
    REJECTED = "rejected"  # business failure, abort the transition


CATALOG_MISSING_PATTERN = "ItemMissingCatalogData"
ORDER_NOT_FOUND_PATTERN = "requested order not found"

# Ordered: first match wins. Case-sensitive substring match.
FAULT_PATTERNS: list[tuple[str, FaultKind, str]] = [
    (CATALOG_MISSING_PATTERN, FaultKind.IGNORABLE, "E-3004"),
    (ORDER_NOT_FOUND_PATTERN, FaultKind.PERMANENT, "E-3003"),
    ("RequestThrottled", FaultKind.TRANSIENT, "E-3002"),
    ("throttled", FaultKind.TRANSIENT, "E-3002"),
    ("ServiceUnavailable", FaultKind.TRANSIENT, "E-3001"),
    ("InternalError", FaultKind.TRANSIENT, "E-3001"),
]

_DEFAULT_CODE = "E-3005"


def _match(faultstring: str | None) -> tuple[FaultKind, str]:
    if faultstring:
        for pattern, kind, code in FAULT_PATTERNS:
            if pattern in faultstring:
                return kind, code
    return FaultKind.REJECTED, _DEFAULT_CODE


def classify_fault(faultstring: str | None) -> FaultKind:
    """Classify a fault string.

    Args:
        faultstring: Fault text from the service, or None.

    Returns:
        The FaultKind of the first matching pattern, REJECTED otherwise.
    """
    return _match(faultstring)[0]


def translate_fault(faultstring: str | None) -> tuple[str, str, str]:
    """Translate a fault string to a registry error.

    Args:
        faultstring: Fault text from the service, or None.

    Returns:
        Tuple of (error_code, formatted_message, remediation).
    """
    _, code = _match(faultstring)
    error = get_error(code)
    message = format_error_message(
        code,
        faultstring=faultstring or "no fault string",
        details=faultstring or "no details",
    )
    return (code, message, error.remediation if error else "")
