"""Error code registry with E-XXXX format codes.

This module defines the error code system for the fulfillment adapter,
organizing errors into categories:
- E-1xxx: Shipment data errors
- E-2xxx: Workflow state errors
- E-3xxx: Fulfillment service errors
- E-4xxx: System/internal errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    DATA = "data"  # E-1xxx: Shipment data errors
    WORKFLOW = "workflow"  # E-2xxx: Workflow state errors
    REMOTE = "remote"  # E-3xxx: Fulfillment service errors
    SYSTEM = "system"  # E-4xxx: System/internal errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action the operator should take to resolve.
        is_retryable: Whether polling or resubmitting later may succeed.
    """

    code: str
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    is_retryable: bool = False


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Data errors (E-1xxx)
    "E-1001": ErrorCode(
        code="E-1001",
        category=ErrorCategory.DATA,
        title="Missing SKU",
        message_template="Inventory unit for '{variant}' has no SKU.",
        remediation="Assign a SKU to the variant before fulfilling the shipment.",
    ),
    "E-1002": ErrorCode(
        code="E-1002",
        category=ErrorCategory.DATA,
        title="Missing Address Field",
        message_template="Ship address is missing required field '{field}'.",
        remediation="Complete the order's ship address and retry.",
    ),
    # Workflow errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.WORKFLOW,
        title="Shipment Not Ready",
        message_template="Shipment {number} is in state '{state}', expected 'ready'.",
        remediation="Only ready shipments can be sent for fulfillment.",
    ),
    # Fulfillment service errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.REMOTE,
        title="Fulfillment Service Unavailable",
        message_template="Fulfillment service did not respond: {details}",
        remediation="Wait a few minutes and retry.",
        is_retryable=True,
    ),
    "E-3002": ErrorCode(
        code="E-3002",
        category=ErrorCategory.REMOTE,
        title="Fulfillment Request Throttled",
        message_template="Fulfillment service throttled the request: {faultstring}",
        remediation="Increase fulfillment.pacing_delay_seconds or retry later.",
        is_retryable=True,
    ),
    "E-3003": ErrorCode(
        code="E-3003",
        category=ErrorCategory.REMOTE,
        title="Order Not Found",
        message_template="Fulfillment service has no record of the order: {faultstring}",
        remediation="Stop polling. Resubmit the shipment after fixing the order data.",
    ),
    "E-3004": ErrorCode(
        code="E-3004",
        category=ErrorCategory.REMOTE,
        title="Item Missing Catalog Data",
        message_template="A SKU is not listed in the fulfillment catalog: {faultstring}",
        remediation="Create the listing in the seller catalog, or enable development_mode for test catalogs.",
    ),
    "E-3005": ErrorCode(
        code="E-3005",
        category=ErrorCategory.REMOTE,
        title="Fulfillment Request Rejected",
        message_template="Fulfillment service rejected the request: {faultstring}",
        remediation="Inspect the fault string and correct the shipment data.",
    ),
    "E-3006": ErrorCode(
        code="E-3006",
        category=ErrorCategory.REMOTE,
        title="Malformed Response",
        message_template="Fulfillment service returned a response that could not be parsed.",
        remediation="Retry later. Check the logged response body if the issue persists.",
        is_retryable=True,
    ),
    # System errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Configuration Error",
        message_template="Configuration is invalid: {details}",
        remediation="Fix the fulfillment.yaml file or FULFILLMENT_* environment variables.",
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def format_error_message(code: str, **context: object) -> str:
    """Render an error's message template, keeping unknown placeholders.

    Args:
        code: Error code in E-XXXX format.
        **context: Values to substitute into the template.

    Returns:
        Formatted message, or the bare code if it is not registered.
    """
    error = get_error(code)
    if error is None:
        return code
    try:
        return error.message_template.format(**context)
    except KeyError:
        return error.message_template
