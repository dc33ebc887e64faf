"""Error handling framework for the fulfillment adapter.

This package provides:
- Error code registry with E-XXXX format codes
- Fault string classification for fulfillment service responses
- Domain exceptions for shipment data defects

Error categories:
- E-1xxx: Shipment data errors
- E-2xxx: Workflow state errors
- E-3xxx: Fulfillment service errors
- E-4xxx: System/internal errors
"""

from src.errors.domain import (
    DomainError,
    MissingAddressFieldError,
    MissingSkuError,
    ValidationError,
)
from src.errors.fault_translation import (
    FaultKind,
    classify_fault,
    translate_fault,
)
from src.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    format_error_message,
    get_error,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "format_error_message",
    # Fault translation
    "FaultKind",
    "classify_fault",
    "translate_fault",
    # Domain
    "DomainError",
    "ValidationError",
    "MissingSkuError",
    "MissingAddressFieldError",
]
