"""Typed domain exceptions for shipment data defects.

These are the only failures allowed to escape a workflow step. Remote
interaction failures are converted into typed outcomes instead.

Usage:
    raise MissingSkuError("Blue T-Shirt (M)")
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ValidationError(DomainError):
    """Shipment data failed validation. Indicates upstream data corruption."""

    code = "E-1000"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class MissingSkuError(ValidationError):
    """An inventory unit's variant has no SKU."""

    code = "E-1001"

    def __init__(self, variant: str) -> None:
        super().__init__(f"missing sku for {variant}")
        self.variant = variant


class MissingAddressFieldError(ValidationError):
    """The order's ship address lacks a required field."""

    code = "E-1002"

    def __init__(self, field: str) -> None:
        super().__init__(f"ship address is missing required field '{field}'")
        self.field = field
