"""Shared service-layer error types.

Centralised here to avoid circular imports between the client, submitter
and resolver modules.
"""

from dataclasses import dataclass


@dataclass
class FulfillmentServiceError(Exception):
    """Transport-level failure talking to the fulfillment service.

    Attributes:
        code: Error code (E-XXXX format)
        message: Human-readable error message
        remediation: Suggested fix
        details: Raw error details
    """

    code: str
    message: str
    remediation: str = ""
    details: dict | None = None

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"[{self.code}] {self.message}"


class ResponseParseError(Exception):
    """Response body is not well-formed XML."""
