"""Redaction of credentials and customer contact data for logging.

Request and response params are logged at every workflow step. Keys that
carry credentials or customer email are masked before they reach a log
handler. Matching is a case-insensitive substring test on dict keys.
"""

import re
from typing import Any

_DEFAULT_SENSITIVE_PATTERNS = frozenset({
    "secret", "api_key", "password", "signature",
    "awsaccesskeyid", "authorization", "email",
})

# Keys whose entire value is redacted (regardless of content type)
_CONTAINER_KEYS = frozenset({"credentials", "headers", "notificationemaillist"})

_REDACTED = "***REDACTED***"

_EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")


def _is_sensitive_key(key: str, sensitive_patterns: frozenset[str]) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in sensitive_patterns)


def redact_for_logging(
    obj: dict[str, Any],
    sensitive_patterns: frozenset[str] = _DEFAULT_SENSITIVE_PATTERNS,
) -> dict[str, Any]:
    """Return a copy of ``obj`` with sensitive values masked.

    Args:
        obj: Dict to redact (not mutated).
        sensitive_patterns: Substrings whose matching keys are masked.

    Returns:
        New dict. Nested dicts and lists of dicts are handled recursively.
    """
    result: dict[str, Any] = {}
    for key, value in obj.items():
        key_str = str(key)
        if key_str.lower() in _CONTAINER_KEYS:
            result[key] = _REDACTED
        elif _is_sensitive_key(key_str, sensitive_patterns):
            result[key] = _REDACTED
        elif isinstance(value, dict):
            result[key] = redact_for_logging(value, sensitive_patterns)
        elif isinstance(value, list):
            result[key] = [
                redact_for_logging(item, sensitive_patterns) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value
    return result


def mask_emails(text: str | None, max_length: int = 2000) -> str | None:
    """Mask email addresses in free text and truncate to ``max_length``."""
    if text is None:
        return None
    masked = _EMAIL_PATTERN.sub(_REDACTED, text)
    if len(masked) > max_length:
        masked = masked[:max_length - 3] + "..."
    return masked
