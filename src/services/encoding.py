"""Encoding repair for untrusted response bodies.

The fulfillment service occasionally emits stray invalid byte sequences.
Rather than failing the whole parse, the malformed fragment is replaced.
"""

CANONICAL_ENCODING = "utf-8"


def normalize_encoding(raw: bytes | str) -> str:
    """Return valid UTF-8 text for a response body. Never raises.

    Args:
        raw: Response body as bytes, or text that may contain lone
            surrogates from a lossy upstream decode.

    Returns:
        The body decoded as UTF-8. Invalid or undefined sequences are
        replaced with U+FFFD (bytes) or '?' (unencodable text).
    """
    if isinstance(raw, str):
        try:
            raw.encode(CANONICAL_ENCODING)
            return raw
        except UnicodeEncodeError:
            return raw.encode(CANONICAL_ENCODING, errors="replace").decode(CANONICAL_ENCODING)

    try:
        return raw.decode(CANONICAL_ENCODING)
    except UnicodeDecodeError:
        return raw.decode(CANONICAL_ENCODING, errors="replace")
