"""Percent-encoding per RFC 3986 as required by OAuth 1.0a (RFC 5849 §3.6)."""

from typing import Any
from urllib.parse import quote

from .exceptions import EncodingError


def percent_encode(value: Any) -> str:
    """
    Percent-encode a value for use in OAuth signatures and headers.

    Only the unreserved characters ``A-Za-z0-9-._~`` are left as-is. Every
    other byte of the UTF-8 encoding becomes ``%XX`` with uppercase hex, so
    a space is ``%20`` (never ``+``) and ``*!'()`` are escaped too.

    Encoding is not idempotent: an existing ``%`` is encoded again.

    Args:
        value: String to encode (other types are converted with str())

    Returns:
        Encoded string

    Raises:
        EncodingError: If the value cannot be encoded as UTF-8
    """
    if not isinstance(value, str):
        value = str(value)

    try:
        return quote(value.encode("utf-8"), safe="~")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Cannot percent-encode value: {e}") from e
