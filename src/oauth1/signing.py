"""
OAuth 1.0a HMAC-SHA1 request signing (RFC 5849 §3.4).

The signature covers three parts joined by "&", each percent-encoded:
the HTTP method, the base string URI, and the normalized parameter string.
Any deviation from the server's reconstruction yields "invalid signature"
with no further diagnostic, so every step here is deterministic.
"""

import base64
import hashlib
import hmac
from collections import abc
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from .encoding import percent_encode

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"

# Parameters never included in the signature base string
EXCLUDED_PARAMETERS = frozenset({"oauth_signature"})

DEFAULT_PORTS = {"http": 80, "https": 443}

Parameters = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def _pairs(params: Optional[Parameters]) -> List[Tuple[str, str]]:
    if params is None:
        return []
    if isinstance(params, abc.Mapping):
        return list(params.items())
    return list(params)


def normalize_parameters(
    oauth_params: Parameters, extra_params: Optional[Parameters] = None
) -> str:
    """
    Build the normalized request parameter string.

    Both inputs are merged into one multiset of pairs (a key present in
    both is kept twice). Keys and values are percent-encoded, then sorted
    by encoded key and encoded value using ordinal comparison.

    Args:
        oauth_params: oauth_* protocol parameters
        extra_params: Query parameters of the request (mapping or pairs)

    Returns:
        Parameter string like "a=1&b=2"
    """
    encoded = [
        (percent_encode(key), percent_encode(value))
        for key, value in _pairs(oauth_params) + _pairs(extra_params)
        if key not in EXCLUDED_PARAMETERS
    ]
    encoded.sort()
    return "&".join(f"{key}={value}" for key, value in encoded)


def base_string_uri(url: str) -> Tuple[str, List[Tuple[str, str]]]:
    """
    Split a request URL into its base string URI and query parameters.

    Scheme and host are lower-cased, default ports dropped and the
    fragment discarded. Query parameters are returned separately because
    they belong in the parameter set, not the URI.

    Args:
        url: Absolute request URL, optionally with a query string

    Returns:
        Tuple of (base string URI, decoded query pairs)
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    netloc = host
    if parts.port is not None and parts.port != DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{parts.port}"

    uri = urlunsplit((scheme, netloc, parts.path or "/", "", ""))
    query = parse_qsl(parts.query, keep_blank_values=True)
    return uri, query


def build_base_string(method: str, url: str, normalized_params: str) -> str:
    """
    Assemble the signature base string.

    The normalized parameter string is already percent-encoded and is
    encoded again here as a single unit, as the protocol requires.

    Args:
        method: HTTP method (upper-cased here)
        url: Base string URI (no query, no fragment)
        normalized_params: Output of normalize_parameters()

    Returns:
        "METHOD&encoded-url&encoded-params"
    """
    return "&".join(
        (
            percent_encode(method.upper()),
            percent_encode(url),
            percent_encode(normalized_params),
        )
    )


def signing_key(consumer_secret: str, token_secret: Optional[str] = None) -> str:
    """Derive the HMAC key; the token part is empty (not omitted) without a token."""
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"


def sign(base_string: str, consumer_secret: str, token_secret: Optional[str] = None) -> str:
    """
    Compute the HMAC-SHA1 signature of a base string.

    Args:
        base_string: Output of build_base_string()
        consumer_secret: Application consumer secret
        token_secret: Secret of the request or access token, if any

    Returns:
        Standard base64 (padded) of the 20-byte digest
    """
    digest = hmac.new(
        signing_key(consumer_secret, token_secret).encode("utf-8"),
        base_string.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


@dataclass(frozen=True)
class SignatureRequest:
    """
    Everything needed to sign one request.

    Attributes:
        http_method: HTTP method (GET, POST, ...)
        url: Request URL; a query string is folded into the parameters
        oauth_parameters: oauth_* parameters, excluding the signature
        extra_parameters: Additional request parameters
        consumer_secret: Application consumer secret
        token_secret: Secret of the token being used, if any
    """

    http_method: str
    url: str
    oauth_parameters: Tuple[Tuple[str, str], ...]
    extra_parameters: Tuple[Tuple[str, str], ...] = ()
    consumer_secret: str = field(default="", repr=False)
    token_secret: Optional[str] = field(default=None, repr=False)

    @property
    def base_string(self) -> str:
        """Signature base string for this request."""
        uri, query = base_string_uri(self.url)
        normalized = normalize_parameters(
            self.oauth_parameters, list(self.extra_parameters) + query
        )
        return build_base_string(self.http_method, uri, normalized)


def sign_request(request: SignatureRequest) -> str:
    """
    Sign a request end to end.

    Args:
        request: Request to sign

    Returns:
        Value for the oauth_signature parameter
    """
    return sign(request.base_string, request.consumer_secret, request.token_secret)
