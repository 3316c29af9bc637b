"""
Authorization header rendering for OAuth 1.0a requests.

Header values are encoded with the same percent-encoder used for signing,
independently of the normalization pass that produced the signature.
"""

import re
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple
from urllib.parse import unquote

from .encoding import percent_encode

_HEADER_PAIR = re.compile(r'\s*([^=,\s]+)="([^"]*)"\s*')


def build_authorization_header(params: Mapping[str, str]) -> str:
    """
    Render OAuth parameters as an Authorization header value.

    Pairs are sorted by name so the output is stable.

    Args:
        params: oauth_* parameters including oauth_signature (raw values)

    Returns:
        Header value like 'OAuth oauth_consumer_key="...", oauth_nonce="..."'
    """
    rendered = ", ".join(
        f'{percent_encode(key)}="{percent_encode(value)}"'
        for key, value in sorted(params.items())
    )
    return f"OAuth {rendered}"


def parse_authorization_header(header: str) -> Dict[str, str]:
    """
    Parse an OAuth Authorization header back into raw parameters.

    Args:
        header: Header value produced by build_authorization_header()

    Returns:
        Dictionary of parameter name to decoded value

    Raises:
        ValueError: If the header is not an OAuth header
    """
    scheme, _, rest = header.strip().partition(" ")
    if scheme != "OAuth":
        raise ValueError(f"Not an OAuth authorization header: {header[:20]!r}")

    params = {}
    for chunk in rest.split(","):
        if not chunk.strip():
            continue
        match = _HEADER_PAIR.fullmatch(chunk)
        if not match:
            raise ValueError(f"Malformed header parameter: {chunk.strip()!r}")
        params[unquote(match.group(1))] = unquote(match.group(2))
    return params


@dataclass(frozen=True)
class AuthorizationHeader:
    """
    Signed OAuth parameters for a single request.

    Single-use: the nonce and timestamp inside make it invalid for any
    other request, so it is never cached.

    Attributes:
        params: (name, raw value) pairs including oauth_signature
    """

    params: Tuple[Tuple[str, str], ...]

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "AuthorizationHeader":
        """Create header from a parameter mapping, preserving its order."""
        return cls(params=tuple(params.items()))

    def render(self) -> str:
        """Return the Authorization header value."""
        return build_authorization_header(dict(self.params))

    def as_dict(self) -> Dict[str, str]:
        """
        Get header dict for HTTP requests.

        Returns:
            {"Authorization": "OAuth ..."}
        """
        return {"Authorization": self.render()}

    def __str__(self) -> str:
        return self.render()
