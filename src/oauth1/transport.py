"""
HTTP transport for signed E*TRADE requests.

The lifecycle manager only produces the Authorization header; network I/O
is delegated to a Transport. Failures are returned in the response rather
than raised so each call site decides whether they are fatal.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Mapping, Optional
from urllib.parse import parse_qsl

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """
    Result of sending one request.

    Attributes:
        body: Raw response body (may be empty)
        error: Description of the failure, None on success
        status_code: HTTP status, None if no response was received
    """

    body: bytes = b""
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(ABC):
    """Interface for sending a signed request."""

    @abstractmethod
    def send(self, method: str, url: str, headers: Mapping[str, str]) -> TransportResponse:
        """
        Send a request and report the outcome.

        Returns:
            TransportResponse; failures go in its error field instead of
            being raised
        """
        pass


class RequestsTransport(Transport):
    """Transport backed by a requests.Session."""

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        """
        Initialize transport.

        Args:
            timeout: Request timeout in seconds
            session: Session to use (creates one if not provided)
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, method: str, url: str, headers: Mapping[str, str]) -> TransportResponse:
        """
        Send a request.

        Args:
            method: HTTP method
            url: Absolute URL including any query string
            headers: Request headers (Authorization included)

        Returns:
            TransportResponse; network errors and HTTP status >= 400 are
            reported through its error field
        """
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method, url, headers=dict(headers), timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning(f"Network error during {method} {url}: {e}")
            return TransportResponse(error=f"Network error: {e}")

        if response.status_code >= 400:
            logger.warning(f"{method} {url} failed with status {response.status_code}")
            return TransportResponse(
                body=response.content,
                error=f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return TransportResponse(body=response.content, status_code=response.status_code)


def parse_token_response(body: bytes) -> Dict[str, str]:
    """
    Parse a form-encoded token response.

    Args:
        body: Body like b"oauth_token=...&oauth_token_secret=..."

    Returns:
        Dictionary of decoded fields (empty if the body is not form-encoded)
    """
    text = body.decode("utf-8", errors="replace").strip()
    return dict(parse_qsl(text, keep_blank_values=True))
