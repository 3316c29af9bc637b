"""
Credential and token value types for E*TRADE OAuth.

Credentials identify the application (consumer key/secret). Tokens are
issued by E*TRADE during the handshake: a short-lived request token that
carries the user through authorization, then an access token used to
sign resource requests.
"""

import os
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import MalformedCredentialError

# Shortest consumer key/secret accepted before any network attempt
MIN_CREDENTIAL_LENGTH = 10


@dataclass(frozen=True)
class Credential:
    """
    Application credential issued by the E*TRADE Developer portal.

    Attributes:
        consumer_key: Consumer key identifying the application
        consumer_secret: Consumer secret used to derive signing keys
    """

    consumer_key: str
    consumer_secret: str = field(repr=False)

    def __post_init__(self) -> None:
        """Validate credential before it can be used for signing."""
        if not self.consumer_key:
            raise MalformedCredentialError("consumer_key cannot be empty")

        if not self.consumer_secret:
            raise MalformedCredentialError("consumer_secret cannot be empty")

        if len(self.consumer_key) < MIN_CREDENTIAL_LENGTH:
            raise MalformedCredentialError(
                "consumer_key seems too short. Please verify your credentials."
            )

        if len(self.consumer_secret) < MIN_CREDENTIAL_LENGTH:
            raise MalformedCredentialError(
                "consumer_secret seems too short. Please verify your credentials."
            )

    @property
    def masked_key(self) -> str:
        """
        Consumer key safe for logging.

        At most a quarter of the key is shown at each end, so short keys
        are never revealed in full.

        Returns:
            Up to 8 leading and 4 trailing characters (e.g., "c5bb4dcb...1188")
        """
        quarter = len(self.consumer_key) // 4
        prefix = self.consumer_key[: min(8, quarter)]
        suffix = self.consumer_key[len(self.consumer_key) - min(4, quarter):]
        return f"{prefix}...{suffix}"

    @classmethod
    def from_password(cls, password: str) -> "Credential":
        """
        Parse a combined "CONSUMER_KEY|CONSUMER_SECRET" password field.

        Banking hosts typically offer a single password field, so both
        values are entered there separated by "|".

        Args:
            password: Combined key and secret

        Returns:
            Credential instance

        Raises:
            MalformedCredentialError: If the field is empty or has no separator
        """
        if not password:
            raise MalformedCredentialError(
                "Password field is required. Format: CONSUMER_KEY|CONSUMER_SECRET"
            )

        consumer_key, separator, consumer_secret = password.partition("|")
        if not separator:
            raise MalformedCredentialError(
                "Invalid password format. "
                "Expected: CONSUMER_KEY|CONSUMER_SECRET (separated by |)"
            )

        return cls(consumer_key=consumer_key, consumer_secret=consumer_secret)

    @classmethod
    def from_env(cls) -> "Credential":
        """
        Load credential from environment variables.

        Required environment variables:
            ETRADE_CONSUMER_KEY: Consumer key
            ETRADE_CONSUMER_SECRET: Consumer secret

        Returns:
            Credential instance

        Raises:
            MalformedCredentialError: If variables are missing or invalid
        """
        consumer_key = os.environ.get("ETRADE_CONSUMER_KEY")
        consumer_secret = os.environ.get("ETRADE_CONSUMER_SECRET")

        if not consumer_key or not consumer_secret:
            raise MalformedCredentialError(
                "Missing E*TRADE credentials. Set environment variables:\n"
                "  ETRADE_CONSUMER_KEY=your_consumer_key\n"
                "  ETRADE_CONSUMER_SECRET=your_consumer_secret\n"
                "\n"
                "Get credentials from: https://developer.etrade.com"
            )

        return cls(consumer_key=consumer_key, consumer_secret=consumer_secret)


class TokenKind(Enum):
    """Kind of token held by a session."""

    REQUEST = "request"
    ACCESS = "access"


@dataclass(frozen=True)
class Token:
    """
    OAuth token issued by E*TRADE.

    Attributes:
        value: The oauth_token value sent with signed requests
        secret: The oauth_token_secret used in the signing key
        kind: Whether this is a request token or an access token
    """

    value: str
    secret: str = field(repr=False)
    kind: TokenKind

    @property
    def is_access_token(self) -> bool:
        """True if this token may sign resource requests."""
        return self.kind is TokenKind.ACCESS
