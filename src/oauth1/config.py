"""
OAuth configuration for E*TRADE API integration.

This module provides endpoint and transport settings for OAuth 1.0a
authentication with E*TRADE. Configuration can be loaded from environment
variables or provided programmatically. Consumer credentials are kept
separately in Credential so they are only held by the session.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError

ENVIRONMENTS = {
    "sandbox": "https://apisb.etrade.com",
    "production": "https://api.etrade.com",
}


@dataclass
class ETradeOAuthConfig:
    """
    Configuration for E*TRADE OAuth 1.0a.

    Attributes:
        environment: "sandbox" or "production" (selects the API host)
        authorize_url: Page where the user approves the request token
        request_token_path: Path of the request-token endpoint
        access_token_path: Path of the access-token endpoint
        renew_access_token_path: Path of the renewal endpoint
        revoke_access_token_path: Path of the revocation endpoint
        callback: oauth_callback sent with the request-token call
                  (None omits it; E*TRADE uses "oob" for out-of-band)
        timeout: HTTP timeout in seconds
    """

    environment: str = "sandbox"

    # E*TRADE OAuth endpoints
    authorize_url: str = "https://us.etrade.com/e/t/etws/authorize"
    request_token_path: str = "/oauth/request_token"
    access_token_path: str = "/oauth/access_token"
    renew_access_token_path: str = "/oauth/renew_access_token"
    revoke_access_token_path: str = "/oauth/revoke_access_token"

    callback: Optional[str] = None
    timeout: int = 30

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.environment not in ENVIRONMENTS:
            raise ConfigurationError(
                f"environment must be one of {sorted(ENVIRONMENTS)}, "
                f"got {self.environment!r}"
            )

        if not isinstance(self.timeout, int) or self.timeout <= 0:
            raise ConfigurationError(f"timeout must be a positive integer, got {self.timeout}")

    @property
    def base_url(self) -> str:
        """API host for the configured environment."""
        return ENVIRONMENTS[self.environment]

    @property
    def request_token_url(self) -> str:
        return f"{self.base_url}{self.request_token_path}"

    @property
    def access_token_url(self) -> str:
        return f"{self.base_url}{self.access_token_path}"

    @property
    def renew_access_token_url(self) -> str:
        return f"{self.base_url}{self.renew_access_token_path}"

    @property
    def revoke_access_token_url(self) -> str:
        return f"{self.base_url}{self.revoke_access_token_path}"

    def resource_url(self, path: str) -> str:
        """
        Full URL for an API path.

        Args:
            path: Path such as "/v1/accounts/list" or an absolute URL

        Returns:
            Absolute URL on the configured API host
        """
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    @classmethod
    def from_env(cls) -> "ETradeOAuthConfig":
        """
        Load configuration from environment variables.

        Optional environment variables:
            ETRADE_ENVIRONMENT: "sandbox" or "production" (default: sandbox)
            ETRADE_CALLBACK: oauth_callback value (default: omitted)
            ETRADE_TIMEOUT: HTTP timeout in seconds (default: 30)

        Returns:
            ETradeOAuthConfig instance

        Raises:
            ConfigurationError: If a variable has an invalid value
        """
        timeout = os.environ.get("ETRADE_TIMEOUT", "30")
        try:
            timeout_seconds = int(timeout)
        except ValueError as e:
            raise ConfigurationError(f"ETRADE_TIMEOUT must be an integer, got {timeout!r}") from e

        return cls(
            environment=os.environ.get("ETRADE_ENVIRONMENT", "sandbox").lower(),
            callback=os.environ.get("ETRADE_CALLBACK") or None,
            timeout=timeout_seconds,
        )
