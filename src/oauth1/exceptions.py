"""
OAuth exception classes for E*TRADE API integration.

This module defines the exception hierarchy for all OAuth 1.0a errors.
Handshake and credential errors are fatal and raised to the caller;
revocation failures are reported through RevocationResult instead.
"""

from typing import Optional


class ETradeOAuthError(Exception):
    """Base exception for all E*TRADE OAuth errors."""

    pass


class ConfigurationError(ETradeOAuthError):
    """OAuth configuration error (missing or invalid configuration)."""

    pass


class MalformedCredentialError(ConfigurationError):
    """Consumer key or secret is empty or too short to be genuine."""

    pass


class EncodingError(ETradeOAuthError):
    """Value could not be percent-encoded (not representable as UTF-8)."""

    pass


class HandshakeRejectedError(ETradeOAuthError):
    """
    Request-token or access-token call was rejected.

    Attributes:
        server_message: Problem reported by E*TRADE, if the response had one
    """

    def __init__(self, message: str, server_message: Optional[str] = None):
        super().__init__(message)
        self.server_message = server_message


class InvalidSessionStateError(HandshakeRejectedError):
    """Operation is not valid in the session's current phase."""

    pass


class TokenNotAvailableError(ETradeOAuthError):
    """No access token held (need to complete authorization first)."""

    pass


class TokenRenewalError(ETradeOAuthError):
    """Failed to renew the access token."""

    pass
