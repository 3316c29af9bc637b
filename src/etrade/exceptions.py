"""Exceptions for E*TRADE API client."""


class ETradeAPIError(Exception):
    """Base exception for E*TRADE API errors."""

    pass


class ETradeAuthenticationError(ETradeAPIError):
    """
    Authentication failure with E*TRADE API.

    The access token is missing, inactive, expired or revoked, or the
    request signature was rejected.

    Resolution:
        1. Call OAuthCoordinator.renew() if the token went inactive
        2. Otherwise run the authorization flow again:
           python scripts/authorize_etrade.py
    """

    pass


class ETradeRateLimitError(ETradeAPIError):
    """API rate limit exceeded."""

    pass
