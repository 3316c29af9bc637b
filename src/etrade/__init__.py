"""
E*TRADE API client module.

This module provides signed access to E*TRADE's Accounts API using
OAuth 1.0a authentication. It includes:

- ETradeClient: Authenticated HTTP client for API calls
- Account endpoints: account list, balances, transactions, portfolio

Responses are returned as decoded JSON dictionaries; mapping them to
host data models is left to the caller.
"""

from .client import ETradeClient
from .exceptions import ETradeAPIError, ETradeAuthenticationError, ETradeRateLimitError

__all__ = [
    "ETradeClient",
    "ETradeAPIError",
    "ETradeAuthenticationError",
    "ETradeRateLimitError",
]
