"""
E*TRADE API client with OAuth 1.0a authentication.

This module provides an authenticated HTTP client for E*TRADE's Accounts
API. It handles:

- Signing every request with the session's access token
- JSON decoding and error-body detection
- 401 response handling with clear renewal/re-authorization guidance

The client must be given an OAuthCoordinator that has completed the
authorization flow. Token renewal is never automatic: on an
authentication error the caller decides whether to call renew().
"""

import json
import logging
from datetime import date
from typing import Any, Dict, Optional

from src.oauth1.coordinator import OAuthCoordinator
from src.oauth1.encoding import percent_encode
from src.oauth1.exceptions import TokenNotAvailableError
from src.oauth1.transport import TransportResponse

from . import endpoints
from .exceptions import ETradeAPIError, ETradeAuthenticationError, ETradeRateLimitError

logger = logging.getLogger(__name__)


class ETradeClient:
    """
    Authenticated HTTP client for E*TRADE APIs.

    Example:
        from src.oauth1.coordinator import OAuthCoordinator
        from src.etrade.client import ETradeClient

        oauth = OAuthCoordinator()
        token, url = oauth.obtain_request_token(credential)
        oauth.exchange_verifier(token, verifier)

        client = ETradeClient(oauth)
        accounts = client.list_accounts()
    """

    def __init__(self, oauth_coordinator: OAuthCoordinator):
        """
        Initialize E*TRADE API client.

        Args:
            oauth_coordinator: OAuth coordinator holding the session's access token
        """
        self.oauth = oauth_coordinator
        logger.info("ETradeClient initialized")

    def _request(
        self, method: str, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> TransportResponse:
        """
        Make signed HTTP request to E*TRADE API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            params: Query parameters

        Returns:
            Successful transport response

        Raises:
            ETradeAuthenticationError: If not authorized or E*TRADE returns 401
            ETradeRateLimitError: If rate limit exceeded (429)
            ETradeAPIError: For other API errors
        """
        params = {k: str(v) for k, v in (params or {}).items() if v is not None}

        try:
            header = self.oauth.signed_request(method, endpoint, params)
        except TokenNotAvailableError as e:
            logger.error(f"Not authorized: {e}")
            raise ETradeAuthenticationError(
                "No E*TRADE access token available. "
                "Run the authorization flow: python scripts/authorize_etrade.py"
            ) from e

        url = self.oauth.config.resource_url(endpoint)
        if params:
            query = "&".join(
                f"{percent_encode(k)}={percent_encode(v)}" for k, v in params.items()
            )
            url = f"{url}?{query}"

        headers = header.as_dict()
        headers["Accept"] = "application/json"

        logger.debug(f"{method} {url}")
        response = self.oauth.transport.send(method, url, headers)

        if response.status_code == 401:
            logger.error(f"Authentication failed (401): {response.text[:200]}")
            raise ETradeAuthenticationError(
                "Authentication failed. The access token may be inactive or expired. "
                "Call renew(), or re-authorize: python scripts/authorize_etrade.py"
            )

        if response.status_code == 429:
            logger.warning("Rate limit exceeded (429)")
            raise ETradeRateLimitError(
                "E*TRADE API rate limit exceeded. Please wait before retrying."
            )

        if not response.ok:
            logger.error(f"API error ({response.error}): {response.text[:200]}")
            raise ETradeAPIError(f"E*TRADE API error ({response.error}): {response.text}")

        return response

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make authenticated GET request.

        Args:
            endpoint: API endpoint path
            params: Query parameters

        Returns:
            JSON response as dictionary (empty for an empty body)

        Raises:
            ETradeAuthenticationError: If authentication fails
            ETradeAPIError: For API errors, including an error field in the body
        """
        response = self._request("GET", endpoint, params=params)
        return self._parse_json(response)

    def list_accounts(self) -> Dict[str, Any]:
        """
        List the user's accounts.

        Returns:
            AccountListResponse as returned by E*TRADE
        """
        return self.get(endpoints.ACCOUNTS_LIST)

    def get_account_balance(
        self, account_id_key: str, inst_type: str = "BROKERAGE", real_time_nav: bool = True
    ) -> Dict[str, Any]:
        """
        Get balances for one account.

        Args:
            account_id_key: accountIdKey from list_accounts()
            inst_type: Institution type (E*TRADE only supports BROKERAGE)
            real_time_nav: Whether to request real-time net asset value

        Returns:
            BalanceResponse as returned by E*TRADE
        """
        return self.get(
            endpoints.ACCOUNT_BALANCE.format(accountIdKey=account_id_key),
            params={"instType": inst_type, "realTimeNAV": str(real_time_nav).lower()},
        )

    def list_transactions(
        self,
        account_id_key: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        count: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        List transactions for one account.

        Args:
            account_id_key: accountIdKey from list_accounts()
            start_date: Earliest transaction date
            end_date: Latest transaction date
            count: Maximum number of transactions (E*TRADE caps at 50)

        Returns:
            TransactionListResponse as returned by E*TRADE
        """
        params = {
            "startDate": start_date.strftime(endpoints.TRANSACTION_DATE_FORMAT) if start_date else None,
            "endDate": end_date.strftime(endpoints.TRANSACTION_DATE_FORMAT) if end_date else None,
            "count": count,
        }
        return self.get(
            endpoints.ACCOUNT_TRANSACTIONS.format(accountIdKey=account_id_key), params=params
        )

    def get_portfolio(self, account_id_key: str) -> Dict[str, Any]:
        """
        Get positions for one account.

        Args:
            account_id_key: accountIdKey from list_accounts()

        Returns:
            PortfolioResponse as returned by E*TRADE
        """
        return self.get(endpoints.ACCOUNT_PORTFOLIO.format(accountIdKey=account_id_key))

    @staticmethod
    def _parse_json(response: TransportResponse) -> Dict[str, Any]:
        """
        Decode a JSON body and surface an error field.

        Raises:
            ETradeAPIError: If the body is not JSON or carries an error
        """
        if not response.body.strip():
            return {}

        try:
            data = json.loads(response.body)
        except ValueError as e:
            logger.error(f"Invalid JSON response: {e}")
            raise ETradeAPIError(f"Invalid JSON response from E*TRADE: {e}") from e

        if isinstance(data, dict):
            error = data.get("error") or data.get("Error")
            if error:
                message = error.get("message", error) if isinstance(error, dict) else error
                logger.error(f"E*TRADE API error: {message}")
                raise ETradeAPIError(f"E*TRADE API error: {message}")

        return data
