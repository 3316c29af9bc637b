"""
OAuth coordinator for high-level OAuth operations.

This module provides the main interface for OAuth operations in the
application. It owns the session's state and exposes the handshake,
signing, renewal and revocation steps to the banking host.
"""

import logging
from typing import Optional, Tuple

from .config import ETradeOAuthConfig
from .credentials import Credential, Token
from .header import AuthorizationHeader
from .nonce import NonceSource
from .session import SessionPhase, SessionState
from .signing import Parameters
from .token_manager import TokenManager
from .transport import Transport

logger = logging.getLogger(__name__)


class OAuthCoordinator:
    """
    High-level coordinator for one E*TRADE banking session.

    This is the main interface that applications should use for OAuth.
    Each coordinator owns its own SessionState, so coordinators for
    different sessions never share tokens.

    Example:
        coordinator = OAuthCoordinator()
        request_token, url = coordinator.obtain_request_token(Credential.from_env())
        # User visits url and reads back a verifier code
        coordinator.exchange_verifier(request_token, verifier)
        header = coordinator.signed_request("GET", "/v1/accounts/list")
        response = requests.get(url, headers=header.as_dict())
        ...
        coordinator.revoke()
    """

    def __init__(
        self,
        config: Optional[ETradeOAuthConfig] = None,
        transport: Optional[Transport] = None,
        nonce_source: Optional[NonceSource] = None,
    ):
        """
        Initialize OAuth coordinator.

        Args:
            config: OAuth configuration (loads from environment if not provided)
            transport: HTTP transport (requests-based if not provided)
            nonce_source: Nonce/timestamp source (random if not provided)
        """
        self.config = config or ETradeOAuthConfig.from_env()
        self.token_manager = TokenManager(self.config, transport, nonce_source)
        self.state = SessionState()

    @property
    def transport(self) -> Transport:
        return self.token_manager.transport

    def obtain_request_token(self, credential: Credential) -> Tuple[Token, str]:
        """
        Start the authorization flow.

        Obtains a request token and builds the URL where the user approves
        it. The session then waits for exchange_verifier().

        Args:
            credential: Consumer credential for this session

        Returns:
            Tuple of (request token, authorization URL)

        Raises:
            InvalidSessionStateError: If the session already holds an access token
            HandshakeRejectedError: If E*TRADE rejects the request
        """
        token = self.token_manager.obtain_request_token(self.state, credential)
        url = self.token_manager.build_authorization_url(self.state)
        return token, url

    def exchange_verifier(self, request_token: Token, verifier: str) -> Token:
        """
        Complete the authorization flow with the user's verifier code.

        Args:
            request_token: Token returned by obtain_request_token()
            verifier: Code shown to the user after approving access

        Returns:
            Access token

        Raises:
            InvalidSessionStateError: If no request token is awaiting a verifier
            HandshakeRejectedError: If E*TRADE rejects the verifier
        """
        return self.token_manager.exchange_verifier(self.state, request_token, verifier)

    def resume(self, credential: Credential, access_token: Token) -> None:
        """
        Resume with an access token the host persisted from an earlier session.

        Args:
            credential: Consumer credential
            access_token: Stored access token
        """
        self.token_manager.resume(self.state, credential, access_token)

    def signed_request(
        self, method: str, path: str, extra_params: Optional[Parameters] = None
    ) -> AuthorizationHeader:
        """
        Get the Authorization header for a resource request.

        Args:
            method: HTTP method
            path: API path (e.g., "/v1/accounts/list") or absolute URL
            extra_params: Query parameters sent with the request

        Returns:
            AuthorizationHeader, valid for this one request

        Raises:
            TokenNotAvailableError: If not authorized

        Example:
            header = coordinator.signed_request("GET", "/v1/accounts/list")
            response = requests.get(url, headers=header.as_dict())
        """
        url = self.config.resource_url(path)
        return self.token_manager.signed_request(self.state, method, url, extra_params)

    def renew(self) -> Token:
        """
        Renew the access token.

        Call this when the API reports an inactive or expired token.

        Returns:
            Current access token

        Raises:
            TokenNotAvailableError: If not authorized
            TokenRenewalError: If renewal fails
        """
        return self.token_manager.renew(self.state)

    def revoke(self) -> None:
        """
        Revoke the access token and end the session.

        Failures are logged, never raised: the session is always torn down
        and its token and credential cleared.
        """
        result = self.token_manager.revoke(self.state)
        if not result.revoked:
            logger.warning(f"Access token revocation not confirmed: {result.error}")
        logger.info("Session ended. A new session requires a new credential.")

    def is_authorized(self) -> bool:
        """
        Check if currently authorized.

        Returns:
            True if an access token is held, False otherwise
        """
        return self.state.phase is SessionPhase.ACCESS_TOKEN_OBTAINED

    def get_status(self) -> dict:
        """
        Get current session status for diagnostics.

        Returns:
            Dictionary with status information including:
            - phase: str
            - authorized: bool
            - environment: str
            - consumer_key: masked key (if a credential is held)
            - authorization_url: str (if awaiting a verifier)
        """
        status = {
            "phase": self.state.phase.value,
            "authorized": self.is_authorized(),
            "environment": self.config.environment,
        }
        if self.state.credential:
            status["consumer_key"] = self.state.credential.masked_key
        if self.state.authorization_url:
            status["authorization_url"] = self.state.authorization_url
        return status
