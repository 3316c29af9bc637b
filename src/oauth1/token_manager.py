"""
Token manager for E*TRADE OAuth integration.

This module manages the OAuth 1.0a token lifecycle including:
- Request token acquisition (consumer key → request token)
- Authorization URL construction for the out-of-band approval step
- Verifier exchange (request token + verifier → access token)
- Access token renewal and best-effort revocation
- Signing of resource requests with the access token

All operations take the session's SessionState explicitly; the manager
itself holds only configuration and collaborators.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from urllib.parse import urlencode

from .config import ETradeOAuthConfig
from .credentials import Credential, Token, TokenKind
from .exceptions import (
    HandshakeRejectedError,
    InvalidSessionStateError,
    TokenNotAvailableError,
    TokenRenewalError,
)
from .header import AuthorizationHeader
from .nonce import NonceSource
from .session import SessionPhase, SessionState
from .signing import OAUTH_VERSION, SIGNATURE_METHOD, Parameters, SignatureRequest, sign_request
from .transport import RequestsTransport, Transport, TransportResponse, parse_token_response

logger = logging.getLogger(__name__)

# Longest server message carried into exceptions and logs
MAX_SERVER_MESSAGE = 200


@dataclass(frozen=True)
class RevocationResult:
    """
    Outcome of a revocation attempt.

    The session is torn down regardless; this only reports whether
    E*TRADE acknowledged the revocation.

    Attributes:
        revoked: True if the server accepted the revocation
        error: Failure description when it did not
    """

    revoked: bool
    error: Optional[str] = None


class TokenManager:
    """
    Manages the OAuth 1.0a token lifecycle.

    Responsibilities:
    - Drive the request-token → verifier → access-token handshake
    - Sign every outbound call with the right token secret
    - Renew and revoke access tokens
    """

    def __init__(
        self,
        config: ETradeOAuthConfig,
        transport: Optional[Transport] = None,
        nonce_source: Optional[NonceSource] = None,
    ):
        """
        Initialize token manager.

        Args:
            config: OAuth configuration
            transport: HTTP transport (creates RequestsTransport if not provided)
            nonce_source: Nonce/timestamp source (creates default if not provided)
        """
        self.config = config
        self.transport = transport or RequestsTransport(timeout=config.timeout)
        self.nonce_source = nonce_source or NonceSource()

    def obtain_request_token(self, state: SessionState, credential: Credential) -> Token:
        """
        Obtain a request token.

        This is the first step of the handshake. The call is signed with the
        consumer secret only and carries no oauth_token.

        Args:
            state: Session state (must not be past the handshake)
            credential: Consumer credential for this session

        Returns:
            Request token

        Raises:
            InvalidSessionStateError: If an access token is held or the session ended
            HandshakeRejectedError: If E*TRADE returns no token
        """
        state.require_phase(
            SessionPhase.UNAUTHENTICATED,
            SessionPhase.REQUEST_TOKEN_OBTAINED,
            SessionPhase.AWAITING_VERIFIER,
        )

        logger.info(f"Requesting request token for consumer key {credential.masked_key}")

        oauth_params = self._oauth_params(credential)
        if self.config.callback:
            oauth_params["oauth_callback"] = self.config.callback

        response = self._send_signed(
            "GET", self.config.request_token_url, oauth_params, credential.consumer_secret
        )
        value, secret = self._parse_handshake_response(response, "Request token")

        state.credential = credential
        state.token = Token(value=value, secret=secret, kind=TokenKind.REQUEST)
        state.authorization_url = None
        state.phase = SessionPhase.REQUEST_TOKEN_OBTAINED

        logger.info("Request token obtained")
        return state.token

    def build_authorization_url(self, state: SessionState) -> str:
        """
        Build the URL where the user approves the request token.

        No network call is made. The user visits the URL out of band and
        comes back with a verifier code.

        Args:
            state: Session state holding a request token

        Returns:
            Authorization URL

        Raises:
            InvalidSessionStateError: If no request token is held
        """
        state.require_phase(SessionPhase.REQUEST_TOKEN_OBTAINED, SessionPhase.AWAITING_VERIFIER)

        query = urlencode({"key": state.credential.consumer_key, "token": state.token.value})
        state.authorization_url = f"{self.config.authorize_url}?{query}"
        state.phase = SessionPhase.AWAITING_VERIFIER

        logger.info("Awaiting verifier from user authorization")
        return state.authorization_url

    def exchange_verifier(
        self, state: SessionState, request_token: Token, verifier: str
    ) -> Token:
        """
        Exchange an authorized request token for an access token.

        Args:
            state: Session state awaiting a verifier
            request_token: The request token the user authorized
            verifier: Verification code shown to the user by E*TRADE

        Returns:
            Access token

        Raises:
            InvalidSessionStateError: If no authorized request token is pending
                                      (raised before any network call)
            HandshakeRejectedError: If E*TRADE rejects the verifier
        """
        state.require_phase(SessionPhase.AWAITING_VERIFIER)

        if request_token.kind is not TokenKind.REQUEST or request_token != state.token:
            raise InvalidSessionStateError(
                "Request token does not match the token held by this session"
            )

        verifier = (verifier or "").strip()
        if not verifier:
            raise HandshakeRejectedError("Verifier code cannot be empty")

        logger.info("Exchanging verifier for access token")

        oauth_params = self._oauth_params(state.credential)
        oauth_params["oauth_token"] = request_token.value
        oauth_params["oauth_verifier"] = verifier

        response = self._send_signed(
            "GET",
            self.config.access_token_url,
            oauth_params,
            state.credential.consumer_secret,
            request_token.secret,
        )
        value, secret = self._parse_handshake_response(response, "Access token")

        state.token = Token(value=value, secret=secret, kind=TokenKind.ACCESS)
        state.authorization_url = None
        state.phase = SessionPhase.ACCESS_TOKEN_OBTAINED

        logger.info("Successfully obtained access token")
        return state.token

    def resume(self, state: SessionState, credential: Credential, access_token: Token) -> None:
        """
        Resume a session with an access token the host stored earlier.

        Args:
            state: Fresh session state
            credential: Consumer credential the token was issued to
            access_token: Previously obtained access token

        Raises:
            InvalidSessionStateError: If the session is not fresh or the
                                      token is not an access token
        """
        state.require_phase(SessionPhase.UNAUTHENTICATED)

        if not access_token.is_access_token:
            raise InvalidSessionStateError("Only an access token can resume a session")

        state.credential = credential
        state.token = access_token
        state.phase = SessionPhase.ACCESS_TOKEN_OBTAINED
        logger.info(f"Resumed session for consumer key {credential.masked_key}")

    def signed_request(
        self,
        state: SessionState,
        method: str,
        url: str,
        extra_params: Optional[Parameters] = None,
    ) -> AuthorizationHeader:
        """
        Sign a resource request with the access token.

        Args:
            state: Session state holding an access token
            method: HTTP method
            url: Absolute request URL (a query string is included in the signature)
            extra_params: Query parameters not already in the URL

        Returns:
            AuthorizationHeader for this single request

        Raises:
            TokenNotAvailableError: If no access token is held
        """
        self._require_access_token(state)

        oauth_params = self._oauth_params(state.credential)
        oauth_params["oauth_token"] = state.token.value

        return self._sign(
            method,
            url,
            oauth_params,
            state.credential.consumer_secret,
            state.token.secret,
            extra_params,
        )

    def renew(self, state: SessionState) -> Token:
        """
        Renew the access token.

        E*TRADE access tokens go inactive after two idle hours and expire at
        midnight US Eastern time. Renewal reactivates an inactive token; if
        the response carries a new token and secret, they replace the held
        token in place.

        Args:
            state: Session state holding an access token

        Returns:
            Current access token after renewal

        Raises:
            TokenNotAvailableError: If no access token is held
            TokenRenewalError: If renewal fails
        """
        self._require_access_token(state)

        logger.info("Renewing access token")

        oauth_params = self._oauth_params(state.credential)
        oauth_params["oauth_token"] = state.token.value

        response = self._send_signed(
            "GET",
            self.config.renew_access_token_url,
            oauth_params,
            state.credential.consumer_secret,
            state.token.secret,
        )

        if not response.ok:
            message = _server_message(response)
            logger.error(f"Token renewal failed: {response.error} - {message}")
            raise TokenRenewalError(
                f"Token renewal failed ({response.error}). "
                f"The access token may have expired; please authorize again."
            )

        fields = parse_token_response(response.body)
        if fields.get("oauth_token") and fields.get("oauth_token_secret"):
            state.token = Token(
                value=fields["oauth_token"],
                secret=fields["oauth_token_secret"],
                kind=TokenKind.ACCESS,
            )
            logger.info("Access token renewed and rotated")
        else:
            logger.info("Access token renewed")

        return state.token

    def revoke(self, state: SessionState) -> RevocationResult:
        """
        Revoke the access token and end the session.

        Revocation is best-effort: whatever happens on the network, the
        token and credential are cleared and the session moves to REVOKED.
        This method never raises.

        Args:
            state: Session state

        Returns:
            RevocationResult describing the server's answer
        """
        if state.is_revoked:
            return RevocationResult(revoked=False, error="Session already revoked")

        if state.phase is not SessionPhase.ACCESS_TOKEN_OBTAINED:
            state.clear()
            logger.info("Session ended without an access token; nothing to revoke")
            return RevocationResult(revoked=False, error="No access token held")

        try:
            oauth_params = self._oauth_params(state.credential)
            oauth_params["oauth_token"] = state.token.value
            response = self._send_signed(
                "GET",
                self.config.revoke_access_token_url,
                oauth_params,
                state.credential.consumer_secret,
                state.token.secret,
            )
        except Exception as e:
            # Teardown must complete even if signing or the transport blew up
            response = TransportResponse(error=f"{type(e).__name__}: {e}")
        finally:
            state.clear()

        if not response.ok:
            return RevocationResult(revoked=False, error=response.error)

        logger.info("Access token revoked")
        return RevocationResult(revoked=True)

    def _oauth_params(self, credential: Credential) -> Dict[str, str]:
        """Protocol parameters common to every call, with a fresh nonce and timestamp."""
        return {
            "oauth_consumer_key": credential.consumer_key,
            "oauth_nonce": self.nonce_source.next_nonce(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": str(self.nonce_source.current_timestamp()),
            "oauth_version": OAUTH_VERSION,
        }

    def _sign(
        self,
        method: str,
        url: str,
        oauth_params: Dict[str, str],
        consumer_secret: str,
        token_secret: Optional[str] = None,
        extra_params: Optional[Parameters] = None,
    ) -> AuthorizationHeader:
        if extra_params is None:
            extra = ()
        elif hasattr(extra_params, "items"):
            extra = tuple(extra_params.items())
        else:
            extra = tuple(extra_params)

        request = SignatureRequest(
            http_method=method,
            url=url,
            oauth_parameters=tuple(oauth_params.items()),
            extra_parameters=extra,
            consumer_secret=consumer_secret,
            token_secret=token_secret,
        )
        signed = dict(oauth_params)
        signed["oauth_signature"] = sign_request(request)
        return AuthorizationHeader.from_params(signed)

    def _send_signed(
        self,
        method: str,
        url: str,
        oauth_params: Dict[str, str],
        consumer_secret: str,
        token_secret: Optional[str] = None,
    ) -> TransportResponse:
        header = self._sign(method, url, oauth_params, consumer_secret, token_secret)
        return self.transport.send(method, url, header.as_dict())

    def _parse_handshake_response(
        self, response: TransportResponse, step: str
    ) -> Tuple[str, str]:
        """
        Extract token and secret from a handshake response.

        Raises:
            HandshakeRejectedError: If the call failed or the body has no token
        """
        if not response.ok:
            message = _server_message(response)
            logger.error(f"{step} request failed: {response.error} - {message}")
            raise HandshakeRejectedError(
                f"{step} request failed: {response.error}", server_message=message
            )

        fields = parse_token_response(response.body)
        value = fields.get("oauth_token")
        secret = fields.get("oauth_token_secret")

        if not value or not secret:
            message = fields.get("oauth_problem") or _server_message(response)
            logger.error(f"{step} response is missing oauth_token: {message}")
            raise HandshakeRejectedError(
                f"{step} response did not contain oauth_token and oauth_token_secret",
                server_message=message,
            )

        return value, secret

    @staticmethod
    def _require_access_token(state: SessionState) -> None:
        if state.phase is not SessionPhase.ACCESS_TOKEN_OBTAINED or not state.token:
            raise TokenNotAvailableError(
                "No access token available. Complete the authorization flow first."
            )


def _server_message(response: TransportResponse) -> Optional[str]:
    """Short server-provided problem description, if the body has one."""
    if not response.body:
        return None
    fields = parse_token_response(response.body)
    if fields.get("oauth_problem"):
        return fields["oauth_problem"]
    return response.text.strip()[:MAX_SERVER_MESSAGE] or None
