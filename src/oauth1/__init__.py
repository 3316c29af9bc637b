"""
OAuth 1.0a module for E*TRADE API integration.

This module provides the three-legged OAuth 1.0a flow with HMAC-SHA1
request signing for authenticating with E*TRADE's Accounts API.

Authorization is out of band: the user opens the authorization URL in a
browser and types the verifier code E*TRADE shows back into the host.

Public API:
    ETradeOAuthConfig: Endpoint and transport configuration
    Credential: Consumer key/secret
    Token / TokenKind: Request and access tokens
    SessionState / SessionPhase: Per-session handshake state
    TokenManager: Token lifecycle management
    OAuthCoordinator: High-level OAuth interface
    percent_encode, normalize_parameters, build_base_string, sign:
        Signature primitives
    AuthorizationHeader, build_authorization_header: Header rendering

Exceptions:
    ETradeOAuthError: Base exception
    ConfigurationError: Configuration error
    MalformedCredentialError: Invalid consumer key or secret
    EncodingError: Value cannot be percent-encoded
    HandshakeRejectedError: Request/access token call rejected
    InvalidSessionStateError: Operation not valid in current phase
    TokenNotAvailableError: No access token
    TokenRenewalError: Token renewal failed
"""

from .config import ETradeOAuthConfig
from .coordinator import OAuthCoordinator
from .credentials import Credential, Token, TokenKind
from .encoding import percent_encode
from .exceptions import (
    ConfigurationError,
    EncodingError,
    ETradeOAuthError,
    HandshakeRejectedError,
    InvalidSessionStateError,
    MalformedCredentialError,
    TokenNotAvailableError,
    TokenRenewalError,
)
from .header import AuthorizationHeader, build_authorization_header, parse_authorization_header
from .nonce import NonceSource
from .session import SessionPhase, SessionState
from .signing import SignatureRequest, build_base_string, normalize_parameters, sign, sign_request
from .token_manager import RevocationResult, TokenManager
from .transport import RequestsTransport, Transport, TransportResponse

__all__ = [
    # Configuration
    "ETradeOAuthConfig",
    # Credentials and tokens
    "Credential",
    "Token",
    "TokenKind",
    # Signing
    "percent_encode",
    "NonceSource",
    "normalize_parameters",
    "build_base_string",
    "sign",
    "sign_request",
    "SignatureRequest",
    "AuthorizationHeader",
    "build_authorization_header",
    "parse_authorization_header",
    # Session and lifecycle
    "SessionPhase",
    "SessionState",
    "TokenManager",
    "RevocationResult",
    "OAuthCoordinator",
    # Transport
    "Transport",
    "TransportResponse",
    "RequestsTransport",
    # Exceptions
    "ETradeOAuthError",
    "ConfigurationError",
    "MalformedCredentialError",
    "EncodingError",
    "HandshakeRejectedError",
    "InvalidSessionStateError",
    "TokenNotAvailableError",
    "TokenRenewalError",
]
