"""
Session state for the OAuth 1.0a handshake.

Each banking session owns exactly one SessionState and passes it
explicitly to every TokenManager operation. Nothing is kept in module
globals, so several sessions can coexist in one process without one
session's token ever signing another session's request.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .credentials import Credential, Token
from .exceptions import InvalidSessionStateError


class SessionPhase(Enum):
    """Phases of the three-legged handshake."""

    UNAUTHENTICATED = "unauthenticated"
    REQUEST_TOKEN_OBTAINED = "request_token_obtained"
    AWAITING_VERIFIER = "awaiting_verifier"
    ACCESS_TOKEN_OBTAINED = "access_token_obtained"
    REVOKED = "revoked"


@dataclass
class SessionState:
    """
    Mutable state of one banking session.

    Attributes:
        phase: Current handshake phase
        credential: Consumer credential (set by the first handshake step)
        token: Currently held request or access token
        authorization_url: URL the user must visit while awaiting a verifier
    """

    phase: SessionPhase = SessionPhase.UNAUTHENTICATED
    credential: Optional[Credential] = field(default=None, repr=False)
    token: Optional[Token] = None
    authorization_url: Optional[str] = None

    @property
    def is_revoked(self) -> bool:
        return self.phase is SessionPhase.REVOKED

    def require_phase(self, *phases: SessionPhase) -> None:
        """
        Check that the session is in one of the given phases.

        Raises:
            InvalidSessionStateError: If it is not
        """
        if self.phase not in phases:
            expected = ", ".join(p.value for p in phases)
            raise InvalidSessionStateError(
                f"Operation not allowed in phase '{self.phase.value}' "
                f"(expected: {expected})"
            )

    def clear(self) -> None:
        """Drop credential and token and end the session."""
        self.credential = None
        self.token = None
        self.authorization_url = None
        self.phase = SessionPhase.REVOKED
