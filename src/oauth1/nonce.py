"""Nonce and timestamp generation for signed requests."""

import secrets
import time
from typing import Callable

# 16 random bytes render as 32 hex characters
NONCE_BYTES = 16


class NonceSource:
    """
    Supplies a fresh nonce and timestamp for every signed request.

    Nonces come from the secrets module, so two requests issued within the
    same second still carry different nonces.
    """

    def __init__(self, clock: Callable[[], float] = time.time, nonce_bytes: int = NONCE_BYTES):
        """
        Initialize nonce source.

        Args:
            clock: Returns current Unix time in seconds
            nonce_bytes: Random bytes per nonce (hex-rendered)
        """
        if nonce_bytes < 8:
            raise ValueError("nonce_bytes must be at least 8")
        self.clock = clock
        self.nonce_bytes = nonce_bytes

    def next_nonce(self) -> str:
        """Return a new alphanumeric nonce."""
        return secrets.token_hex(self.nonce_bytes)

    def current_timestamp(self) -> int:
        """Return the current Unix timestamp in whole seconds."""
        return int(self.clock())
