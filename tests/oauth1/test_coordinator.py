"""Tests for OAuth coordinator module."""

import logging
from unittest import mock

import pytest

from src.oauth1.config import ETradeOAuthConfig
from src.oauth1.coordinator import OAuthCoordinator
from src.oauth1.credentials import Credential, Token, TokenKind
from src.oauth1.exceptions import HandshakeRejectedError, TokenNotAvailableError
from src.oauth1.nonce import NonceSource
from src.oauth1.session import SessionPhase
from src.oauth1.transport import Transport, TransportResponse

CONSUMER_KEY = "c5bb4dcb7bd6826c7c4340df3f791188"
CONSUMER_SECRET = "7d30246211192cda43ede3abd9b393b9"


class TestOAuthCoordinator:
    """Tests for OAuthCoordinator class."""

    @pytest.fixture
    def config(self):
        return ETradeOAuthConfig()

    @pytest.fixture
    def credential(self):
        return Credential(CONSUMER_KEY, CONSUMER_SECRET)

    @pytest.fixture
    def transport(self):
        transport = mock.Mock(spec=Transport)
        transport.send.side_effect = [
            TransportResponse(body=b"oauth_token=req&oauth_token_secret=req_secret"),
            TransportResponse(body=b"oauth_token=acc&oauth_token_secret=acc_secret"),
        ]
        return transport

    @pytest.fixture
    def coordinator(self, config, transport):
        return OAuthCoordinator(config, transport=transport)

    @pytest.fixture
    def authorized(self, coordinator, credential):
        """Coordinator that completed the authorization flow."""
        request_token, _ = coordinator.obtain_request_token(credential)
        coordinator.exchange_verifier(request_token, "7KQ2B")
        return coordinator

    def test_coordinator_initialization(self, config):
        """OAuthCoordinator initializes with a fresh session."""
        coordinator = OAuthCoordinator(config)

        assert coordinator.config == config
        assert coordinator.token_manager is not None
        assert coordinator.state.phase is SessionPhase.UNAUTHENTICATED
        assert isinstance(coordinator.token_manager.nonce_source, NonceSource)

    @mock.patch.dict("os.environ", {"ETRADE_ENVIRONMENT": "production"})
    def test_coordinator_loads_config_from_env(self):
        """OAuthCoordinator loads config from environment if not provided."""
        coordinator = OAuthCoordinator()

        assert coordinator.config.environment == "production"

    def test_obtain_request_token_returns_token_and_url(self, coordinator, credential):
        """First step yields the request token and the authorization URL."""
        token, url = coordinator.obtain_request_token(credential)

        assert token == Token(value="req", secret="req_secret", kind=TokenKind.REQUEST)
        assert url == f"https://us.etrade.com/e/t/etws/authorize?key={CONSUMER_KEY}&token=req"
        assert coordinator.state.phase is SessionPhase.AWAITING_VERIFIER

    def test_full_flow(self, authorized):
        """Verifier exchange leaves the coordinator authorized."""
        assert authorized.is_authorized()
        assert authorized.state.token.value == "acc"

    def test_exchange_verifier_before_request_token(self, coordinator, transport):
        """exchange_verifier without a pending request token fails locally."""
        with pytest.raises(HandshakeRejectedError):
            coordinator.exchange_verifier(Token("req", "sec", TokenKind.REQUEST), "7KQ2B")

        transport.send.assert_not_called()

    def test_signed_request_resolves_path(self, authorized):
        """Paths are resolved against the API host and signed."""
        header = authorized.signed_request("GET", "/v1/accounts/list.json", {"count": "5"})

        params = dict(header.params)
        assert params["oauth_token"] == "acc"
        assert header.as_dict()["Authorization"].startswith("OAuth ")

    def test_signed_request_not_authorized(self, coordinator):
        """Signing before authorization raises TokenNotAvailableError."""
        with pytest.raises(TokenNotAvailableError):
            coordinator.signed_request("GET", "/v1/accounts/list.json")

    def test_renew(self, authorized, transport):
        """renew() returns the current access token."""
        transport.send.side_effect = None
        transport.send.return_value = TransportResponse(body=b"Access Token has been renewed")

        assert authorized.renew().value == "acc"

    def test_revoke_failure_is_logged_not_raised(self, authorized, transport, caplog):
        """Failed revocation logs a warning and still ends the session."""
        transport.send.side_effect = None
        transport.send.return_value = TransportResponse(error="Network error: refused")

        with caplog.at_level(logging.WARNING):
            authorized.revoke()

        assert "revocation not confirmed" in caplog.text
        assert not authorized.is_authorized()
        assert authorized.state.phase is SessionPhase.REVOKED
        assert authorized.state.token is None
        assert authorized.state.credential is None

    def test_resume(self, coordinator, credential):
        """Stored access tokens make the coordinator authorized."""
        coordinator.resume(credential, Token("stored", "stored_secret", TokenKind.ACCESS))

        assert coordinator.is_authorized()

    def test_get_status_masks_key(self, coordinator, credential):
        """Status exposes only the masked consumer key."""
        coordinator.obtain_request_token(credential)

        status = coordinator.get_status()

        assert status["phase"] == "awaiting_verifier"
        assert status["authorized"] is False
        assert status["environment"] == "sandbox"
        assert status["consumer_key"] == "c5bb4dcb...1188"
        assert "authorization_url" in status
        assert CONSUMER_SECRET not in str(status)

    def test_get_status_fresh_session(self, coordinator):
        """Fresh sessions report no credential."""
        status = coordinator.get_status()

        assert status == {"phase": "unauthenticated", "authorized": False, "environment": "sandbox"}

    def test_coordinators_are_isolated(self, config, credential):
        """Two coordinators never share session state."""
        first_transport = mock.Mock(spec=Transport)
        first_transport.send.return_value = TransportResponse(
            body=b"oauth_token=one&oauth_token_secret=one_secret"
        )
        first = OAuthCoordinator(config, transport=first_transport)
        second = OAuthCoordinator(config, transport=mock.Mock(spec=Transport))

        first.obtain_request_token(credential)

        assert first.state is not second.state
        assert second.state.token is None
