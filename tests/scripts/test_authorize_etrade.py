"""Tests for the E*TRADE authorization script."""

import importlib.util
from pathlib import Path
from unittest import mock

import pytest

from src.oauth1.config import ETradeOAuthConfig
from src.oauth1.coordinator import OAuthCoordinator
from src.oauth1.credentials import Credential, Token, TokenKind
from src.oauth1.session import SessionPhase
from src.oauth1.transport import Transport, TransportResponse

SCRIPT_PATH = Path(__file__).parents[2] / "scripts" / "authorize_etrade.py"


@pytest.fixture(scope="module")
def script():
    """Load the script as a module."""
    spec = importlib.util.spec_from_file_location("authorize_etrade", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestEndSession:
    """Tests for end_session function."""

    @pytest.fixture
    def transport(self):
        transport = mock.Mock(spec=Transport)
        transport.send.return_value = TransportResponse(body=b"Revoked Access Token")
        return transport

    @pytest.fixture
    def coordinator(self, transport):
        coordinator = OAuthCoordinator(ETradeOAuthConfig(), transport=transport)
        coordinator.resume(
            Credential("c5bb4dcb7bd6826c7c4340df3f791188", "7d30246211192cda43ede3abd9b393b9"),
            Token(value="acc", secret="acc_secret", kind=TokenKind.ACCESS),
        )
        return coordinator

    def test_revokes_by_default(self, script, coordinator, transport):
        """Without --keep-token the access token is revoked."""
        script.end_session(coordinator)

        transport.send.assert_called_once()
        _, url, _ = transport.send.call_args[0]
        assert url.endswith("/oauth/revoke_access_token")
        assert coordinator.state.phase is SessionPhase.REVOKED

    def test_keep_token_skips_revocation(self, script, coordinator, transport, capsys):
        """With --keep-token the token is printed and stays valid."""
        script.end_session(coordinator, keep_token=True)

        transport.send.assert_not_called()
        assert coordinator.is_authorized()
        output = capsys.readouterr().out
        assert "ETRADE_ACCESS_TOKEN=acc" in output
        assert "ETRADE_ACCESS_TOKEN_SECRET=acc_secret" in output

    def test_keep_token_without_access_token_ends_session(self, script, transport):
        """Nothing to keep after a failed handshake; the session is cleared."""
        coordinator = OAuthCoordinator(ETradeOAuthConfig(), transport=transport)

        script.end_session(coordinator, keep_token=True)

        transport.send.assert_not_called()
        assert coordinator.state.phase is SessionPhase.REVOKED


class TestMain:
    """Tests for command-line parsing."""

    @pytest.mark.parametrize(
        "argv,keep_token",
        [(["authorize_etrade.py"], False), (["authorize_etrade.py", "--keep-token"], True)],
    )
    def test_keep_token_flag(self, script, argv, keep_token):
        """--keep-token is passed through to authorize()."""
        with mock.patch.object(script, "authorize", return_value=0) as mock_authorize, \
                mock.patch("sys.argv", argv):
            assert script.main() == 0

        mock_authorize.assert_called_once_with(
            open_browser=True, list_accounts=True, keep_token=keep_token
        )
