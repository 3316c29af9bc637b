"""Tests for the HTTP transport."""

from unittest import mock

import pytest
import requests

from src.oauth1.transport import RequestsTransport, Transport, TransportResponse, parse_token_response


class TestTransportResponse:
    """Tests for TransportResponse class."""

    def test_ok_without_error(self):
        assert TransportResponse(body=b"x").ok

    def test_not_ok_with_error(self):
        assert not TransportResponse(error="HTTP 500").ok

    def test_text_decodes_body(self):
        assert TransportResponse(body="é".encode("utf-8")).text == "é"


class TestTransport:
    """Tests for the Transport interface."""

    def test_cannot_instantiate_interface(self):
        """Transport is abstract."""
        with pytest.raises(TypeError):
            Transport()

    def test_subclass_must_implement_send(self):
        """Subclasses without send() cannot be instantiated."""

        class IncompleteTransport(Transport):
            pass

        with pytest.raises(TypeError):
            IncompleteTransport()

    def test_requests_transport_is_a_transport(self):
        assert isinstance(RequestsTransport(), Transport)


class TestRequestsTransport:
    """Tests for RequestsTransport class."""

    def _transport(self, response=None, side_effect=None):
        session = mock.Mock(spec=requests.Session)
        session.request.return_value = response
        session.request.side_effect = side_effect
        return RequestsTransport(timeout=5, session=session), session

    def test_send_success(self):
        """Successful responses carry the body and status."""
        response = mock.Mock(status_code=200, content=b"oauth_token=a")
        transport, session = self._transport(response)

        result = transport.send("GET", "https://example.com/x", {"Authorization": "OAuth a=\"b\""})

        assert result.ok
        assert result.body == b"oauth_token=a"
        assert result.status_code == 200
        session.request.assert_called_once_with(
            "GET",
            "https://example.com/x",
            headers={"Authorization": "OAuth a=\"b\""},
            timeout=5,
        )

    def test_send_http_error(self):
        """HTTP errors are reported, not raised."""
        response = mock.Mock(status_code=401, content=b"oauth_problem=signature_invalid")
        transport, _ = self._transport(response)

        result = transport.send("GET", "https://example.com/x", {})

        assert not result.ok
        assert result.error == "HTTP 401"
        assert result.status_code == 401
        assert result.body == b"oauth_problem=signature_invalid"

    def test_send_network_error(self):
        """Network errors are reported, not raised."""
        transport, _ = self._transport(side_effect=requests.ConnectionError("refused"))

        result = transport.send("GET", "https://example.com/x", {})

        assert not result.ok
        assert "refused" in result.error
        assert result.status_code is None


class TestParseTokenResponse:
    """Tests for parse_token_response function."""

    def test_parses_token_and_secret(self):
        """Form-encoded fields are decoded."""
        body = b"oauth_token=abc%2B1&oauth_token_secret=s%3D&oauth_callback_confirmed=true"

        assert parse_token_response(body) == {
            "oauth_token": "abc+1",
            "oauth_token_secret": "s=",
            "oauth_callback_confirmed": "true",
        }

    def test_empty_body(self):
        assert parse_token_response(b"") == {}
