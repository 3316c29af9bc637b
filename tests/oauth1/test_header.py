"""Tests for Authorization header rendering."""

import pytest

from src.oauth1.header import (
    AuthorizationHeader,
    build_authorization_header,
    parse_authorization_header,
)


class TestBuildAuthorizationHeader:
    """Tests for build_authorization_header function."""

    def test_etrade_request_token_header(self):
        """Header has the documented shape with encoded signature."""
        header = build_authorization_header(
            {
                "oauth_version": "1.0",
                "oauth_timestamp": "1700000000",
                "oauth_signature_method": "HMAC-SHA1",
                "oauth_signature": "G97vl1qp7f1ybss5tRT4z66B9/M=",
                "oauth_nonce": "abc123",
                "oauth_consumer_key": "c5bb4dcb7bd6826c7c4340df3f791188",
            }
        )

        assert header == (
            'OAuth oauth_consumer_key="c5bb4dcb7bd6826c7c4340df3f791188", '
            'oauth_nonce="abc123", '
            'oauth_signature="G97vl1qp7f1ybss5tRT4z66B9%2FM%3D", '
            'oauth_signature_method="HMAC-SHA1", '
            'oauth_timestamp="1700000000", '
            'oauth_version="1.0"'
        )

    def test_values_percent_encoded(self):
        """Values use the OAuth percent-encoder."""
        header = build_authorization_header({"oauth_callback": "http://a.b/c?d=e f"})
        assert header == 'OAuth oauth_callback="http%3A%2F%2Fa.b%2Fc%3Fd%3De%20f"'

    def test_stable_order(self):
        """Output does not depend on input order."""
        first = build_authorization_header({"b": "2", "a": "1"})
        second = build_authorization_header({"a": "1", "b": "2"})
        assert first == second == 'OAuth a="1", b="2"'


class TestParseAuthorizationHeader:
    """Tests for parse_authorization_header function."""

    def test_round_trip(self):
        """Parsing a built header recovers the raw values."""
        params = {
            "oauth_consumer_key": "key",
            "oauth_token": "tok+en/=",
            "oauth_signature": "abc+/def=",
            "oauth_verifier": "A B*C",
        }

        assert parse_authorization_header(build_authorization_header(params)) == params

    def test_rejects_other_schemes(self):
        """Non-OAuth headers raise ValueError."""
        with pytest.raises(ValueError, match="Not an OAuth"):
            parse_authorization_header("Bearer abc")

    def test_rejects_malformed_pairs(self):
        """Unquoted values raise ValueError."""
        with pytest.raises(ValueError, match="Malformed"):
            parse_authorization_header("OAuth oauth_token=abc")


class TestAuthorizationHeader:
    """Tests for AuthorizationHeader class."""

    @pytest.fixture
    def header(self):
        return AuthorizationHeader.from_params(
            {"oauth_nonce": "n", "oauth_consumer_key": "k", "oauth_signature": "s="}
        )

    def test_render(self, header):
        """render() produces the header value."""
        assert header.render() == 'OAuth oauth_consumer_key="k", oauth_nonce="n", oauth_signature="s%3D"'
        assert str(header) == header.render()

    def test_as_dict(self, header):
        """as_dict() is ready to merge into request headers."""
        assert header.as_dict() == {"Authorization": header.render()}

    def test_params_keep_insertion_order(self, header):
        """Parameters are kept in the order given."""
        assert [name for name, _ in header.params] == [
            "oauth_nonce",
            "oauth_consumer_key",
            "oauth_signature",
        ]
