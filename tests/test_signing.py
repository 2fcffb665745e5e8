"""Unit tests for OAuth1 request signing."""

import base64
import hashlib
import hmac
import re
from unittest.mock import patch

import pytest

from cardinity.core import signing
from cardinity.core.signing import (
    Credentials,
    build_oauth_header,
    form_encode,
    generate_nonce,
    oauth_parameters,
    parse_oauth_header,
    percent_encode,
    sign,
    signature_base_string,
)

URI = "https://api.cardinity.com/v1/payments?limit=10"
NOW = 1700000000
NONCE = "0123456789abcdef0123456789abcdef"


def _header(**changes):
    arguments = {
        "consumer_key": "key",
        "consumer_secret": "secret",
        "method": "GET",
        "uri": URI,
        "now": NOW,
        "nonce": NONCE,
    }
    arguments.update(changes)
    return build_oauth_header(
        arguments["consumer_key"],
        arguments["consumer_secret"],
        arguments["method"],
        arguments["uri"],
        now=arguments["now"],
        nonce=arguments["nonce"],
    )


def _signature(**changes):
    return parse_oauth_header(_header(**changes))["oauth_signature"]


class TestPercentEncode:
    """RFC 3986 percent-encoding."""

    def test_unreserved_characters_untouched(self):
        value = "AZaz09-._~"
        assert percent_encode(value) == value

    def test_reserved_characters_escaped(self):
        assert percent_encode("https://a.b/c?d=e&f") == "https%3A%2F%2Fa.b%2Fc%3Fd%3De%26f"

    def test_space_and_plus(self):
        assert percent_encode("a b+c") == "a%20b%2Bc"

    def test_non_ascii_as_utf8(self):
        assert percent_encode("ą") == "%C4%85"


class TestSignatureBaseString:
    """Construction of the string that gets signed."""

    def test_form_encode_sorts_keys(self):
        assert form_encode({"b": "2", "a": "1 1", "c": "/"}) == "a=1%201&b=2&c=%2F"

    def test_base_string_layout(self):
        params = oauth_parameters("key", timestamp=NOW, nonce=NONCE)
        base = signature_base_string("post", "https://api.cardinity.com/v1/payments", params)

        expected_params = (
            "oauth_consumer_key%3Dkey"
            f"%26oauth_nonce%3D{NONCE}"
            "%26oauth_signature_method%3DHMAC-SHA1"
            f"%26oauth_timestamp%3D{NOW}"
            "%26oauth_version%3D1.0"
        )
        assert base == (
            "POST&https%3A%2F%2Fapi.cardinity.com%2Fv1%2Fpayments&" + expected_params
        )

    def test_known_hmac_sha1_vector(self):
        """Reference example from the OAuth 1.0 specification, appendix A.5."""
        params = {
            "file": "vacation.jpg",
            "oauth_consumer_key": "dpf43f3p2l4k3l03",
            "oauth_nonce": "kllo9940pd9333jh",
            "oauth_signature_method": "HMAC-SHA1",
            "oauth_timestamp": "1191242096",
            "oauth_token": "nnch734d00sl2jdk",
            "oauth_version": "1.0",
            "size": "original",
        }
        base = signature_base_string("GET", "http://photos.example.net/photos", params)

        assert base == (
            "GET&http%3A%2F%2Fphotos.example.net%2Fphotos&file%3Dvacation.jpg"
            "%26oauth_consumer_key%3Ddpf43f3p2l4k3l03%26oauth_nonce%3Dkllo9940pd9333jh"
            "%26oauth_signature_method%3DHMAC-SHA1%26oauth_timestamp%3D1191242096"
            "%26oauth_token%3Dnnch734d00sl2jdk%26oauth_version%3D1.0%26size%3Doriginal"
        )
        assert sign("kd94hf93k423kf44", base, "pfkkdhi9sl3r4s00") == "tR3+Ty81lMeYAr/Fid0kMTYa/WM="

    def test_sign_uses_empty_token_secret(self):
        digest = hmac.new(b"s%20cret&", b"base", hashlib.sha1).digest()
        assert sign("s cret", "base") == base64.b64encode(digest).decode("ascii")


class TestBuildOAuthHeader:
    """The ``OAuth`` header value."""

    def test_deterministic_for_fixed_inputs(self):
        assert _header() == _header()

    @pytest.mark.parametrize(
        "change",
        [
            {"consumer_secret": "other-secret"},
            {"method": "POST"},
            {"uri": URI + "&offset=1"},
            {"now": NOW + 1},
            {"nonce": "f" * 32},
        ],
    )
    def test_signature_changes_with_each_input(self, change):
        assert _signature(**change) != _signature()

    def test_contains_each_parameter_exactly_once(self):
        header = _header()
        keys = [pair.split("=", 1)[0] for pair in header.split("&")]

        assert sorted(keys) == [
            "oauth_consumer_key",
            "oauth_nonce",
            "oauth_signature",
            "oauth_signature_method",
            "oauth_timestamp",
            "oauth_version",
        ]
        assert len(keys) == len(set(keys))

    def test_parameter_values(self):
        params = parse_oauth_header(_header())

        assert params["oauth_consumer_key"] == "key"
        assert params["oauth_nonce"] == NONCE
        assert params["oauth_signature_method"] == "HMAC-SHA1"
        assert params["oauth_timestamp"] == str(NOW)
        assert params["oauth_version"] == "1.0"

    def test_signature_matches_base_string(self):
        params = parse_oauth_header(_header())
        signature = params.pop("oauth_signature")

        assert signature == sign("secret", signature_base_string("GET", URI, params))

    def test_method_case_is_ignored(self):
        assert _header(method="get") == _header(method="GET")

    def test_signature_is_form_encoded_in_header(self):
        header = _header()
        assert "+" not in header
        assert re.search(r"oauth_signature=[A-Za-z0-9%]+", header)

    def test_fresh_timestamp_and_nonce(self):
        with patch.object(signing.time, "time", return_value=1234.9):
            params = parse_oauth_header(build_oauth_header("key", "secret", "GET", URI))

        assert params["oauth_timestamp"] == "1234"
        assert re.fullmatch(r"[0-9a-f]{32}", params["oauth_nonce"])

    def test_nonces_are_not_reused(self):
        nonces = {generate_nonce() for _ in range(200)}
        assert len(nonces) == 200


class TestParseOAuthHeader:
    def test_rejects_duplicate_parameters(self):
        with pytest.raises(ValueError, match="oauth_nonce"):
            parse_oauth_header("oauth_nonce=a&oauth_nonce=b")


class TestCredentials:
    def test_rejects_empty_values(self):
        with pytest.raises(ValueError):
            Credentials("", "secret")
        with pytest.raises(ValueError):
            Credentials("key", "")

    def test_repr_hides_secret(self):
        assert "secret-value" not in repr(Credentials("key", "secret-value"))

    def test_header_for_delegates(self):
        credentials = Credentials("key", "secret")
        assert credentials.header_for("GET", URI, now=NOW, nonce=NONCE) == _header()
