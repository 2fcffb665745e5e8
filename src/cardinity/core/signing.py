"""
OAuth1 (HMAC-SHA1) signing for Cardinity API requests.

Cardinity authenticates every call with a single ``OAuth`` header carrying a
form-encoded set of ``oauth_*`` parameters. Only the consumer key/secret pair
is used: there is no token, so the token secret half of the signing key is
always empty.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time
from dataclasses import dataclass
from typing import Dict, Mapping, Optional
from urllib.parse import parse_qsl, quote

__all__ = [
    "Credentials",
    "SIGNATURE_METHOD",
    "OAUTH_VERSION",
    "build_oauth_header",
    "form_encode",
    "generate_nonce",
    "oauth_parameters",
    "parse_oauth_header",
    "percent_encode",
    "sign",
    "signature_base_string",
]

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"


def percent_encode(value: str) -> str:
    """
    Encode ``value`` following RFC 3986.

    Only unreserved characters (letters, digits, ``-._~``) are left as-is;
    spaces become ``%20`` rather than ``+``.
    """
    return quote(str(value), safe="~")


def form_encode(params: Mapping[str, str]) -> str:
    return "&".join(
        f"{percent_encode(key)}={percent_encode(value)}"
        for key, value in sorted(params.items())
    )


def generate_nonce() -> str:
    """Return a fresh 32 character hex nonce."""
    return secrets.token_hex(16)


def oauth_parameters(
    consumer_key: str,
    *,
    timestamp: int,
    nonce: str,
) -> Dict[str, str]:
    return {
        "oauth_consumer_key": consumer_key,
        "oauth_nonce": nonce,
        "oauth_signature_method": SIGNATURE_METHOD,
        "oauth_timestamp": str(timestamp),
        "oauth_version": OAUTH_VERSION,
    }


def signature_base_string(method: str, uri: str, params: Mapping[str, str]) -> str:
    return "&".join(
        (
            method.upper(),
            percent_encode(uri),
            percent_encode(form_encode(params)),
        )
    )


def sign(consumer_secret: str, base_string: str, token_secret: str = "") -> str:
    """
    Compute the base64 encoded HMAC-SHA1 of ``base_string``.
    """
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
    digest = hmac.new(
        key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def build_oauth_header(
    consumer_key: str,
    consumer_secret: str,
    method: str,
    uri: str,
    *,
    now: Optional[int] = None,
    nonce: Optional[str] = None,
) -> str:
    """
    Build the value of the ``OAuth`` header for a single request.

    ``uri`` is the absolute URL the request is sent to, query string included.
    ``now`` and ``nonce`` are generated per call unless supplied; pinning them
    makes the result fully deterministic.
    """
    timestamp = int(time.time()) if now is None else now
    nonce = generate_nonce() if nonce is None else nonce

    params = oauth_parameters(consumer_key, timestamp=timestamp, nonce=nonce)
    base_string = signature_base_string(method, uri, params)
    params["oauth_signature"] = sign(consumer_secret, base_string)
    return form_encode(params)


def parse_oauth_header(value: str) -> Dict[str, str]:
    """
    Decode an ``OAuth`` header value back into its parameters.

    Raises :class:`ValueError` if a parameter appears more than once.
    """
    params: Dict[str, str] = {}
    for key, item in parse_qsl(value, keep_blank_values=True, strict_parsing=True):
        if key in params:
            raise ValueError(f"Duplicate OAuth parameter '{key}'")
        params[key] = item
    return params


@dataclass(frozen=True)
class Credentials:
    consumer_key: str
    consumer_secret: str

    def __post_init__(self) -> None:
        if not self.consumer_key:
            raise ValueError("consumer_key must not be empty")
        if not self.consumer_secret:
            raise ValueError("consumer_secret must not be empty")

    def __repr__(self) -> str:
        return f"Credentials(consumer_key={self.consumer_key!r}, consumer_secret='***')"

    def header_for(
        self,
        method: str,
        uri: str,
        *,
        now: Optional[int] = None,
        nonce: Optional[str] = None,
    ) -> str:
        return build_oauth_header(
            self.consumer_key,
            self.consumer_secret,
            method,
            uri,
            now=now,
            nonce=nonce,
        )
