"""
Signed request execution against the Cardinity API.
"""

from __future__ import annotations

import json
import logging
from http.client import responses as _STATUS_PHRASES
from typing import Any, Dict, Mapping, Optional, Protocol, Type, TypeVar, Union

import requests

from .config import ClientConfig
from .errors import APIError, DecodeError, TransportError, UnexpectedError
from .signing import Credentials

__all__ = [
    "CardinityClient",
    "JSONDecodable",
    "execute",
]

T = TypeVar("T", bound="JSONDecodable")

_logger = logging.getLogger(__name__)


class JSONDecodable(Protocol):
    """Anything that can be built from a decoded JSON document."""

    @classmethod
    def from_payload(cls: Type[T], payload: Any) -> T:
        ...


def _status_line(response: requests.Response) -> str:
    reason = response.reason or _STATUS_PHRASES.get(response.status_code, "")
    return f"{response.status_code} {reason}".strip()


def _error_from_response(response: requests.Response, body: bytes) -> Exception:
    try:
        return APIError.from_payload(json.loads(body))
    except (ValueError, RecursionError):
        # Malformed error bodies are never surfaced, only the status line.
        return UnexpectedError(_status_line(response))


def _decode(body: bytes, target: Type[T]) -> T:
    try:
        return target.from_payload(json.loads(body))
    except Exception as exc:  # noqa: BLE001
        raise DecodeError(exc) from exc


def execute(
    session: requests.Session,
    credentials: Credentials,
    request: Union[requests.Request, requests.PreparedRequest],
    target: Optional[Type[T]] = None,
    *,
    timeout: Optional[float] = None,
    logger: Optional[logging.Logger] = None,
    debug: bool = False,
) -> Union[bytes, T]:
    """
    Sign ``request``, send it and classify the response.

    Returns the raw body when ``target`` is omitted, otherwise the body decoded
    through ``target.from_payload``.

    Raises:
        TransportError: the request could not be sent or the body not read.
        APIError: the API answered 4xx/5xx with a well-formed error document.
        UnexpectedError: the API answered 4xx/5xx with anything else.
        DecodeError: a successful body could not be decoded into ``target``.
    """
    log = logger or _logger
    level = logging.INFO if debug else logging.DEBUG

    try:
        if isinstance(request, requests.Request):
            prepared = session.prepare_request(request)
        else:
            prepared = request.copy()
    except requests.RequestException as exc:
        log.warning("Preparing request failed: %s", exc)
        raise TransportError(exc) from exc

    prepared.headers["Content-Type"] = "application/json"
    prepared.headers["OAuth"] = credentials.header_for(prepared.method, prepared.url)

    settings = session.merge_environment_settings(prepared.url, {}, None, None, None)
    settings["stream"] = True

    log.log(level, "Sending %s %s", prepared.method, prepared.url)
    try:
        response = session.send(prepared, timeout=timeout, **settings)
    except requests.RequestException as exc:
        log.warning("Request %s %s failed: %s", prepared.method, prepared.url, exc)
        raise TransportError(exc) from exc

    with response:
        try:
            body = response.content
        except requests.RequestException as exc:
            log.warning("Reading response from %s failed: %s", prepared.url, exc)
            raise TransportError(exc) from exc

        log.log(
            level,
            "Received %s for %s %s",
            response.status_code,
            prepared.method,
            prepared.url,
        )

        if response.status_code >= 400:
            error = _error_from_response(response, body)
            log.log(
                level,
                "API returned %s for %s %s",
                type(error).__name__,
                response.status_code,
                prepared.url,
            )
            raise error

        if target is None:
            return body
        return _decode(body, target)


class CardinityClient:
    """
    Holds the credentials and HTTP session used to call the Cardinity API.

    Instances are safe to share between callers: signing is a pure per-call
    computation and the only state is the immutable configuration.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        credentials: Optional[Credentials] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if config is not None and credentials is not None:
            raise ValueError("Provide either a ClientConfig or Credentials, not both.")
        if config is None:
            if credentials is None:
                raise ValueError("A ClientConfig or Credentials is required.")
            config = ClientConfig(credentials.consumer_key, credentials.consumer_secret)

        self.config = config
        self.credentials = config.credentials
        self.session = session or requests.Session()
        self._owns_session = session is None
        self.logger = logger or logging.getLogger(__name__)

    def __enter__(self) -> "CardinityClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session if the client created it."""
        if self._owns_session:
            self.session.close()

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        base = self.config.base_url
        if not base.endswith("/"):
            base += "/"
        return base + path.lstrip("/")

    def build_request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Any] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Request:
        return requests.Request(
            method=method.upper(),
            url=self.url_for(path),
            json=payload,
            params=dict(params) if params else None,
        )

    def execute(
        self,
        request: Union[requests.Request, requests.PreparedRequest],
        target: Optional[Type[T]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Union[bytes, T]:
        """
        Sign and send ``request``; see :func:`execute`.

        ``timeout`` defaults to the configured ``timeout_seconds``.
        """
        return execute(
            self.session,
            self.credentials,
            request,
            target,
            timeout=self.config.timeout_seconds if timeout is None else timeout,
            logger=self.logger,
            debug=self.config.debug,
        )

    def request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Any] = None,
        params: Optional[Mapping[str, Any]] = None,
        target: Optional[Type[T]] = None,
        timeout: Optional[float] = None,
    ) -> Union[bytes, T]:
        request = self.build_request(method, path, payload=payload, params=params)
        return self.execute(request, target, timeout=timeout)

    def get(
        self,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        target: Optional[Type[T]] = None,
    ) -> Union[bytes, T]:
        return self.request("GET", path, params=params, target=target)

    def post(
        self,
        path: str,
        payload: Any,
        *,
        target: Optional[Type[T]] = None,
    ) -> Union[bytes, T]:
        return self.request("POST", path, payload=payload, target=target)
