"""Shared fixtures for the Cardinity client tests."""

import io
from unittest.mock import patch

import pytest
import requests

from cardinity import CardinityClient, ClientConfig, Credentials


class CountingRaw(io.BytesIO):
    """In-memory response stream that records connection releases."""

    def __init__(self, body=b"", read_error=None):
        super().__init__(body)
        self.read_error = read_error
        self.released = 0

    def read(self, *args, **kwargs):
        if self.read_error is not None:
            raise self.read_error
        return super().read(*args, **kwargs)

    def release_conn(self):
        self.released += 1


def build_response(status_code=200, body=b"", reason=None, read_error=None):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.raw = CountingRaw(body, read_error=read_error)
    response.url = "https://api.cardinity.com/v1/payments"
    return response


@pytest.fixture
def make_response():
    """Factory for fake ``requests.Response`` objects."""
    return build_response


@pytest.fixture
def credentials():
    return Credentials("test-key", "test-secret")


@pytest.fixture
def config():
    return ClientConfig(
        consumer_key="test-key",
        consumer_secret="test-secret",
        base_url="https://api.cardinity.com/v1/",
        timeout_seconds=12.5,
    )


@pytest.fixture
def session():
    with requests.Session() as session:
        yield session


@pytest.fixture
def client(config, session):
    return CardinityClient(config, session=session)


@pytest.fixture
def mock_send(session):
    """Patch ``session.send`` so no network traffic happens."""
    with patch.object(session, "send") as send:
        yield send
