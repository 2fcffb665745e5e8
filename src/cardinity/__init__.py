"""
Public facade for the Cardinity API client.

Integrators can ``from cardinity import ...`` everything they need to sign and
send requests without navigating the package.
"""

from .api import create_client
from .core import (
    APIError,
    CardinityClient,
    CardinityError,
    ClientConfig,
    ClientEnvironment,
    ConfigError,
    Credentials,
    DecodeError,
    FieldError,
    JSONDecodable,
    TransportError,
    UnexpectedError,
    build_environment,
    build_oauth_header,
    execute,
    load_client_config,
    load_env_file,
    parse_oauth_header,
)

__all__ = (
    "APIError",
    "CardinityClient",
    "CardinityError",
    "ClientConfig",
    "ClientEnvironment",
    "ConfigError",
    "Credentials",
    "DecodeError",
    "FieldError",
    "JSONDecodable",
    "TransportError",
    "UnexpectedError",
    "build_environment",
    "build_oauth_header",
    "create_client",
    "execute",
    "load_client_config",
    "load_env_file",
    "parse_oauth_header",
)
