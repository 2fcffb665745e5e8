"""
Core primitives: request signing, signed request execution and configuration.
"""

from .client import CardinityClient, JSONDecodable, execute
from .config import ClientConfig, ConfigError, load_client_config
from .environment import ClientEnvironment, build_environment, load_env_file
from .errors import (
    APIError,
    CardinityError,
    DecodeError,
    FieldError,
    TransportError,
    UnexpectedError,
)
from .signing import (
    Credentials,
    build_oauth_header,
    parse_oauth_header,
    percent_encode,
    sign,
    signature_base_string,
)

__all__ = [
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
    "execute",
    "load_client_config",
    "load_env_file",
    "parse_oauth_header",
    "percent_encode",
    "sign",
    "signature_base_string",
]
