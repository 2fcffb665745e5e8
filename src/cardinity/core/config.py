"""
Configuration objects for the Cardinity client.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from .environment import build_environment
from .signing import Credentials

__all__ = [
    "ConfigError",
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "load_client_config",
]

DEFAULT_BASE_URL = "https://api.cardinity.com/v1/"
DEFAULT_TIMEOUT_SECONDS = 30.0

_PARAMETER_TO_ENV_KEY = {
    "consumer_key": "CARDINITY_CONSUMER_KEY",
    "consumer_secret": "CARDINITY_CONSUMER_SECRET",
    "base_url": "CARDINITY_BASE_URL",
    "timeout_seconds": "CARDINITY_TIMEOUT_SECONDS",
    "debug": "CARDINITY_DEBUG",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _collect_parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in explicit.items():
        if value is None:
            continue
        overrides[_PARAMETER_TO_ENV_KEY[key]] = _stringify(value)
    return overrides


def _require(values: Mapping[str, str], env_key: str) -> str:
    value = (values.get(env_key) or "").strip()
    if not value:
        raise ConfigError(f"{env_key} must be provided")
    return value


def _normalize_base_url(raw_url: str) -> str:
    url = raw_url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"CARDINITY_BASE_URL must be an http(s) URL, got '{raw_url}'")
    if not url.endswith("/"):
        url += "/"
    return url


def _parse_timeout(raw_timeout: str) -> float:
    try:
        timeout = float(raw_timeout)
    except ValueError as exc:
        raise ConfigError(
            f"CARDINITY_TIMEOUT_SECONDS must be a number, got '{raw_timeout}'"
        ) from exc
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigError("CARDINITY_TIMEOUT_SECONDS must be a finite number greater than zero")
    return timeout


def _parse_bool(raw_value: str, env_key: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{env_key} must be a boolean, got '{raw_value}'")


@dataclass(frozen=True)
class ClientConfig:
    consumer_key: str
    consumer_secret: str
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    debug: bool = False

    def __repr__(self) -> str:
        return (
            f"ClientConfig(consumer_key={self.consumer_key!r}, consumer_secret='***', "
            f"base_url={self.base_url!r}, timeout_seconds={self.timeout_seconds!r}, "
            f"debug={self.debug!r})"
        )

    @property
    def credentials(self) -> Credentials:
        return Credentials(self.consumer_key, self.consumer_secret)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        return cls(
            consumer_key=_require(values, "CARDINITY_CONSUMER_KEY"),
            consumer_secret=_require(values, "CARDINITY_CONSUMER_SECRET"),
            base_url=_normalize_base_url(
                values.get("CARDINITY_BASE_URL", DEFAULT_BASE_URL)
            ),
            timeout_seconds=_parse_timeout(
                values.get("CARDINITY_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
            ),
            debug=_parse_bool(values.get("CARDINITY_DEBUG", "false"), "CARDINITY_DEBUG"),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        consumer_key: Optional[str] = None,
        consumer_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float | str] = None,
        debug: Optional[bool] = None,
    ) -> "ClientConfig":
        merged_overrides = dict(overrides or {})
        merged_overrides.update(
            _collect_parameter_overrides(
                {
                    "consumer_key": consumer_key,
                    "consumer_secret": consumer_secret,
                    "base_url": base_url,
                    "timeout_seconds": timeout_seconds,
                    "debug": debug,
                }
            )
        )

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    consumer_key: Optional[str] = None,
    consumer_secret: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float | str] = None,
    debug: Optional[bool] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    Settings can come from environment variables, a ``.env`` file, keyword
    arguments, or any combination of the three.
    """
    return ClientConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        debug=debug,
    )
