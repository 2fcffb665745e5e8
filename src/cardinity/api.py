"""
High-level helpers for building a ready-to-use Cardinity client.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import requests

from .core.client import CardinityClient
from .core.config import ClientConfig, load_client_config

__all__ = ["create_client"]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    logger: Optional[logging.Logger] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    consumer_key: Optional[str] = None,
    consumer_secret: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float | str] = None,
    debug: Optional[bool] = None,
) -> CardinityClient:
    """
    Construct a :class:`CardinityClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from environment data and keyword arguments.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            consumer_key,
            consumer_secret,
            base_url,
            timeout_seconds,
            debug,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            debug=debug,
        )
    return CardinityClient(cfg, session=session, logger=logger)
