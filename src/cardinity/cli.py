"""
Command-line interface for signing and sending Cardinity API requests.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Iterable, Sequence, Tuple

from .api import create_client
from .core.config import ConfigError, load_client_config
from .core.errors import CardinityError


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _json_body(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"--data must be valid JSON: {exc}") from exc


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    return {key: value for key, value in pairs}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cardinity",
        description="Sign and send requests to the Cardinity API",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing CARDINITY_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Python logging level (default: WARNING)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    sign = commands.add_parser("sign", help="Print an OAuth header for a request")
    sign.add_argument("method", help="HTTP method, e.g. GET")
    sign.add_argument("uri", help="Absolute request URI, query string included")

    request = commands.add_parser(
        "request", help="Send a signed request and print the response body"
    )
    request.add_argument("method", help="HTTP method, e.g. GET")
    request.add_argument("path", help="Resource path relative to the base URL")
    request.add_argument(
        "--data",
        type=_json_body,
        default=None,
        help="JSON request body",
    )
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    if args.command == "sign":
        print(config.credentials.header_for(args.method, args.uri))
        return 0

    with create_client(config=config) as client:
        try:
            body = client.request(args.method, args.path, payload=args.data)
        except CardinityError as exc:
            logging.error("Request failed: %s", exc)
            return 1

    print(body.decode("utf-8", errors="replace"))
    return 0
