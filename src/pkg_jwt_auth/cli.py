# src/pkg_jwt_auth/cli.py

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

import structlog

from .adapters.crypto.pubkeys import describe
from .config.env import settings_from_env
from .config.settings import JwtAuthSettings
from .domain.constants import KeyType, Status
from .domain.exceptions import AuthenticationError, ConfigurationError
from .integrations.common.auth_factory import create_authenticator
from .log import LOGGER_NAME


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-jwt-auth",
        description="Verify a compact JWT against a local JWKS or PEM public key",
    )

    parser.add_argument(
        "token",
        help="Compact JWT to verify ('-' reads it from stdin)",
    )
    keys = parser.add_mutually_exclusive_group()
    keys.add_argument(
        "--jwks",
        metavar="FILE",
        help="JWKS document to verify against "
             "(defaults to env JWT_AUTH_PUBKEY / JWT_AUTH_PUBKEY_FILE).",
    )
    keys.add_argument(
        "--pem",
        metavar="FILE",
        help="File holding the base64 body of an RSA public key.",
    )
    parser.add_argument(
        "--issuer",
        help="Required token issuer.",
    )
    parser.add_argument(
        "--audience",
        "-A",
        nargs="*",
        help="Accepted audiences (any one must be present in the token).",
    )
    parser.add_argument(
        "--leeway",
        type=int,
        default=None,
        help="Seconds of clock skew tolerated when checking 'exp'.",
    )
    parser.add_argument(
        "--list-keys",
        action="store_true",
        help="Include the usable keys (kty / kid / alg) in the output.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log key-set and verification details to stderr.",
    )

    return parser.parse_args(args=argv)


def _configure_logging(verbose: bool) -> None:
    # stdout carries the JSON result, log events go to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=False,
    )


def _strip_pem_armor(text: str) -> str:
    # The core takes the base64 body only.
    return "\n".join(
        line for line in text.splitlines() if not line.strip().startswith("-----")
    )


def _settings(args: argparse.Namespace) -> JwtAuthSettings:
    if args.jwks or args.pem:
        path = Path(args.jwks or args.pem)
        try:
            material = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read key file {path}: {exc}") from exc
        settings = JwtAuthSettings(
            pubkey=material if args.jwks else _strip_pem_armor(material),
            pubkey_type=KeyType.JWKS if args.jwks else KeyType.PEM,
        )
    else:
        settings = settings_from_env()

    if args.issuer is not None:
        settings.issuer = args.issuer
    if args.audience is not None:
        settings.audiences = list(args.audience)
    if args.leeway is not None:
        settings.leeway_seconds = args.leeway
    return settings


def _run(args: argparse.Namespace) -> dict[str, Any]:
    token = sys.stdin.read().strip() if args.token == "-" else args.token.strip()
    auth = create_authenticator(_settings(args))

    summary: dict[str, Any] = {}
    if args.list_keys:
        summary["keys"] = describe(auth.pubkeys)

    payload = auth.authenticate(token)
    return {"status": Status.OK.value, **payload.to_dict(), **summary}


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    _configure_logging(args.verbose)

    try:
        summary = _run(args)
    except AuthenticationError as exc:
        json.dump(
            {"ok": False, "status": exc.status.value, "error": str(exc)},
            sys.stdout,
            indent=2,
        )
        sys.stdout.write("\n")
        return 1
    except ConfigurationError as exc:
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 2

    json.dump({"ok": True, **summary}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
