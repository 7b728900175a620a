"""
Command-line entry point for IsoToken.

Subcommands:
    sign    build and sign a token from a JSON claims object
    verify  parse and fully validate a token, print its claims
    show    decode a token without any verification

Keys come from ``--key-file`` (raw bytes, or PEM for RS*), ``--key``, or the
``ISOTOKEN_SIGNING_KEY`` setting. Tokens and claims may be piped via stdin.
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from .core.config import settings
from .core.logging_config import setup_logging
from .core.parser import Parser
from .core.token import new_token
from .exceptions import IsoTokenException, ValidationError
from .signing import default_registry

__all__ = ["main"]

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2

_RESERVED_HEADERS = ("alg", "typ")


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------

def _read_input(value: Optional[str], what: str) -> str:
    """Return *value*, or stdin when *value* is missing or ``-``."""
    if value is None or value == "-":
        value = sys.stdin.read()
    value = value.strip()
    if not value:
        raise argparse.ArgumentTypeError(f"no {what} given")
    return value


def _resolve_key(args: argparse.Namespace) -> bytes:
    if args.key_file:
        return Path(args.key_file).read_bytes()
    if args.key:
        return args.key.encode("utf-8")
    return settings.signing_key.encode("utf-8")


def _print_json(label: str, data: dict) -> None:
    print(f"{label}:")
    print(json.dumps(data, indent=4, sort_keys=True))


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def _cmd_sign(args: argparse.Namespace, now: Callable[[], float]) -> int:
    claims = json.loads(_read_input(args.claims, "claims"))
    if not isinstance(claims, dict):
        raise argparse.ArgumentTypeError("claims must be a JSON object")

    ttl = settings.token_ttl_seconds if args.exp_in is None else args.exp_in
    if ttl > 0 and "exp" not in claims:
        claims["exp"] = int(now()) + ttl

    token = new_token(args.alg or settings.default_algorithm, claims)
    for header in args.header or []:
        name, _, value = header.partition("=")
        if name in _RESERVED_HEADERS:
            raise argparse.ArgumentTypeError(f"--header cannot set {name!r}; use --alg")
        token.header[name] = value

    print(token.signed_string(_resolve_key(args)))
    return EXIT_OK


def _cmd_verify(args: argparse.Namespace, now: Callable[[], float]) -> int:
    token_string = _read_input(args.token, "token")
    key = _resolve_key(args)
    parser = Parser(time_func=now)
    try:
        token = parser.parse(token_string, lambda _token: key)
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(f"Flags: {', '.join(exc.flag_names())}", file=sys.stderr)
        return EXIT_INVALID

    _print_json("Claims", token.claims)
    return EXIT_OK


def _cmd_show(args: argparse.Namespace, now: Callable[[], float]) -> int:
    token = Parser(time_func=now).parse_unverified(_read_input(args.token, "token"))
    _print_json("Header", token.header)
    _print_json("Claims", token.claims)
    print(f"Signature (base64url encoded):\n{token.signature}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _add_key_options(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--key-file", help="Read the key from this file (PEM for RS* algorithms)")
    group.add_argument("--key", help="Key given inline as a string")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="isotoken",
        description="Sign, verify and inspect compact signed tokens.",
        epilog="Examples:\n"
               "  %(prog)s sign '{\"sub\": \"alice\"}' --key s3cret\n"
               "  %(prog)s verify <token> --key s3cret\n"
               "  echo '<token>' | %(prog)s show -\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default=None, help="Override ISOTOKEN_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    sign = sub.add_parser("sign", help="Sign a JSON claims object")
    sign.add_argument("claims", nargs="?", default=None, help="Claims JSON ('-' or omitted reads stdin)")
    sign.add_argument("--alg", choices=default_registry.algorithms(), default=None,
                      help="Signing algorithm (default: ISOTOKEN_DEFAULT_ALGORITHM)")
    sign.add_argument("--exp-in", type=int, default=None,
                      help="Seconds until expiry; 0 omits exp (default: ISOTOKEN_TOKEN_TTL_SECONDS)")
    sign.add_argument("--header", action="append", metavar="NAME=VALUE",
                      help="Extra header entry, e.g. kid=2024-01 (repeatable)")
    _add_key_options(sign)
    sign.set_defaults(handler=_cmd_sign)

    verify = sub.add_parser("verify", help="Validate a token and print its claims")
    verify.add_argument("token", nargs="?", default=None, help="Token ('-' or omitted reads stdin)")
    _add_key_options(verify)
    verify.set_defaults(handler=_cmd_verify)

    show = sub.add_parser("show", help="Decode a token without verification")
    show.add_argument("token", nargs="?", default=None, help="Token ('-' or omitted reads stdin)")
    show.set_defaults(handler=_cmd_show)

    return parser


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[Sequence[str]] = None, now: Callable[[], float] = time.time) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level or settings.log_level, log_format="text")

    try:
        return args.handler(args, now)
    except argparse.ArgumentTypeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except json.JSONDecodeError as exc:
        print(f"Error: claims are not valid JSON: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except OSError as exc:
        print(f"Error: cannot read key: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except IsoTokenException as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
