from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from catalogsync.app import build_services, ensure_storage, list_verified_contents, seed_contents
from catalogsync.config import configure_logging, require_env_vars

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

SHOP_NAME_ENV = "SHOPIFY_SHOP_NAME"
ACCESS_TOKEN_ENV = "SHOPIFY_ACCESS_TOKEN"  # noqa: S105


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve and inspect verified shop content")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")

    seed = subparsers.add_parser("seed", help="Load shops and content from a JSON file")
    seed.add_argument("path", type=Path, help="JSON document with a top-level 'shops' list")

    listing = subparsers.add_parser("list", help="Print one page of verified content")
    listing.add_argument(
        "--shop-name",
        type=str,
        help=f"Shop subdomain (defaults to ${SHOP_NAME_ENV})",
    )
    listing.add_argument(
        "--access-token",
        type=str,
        help=f"Admin API access token (defaults to ${ACCESS_TOKEN_ENV})",
    )
    listing.add_argument("--page", type=int, default=1, help="Page number (default: %(default)s)")
    listing.add_argument("--limit", type=int, default=10, help="Page size (default: %(default)s)")

    return parser.parse_args(list(argv))


def _resolve_credentials(args: argparse.Namespace) -> tuple[str, str]:
    if args.shop_name and args.access_token:
        return args.shop_name, args.access_token
    missing = [
        name
        for name, given in ((SHOP_NAME_ENV, args.shop_name), (ACCESS_TOKEN_ENV, args.access_token))
        if not given
    ]
    env = require_env_vars(missing)
    return args.shop_name or env[SHOP_NAME_ENV], args.access_token or env[ACCESS_TOKEN_ENV]


def _serve(host: str, port: int) -> None:
    import uvicorn

    from catalogsync.api.app import create_app

    uvicorn.run(create_app(), host=host, port=port)


def _list(args: argparse.Namespace) -> None:
    shop_name, access_token = _resolve_credentials(args)
    ensure_storage()
    services = build_services()
    page = asyncio.run(
        list_verified_contents(
            services,
            shop_name=shop_name,
            access_token=access_token,
            page=args.page,
            limit=args.limit,
        )
    )
    print(json.dumps(page.to_payload(), indent=2, default=str))  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    if parsed_args.command == "list" and (parsed_args.page < 1 or parsed_args.limit < 1):
        log.error("--page and --limit must be at least 1")
        sys.exit(2)

    try:
        if parsed_args.command == "serve":
            _serve(parsed_args.host, parsed_args.port)
        elif parsed_args.command == "seed":
            ensure_storage()
            stored = seed_contents(parsed_args.path)
            log.info("Stored %s content records", stored)
        elif parsed_args.command == "list":
            _list(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error running %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
