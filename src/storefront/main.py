#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from storefront.adapters.sqlalchemy.connection import shutdown
from storefront.app import (
    IDENTITY_EVENTS,
    clear_buyer_cart,
    handle_identity_event,
    list_buyer_addresses,
    migrate,
    submit_checkout,
)
from storefront.config import ConfigurationError, configure_logging
from storefront.domain.errors import CheckoutError
from storefront.domain.model import CheckoutState

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_REJECTED = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Storefront checkout tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    commands = parser.add_subparsers(dest="command", required=True)

    checkout = commands.add_parser("checkout", help="Submit an order for a buyer")
    checkout.add_argument("--buyer", required=True, help="Identity-provider user id")
    checkout.add_argument(
        "--body",
        default="-",
        help="JSON file with {address, items}, '-' reads stdin (default: %(default)s)",
    )

    clear = commands.add_parser("clear-cart", help="Empty a buyer's cart")
    clear.add_argument("--buyer", required=True)

    addresses = commands.add_parser("addresses", help="List a buyer's saved addresses")
    addresses.add_argument("--buyer", required=True)

    identity = commands.add_parser("identity-event", help="Apply a clerk/user.* event")
    identity.add_argument("name", choices=IDENTITY_EVENTS)
    identity.add_argument(
        "--data",
        default="-",
        help="JSON file with the event data, '-' reads stdin (default: %(default)s)",
    )

    commands.add_parser("migrate", help="Upgrade the database schema to the latest revision")
    return parser.parse_args(list(argv))


def _read_json(source: str) -> object:
    try:
        raw = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
        return json.loads(raw)
    except OSError as exc:
        raise ValueError(f"Cannot read {source}: {exc.strerror}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {source}: {exc.msg}") from exc


async def _run(args: argparse.Namespace, payload: object) -> int:
    try:
        match args.command:
            case "checkout":
                outcome = await submit_checkout(args.buyer, payload)
                print(json.dumps(outcome.to_response()))
                if outcome.state is CheckoutState.REJECTED:
                    return EXIT_REJECTED
                return EXIT_OK if outcome.success else EXIT_FAILED
            case "clear-cart":
                cleared = await clear_buyer_cart(args.buyer)
                print(json.dumps({"success": True, "cleared": cleared}))
            case "addresses":
                found = await list_buyer_addresses(args.buyer)
                print(json.dumps({"success": True, "addresses": [asdict(a) for a in found]}))
            case "identity-event":
                if not isinstance(payload, dict):
                    raise ValueError("Event data must be a JSON object")
                result = await handle_identity_event(args.name, payload)
                print(json.dumps({"success": True, "applied": bool(result)}))
            case "migrate":
                await migrate()
            case _:
                raise ValueError(f"Unknown command: {args.command}")
        return EXIT_OK
    finally:
        await shutdown()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        args = _parse_args(sys.argv[1:] if argv is None else argv)
        payload: object = None
        if args.command == "checkout":
            payload = _read_json(args.body)
        elif args.command == "identity-event":
            payload = _read_json(args.data)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_REJECTED)

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        code = asyncio.run(_run(args, payload))
    except (CheckoutError, ConfigurationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_FAILED)
    except Exception:
        log.exception("Unexpected failure running %s", args.command)
        sys.exit(EXIT_FAILED)

    if code != EXIT_OK:
        sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
