# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from cartguard.app import check_cart, inspect_cart
from cartguard.config import ConfigurationError, configure_logging
from cartguard.domain.errors import TransportError
from cartguard.domain.events import ItemAdded

from .console import ConsoleNotifier, format_inspection

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Keep a storefront cart within its rules")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every cycle transition",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("check", "Run one reconciliation cycle and fix the cart"),
        ("inspect", "Show the changes a cycle would make without applying them"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument(
            "--product-id",
            type=int,
            help="Product id of the item that was just added",
        )
        command.add_argument(
            "--variant-id",
            type=int,
            help="Variant id of the item that was just added",
        )

    return parser.parse_args(list(argv))


def _build_trigger(args: argparse.Namespace) -> ItemAdded | None:
    if args.product_id is None and args.variant_id is None:
        return None
    if args.product_id is not None and args.product_id <= 0:
        raise ValueError("Product id must be positive")
    if args.variant_id is not None and args.variant_id <= 0:
        raise ValueError("Variant id must be positive")
    return ItemAdded(product_id=args.product_id, variant_id=args.variant_id)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        trigger = _build_trigger(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    if parsed_args.verbose:
        configure_logging(level=logging.DEBUG, force=True)

    try:
        if parsed_args.command == "check":
            check_cart(notifier=ConsoleNotifier(), trigger=trigger)
        else:
            print(format_inspection(inspect_cart(trigger=trigger)))
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except TransportError:
        log.exception("Cart service error")
        sys.exit(1)


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
