"""
Command line entrypoint for the BTC-e client.

Usage:
    export BTCE_API_KEY=...
    export BTCE_API_SECRET=...
    btce ticker btc_usd
    btce order 0.01 btc_usd buy 250.5
    python -m btce_client.cli check 123456
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from btce_client.common.env import init_env
from btce_client.exchange.base import ExchangeError
from btce_client.exchange.btce import BtceClient

logger = logging.getLogger(__name__)

_PAIR_COMMANDS = {
    "fee": "get_pair_fee",
    "ticker": "get_ticker",
    "trades": "get_trades",
    "depth": "get_depth",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="btce", description="BTC-e public and trade API client")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("info", help="active pairs and their limits")
    for name in _PAIR_COMMANDS:
        sub = commands.add_parser(name, help=f"public {name} data for a pair")
        sub.add_argument("pair")

    order = commands.add_parser("order", help="place a limit order")
    order.add_argument("amount")
    order.add_argument("pair")
    order.add_argument("direction", choices=["buy", "sell"])
    order.add_argument("price")

    cancel = commands.add_parser("cancel", help="cancel an active order")
    cancel.add_argument("order_id")

    check = commands.add_parser("check", help="look up a completed order")
    check.add_argument("order_id")
    return parser


def _run(args: argparse.Namespace) -> Any:
    client = BtceClient.from_env()
    if args.command == "info":
        return client.get_market_info()
    if args.command in _PAIR_COMMANDS:
        return getattr(client, _PAIR_COMMANDS[args.command])(args.pair)
    if args.command == "order":
        return client.make_order(args.amount, args.pair, args.direction, args.price)
    if args.command == "cancel":
        return client.cancel_order(args.order_id)
    return client.check_past_order(args.order_id)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_env()

    try:
        result = _run(args)
    except ExchangeError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if result is None:
        print(f"error: no data returned for {args.command}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
