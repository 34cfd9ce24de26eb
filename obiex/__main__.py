import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from typing import Any

from .client import ObiexClient
from .errors import ObiexError
from .models import TradeSide, TransactionCategory


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="obiex", description="Query the Obiex API from the command line.")
    parser.add_argument("--sandbox", action="store_true", default=None, help="Use the staging API")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("currencies", help="List currencies")
    p = sub.add_parser("currency", help="Look up one currency by code")
    p.add_argument("code")
    p = sub.add_parser("pairs", help="List trade pairs")
    p.add_argument("--currency-id")
    p = sub.add_parser("networks", help="List networks for a currency")
    p.add_argument("code")
    sub.add_parser("active-networks", help="List active networks per currency")
    sub.add_parser("banks", help="List Nigerian banks")
    p = sub.add_parser("merchants", help="List naira merchants")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--page-size", type=int, default=30)
    p = sub.add_parser("wallet", help="Get or create the wallet for a currency")
    p.add_argument("code")
    p = sub.add_parser("quote", help="Create a quote, optionally accepting it")
    p.add_argument("source")
    p.add_argument("target")
    p.add_argument("side", type=str.upper, choices=[s.value for s in TradeSide])
    p.add_argument("amount", type=float)
    p.add_argument("--accept", action="store_true")
    p = sub.add_parser("transactions", help="Transaction history")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--page-size", type=int, default=30)
    p.add_argument("--category", type=str.upper, choices=[c.value for c in TransactionCategory])
    p = sub.add_parser("trades", help="Trade history")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--page-size", type=int, default=30)
    p = sub.add_parser("transaction", help="Get one transaction")
    p.add_argument("transaction_id")
    p = sub.add_parser("resolve-account", help="Resolve a bank account name")
    p.add_argument("bank_id")
    p.add_argument("account_number")
    return parser


async def dispatch(client: ObiexClient, args: argparse.Namespace) -> Any:
    command = args.command
    if command == "currencies":
        return await client.get_currencies()
    if command == "currency":
        return await client.get_currency_by_code(args.code)
    if command == "pairs":
        if args.currency_id:
            return await client.get_trade_pairs_by_currency(args.currency_id)
        return await client.get_trade_pairs()
    if command == "networks":
        return await client.get_networks(args.code)
    if command == "active-networks":
        return [
            {code: dataclasses.asdict(entry) for code, entry in mapping.items()}
            for mapping in await client.get_active_networks()
        ]
    if command == "banks":
        return await client.get_banks()
    if command == "merchants":
        return await client.get_naira_merchants(args.page, args.page_size)
    if command == "wallet":
        return await client.get_or_create_wallet(args.code)
    if command == "quote":
        if args.accept:
            return await client.trade(args.source, args.target, args.side, args.amount)
        return await client.create_quote(args.source, args.target, args.side, args.amount)
    if command == "transactions":
        category = TransactionCategory(args.category) if args.category else None
        return await client.get_transaction_history(args.page, args.page_size, category)
    if command == "trades":
        return await client.get_trade_history(args.page, args.page_size)
    if command == "transaction":
        return await client.get_transaction_by_id(args.transaction_id)
    if command == "resolve-account":
        return await client.resolve_naira_bank_account(args.bank_id, args.account_number)
    raise ValueError(f"Unknown command: {command}")


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    try:
        async with ObiexClient.from_env(sandbox_mode=args.sandbox) as client:
            result = await dispatch(client, args)
    except ObiexError as exc:
        logging.error("Request failed: %s", exc)
        return 1
    print(json.dumps(_to_jsonable(result), indent=2, default=str))
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
