#!/usr/bin/env python3
"""
Multicall Reader
================
Batched read-only contract queries with block freshness tracking

Examples:
    python main.py balances --chain ethereum --account 0x... --tokens ETH,DAI,USDC
    python main.py reserves --chain ethereum --pairs ETH/USDC,DAI/USDC
    python main.py erc20 --chain ethereum --token DAI
"""
import argparse
import asyncio
import sys

from rich.table import Table

from config.chains import ChainId
from config.tokens import find_token, wrapped_currency
from core.calls.aggregator import CallResultAggregator
from core.calls.queries import MulticallQueries
from core.errors import MulticallError
from core.network.height import RPCHeightSource
from core.network.multicall import BatchFetcher, MulticallEndpoint
from exchanges.dex.uniswap_v2 import PairReserves
from exchanges.tokens.balances import TokenBalances
from exchanges.tokens.erc20 import ERC20Reader
from utils.logger import console, get_logger, setup_logging
from utils.rpc_manager import rpc_manager

logger = get_logger(__name__)


def build_queries(chain_id: ChainId) -> MulticallQueries:
    """Wire endpoint, height source and aggregator for one chain"""
    fetcher = BatchFetcher(MulticallEndpoint(chain_id))
    aggregator = CallResultAggregator(fetcher, RPCHeightSource(chain_id))
    return MulticallQueries(aggregator)


def parse_chain(value: str) -> ChainId:
    try:
        return ChainId[value.upper()]
    except KeyError:
        raise argparse.ArgumentTypeError(
            f"Unknown chain {value}. Available: {', '.join(c.name.lower() for c in ChainId)}"
        )


def split_list(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


async def show_balances(args: argparse.Namespace):
    queries = build_queries(args.chain)
    currencies = [find_token(args.chain, ref) for ref in split_list(args.tokens)]
    balances = await TokenBalances(queries, args.chain).get_currency_balances(args.account, currencies)

    table = Table(title=f"Balances of {args.account}", header_style="bold magenta", border_style="dim")
    table.add_column("Token", style="cyan")
    table.add_column("Balance", justify="right", style="green")
    for ref, currency, balance in zip(split_list(args.tokens), currencies, balances):
        if currency is None:
            table.add_row(ref, "[red]unknown token[/red]")
        else:
            table.add_row(currency.symbol or ref, str(balance.to_decimal()) if balance else "-")
    console.print(table)


async def show_reserves(args: argparse.Namespace):
    queries = build_queries(args.chain)
    pairs = []
    for pair_ref in split_list(args.pairs):
        left, _, right = pair_ref.partition("/")
        pairs.append((find_token(args.chain, left), find_token(args.chain, right)))

    results = await PairReserves(queries, args.chain).get_pairs(pairs)

    table = Table(title="Pair reserves", header_style="bold magenta", border_style="dim")
    table.add_column("Pair", style="cyan")
    table.add_column("State")
    table.add_column("Address", style="dim")
    table.add_column("Reserve 0", justify="right", style="green")
    table.add_column("Reserve 1", justify="right", style="green")
    for pair_ref, (state, pair) in zip(split_list(args.pairs), results):
        if pair is None:
            table.add_row(pair_ref, state.value, "-", "-", "-")
        else:
            table.add_row(pair_ref, state.value, pair.address, str(pair.reserve0), str(pair.reserve1))
    console.print(table)


async def show_erc20(args: argparse.Namespace):
    queries = build_queries(args.chain)
    token = wrapped_currency(find_token(args.chain, args.token), args.chain)
    if token is None:
        raise SystemExit(f"Unknown token {args.token} on {args.chain.name}")

    reader = ERC20Reader(token, queries)
    table = Table(title=f"{token.symbol} ({token.address})", header_style="bold magenta", border_style="dim")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("decimals", str(await reader.decimals()))
    table.add_row("totalSupply", str(await reader.total_supply()))
    if args.owner and args.spender:
        allowance = await reader.allowance(args.owner, args.spender)
        table.add_row("allowance", str(allowance) if allowance else "-")
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Batched read-only contract queries")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose (DEBUG) logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    balances = subparsers.add_parser("balances", help="Native and token balances of an account")
    balances.add_argument("--chain", type=parse_chain, default=ChainId.ETHEREUM)
    balances.add_argument("--account", required=True)
    balances.add_argument("--tokens", required=True, help="Comma-separated symbols or addresses")
    balances.set_defaults(handler=show_balances)

    reserves = subparsers.add_parser("reserves", help="Uniswap V2 style pair reserves")
    reserves.add_argument("--chain", type=parse_chain, default=ChainId.ETHEREUM)
    reserves.add_argument("--pairs", required=True, help="Comma-separated pairs, e.g. ETH/USDC")
    reserves.set_defaults(handler=show_reserves)

    erc20 = subparsers.add_parser("erc20", help="ERC-20 token metadata")
    erc20.add_argument("--chain", type=parse_chain, default=ChainId.ETHEREUM)
    erc20.add_argument("--token", required=True)
    erc20.add_argument("--owner")
    erc20.add_argument("--spender")
    erc20.set_defaults(handler=show_erc20)

    return parser


async def run(args: argparse.Namespace) -> int:
    try:
        await args.handler(args)
    except MulticallError as e:
        logger.error(f"[red]Batch failed: {e}[/red]")
        return 1
    finally:
        await rpc_manager.close()
    return 0


def main():
    """Main entry point"""
    args = build_parser().parse_args()
    setup_logging("DEBUG" if args.verbose else None)
    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        logger.info("[yellow]Interrupted[/yellow]")


if __name__ == "__main__":
    main()
