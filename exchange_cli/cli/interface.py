"""CLI entrypoint for the exchange CLI.

Argument parsing and output only: the REPL and the one-shot mode both route into
ExchangeRateApiClient, and every error is reported here as a single line.
"""

from __future__ import annotations

import argparse
import shlex
import sys
from pathlib import Path

from prettytable import PrettyTable

from ..api.api_clients import ExchangeRateApiClient
from ..api.config import default_key_source, load_client_config
from ..api.storage import write_api_key
from ..core.exceptions import (
    ApiRequestError,
    ConfigError,
    ExchangeCliError,
    InputError,
    ServiceError,
)
from ..core.models import (
    ConversionQuery,
    ConversionResult,
    MultiRateResult,
    PairQuery,
    PairRateResult,
    RateQuery,
)
from ..core.utils import format_amount, format_money, parse_amount
from ..logging_config import configure_logging


class _ArgumentParser(argparse.ArgumentParser):
    """argparse that raises instead of exiting on bad arguments."""

    def error(self, message: str):  # type: ignore[override]
        raise InputError(f"{self.prog}: {message}")


def _print_error(msg: str) -> None:
    """Print a user-facing error message (no stack traces)."""
    print(msg)


def _print_pair(res: PairRateResult) -> None:
    print(
        f"1 {res.base_code} = {res.conversion_rate:.8f} {res.target_code} "
        f"(updated: {res.info.time_last_update_utc})"
    )


def _print_rates(res: MultiRateResult) -> None:
    """Render all rates for a base as a table."""
    print(
        f"Rates for 1 {res.base_code} "
        f"(updated: {res.info.time_last_update_utc}, "
        f"next update: {res.info.time_next_update_utc}):"
    )
    table = PrettyTable()
    table.field_names = ["Currency", f"Rate ({res.base_code})"]
    table.align["Currency"] = "l"
    table.align[f"Rate ({res.base_code})"] = "r"
    for code in sorted(res.conversion_rates):
        table.add_row([code, f"{res.conversion_rates[code]:.6f}"])
    print(table)


def _decimals_for(value: float) -> int:
    # Keep sub-unit results readable, e.g. 0.00021 rather than 0.0002
    return 8 if 0 < abs(value) < 1 else 4


def _print_conversion(amount: str, res: ConversionResult) -> None:
    value = res.conversion_result
    converted = format_money(value, decimals=_decimals_for(value))
    print(f"{amount} {res.base_code} = {converted} {res.target_code}")
    print(
        f"Rate: {res.conversion_rate:.8f} "
        f"(updated: {res.info.time_last_update_utc})"
    )


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argparse parser with all subcommands."""
    parser = _ArgumentParser(prog="exchange-cli")
    sub = parser.add_subparsers(
        dest="command", required=True, parser_class=_ArgumentParser
    )

    p = sub.add_parser("rate", help="Rate for a currency pair")
    p.add_argument("frm", metavar="FROM")
    p.add_argument("to", metavar="TO")

    p = sub.add_parser("rates", help="All rates for a base currency")
    p.add_argument("base", metavar="BASE")

    p = sub.add_parser("convert", help="Convert an amount between currencies")
    p.add_argument("frm", metavar="FROM")
    p.add_argument("to", metavar="TO")
    p.add_argument("amount", metavar="AMOUNT")

    p = sub.add_parser("set-key", help="Store the ExchangeRate-API key")
    p.add_argument("api_key", metavar="KEY")

    return parser


Query = RateQuery | PairQuery | ConversionQuery


def to_query(ns: argparse.Namespace) -> Query | None:
    """Turn parsed rate commands into a query; None for other commands.

    Raises:
        InputError: if the amount of a conversion is invalid
    """
    if ns.command == "rate":
        return PairQuery(ns.frm, ns.to)
    if ns.command == "rates":
        return RateQuery(ns.base)
    if ns.command == "convert":
        return ConversionQuery(ns.frm, ns.to, parse_amount(ns.amount))
    return None


def _execute(query: Query, client: ExchangeRateApiClient) -> None:
    if isinstance(query, PairQuery):
        _print_pair(client.fetch_pair_rate(query.from_currency, query.to_currency))
    elif isinstance(query, RateQuery):
        _print_rates(client.fetch_all_rates(query.base_currency))
    else:
        res = client.convert_amount(
            query.from_currency, query.to_currency, query.amount
        )
        _print_conversion(format_amount(query.amount), res)


def _run_once(argv: list[str], client: ExchangeRateApiClient) -> int:
    """Execute a single command and return an exit code."""
    try:
        ns = build_parser().parse_args(argv)

        query = to_query(ns)
        if query is not None:
            _execute(query, client)
            return 0

        if ns.command == "set-key":
            key = ns.api_key.strip()
            if not key:
                raise InputError("API key must not be empty")
            path = Path(client.cfg.KEY_FILE_PATH)
            write_api_key(path, key)
            print(f"API key saved to {path}")
            return 0

        raise InputError(f"Unknown command '{ns.command}'")
    except ServiceError as exc:
        _print_error(f"Service error: {exc}")
        return 1
    except ApiRequestError as exc:
        _print_error(f"Request failed: {exc}")
        _print_error("Try again later or check your network connection")
        return 1
    except ConfigError as exc:
        _print_error(f"Configuration error: {exc}")
        return 1
    except InputError as exc:
        _print_error(str(exc))
        _print_error("Type 'help' for a list of commands.")
        return 2
    except ExchangeCliError as exc:
        _print_error(f"Error: {exc}")
        return 1
    except OSError as exc:
        # e.g. the key file can't be written
        _print_error(f"Error: {exc}")
        return 1


def _print_repl_help() -> None:
    """Print short help for REPL usage with examples."""
    print("Available commands:")
    print("  rate <FROM> <TO>              rate for a currency pair")
    print("  rates <BASE>                  all rates for a base currency")
    print("  convert <FROM> <TO> <AMOUNT>  convert an amount")
    print("  set-key <KEY>                 store your ExchangeRate-API key")
    print("  help | exit")
    print("\nExamples:")
    print("  rate USD EUR")
    print("  rates GBP")
    print("  convert USD JPY 4231.1296")


def _repl_loop(client: ExchangeRateApiClient) -> int:
    """Run the interactive REPL loop until user exits or input ends."""
    print("Welcome to the Currency Converter!")
    print(
        "This program uses www.exchangerate-api.com to get the latest "
        "exchange rates."
    )
    print("Type 'help' for a list of commands.")
    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line:
            continue
        if line.lower() in {"exit", "quit"}:
            return 0
        if line.lower() in {"help", "?"}:
            _print_repl_help()
            continue
        try:
            args = shlex.split(line)
        except ValueError as exc:
            _print_error(f"Could not parse command: {exc}")
            continue
        try:
            _run_once(args, client)
        except SystemExit:
            # argparse exits after printing --help; the REPL must not
            continue


def build_client() -> ExchangeRateApiClient:
    cfg = load_client_config()
    return ExchangeRateApiClient(cfg, default_key_source(cfg))


def main(
    argv: list[str] | None = None, client: ExchangeRateApiClient | None = None
) -> int:
    """CLI entrypoint used by the console script and main.py.

    Args:
        argv: Optional explicit argv (without program name). If None, uses sys.argv[1:].
        client: Optional pre-built client; one is built from config otherwise.
    Returns:
        Exit code integer (0 success, non-zero on error).
    """
    configure_logging()
    args = sys.argv[1:] if argv is None else argv
    client = client or build_client()
    with client:
        if not args:
            return _repl_loop(client)
        return _run_once(args, client)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
