"""
Command-line interface

Usage:
    evensplit trip.txt
    evensplit trip.txt --all --limit 5
    cat trip.txt | evensplit --pairing largest --symbol '$'

Exit codes: 0 success, 1 input error, 2 internal consistency error.
"""

from __future__ import annotations
from typing import List, Optional, TextIO
import argparse
import logging
import sys

from .amount import Amount
from .errors import ConsistencyError, InputError
from .plan import Plan
from .settle import SettlementPolicy, settle, solve_all
from .solver import Pairing
from .text import parse, render_plan


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_CONSISTENCY_ERROR = 2


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be zero or more, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evensplit",
        description="Turn shared-expense facts into pay-to instructions.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="facts file ('-' or omitted reads stdin)",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="enumerate alternative plans instead of printing one",
    )
    parser.add_argument(
        "--limit",
        type=_non_negative_int,
        default=10,
        help="maximum number of plans printed with --all (default: 10)",
    )
    parser.add_argument(
        "--pairing",
        choices=[p.value for p in Pairing],
        default=Pairing.FIRST.value,
        help="how the single plan picks debtor/creditor pairs",
    )
    parser.add_argument("--places", type=_non_negative_int, default=2, help="decimal places shown")
    parser.add_argument("--symbol", default="", help="currency symbol shown before amounts")
    parser.add_argument(
        "--balances",
        action="store_true",
        help="print who owes and who is owed before the plan",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _read(path: str, stdin: TextIO) -> str:
    if path == "-":
        return stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def _format_amount(amount: Amount, places: int, symbol: str) -> str:
    return f"{symbol}{amount.quantize(places)}"


def run(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> None:
    records = parse(_read(args.file, stdin))
    policy = SettlementPolicy(
        pairing=Pairing(args.pairing),
        max_plans=args.limit if args.all else None,
    )

    if args.all:
        plans = list(solve_all(records, policy))
        for number, instructions in enumerate(plans, start=1):
            print(f"Plan {number} ({len(instructions)} transfers):", file=stdout)
            print(render_plan(Plan(tuple(instructions)), args.places, args.symbol), file=stdout)
        return

    result = settle(records, policy)
    if args.balances:
        print(
            "Expected contribution: "
            + _format_amount(result.expected_contribution, args.places, args.symbol),
            file=stdout,
        )
        for entry in result.balances:
            print(
                f"{entry.participant} {entry.role.value} "
                + _format_amount(entry.amount, args.places, args.symbol),
                file=stdout,
            )
    print(render_plan(result.plan, args.places, args.symbol), file=stdout)


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        run(args, stdin, stdout)
    except InputError as e:
        print(f"{type(e).__name__}: {e}", file=stderr)
        return EXIT_INPUT_ERROR
    except ConsistencyError as e:
        logger.error("Consistency check failed: %s", e)
        print(f"{type(e).__name__}: {e}", file=stderr)
        return EXIT_CONSISTENCY_ERROR
    except (OSError, UnicodeDecodeError) as e:
        print(f"{type(e).__name__}: {e}", file=stderr)
        return EXIT_INPUT_ERROR
    return EXIT_OK
