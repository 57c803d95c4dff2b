"""
text.py — Line-oriented input format and plan rendering

Input, one fact per line:

    # comments and blank lines are ignored
    Alice spent 500
    Angel spent $2,700.50
    Dexter gave 2000 to Harry

Keywords are case-insensitive, names are single tokens, amounts may carry a
leading currency symbol and thousands separators.

Output:

    Bob pays 100.00 to Alice
"""

from __future__ import annotations
from typing import Iterable, List
import re

from .errors import ParseError
from .plan import Plan
from .records import Gave, Instruction, Record, Spent
from .amount import RoundingMode


_AMOUNT = r"(?P<amount>[$€£]?\s*[+-]?(?:[0-9]{1,3}(?:,[0-9]{3})+|[0-9]+)(?:\.[0-9]+)?)"
_SPENT = re.compile(rf"^(?P<who>\S+)\s+spent\s+{_AMOUNT}$", re.IGNORECASE)
_GAVE = re.compile(
    rf"^(?P<who>\S+)\s+gave\s+{_AMOUNT}\s+to\s+(?P<whom>\S+)$", re.IGNORECASE
)

SETTLED_MESSAGE = "Everyone is settled."


def _clean_amount(raw: str) -> str:
    return raw.lstrip("$€£").replace(",", "").replace(" ", "")


def parse_line(line: str, line_number: int = 1) -> Record | None:
    """
    Parse one line. Returns None for blank and comment lines.

    Raises:
        ParseError: if the line is neither a Spent nor a Gave fact
        InvalidAmount: if the fact is well-formed but its amount is not valid
    """
    text = line.split("#", 1)[0].strip()
    if not text:
        return None

    match = _SPENT.match(text)
    if match:
        return Spent(match["who"], _clean_amount(match["amount"]))

    match = _GAVE.match(text)
    if match:
        return Gave(match["who"], _clean_amount(match["amount"]), match["whom"])

    raise ParseError(line_number, line, "expected '<name> spent <amount>' "
                                        "or '<name> gave <amount> to <name>'")


def parse(text: str) -> List[Record]:
    """Parse a whole document into records, in order."""
    records = []
    for number, line in enumerate(text.splitlines(), start=1):
        record = parse_line(line, number)
        if record is not None:
            records.append(record)
    return records


def render_instruction(
    instruction: Instruction,
    places: int = 2,
    symbol: str = "",
    rounding: RoundingMode = RoundingMode.HALF_EVEN,
) -> str:
    amount = instruction.amount.quantize(places, rounding)
    return f"{instruction.payer} pays {symbol}{amount} to {instruction.payee}"


def render_plan(
    plan: Plan | Iterable[Instruction],
    places: int = 2,
    symbol: str = "",
    rounding: RoundingMode = RoundingMode.HALF_EVEN,
) -> str:
    """One line per instruction; SETTLED_MESSAGE for an empty plan."""
    lines = [render_instruction(i, places, symbol, rounding) for i in plan]
    if not lines:
        return SETTLED_MESSAGE
    return "\n".join(lines)
