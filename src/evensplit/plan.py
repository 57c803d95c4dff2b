"""
plan.py — Settlement plans and ways to compare them

A Plan is an ordered, immutable sequence of Instructions that exhausts every
debt against every credit. Different pairing choices give different plans;
all of them move the same net amount for each participant.
"""

from __future__ import annotations
from dataclasses import dataclass
from itertools import islice
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
import hashlib
import json

from .amount import Amount
from .errors import InconsistentBalances
from .records import Balance, Instruction


def _add(totals: Dict[str, Amount], person: str, amount: Amount) -> None:
    totals[person] = totals.get(person, Amount.zero()) + amount


@dataclass(frozen=True)
class Plan:
    """
    Ordered settlement instructions.

    INVARIANT (checked by verify()): per payer, the amounts paid equal that
    payer's debt; per payee, the amounts received equal that payee's credit.
    """
    instructions: Tuple[Instruction, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "instructions", tuple(self.instructions))

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @property
    def transfer_count(self) -> int:
        return len(self.instructions)

    def total_transferred(self) -> Amount:
        return Amount.total(i.amount for i in self.instructions)

    def paid_by(self) -> Dict[str, Amount]:
        totals: Dict[str, Amount] = {}
        for i in self.instructions:
            _add(totals, i.payer, i.amount)
        return totals

    def received_by(self) -> Dict[str, Amount]:
        totals: Dict[str, Amount] = {}
        for i in self.instructions:
            _add(totals, i.payee, i.amount)
        return totals

    def net_flows(self) -> Dict[str, Amount]:
        """Amount paid minus amount received, for everyone in the plan."""
        totals: Dict[str, Amount] = {}
        for i in self.instructions:
            _add(totals, i.payer, i.amount)
            _add(totals, i.payee, -i.amount)
        return totals

    def payers(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(i.payer for i in self.instructions))

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def verify(self, entries: Iterable[Balance]) -> None:
        """
        Check that this plan exactly cancels `entries`.

        Raises:
            InconsistentBalances: on any mismatch
        """
        owed: Dict[str, Amount] = {}
        due: Dict[str, Amount] = {}
        for entry in entries:
            target = owed if entry.is_debt else due
            _add(target, entry.participant, entry.amount)

        paid = self.paid_by()
        received = self.received_by()
        if paid != owed:
            raise InconsistentBalances(
                f"Plan payments {_fmt(paid)} do not match debts {_fmt(owed)}"
            )
        if received != due:
            raise InconsistentBalances(
                f"Plan receipts {_fmt(received)} do not match credits {_fmt(due)}"
            )

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def signature(self) -> str:
        """SHA-256 of the instruction sequence (order-sensitive)."""
        content = json.dumps([i.to_dict() for i in self.instructions], sort_keys=True)
        return hashlib.sha256(content.encode()).hexdigest()

    def fingerprint(self) -> str:
        """SHA-256 of the instruction multiset (order-insensitive)."""
        rows = sorted(
            json.dumps(i.to_dict(), sort_keys=True) for i in self.instructions
        )
        return hashlib.sha256(json.dumps(rows).encode()).hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instructions": [i.to_dict() for i in self.instructions],
            "transfer_count": self.transfer_count,
            "total_transferred": self.total_transferred().to_dict(),
        }

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)

    def __str__(self) -> str:
        return "; ".join(str(i) for i in self.instructions)


def _fmt(totals: Dict[str, Amount]) -> str:
    return "{" + ", ".join(f"{k}: {v}" for k, v in sorted(totals.items())) + "}"


# ==============================================================================
# COMPARING PLANS
# ==============================================================================

def rank_plans(plans: Iterable[Plan], limit: Optional[int] = None) -> List[Plan]:
    """
    Order plans from simplest to most fragmented.

    Takes at most `limit` plans from `plans` (all of them when None), then
    sorts by number of transfers, then by number of distinct payers. The sort
    is stable, so equally simple plans keep their enumeration order.
    """
    taken = list(plans if limit is None else islice(plans, limit))
    return sorted(taken, key=lambda p: (p.transfer_count, len(p.payers())))


def unique_plans(plans: Iterable[Plan]) -> Iterator[Plan]:
    """Lazily drop plans that repeat an earlier plan's instructions in another order."""
    seen = set()
    for plan in plans:
        key = plan.fingerprint()
        if key in seen:
            continue
        seen.add(key)
        yield plan
