"""
settle.py — Entry points

    solve(batch)      -> list[Instruction]             one plan
    solve_all(batch)  -> Iterator[list[Instruction]]   every plan, lazily
    settle(batch)     -> Settlement                    plan plus the figures behind it

All three are pure functions of the batch. Behaviour is tuned through a
SettlementPolicy; the defaults need no configuration.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from itertools import islice
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
import logging

from .amount import Amount
from .balance import classify, net_positions
from .ledger import Ledger
from .plan import Plan
from .records import Balance, Instruction, Record
from .solver import Pairing, SettlementSolver


logger = logging.getLogger(__name__)


# ==============================================================================
# POLICY
# ==============================================================================

@dataclass
class SettlementPolicy:
    """
    Settings for a settlement request.

    - pairing: strategy used by solve()/settle() to pick one plan
    - max_plans: cap on the plans solve_all() yields (None = no cap)
    - verify: check every emitted plan against the balances it settles
    - max_records: batch size limit passed to the Ledger
    """
    pairing: Pairing = Pairing.FIRST
    max_plans: Optional[int] = None
    verify: bool = True
    max_records: int = Ledger.MAX_RECORDS

    def __post_init__(self) -> None:
        if self.max_plans is not None and self.max_plans < 0:
            raise ValueError(f"max_plans must be >= 0, got {self.max_plans}")
        if self.max_records <= 0:
            raise ValueError(f"max_records must be > 0, got {self.max_records}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pairing": self.pairing.value,
            "max_plans": self.max_plans,
            "verify": self.verify,
            "max_records": self.max_records,
        }


# ==============================================================================
# RESULT
# ==============================================================================

@dataclass(frozen=True)
class Settlement:
    """A chosen plan together with the figures it was derived from."""
    ledger: Ledger
    expected_contribution: Amount
    net_positions: Dict[str, Amount]
    balances: Tuple[Balance, ...]
    plan: Plan
    policy: SettlementPolicy = field(default_factory=SettlementPolicy)

    @property
    def instructions(self) -> List[Instruction]:
        return list(self.plan.instructions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batch_digest": self.ledger.digest(),
            "total_cost": self.ledger.total_cost().to_dict(),
            "expected_contribution": self.expected_contribution.to_dict(),
            "net_positions": {p: a.to_dict() for p, a in self.net_positions.items()},
            "balances": [b.to_dict() for b in self.balances],
            "plan": self.plan.to_dict(),
            "policy": self.policy.to_dict(),
        }


# ==============================================================================
# ENTRY POINTS
# ==============================================================================

def _solver(batch: Iterable[Record], policy: SettlementPolicy) -> Tuple[Ledger, SettlementSolver]:
    ledger = Ledger(batch, max_records=policy.max_records)
    solver = SettlementSolver(classify(ledger), pairing=policy.pairing)
    return ledger, solver


def settle(batch: Iterable[Record], policy: Optional[SettlementPolicy] = None) -> Settlement:
    """
    Settle a batch and keep every intermediate figure.

    Raises:
        NoParticipants: if the batch is empty
        UnknownParticipant, InconsistentBalances: on corrupted input
    """
    policy = policy or SettlementPolicy()
    ledger, solver = _solver(batch, policy)
    plan = solver.solve()
    if policy.verify:
        plan.verify(solver.balances)
    logger.info(
        "Settled %d participants with %d instructions",
        len(ledger.participants()), plan.transfer_count,
    )
    return Settlement(
        ledger=ledger,
        expected_contribution=ledger.expected_contribution(),
        net_positions=net_positions(ledger),
        balances=solver.balances,
        plan=plan,
        policy=policy,
    )


def solve(batch: Iterable[Record], policy: Optional[SettlementPolicy] = None) -> List[Instruction]:
    """One valid settlement plan for `batch`."""
    return settle(batch, policy).instructions


def solve_all(
    batch: Iterable[Record],
    policy: Optional[SettlementPolicy] = None,
) -> Iterator[List[Instruction]]:
    """
    Every valid settlement plan for `batch`, lazily.

    The batch is validated and classified before this function returns, so
    input errors surface immediately rather than on the first next().
    Stop iterating at any point; the rest of the search tree is never built.
    """
    policy = policy or SettlementPolicy()
    _, solver = _solver(batch, policy)

    def plans() -> Iterator[List[Instruction]]:
        found = solver.iter_plans()
        if policy.max_plans is not None:
            found = islice(found, policy.max_plans)
        for plan in found:
            if policy.verify:
                plan.verify(solver.balances)
            yield list(plan.instructions)

    return plans()
