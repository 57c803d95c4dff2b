"""
solver.py — Matching debtors with creditors

================================================================================
TRANSITION RULE
================================================================================

The working state is a set of open DEBT and CREDIT balances. One step picks
any debt (debtor, d) and any credit (creditor, c):

    d == c   ->  debtor pays d to creditor; both balances are closed
    d >  c   ->  debtor pays c; the credit closes, the debt becomes d - c
    d <  c   ->  debtor pays d; the debt closes, the credit becomes c - d

Steps repeat until both sides are empty. Ties are compared exactly.

================================================================================
TERMINATION
================================================================================

Every step closes at least one balance (the last step closes two), so a plan
holds at most len(debts) + len(credits) - 1 instructions. The outstanding
total drops by min(d, c) > 0 at each step.

================================================================================
ENUMERATION
================================================================================

Any pairing is legal, and each choice leads to a different plan. solve()
follows one pairing strategy; iter_plans() walks the whole choice tree
depth-first and yields plans lazily. States are immutable: each branch owns
its own snapshot, and every call to iter_plans() restarts from the initial
state.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Tuple
import logging

from .amount import Amount
from .balance import check_conservation
from .errors import InconsistentBalances
from .plan import Plan
from .records import Balance, Instruction


logger = logging.getLogger(__name__)


# ==============================================================================
# SOLVER STATE
# ==============================================================================

@dataclass(frozen=True)
class SolverState:
    """Open balances at one node of the search tree."""
    debts: Tuple[Balance, ...]
    credits: Tuple[Balance, ...]

    @classmethod
    def from_balances(cls, entries: Iterable[Balance]) -> SolverState:
        entries = tuple(entries)
        return cls(
            debts=tuple(e for e in entries if e.is_debt),
            credits=tuple(e for e in entries if e.is_credit),
        )

    def is_terminal(self) -> bool:
        return not self.debts and not self.credits

    def outstanding(self) -> Amount:
        """Total still owed. Equals the total still due while consistent."""
        return Amount.total(d.amount for d in self.debts)

    def check(self) -> None:
        """
        Raises:
            InconsistentBalances: if one side is exhausted and the other is not
        """
        if bool(self.debts) != bool(self.credits):
            left = self.debts or self.credits
            raise InconsistentBalances(
                "Unmatched balances left over: "
                + ", ".join(str(b) for b in left)
            )

    def choices(self) -> List[Tuple[int, int]]:
        """Every legal (debt index, credit index) pairing, debts outermost."""
        return [
            (i, j)
            for i in range(len(self.debts))
            for j in range(len(self.credits))
        ]

    def pair(self, debt_index: int, credit_index: int) -> Tuple[Instruction, SolverState]:
        """Apply one transition. Returns the emitted instruction and the new state."""
        debt = self.debts[debt_index]
        credit = self.credits[credit_index]
        debts = list(self.debts)
        credits = list(self.credits)

        if debt.amount == credit.amount:
            paid = debt.amount
            del debts[debt_index]
            del credits[credit_index]
        elif debt.amount > credit.amount:
            paid = credit.amount
            debts[debt_index] = debt.with_amount(debt.amount - credit.amount)
            del credits[credit_index]
        else:
            paid = debt.amount
            del debts[debt_index]
            credits[credit_index] = credit.with_amount(credit.amount - debt.amount)

        instruction = Instruction(debt.participant, paid, credit.participant)
        return instruction, SolverState(tuple(debts), tuple(credits))


# ==============================================================================
# PAIRING STRATEGIES
# ==============================================================================

class Pairing(Enum):
    """
    How solve() picks the next (debt, credit) pair.

    - FIRST: first open debt with first open credit
    - LARGEST: largest debt with largest credit (greedy); ties keep the
      earliest entry
    """
    FIRST = "first"
    LARGEST = "largest"

    def choose(self, state: SolverState) -> Tuple[int, int]:
        if self is Pairing.FIRST:
            return (0, 0)
        return (_largest(state.debts), _largest(state.credits))


def _largest(entries: Tuple[Balance, ...]) -> int:
    best = 0
    for index, entry in enumerate(entries):
        if entry.amount > entries[best].amount:
            best = index
    return best


# ==============================================================================
# SOLVER
# ==============================================================================

class SettlementSolver:
    """
    Turns debt/credit balances into settlement plans.

    USAGE:
        solver = SettlementSolver(classify(ledger))
        plan = solver.solve()                          # one plan
        first_ten = islice(solver.iter_plans(), 10)    # lazily, any prefix

    Raises (on construction):
        InconsistentBalances: if debts and credits do not cancel out
    """

    def __init__(self, entries: Iterable[Balance], pairing: Pairing = Pairing.FIRST):
        entries = tuple(entries)
        check_conservation(entries)
        self._entries = entries
        self._initial = SolverState.from_balances(entries)
        self.pairing = pairing

    @property
    def balances(self) -> Tuple[Balance, ...]:
        return self._entries

    @property
    def initial_state(self) -> SolverState:
        return self._initial

    @property
    def max_transfers(self) -> int:
        """Upper bound on the length of any plan."""
        return max(0, len(self._initial.debts) + len(self._initial.credits) - 1)

    def solve(self) -> Plan:
        """One plan, following the configured pairing strategy."""
        state = self._initial
        instructions: List[Instruction] = []
        while not state.is_terminal():
            state.check()
            instruction, state = state.pair(*self.pairing.choose(state))
            instructions.append(instruction)
        logger.debug(
            "Solved %d balances with %d instructions (%s pairing)",
            len(self._entries), len(instructions), self.pairing.value,
        )
        return Plan(tuple(instructions))

    def iter_plans(self) -> Iterator[Plan]:
        """
        Every plan reachable through every pairing choice, depth-first.

        Lazy: nothing beyond the next plan is computed until it is requested.
        The stack holds (state, instructions so far, untried choices) per level.
        """
        initial = self._initial
        if initial.is_terminal():
            yield Plan()
            return
        initial.check()

        stack = [(initial, (), iter(initial.choices()))]
        while stack:
            state, path, pending = stack[-1]
            choice = next(pending, None)
            if choice is None:
                stack.pop()
                continue
            instruction, following = state.pair(*choice)
            extended = path + (instruction,)
            if following.is_terminal():
                yield Plan(extended)
                continue
            following.check()
            stack.append((following, extended, iter(following.choices())))

    def count_plans(self) -> int:
        """Size of the whole enumeration. Exponential; small inputs only."""
        return sum(1 for _ in self.iter_plans())

    def __repr__(self) -> str:
        return (
            f"SettlementSolver(debts={len(self._initial.debts)}, "
            f"credits={len(self._initial.credits)}, pairing={self.pairing.value})"
        )
