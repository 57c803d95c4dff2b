"""
evensplit — Shared-expense settlement engine

Turns "X spent amount" and "X gave amount to Y" facts into "X pays amount
to Y" instructions after which everyone has paid exactly their fair share.
Arithmetic is exact throughout: debts and credits always cancel to the last
fraction of a cent.

================================================================================
QUICK START
================================================================================

One plan:

    from evensplit import Spent, Gave, solve

    batch = [
        Spent("Alice", "500"),
        Spent("Bob", "500"),
        Spent("Alice", "200"),
    ]
    solve(batch)    # [Instruction(payer='Bob', amount=Amount(100), payee='Alice')]

Every alternative plan, lazily:

    from itertools import islice
    from evensplit import solve_all

    for plan in islice(solve_all(batch), 5):
        ...

The figures behind a plan:

    from evensplit import settle

    result = settle(batch)
    result.expected_contribution    # Amount(600)
    result.net_positions            # {'Alice': Amount(100), 'Bob': Amount(-100)}

================================================================================
"""

from .amount import Amount, RoundingMode

from .errors import (
    SettlementError,
    InputError,
    InvalidAmount,
    InvalidName,
    NoParticipants,
    UnknownParticipant,
    ParseError,
    ConsistencyError,
    InconsistentBalances,
)

from .records import Spent, Gave, Record, Role, Balance, Instruction
from .ledger import Ledger
from .balance import (
    reconcile,
    balances,
    adjusted_totals,
    net_positions,
    classify,
    check_conservation,
)
from .plan import Plan, rank_plans, unique_plans
from .solver import SolverState, Pairing, SettlementSolver
from .settle import SettlementPolicy, Settlement, settle, solve, solve_all
from .text import parse, parse_line, render_instruction, render_plan

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Amounts
    "Amount",
    "RoundingMode",
    # Errors
    "SettlementError",
    "InputError",
    "InvalidAmount",
    "InvalidName",
    "NoParticipants",
    "UnknownParticipant",
    "ParseError",
    "ConsistencyError",
    "InconsistentBalances",
    # Records
    "Spent",
    "Gave",
    "Record",
    "Role",
    "Balance",
    "Instruction",
    # Engine
    "Ledger",
    "reconcile",
    "balances",
    "adjusted_totals",
    "net_positions",
    "classify",
    "check_conservation",
    "Plan",
    "rank_plans",
    "unique_plans",
    "SolverState",
    "Pairing",
    "SettlementSolver",
    # Entry points
    "SettlementPolicy",
    "Settlement",
    "settle",
    "solve",
    "solve_all",
    # Text format
    "parse",
    "parse_line",
    "render_instruction",
    "render_plan",
]
