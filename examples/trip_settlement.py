#!/usr/bin/env python3
"""
trip_settlement.py — Settling a shared vacation

================================================================================
THE PROBLEM
================================================================================

Four friends share a trip. Some pay for hotels and dinners, some hand cash
directly to each other. At the end, everyone should have paid the same.

    Dexter spent 5300
    Angel spent 2700 and 2200
    Debra spent 800 and 1700
    Harry spent 1900
    Dexter gave 2000 to Harry
    Angel gave 3200 to Debra

Who pays whom?

================================================================================
THE APPROACH
================================================================================

1. Fold every direct transfer into what each person spent.
2. Compare with the fair share: total cost / number of people.
3. Match whoever owes with whoever is owed, splitting amounts when needed.

Arithmetic is exact, so debts and credits always cancel to the last cent.

================================================================================
"""

from itertools import islice

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from evensplit import (
    Amount,
    Ledger,
    Pairing,
    SettlementPolicy,
    SettlementSolver,
    classify,
    parse,
    rank_plans,
    render_plan,
    settle,
)


TRIP = """\
Dexter spent 5300
Angel spent 2700
Angel spent 2200
Debra spent 800
Debra spent 1700
Harry spent 1900
Dexter gave 2000 to Harry
Angel gave 3200 to Debra
"""


def demonstrate_balances():
    """Show the figures behind the plan."""
    print("=" * 60)
    print("BALANCES")
    print("=" * 60)
    print()

    result = settle(parse(TRIP))
    print(f"Total cost:            {result.ledger.total_cost()}")
    print(f"Expected contribution: {result.expected_contribution}")
    print()
    for person, position in result.net_positions.items():
        print(f"  {person:8s} {position}")
    print()

    total = Amount.total(result.net_positions.values())
    print(f"Sum of net positions: {total}")
    print()


def demonstrate_single_plan():
    """One plan with each pairing strategy."""
    print("=" * 60)
    print("ONE PLAN")
    print("=" * 60)
    print()

    for pairing in Pairing:
        result = settle(parse(TRIP), SettlementPolicy(pairing=pairing))
        print(f"Pairing: {pairing.value}")
        print(render_plan(result.plan, symbol="$"))
        print()


def demonstrate_alternatives():
    """Enumerate alternative plans and rank them."""
    print("=" * 60)
    print("ALTERNATIVES")
    print("=" * 60)
    print()

    solver = SettlementSolver(classify(Ledger(parse(TRIP))))
    print(f"Plans in the search tree: {solver.count_plans()}")
    print(f"Longest possible plan:    {solver.max_transfers} transfers")
    print()

    for number, plan in enumerate(rank_plans(islice(solver.iter_plans(), 6)), 1):
        print(f"Plan {number} ({plan.transfer_count} transfers, fingerprint {plan.fingerprint()[:8]}):")
        print(render_plan(plan, symbol="$"))
        print()


def main():
    """Run all demonstrations."""
    demonstrate_balances()
    demonstrate_single_plan()
    demonstrate_alternatives()


if __name__ == "__main__":
    main()
