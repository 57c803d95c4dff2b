"""
test_balance.py — Tests for transfer folding and debt/credit classification
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from evensplit import (
    Amount,
    Balance,
    Gave,
    InconsistentBalances,
    Ledger,
    Role,
    Spent,
    UnknownParticipant,
    adjusted_totals,
    balances,
    check_conservation,
    classify,
    net_positions,
    reconcile,
)


def amounts(**values):
    return {k: Amount.of(v) for k, v in values.items()}


@pytest.fixture
def trip():
    return Ledger([
        Spent("Dexter", 5300),
        Spent("Angel", 2700),
        Spent("Angel", 2200),
        Spent("Debra", 800),
        Spent("Debra", 1700),
        Spent("Harry", 1900),
        Gave("Dexter", 2000, "Harry"),
        Gave("Angel", 3200, "Debra"),
    ])


class TestReconcile:
    """Folding transfers into spending totals."""

    def test_giver_credited_receiver_debited(self):
        result = reconcile([Gave("A", 30, "B")], amounts(A=100, B=50))
        assert result == amounts(A=130, B=20)

    def test_every_transfer_applied_once(self):
        transfers = [Gave("A", 10, "B"), Gave("A", 10, "B"), Gave("B", 5, "A")]
        result = reconcile(transfers, amounts(A=0, B=0))
        assert result == amounts(A=15, B=-15)

    def test_order_does_not_matter(self):
        transfers = [Gave("A", 10, "B"), Gave("C", 7, "A"), Gave("B", 3, "C")]
        totals = amounts(A=1, B=2, C=3)
        assert reconcile(transfers, totals) == reconcile(reversed(transfers), totals)

    def test_input_is_not_mutated(self):
        totals = amounts(A=100, B=50)
        reconcile([Gave("A", 30, "B")], totals)
        assert totals == amounts(A=100, B=50)

    def test_unknown_receiver(self):
        with pytest.raises(UnknownParticipant) as excinfo:
            reconcile([Gave("A", 30, "Z")], amounts(A=100))
        assert excinfo.value.participant == "Z"

    def test_unknown_giver(self):
        with pytest.raises(UnknownParticipant):
            reconcile([Gave("Z", 30, "A")], amounts(A=100))

    def test_trip_adjusted_totals(self, trip):
        assert adjusted_totals(trip) == amounts(
            Dexter=7300, Angel=8100, Debra=-700, Harry=-100,
        )

    def test_adjusted_totals_still_sum_to_total_cost(self, trip):
        assert Amount.total(adjusted_totals(trip).values()) == trip.total_cost()


class TestBalances:
    """Classification against the expected contribution."""

    def test_roles_and_amounts(self):
        result = balances(amounts(A=700, B=500), Amount.of(600))
        assert result == [
            Balance(Role.CREDIT, "A", 100),
            Balance(Role.DEBT, "B", 100),
        ]

    def test_settled_participant_omitted(self):
        result = balances(amounts(A=100, B=50, C=0), Amount.of(50))
        assert [b.participant for b in result] == ["A", "C"]

    def test_everyone_settled(self):
        assert balances(amounts(A=5, B=5), Amount.of(5)) == []

    def test_order_follows_input(self):
        result = balances(amounts(Z=0, A=10, M=20), Amount.of(10))
        assert [b.participant for b in result] == ["Z", "M"]

    def test_idempotent(self, trip):
        adjusted = adjusted_totals(trip)
        expected = trip.expected_contribution()
        assert balances(adjusted, expected) == balances(adjusted, expected)

    def test_trip_classification(self, trip):
        assert classify(trip) == [
            Balance(Role.CREDIT, "Dexter", 3650),
            Balance(Role.CREDIT, "Angel", 4450),
            Balance(Role.DEBT, "Debra", 4350),
            Balance(Role.DEBT, "Harry", 3750),
        ]

    def test_fractional_share(self):
        ledger = Ledger([Spent("A", 100), Spent("B", 0), Spent("C", 0)])
        third = Amount.of(100).split(3)
        assert classify(ledger) == [
            Balance(Role.CREDIT, "A", third * 2),
            Balance(Role.DEBT, "B", third),
            Balance(Role.DEBT, "C", third),
        ]


class TestNetPositions:

    def test_scenario_a(self):
        ledger = Ledger([Spent("Alice", 500), Spent("Bob", 500), Spent("Alice", 200)])
        assert net_positions(ledger) == amounts(Alice=100, Bob=-100)

    def test_settled_participants_included(self):
        ledger = Ledger([Spent("A", 100), Spent("B", 50), Spent("C", 0)])
        assert net_positions(ledger)["B"] == Amount.zero()

    def test_conservation(self, trip):
        assert Amount.total(net_positions(trip).values()).is_zero()


class TestCheckConservation:

    def test_balanced_passes(self):
        check_conservation([
            Balance(Role.DEBT, "A", 10),
            Balance(Role.CREDIT, "B", 4),
            Balance(Role.CREDIT, "C", 6),
        ])

    def test_empty_passes(self):
        check_conservation([])

    def test_mismatch_raises(self):
        with pytest.raises(InconsistentBalances):
            check_conservation([
                Balance(Role.DEBT, "A", 10),
                Balance(Role.CREDIT, "B", 9),
            ])

    def test_one_sided_raises(self):
        with pytest.raises(InconsistentBalances):
            check_conservation([Balance(Role.DEBT, "A", 10)])

    def test_duplicate_participant_raises(self):
        with pytest.raises(InconsistentBalances):
            check_conservation([
                Balance(Role.DEBT, "A", 5),
                Balance(Role.DEBT, "A", 5),
                Balance(Role.CREDIT, "B", 10),
            ])

    def test_inconsistency_is_not_an_input_error(self):
        with pytest.raises(RuntimeError):
            check_conservation([Balance(Role.CREDIT, "A", 1)])
