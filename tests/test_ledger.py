"""
test_ledger.py — Tests for input records and the Ledger

Tests cover:
- Ingestion-time validation of Spent/Gave records
- Participant derivation and ordering
- Aggregates: total_spent, total_cost, expected_contribution
- Error paths: NoParticipants, UnknownParticipant, batch limits
"""

import json

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from evensplit import (
    Amount,
    Balance,
    Gave,
    InputError,
    Instruction,
    InvalidAmount,
    InvalidName,
    Ledger,
    NoParticipants,
    Role,
    Spent,
    UnknownParticipant,
)


# ==============================================================================
# Record Tests
# ==============================================================================

class TestRecords:
    """Validation happens when a record is built, before any Ledger."""

    def test_spent_coerces_amount(self):
        record = Spent("Alice", "500")
        assert record.amount == Amount.of(500)

    def test_spent_zero_is_allowed(self):
        assert Spent("Alice", 0).amount.is_zero()

    def test_spent_negative_rejected(self):
        with pytest.raises(InvalidAmount):
            Spent("Alice", "-1")

    def test_spent_unparseable_amount_rejected(self):
        with pytest.raises(InvalidAmount):
            Spent("Alice", "lots")

    def test_spent_float_amount_rejected(self):
        with pytest.raises(TypeError):
            Spent("Alice", 12.5)

    def test_empty_name_rejected(self):
        with pytest.raises(InvalidName):
            Spent("  ", 10)

    def test_blank_receiver_is_an_input_error(self):
        with pytest.raises(InputError):
            Gave("Alice", 5, "")

    def test_gave_zero_rejected(self):
        with pytest.raises(InvalidAmount):
            Gave("Alice", 0, "Bob")

    def test_gave_negative_rejected(self):
        with pytest.raises(InvalidAmount):
            Gave("Alice", "-5", "Bob")

    def test_self_transfer_rejected(self):
        with pytest.raises(InvalidAmount):
            Gave("Alice", 10, "Alice")

    def test_records_are_frozen(self):
        record = Gave("Alice", 10, "Bob")
        with pytest.raises(AttributeError):
            record.amount = Amount.of(20)

    def test_records_compare_by_value(self):
        assert Spent("Alice", "1.50") == Spent("Alice", "1.5")

    def test_gave_to_dict(self):
        assert Gave("Alice", "2.5", "Bob").to_dict() == {
            "kind": "gave",
            "giver": "Alice",
            "amount": {"numerator": 5, "denominator": 2},
            "receiver": "Bob",
        }

    def test_instruction_rules(self):
        with pytest.raises(InvalidAmount):
            Instruction("Bob", 0, "Alice")
        with pytest.raises(InvalidAmount):
            Instruction("Bob", 10, "Bob")
        assert str(Instruction("Bob", 100, "Alice")) == "Bob pays 100 to Alice"

    def test_balance_must_be_positive(self):
        with pytest.raises(InvalidAmount):
            Balance(Role.DEBT, "Bob", 0)
        assert str(Balance(Role.CREDIT, "Alice", 5)) == "Alice is owed 5"


# ==============================================================================
# Ledger Tests
# ==============================================================================

@pytest.fixture
def trip():
    """Scenario B batch."""
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


class TestLedger:
    """Aggregate queries."""

    def test_participants_in_first_appearance_order(self, trip):
        assert trip.participants() == ("Dexter", "Angel", "Debra", "Harry")

    def test_participants_include_transfer_only_parties(self):
        ledger = Ledger([Spent("Alice", 90), Gave("Alice", 30, "Carol")])
        assert ledger.participants() == ("Alice", "Carol")

    def test_total_spent_sums_every_expenditure(self, trip):
        assert trip.total_spent("Angel") == Amount.of(4900)
        assert trip.total_spent("Debra") == Amount.of(2500)

    def test_total_spent_ignores_transfers(self, trip):
        assert trip.total_spent("Dexter") == Amount.of(5300)

    def test_total_spent_of_transfer_only_party_is_zero(self):
        ledger = Ledger([Spent("Alice", 90), Gave("Alice", 30, "Carol")])
        assert ledger.total_spent("Carol") == Amount.zero()

    def test_total_spent_unknown_participant(self, trip):
        with pytest.raises(UnknownParticipant) as excinfo:
            trip.total_spent("Rita")
        assert excinfo.value.participant == "Rita"

    def test_total_cost(self, trip):
        assert trip.total_cost() == Amount.of(14600)

    def test_expected_contribution(self, trip):
        assert trip.expected_contribution() == Amount.of(3650)

    def test_expected_contribution_is_exact(self):
        ledger = Ledger([Spent("A", 100), Spent("B", 0), Spent("C", 0)])
        assert ledger.expected_contribution() * 3 == Amount.of(100)

    def test_empty_batch_has_no_participants(self):
        with pytest.raises(NoParticipants):
            Ledger([]).expected_contribution()

    def test_expenditures_and_transfers(self, trip):
        assert len(trip.expenditures()) == 6
        assert trip.transfers() == [
            Gave("Dexter", 2000, "Harry"),
            Gave("Angel", 3200, "Debra"),
        ]

    def test_spending_totals(self, trip):
        assert trip.spending_totals() == {
            "Dexter": Amount.of(5300),
            "Angel": Amount.of(4900),
            "Debra": Amount.of(2500),
            "Harry": Amount.of(1900),
        }

    def test_rejects_non_records(self):
        with pytest.raises(TypeError):
            Ledger([("Alice", 10)])

    def test_max_records(self):
        with pytest.raises(ValueError):
            Ledger([Spent("A", 1)] * 3, max_records=2)

    def test_max_records_must_be_positive(self):
        with pytest.raises(ValueError):
            Ledger([Spent("A", 1)], max_records=0)
        with pytest.raises(ValueError):
            Ledger([], max_records=-5)

    def test_accepts_any_iterable_once(self):
        ledger = Ledger(Spent(name, 10) for name in ("A", "B"))
        assert len(ledger) == 2
        assert list(ledger) == [Spent("A", 10), Spent("B", 10)]

    def test_to_json(self, trip):
        data = json.loads(trip.to_json())
        assert len(data) == 8
        assert data[0]["kind"] == "spent"

    def test_digest_identifies_batch(self, trip):
        same = Ledger(trip.records())
        other = Ledger(trip.records()[:-1])
        assert trip.digest() == same.digest()
        assert trip.digest() != other.digest()
        assert len(trip.digest()) == 64

    def test_repr(self, trip):
        assert repr(trip) == "Ledger(records=8, participants=4)"
