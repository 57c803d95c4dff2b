"""
ledger.py — Immutable store of expense facts

The Ledger is built once from a finite batch of Spent/Gave records and is
read-only afterwards. It answers the aggregate queries the balance
calculation needs:

    participants()            everyone named by any record
    total_spent(person)       sum of that person's Spent amounts
    total_cost()              sum of all Spent amounts (transfers excluded)
    expected_contribution()   total_cost() / len(participants())

PROPERTIES:
- Built once: no facts are added after construction
- Deterministic: participants keep first-appearance order
- Auditable: digest() identifies the exact batch a plan was computed from
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
import hashlib
import json
import logging

from .amount import Amount
from .errors import NoParticipants, UnknownParticipant
from .records import Gave, Record, Spent


logger = logging.getLogger(__name__)


class Ledger:
    """
    Expense facts for a single settlement request.

    Raises:
        TypeError: if the batch holds anything but Spent/Gave records
        ValueError: if the batch exceeds max_records
    """

    # Maximum records per batch (DoS protection, configurable)
    MAX_RECORDS: int = 100_000

    def __init__(
        self,
        records: Iterable[Record] = (),
        max_records: Optional[int] = None,
    ):
        self._max_records = self.MAX_RECORDS if max_records is None else max_records
        if self._max_records < 1:
            raise ValueError(f"max_records must be at least 1, got {self._max_records}")
        self._records: Tuple[Record, ...] = tuple(records)

        if len(self._records) > self._max_records:
            raise ValueError(
                f"Batch exceeds the limit of {self._max_records} records "
                f"({len(self._records)} given)"
            )

        participants: Dict[str, None] = {}
        spent: Dict[str, Amount] = {}
        for record in self._records:
            if not isinstance(record, (Spent, Gave)):
                raise TypeError(
                    f"Ledger accepts Spent or Gave records, not {type(record).__name__}"
                )
            for party in record.parties():
                participants.setdefault(party, None)
            if isinstance(record, Spent):
                spent[record.participant] = (
                    spent.get(record.participant, Amount.zero()) + record.amount
                )

        self._participants: Tuple[str, ...] = tuple(participants)
        self._spent = spent
        logger.debug(
            "Ledger built: %d records, %d participants",
            len(self._records), len(self._participants),
        )

    # -------------------------------------------------------------------------
    # Facts
    # -------------------------------------------------------------------------

    def records(self) -> Tuple[Record, ...]:
        """All records, in batch order."""
        return self._records

    def expenditures(self) -> List[Spent]:
        return [r for r in self._records if isinstance(r, Spent)]

    def transfers(self) -> List[Gave]:
        return [r for r in self._records if isinstance(r, Gave)]

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def participants(self) -> Tuple[str, ...]:
        """Everyone appearing as spender, giver or receiver, first-seen order."""
        return self._participants

    def total_spent(self, person: str) -> Amount:
        """
        Sum of all Spent amounts for `person`.

        Zero for someone who only appears in transfers.

        Raises:
            UnknownParticipant: if no record names `person`
        """
        if person not in self._participants:
            raise UnknownParticipant(person)
        return self._spent.get(person, Amount.zero())

    def spending_totals(self) -> Dict[str, Amount]:
        """total_spent() of every participant, in participant order."""
        return {p: self._spent.get(p, Amount.zero()) for p in self._participants}

    def total_cost(self) -> Amount:
        """Sum of every expenditure. Transfers only redistribute credit."""
        return Amount.total(self._spent.values())

    def expected_contribution(self) -> Amount:
        """
        Fair share of each participant, exact.

        Raises:
            NoParticipants: if the batch names nobody
        """
        if not self._participants:
            raise NoParticipants()
        return self.total_cost().split(len(self._participants))

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_dict(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self._records]

    def to_json(self) -> str:
        """Export the batch as JSON."""
        return json.dumps(self.to_dict(), indent=2)

    def digest(self) -> str:
        """SHA-256 of the canonical JSON of the batch."""
        serialized = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(serialized.encode()).hexdigest()

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return (
            f"Ledger(records={len(self._records)}, "
            f"participants={len(self._participants)})"
        )
