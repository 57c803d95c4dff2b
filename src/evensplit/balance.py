"""
balance.py — Adjusted totals and debt/credit classification

ALGORITHM:
1. Seed a working map with each participant's total spend.
2. Fold every transfer in, exactly once: the giver is credited as if they had
   spent the amount, the receiver's figure drops by the same amount.
3. Compare every adjusted total with the expected contribution:
       adjusted > expected  ->  CREDIT  (adjusted - expected)
       adjusted < expected  ->  DEBT    (expected - adjusted)
       adjusted == expected ->  omitted

INVARIANT: sum(CREDIT amounts) == sum(DEBT amounts), exactly.
Transfers net to zero across the ledger, so the adjusted totals still sum to
the total cost and the net positions sum to zero.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Mapping
import logging

from .amount import Amount
from .errors import InconsistentBalances, UnknownParticipant
from .ledger import Ledger
from .records import Balance, Gave, Role


logger = logging.getLogger(__name__)


def reconcile(
    transfers: Iterable[Gave],
    expenditure_totals: Mapping[str, Amount],
) -> Dict[str, Amount]:
    """
    Fold transfers into the expenditure totals.

    Returns a new map; `expenditure_totals` is left untouched.

    Raises:
        UnknownParticipant: if a transfer names someone not in the map
    """
    adjusted = dict(expenditure_totals)
    for transfer in transfers:
        for party in (transfer.giver, transfer.receiver):
            if party not in adjusted:
                raise UnknownParticipant(
                    party,
                    f"Transfer {transfer.giver} -> {transfer.receiver} "
                    f"names unknown participant {party!r}",
                )
        adjusted[transfer.giver] = adjusted[transfer.giver] + transfer.amount
        adjusted[transfer.receiver] = adjusted[transfer.receiver] - transfer.amount
    return adjusted


def balances(
    adjusted_totals: Mapping[str, Amount],
    expected: Amount,
) -> List[Balance]:
    """
    Classify each participant against the expected contribution.

    Settled participants are left out. Order follows `adjusted_totals`.
    """
    result: List[Balance] = []
    for participant, adjusted in adjusted_totals.items():
        if adjusted > expected:
            result.append(Balance(Role.CREDIT, participant, adjusted - expected))
        elif adjusted < expected:
            result.append(Balance(Role.DEBT, participant, expected - adjusted))
        else:
            logger.debug("%s is settled", participant)
    return result


def adjusted_totals(ledger: Ledger) -> Dict[str, Amount]:
    """reconcile() applied to a ledger's own transfers and spending."""
    return reconcile(ledger.transfers(), ledger.spending_totals())


def net_positions(ledger: Ledger) -> Dict[str, Amount]:
    """
    Signed net position of every participant (settled ones included as zero).

    Positive: is owed money. Negative: owes money.
    """
    expected = ledger.expected_contribution()
    return {
        participant: total - expected
        for participant, total in adjusted_totals(ledger).items()
    }


def classify(ledger: Ledger) -> List[Balance]:
    """Balances of a ledger, checked for conservation."""
    expected = ledger.expected_contribution()
    result = balances(adjusted_totals(ledger), expected)
    check_conservation(result)
    logger.debug(
        "Classified %d participants: expected contribution %s, %d open balances",
        len(ledger.participants()), expected, len(result),
    )
    return result


def check_conservation(entries: Iterable[Balance]) -> None:
    """
    Raises:
        InconsistentBalances: if credits and debts differ, or a participant
            holds more than one balance
    """
    debts = Amount.zero()
    credits = Amount.zero()
    seen = set()
    for entry in entries:
        if entry.participant in seen:
            raise InconsistentBalances(
                f"{entry.participant} holds more than one balance"
            )
        seen.add(entry.participant)
        if entry.is_debt:
            debts = debts + entry.amount
        else:
            credits = credits + entry.amount
    if debts != credits:
        raise InconsistentBalances(
            f"Debts ({debts}) and credits ({credits}) do not cancel out"
        )
