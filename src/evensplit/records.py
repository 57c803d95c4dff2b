"""
records.py — Typed facts and results

Input facts:
    Spent(participant, amount)          amount >= 0
    Gave(giver, amount, receiver)       amount > 0, giver != receiver

Derived values:
    Balance(role, participant, amount)  amount > 0
    Instruction(payer, amount, payee)   amount > 0, payer != payee

Every record is frozen. Amounts are coerced to Amount on construction and
validated right away, so an invalid fact never reaches a Ledger.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from .amount import Amount, AmountLike
from .errors import InvalidAmount, InvalidName


def _coerce_amount(record: object, value: AmountLike) -> Amount:
    try:
        amount = Amount.of(value)
    except ValueError as e:
        raise InvalidAmount(f"{type(record).__name__}: {e}") from e
    object.__setattr__(record, "amount", amount)
    return amount


def _check_name(kind: str, name: object) -> None:
    if not isinstance(name, str):
        raise TypeError(f"{kind} must be a str, got {type(name).__name__}")
    if not name.strip():
        raise InvalidName(f"{kind} must be a non-empty name")


# ==============================================================================
# INPUT FACTS
# ==============================================================================

@dataclass(frozen=True)
class Spent:
    """A participant paid `amount` towards the shared costs."""
    participant: str
    amount: Amount

    def __post_init__(self) -> None:
        _check_name("participant", self.participant)
        amount = _coerce_amount(self, self.amount)
        if amount.is_negative():
            raise InvalidAmount(
                f"{self.participant} spent a negative amount: {amount}"
            )

    def parties(self) -> tuple[str, ...]:
        return (self.participant,)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "spent",
            "participant": self.participant,
            "amount": self.amount.to_dict(),
        }


@dataclass(frozen=True)
class Gave:
    """`giver` handed `amount` directly to `receiver`."""
    giver: str
    amount: Amount
    receiver: str

    def __post_init__(self) -> None:
        _check_name("giver", self.giver)
        _check_name("receiver", self.receiver)
        amount = _coerce_amount(self, self.amount)
        if not amount.is_positive():
            raise InvalidAmount(
                f"{self.giver} gave a non-positive amount to {self.receiver}: {amount}"
            )
        if self.giver == self.receiver:
            raise InvalidAmount(f"{self.giver} cannot give money to themselves")

    def parties(self) -> tuple[str, ...]:
        return (self.giver, self.receiver)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "gave",
            "giver": self.giver,
            "amount": self.amount.to_dict(),
            "receiver": self.receiver,
        }


Record = Union[Spent, Gave]


# ==============================================================================
# DERIVED VALUES
# ==============================================================================

class Role(Enum):
    """Side of a non-zero net position."""
    DEBT = "owes"
    CREDIT = "is owed"


@dataclass(frozen=True)
class Balance:
    """Outstanding debt or credit of one participant."""
    role: Role
    participant: str
    amount: Amount

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            raise TypeError(f"role must be a Role, got {type(self.role).__name__}")
        amount = _coerce_amount(self, self.amount)
        if not amount.is_positive():
            raise InvalidAmount(
                f"Balance of {self.participant} must be positive, got {amount}"
            )

    @property
    def is_debt(self) -> bool:
        return self.role is Role.DEBT

    @property
    def is_credit(self) -> bool:
        return self.role is Role.CREDIT

    def with_amount(self, amount: Amount) -> Balance:
        return Balance(self.role, self.participant, amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role.name.lower(),
            "participant": self.participant,
            "amount": self.amount.to_dict(),
        }

    def __str__(self) -> str:
        return f"{self.participant} {self.role.value} {self.amount}"


@dataclass(frozen=True)
class Instruction:
    """`payer` pays `amount` to `payee`."""
    payer: str
    amount: Amount
    payee: str

    def __post_init__(self) -> None:
        amount = _coerce_amount(self, self.amount)
        if not amount.is_positive():
            raise InvalidAmount(f"Instruction amount must be positive, got {amount}")
        if self.payer == self.payee:
            raise InvalidAmount(f"{self.payer} cannot pay themselves")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payer": self.payer,
            "amount": self.amount.to_dict(),
            "payee": self.payee,
        }

    def __str__(self) -> str:
        return f"{self.payer} pays {self.amount} to {self.payee}"
