"""
errors.py — Error taxonomy

    SettlementError
    ├── InputError              bad facts, rejected before any plan exists
    │   ├── InvalidAmount
    │   ├── InvalidName
    │   ├── NoParticipants
    │   ├── UnknownParticipant
    │   └── ParseError
    └── ConsistencyError        a defect upstream of the solver
        └── InconsistentBalances

Every error is raised eagerly and propagated to the caller; none of them is
turned into an empty or zero result. Misuse of the value types (floats,
non-record objects) raises TypeError instead.
"""

from __future__ import annotations
from typing import Optional


class SettlementError(Exception):
    """Base class for every error raised by evensplit."""


class InputError(SettlementError, ValueError):
    """The input batch cannot be settled."""


class InvalidAmount(InputError):
    """Negative expenditure, non-positive transfer or self-transfer."""


class InvalidName(InputError):
    """A participant name is blank."""


class NoParticipants(InputError):
    """The batch names nobody, so the expected contribution is undefined."""

    def __init__(self, message: str = "No participants: the batch is empty"):
        super().__init__(message)


class UnknownParticipant(InputError):
    """A record references someone outside the participant set."""

    def __init__(self, participant: str, message: Optional[str] = None):
        self.participant = participant
        super().__init__(message or f"Unknown participant: {participant!r}")


class ParseError(InputError):
    """A line of the text format could not be understood."""

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}: {line.strip()!r}")


class ConsistencyError(SettlementError, RuntimeError):
    """Internal consistency check failed. Never an ordinary input error."""


class InconsistentBalances(ConsistencyError):
    """Debts and credits do not cancel out."""
