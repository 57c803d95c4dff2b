"""
amount.py — Exact domain primitive for shared-expense amounts

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   An exact rational (fractions.Fraction). Never floating point.
   Dividing a total cost by the number of participants stays exact, so the
   conservation invariant (sum of net positions == 0) holds bit for bit.

2. TYPE SAFETY
   Arithmetic between Amount and float/int raises TypeError.
   Conversion is always explicit: Amount.of(...).

3. IMMUTABILITY
   Frozen dataclass. Every operation returns a new instance.
   No side effects, safe to share between search branches.

4. EXPLICIT ROUNDING
   Nothing is rounded while computing. quantize() is the single rounding
   step, used only when an amount is rendered for humans.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction
from typing import Iterable, Union


AmountLike = Union["Amount", int, str, Decimal, Fraction]


# ==============================================================================
# ROUNDING STRATEGIES
# ==============================================================================

class RoundingMode(Enum):
    """
    Rounding strategies for display.

    - HALF_UP: commercial rounding (0.5 -> 1)
    - HALF_EVEN: banker's rounding, minimises statistical bias
    - DOWN: always towards zero (truncation)
    - UP: always away from zero
    - HALF_DOWN: 0.5 -> 0
    """
    HALF_UP = "half_up"
    HALF_EVEN = "half_even"
    DOWN = "down"
    UP = "up"
    HALF_DOWN = "half_down"


def _apply_rounding(value: Fraction, mode: RoundingMode) -> int:
    """Round an exact value to an integer with the given strategy."""
    sign = -1 if value < 0 else 1
    q, r = divmod(abs(value.numerator), value.denominator)
    d = value.denominator

    strategies = {
        RoundingMode.HALF_UP: lambda: q + (2 * r >= d),
        RoundingMode.HALF_EVEN: lambda: q + (2 * r > d or (2 * r == d and q % 2 == 1)),
        RoundingMode.DOWN: lambda: q,
        RoundingMode.UP: lambda: q + (r > 0),
        RoundingMode.HALF_DOWN: lambda: q + (2 * r > d),
    }

    strategy = strategies.get(mode)
    if strategy is None:
        raise ValueError(f"Unknown rounding mode: {mode}")

    return sign * int(strategy())


def _scaled_to_decimal(scaled: int, places: int) -> Decimal:
    """Build the Decimal scaled * 10**-places without any rounding."""
    sign = "-" if scaled < 0 else ""
    digits = str(abs(scaled)).rjust(places + 1, "0")
    if places == 0:
        return Decimal(f"{sign}{digits}")
    return Decimal(f"{sign}{digits[:-places]}.{digits[-places:]}")


def _to_fraction(value: AmountLike) -> Fraction:
    """Convert an accepted input into an exact Fraction."""
    if isinstance(value, Amount):
        return value.value
    # bool is an int subclass, but True is not an amount
    if isinstance(value, (bool, float)):
        raise TypeError(
            f"Amount cannot be built from {type(value).__name__}. "
            f"Use a str, int, Decimal or Fraction."
        )
    if isinstance(value, (int, Fraction)):
        return Fraction(value)
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"Not a decimal amount: {value!r}") from None
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Amount must be finite, got {value}")
        return Fraction(value)
    raise TypeError(f"Unsupported amount type: {type(value).__name__}")


# ==============================================================================
# AMOUNT
# ==============================================================================

@dataclass(frozen=True, slots=True, order=False)
class Amount:
    """
    Exact, signed amount of money.

    INVARIANTS:
    1. _value is always a Fraction (no floating point)
    2. Operations with non-Amount operands raise TypeError
    3. split(n) * n == self, exactly

    USAGE:
        cost = Amount.of("1200")
        share = cost.split(3)         # 400
        share * 3 == cost             # always true

    SERIALIZATION:
        to_dict() / from_dict(), format {"numerator": int, "denominator": int}.
        Never serialize as float.
    """
    _value: Fraction

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, value: AmountLike) -> Amount:
        """
        Build from an int, a decimal literal string, a Decimal or a Fraction.
        An Amount is returned unchanged.
        """
        if isinstance(value, Amount):
            return value
        return cls(_value=_to_fraction(value))

    @classmethod
    def zero(cls) -> Amount:
        """Zero. Useful as the start value for sum()."""
        return cls(_value=Fraction(0))

    @classmethod
    def total(cls, amounts: Iterable[Amount]) -> Amount:
        """Exact sum of an iterable of amounts (zero when empty)."""
        result = Fraction(0)
        for amount in amounts:
            if not isinstance(amount, Amount):
                raise TypeError(f"Cannot total {type(amount).__name__}")
            result += amount._value
        return cls(_value=result)

    # -------------------------------------------------------------------------
    # Arithmetic (type-safe)
    # -------------------------------------------------------------------------

    def __add__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            raise TypeError(
                f"Operation not allowed: Amount + {type(other).__name__}. "
                f"Use Amount.of() to convert."
            )
        return Amount(_value=self._value + other._value)

    def __sub__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            raise TypeError(
                f"Operation not allowed: Amount - {type(other).__name__}."
            )
        return Amount(_value=self._value - other._value)

    def __neg__(self) -> Amount:
        return Amount(_value=-self._value)

    def __abs__(self) -> Amount:
        return Amount(_value=abs(self._value))

    def __mul__(self, factor: int) -> Amount:
        """Multiplication by an integer count."""
        if not isinstance(factor, int) or isinstance(factor, bool):
            raise TypeError(
                f"Amount can only be multiplied by int, "
                f"not {type(factor).__name__}."
            )
        return Amount(_value=self._value * factor)

    def __rmul__(self, factor: int) -> Amount:
        return self.__mul__(factor)

    def split(self, n: int) -> Amount:
        """
        Exact n-th part of this amount. No remainder is lost:
        split(n) * n == self.

        Raises:
            ValueError: if n <= 0
        """
        if not isinstance(n, int) or isinstance(n, bool):
            raise TypeError(f"n must be int, got {type(n).__name__}")
        if n <= 0:
            raise ValueError(f"n must be > 0, got: {n}")
        return Amount(_value=self._value / n)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Amount):
            return self._value == other._value
        return NotImplemented

    def __lt__(self, other: Amount) -> bool:
        self._check_comparable(other)
        return self._value < other._value

    def __le__(self, other: Amount) -> bool:
        self._check_comparable(other)
        return self._value <= other._value

    def __gt__(self, other: Amount) -> bool:
        self._check_comparable(other)
        return self._value > other._value

    def __ge__(self, other: Amount) -> bool:
        self._check_comparable(other)
        return self._value >= other._value

    def _check_comparable(self, other: Amount) -> None:
        if not isinstance(other, Amount):
            raise TypeError(f"Cannot compare Amount with {type(other).__name__}")

    def __hash__(self) -> int:
        return hash(self._value)

    # -------------------------------------------------------------------------
    # Properties and output
    # -------------------------------------------------------------------------

    @property
    def value(self) -> Fraction:
        """Exact value. For calculations and persistence."""
        return self._value

    def is_positive(self) -> bool:
        return self._value > 0

    def is_negative(self) -> bool:
        return self._value < 0

    def is_zero(self) -> bool:
        return self._value == 0

    def decimal_places(self) -> int | None:
        """
        Number of decimals of the exact expansion, or None when the
        expansion does not terminate (e.g. 100/3).
        """
        d = self._value.denominator
        twos = fives = 0
        while d % 2 == 0:
            d //= 2
            twos += 1
        while d % 5 == 0:
            d //= 5
            fives += 1
        if d != 1:
            return None
        return max(twos, fives)

    def quantize(
        self,
        places: int = 2,
        rounding: RoundingMode = RoundingMode.HALF_EVEN,
    ) -> Decimal:
        """
        Round to a fixed number of decimal places, for display only.

        WARNING: the result is no longer exact. Never feed it back into
        a calculation.
        """
        if places < 0:
            raise ValueError(f"places must be >= 0, got: {places}")
        scaled = _apply_rounding(self._value * 10 ** places, rounding)
        return _scaled_to_decimal(scaled, places)

    def __repr__(self) -> str:
        return f"Amount({self})"

    def __str__(self) -> str:
        places = self.decimal_places()
        if places is None:
            return f"{self._value.numerator}/{self._value.denominator}"
        scaled = self._value * 10 ** places
        return str(_scaled_to_decimal(scaled.numerator, places))

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """
        Serialize for persistence/API.

        Format: {"numerator": int, "denominator": int}

        NOTE: never serialize as float.
        """
        return {
            "numerator": self._value.numerator,
            "denominator": self._value.denominator,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Amount:
        """
        Deserialize from dict.

        Accepts: {"numerator": int, "denominator": int}
        """
        return cls(_value=Fraction(data["numerator"], data["denominator"]))
