"""Fixed-point money type used for every monetary amount."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

Quantity = Union["Money", Decimal, int, str]

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value: Quantity) -> Decimal:
    """Coerce a quantity to Decimal, refusing binary floats."""
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (bool, float)):
        raise TypeError(f"Refusing to build money from {type(value).__name__} {value!r}")
    if isinstance(value, (int, str)):
        return Decimal(value)
    raise TypeError(f"Unsupported money value: {value!r}")


class Money:
    """Sign-aware decimal amount with exact arithmetic.

    Addition, subtraction and scalar multiplication are exact. Division
    keeps full context precision unless ``places`` is given, in which case
    the result is rounded half-up. Display rounding is always to cents.
    """

    __slots__ = ("amount",)

    def __init__(self, value: Quantity = 0):
        object.__setattr__(self, "amount", to_decimal(value))

    def __setattr__(self, name, value):
        raise AttributeError("Money is immutable")

    @classmethod
    def zero(cls) -> Money:
        return cls(0)

    @classmethod
    def sum(cls, values: Iterable[Quantity]) -> Money:
        """Total an iterable of amounts."""
        total = Decimal("0")
        for value in values:
            total += to_decimal(value)
        return cls(total)

    def __add__(self, other: Quantity) -> Money:
        return Money(self.amount + to_decimal(other))

    __radd__ = __add__

    def __sub__(self, other: Quantity) -> Money:
        return Money(self.amount - to_decimal(other))

    def __rsub__(self, other: Quantity) -> Money:
        return Money(to_decimal(other) - self.amount)

    def __neg__(self) -> Money:
        return Money(-self.amount)

    def __abs__(self) -> Money:
        return Money(abs(self.amount))

    def __mul__(self, factor: Quantity) -> Money:
        return Money(self.amount * to_decimal(factor))

    __rmul__ = __mul__

    def divide(self, divisor: Quantity, places: int | None = None) -> Money:
        """Divide by a scalar.

        Raises:
            InvalidOperation: If the divisor is zero
        """
        denominator = to_decimal(divisor)
        if denominator == 0:
            raise InvalidOperation(f"Cannot divide {self.amount} by zero")
        result = self.amount / denominator
        if places is not None:
            result = result.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
        return Money(result)

    def percentage_of(self, whole: Quantity, places: int = 4) -> Decimal:
        """Return this amount as a percentage of ``whole``, rounded half-up.

        Raises:
            InvalidOperation: If ``whole`` is zero
        """
        return (self * HUNDRED).divide(whole, places=places).amount

    def rounded(self, places: int = 2) -> Decimal:
        """Amount rounded half-up for display or persistence."""
        return self.amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def _compare_value(self, other: object) -> Decimal | None:
        if isinstance(other, (Money, Decimal, int)) and not isinstance(other, bool):
            return to_decimal(other)
        return None

    def __eq__(self, other: object) -> bool:
        value = self._compare_value(other)
        if value is None:
            return NotImplemented
        return self.amount == value

    def __lt__(self, other: Quantity) -> bool:
        return self.amount < to_decimal(other)

    def __le__(self, other: Quantity) -> bool:
        return self.amount <= to_decimal(other)

    def __gt__(self, other: Quantity) -> bool:
        return self.amount > to_decimal(other)

    def __ge__(self, other: Quantity) -> bool:
        return self.amount >= to_decimal(other)

    def __hash__(self) -> int:
        return hash(self.amount)

    def __bool__(self) -> bool:
        return self.amount != 0

    def __repr__(self) -> str:
        return f"Money('{self.amount}')"

    def __str__(self) -> str:
        return f"{self.rounded():.2f}"
