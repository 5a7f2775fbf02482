"""Money value object, held as an integer count of minor units."""

import math
import os
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, String

from ordering.domain import ordering

DEFAULT_CURRENCY = os.getenv("ORDERING_CURRENCY", "INR")

# Every supported currency uses two decimal places.
MINOR_UNITS_PER_MAJOR = 100

SUPPORTED_CURRENCIES = frozenset({"INR", "USD", "EUR", "GBP", "AED", "SGD"})


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@ordering.value_object
class Money:
    """An exact amount of money in a single currency.

    Arithmetic never mutates; every operation hands back a new ``Money``.
    Mixing currencies raises a ``ValidationError``.
    """

    amount: Integer(required=True, min_value=0)
    currency: String(max_length=3, default=DEFAULT_CURRENCY)

    @invariant.post
    def currency_must_be_supported(self):
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValidationError({"currency": [f"Unsupported currency: {self.currency}"]})

    # -------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------
    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(amount=0, currency=currency)

    @classmethod
    def from_minor_units(cls, amount: int, currency: str = DEFAULT_CURRENCY) -> "Money":
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValidationError({"amount": ["Minor-unit amount must be an integer"]})
        if amount < 0:
            raise ValidationError({"amount": ["Money amount cannot be negative"]})
        return cls(amount=amount, currency=currency)

    @classmethod
    def from_major_units(cls, amount, currency: str = DEFAULT_CURRENCY) -> "Money":
        """Build from a major-unit figure such as ``25.5``, rounding half-up to the minor unit."""
        if isinstance(amount, bool):
            raise ValidationError({"amount": ["Money amount must be a number"]})
        if isinstance(amount, float) and not math.isfinite(amount):
            raise ValidationError({"amount": ["Money amount must be a finite number"]})
        try:
            major = Decimal(str(amount))
        except InvalidOperation as exc:
            raise ValidationError({"amount": ["Money amount must be a number"]}) from exc
        if not major.is_finite():
            raise ValidationError({"amount": ["Money amount must be a finite number"]})
        if major < 0:
            raise ValidationError({"amount": ["Money amount cannot be negative"]})
        return cls(amount=_round_half_up(major * MINOR_UNITS_PER_MAJOR), currency=currency)

    # -------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------
    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValidationError(
                {"currency": [f"Cannot operate on different currencies: {self.currency} and {other.currency}"]}
            )

    def add(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def multiply(self, factor) -> "Money":
        """Scale by ``factor`` (usually a quantity), rounding to the nearest minor unit."""
        scaled = Decimal(self.amount) * Decimal(str(factor))
        if scaled < 0:
            raise ValidationError({"amount": ["Cannot multiply money by a negative factor"]})
        return Money(amount=_round_half_up(scaled), currency=self.currency)

    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def major_units(self) -> Decimal:
        return Decimal(self.amount) / MINOR_UNITS_PER_MAJOR

    def format(self) -> str:
        return f"{self.currency} {self.major_units:.2f}"

    def to_payload(self) -> dict:
        """Major-unit rendering used by outbound payloads: ``{"amount": 25.0, "currency": "INR"}``."""
        return {"amount": float(self.major_units), "currency": self.currency}


def sum_money(amounts, currency: str = DEFAULT_CURRENCY) -> Money:
    total = Money.zero(currency)
    for amount in amounts:
        total = total.add(amount)
    return total
