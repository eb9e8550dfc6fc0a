"""Money value object for monetary amounts with currency.

Amounts are held as exact ``Decimal`` values. Nothing is rounded: two
amounts are equal only when they are numerically equal, so ``9.999`` never
matches ``10.00`` and ``12.5`` always matches ``12.50``.
"""

from decimal import Decimal, InvalidOperation

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Decimal as DecimalField
from protean.fields import String

from ordering.domain import ordering

DEFAULT_CURRENCY = "USD"

VALID_CURRENCIES = frozenset(
    {
        "USD",
        "EUR",
        "GBP",
        "JPY",
        "CAD",
        "AUD",
        "CHF",
        "CNY",
        "INR",
        "MXN",
        "BRL",
        "SGD",
        "NZD",
        "ZAR",
    }
)


def to_decimal(value) -> Decimal:
    """Read a float, int, str or Decimal amount as an exact Decimal.

    Floats are read through their shortest repr, so ``12.5`` becomes
    ``Decimal("12.5")`` rather than the binary expansion of the float.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError({"amount": [f"{value!r} is not a valid amount"]}) from None
    if not result.is_finite():
        raise ValidationError({"amount": [f"{value!r} is not a valid amount"]})
    return result


@ordering.value_object
class Money:
    """Value object representing a monetary amount with currency."""

    amount: DecimalField(required=True)
    currency: String(max_length=3, default=DEFAULT_CURRENCY)

    @invariant.post
    def currency_must_be_valid_iso_4217(self):
        if self.currency not in VALID_CURRENCIES:
            raise ValidationError({"currency": [f"Unsupported currency: {self.currency}"]})

    @classmethod
    def of(cls, amount, currency=DEFAULT_CURRENCY):
        return cls(amount=to_decimal(amount), currency=currency)

    @classmethod
    def zero(cls, currency=DEFAULT_CURRENCY):
        return cls.of(0, currency)

    def as_decimal(self) -> Decimal:
        return to_decimal(self.amount)

    def is_greater_than_zero(self) -> bool:
        return self.as_decimal() > 0

    def is_greater_than(self, other) -> bool:
        self._assert_same_currency(other)
        return self.as_decimal() > other.as_decimal()

    def add(self, other):
        self._assert_same_currency(other)
        return Money.of(self.as_decimal() + other.as_decimal(), self.currency)

    def subtract(self, other):
        self._assert_same_currency(other)
        return Money.of(self.as_decimal() - other.as_decimal(), self.currency)

    def multiply(self, multiplier):
        return Money.of(self.as_decimal() * to_decimal(multiplier), self.currency)

    def equals(self, other) -> bool:
        """Exact comparison of amount and currency."""
        return other is not None and self.currency == other.currency and self.as_decimal() == other.as_decimal()

    def _assert_same_currency(self, other):
        if self.currency != other.currency:
            raise ValidationError({"currency": [f"Cannot combine {self.currency} with {other.currency}"]})
