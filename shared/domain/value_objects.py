"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- DateRange: An inclusive range of calendar days (check-in through check-out)
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject
from shared.domain.calendar import enumerate_days, to_calendar_day
from shared.domain.exceptions import ValidationError

DEFAULT_CURRENCY = 'PHP'
SUPPORTED_CURRENCIES = ('PHP', 'USD', 'EUR')
CENT = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports arithmetic operations. Amounts are Decimals so
    fee and refund math never accumulates float error.
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValidationError("Amount cannot be negative", field='amount')
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValidationError(f"Unsupported currency: {self.currency}", field='currency')

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> 'Money':
        return cls(Decimal('0'), currency)

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract different currencies: {self.currency} and {other.currency}")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if isinstance(factor, bool) or not isinstance(factor, (int, float, Decimal)):
            raise TypeError("Can only multiply Money by number")
        product = self.amount * Decimal(str(factor))
        return Money(product.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    __rmul__ = __mul__

    def __bool__(self):
        return self.amount > 0

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date through end_date, BOTH inclusive:
    a booking occupies its check-out day too, so a guest leaving on day N
    blocks day N for everyone else.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        object.__setattr__(self, 'start_date', to_calendar_day(self.start_date))
        object.__setattr__(self, 'end_date', to_calendar_day(self.end_date))
        if self.start_date > self.end_date:
            raise ValidationError(
                f"Check-in ({self.start_date}) must not be after check-out ({self.end_date})",
                field='check_out',
            )

    def days(self) -> list[date]:
        """Every occupied day, in ascending order"""
        return enumerate_days(self)

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range shares at least one day with another

        Examples:
            - DateRange(25, 28) overlaps with DateRange(27, 30) -> True
            - DateRange(25, 28) overlaps with DateRange(28, 31) -> True (turnover day)
            - DateRange(25, 28) overlaps with DateRange(29, 31) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return self.start_date <= other.end_date and self.end_date >= other.start_date

    def contains(self, check_date: date) -> bool:
        return self.start_date <= to_calendar_day(check_date) <= self.end_date

    def __len__(self) -> int:
        """Number of calendar days covered (a single-day range has length 1)"""
        return (self.end_date - self.start_date).days + 1

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
