"""
Billing Periods
===============
Calendar windows used to group usage for billing.

Every period maps to an inclusive UTC time range and a canonical key. Keys
are namespaced by a per-kind prefix ("daily-2025-01-15", "monthly-2025-01")
so kinds never collide, and within a kind they sort chronologically.
"""

import calendar
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta, timezone
from typing import ClassVar

from usage_billing.exceptions import InvalidPeriodError

UTC = timezone.utc

_PERIOD_KINDS: dict[str, type["BillingPeriod"]] = {}


def _as_utc(instant: datetime) -> datetime:
    """Read naive datetimes as UTC, convert aware ones."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


class BillingPeriod(ABC):
    """
    Base class for billing period kinds.

    Subclasses declare their key prefix in the class statement::

        @dataclass(frozen=True, order=True)
        class WeeklyPeriod(BillingPeriod, prefix="weekly"):
            ...

    Time ranges are closed on both ends. The end instant is the last
    microsecond before the next period starts.
    """

    key_prefix: ClassVar[str]

    def __init_subclass__(cls, prefix: str | None = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if prefix is None:
            return
        if not prefix or "-" in prefix:
            raise ValueError(f"Invalid period key prefix: {prefix!r}")
        existing = _PERIOD_KINDS.get(prefix)
        if existing is not None and existing.__qualname__ != cls.__qualname__:
            raise ValueError(f"Period key prefix {prefix!r} already used by {existing.__name__}")
        cls.key_prefix = prefix
        _PERIOD_KINDS[prefix] = cls

    @abstractmethod
    def get_time_range(self) -> tuple[datetime, datetime]:
        """Return the inclusive (start, end) UTC instants of the period."""

    @abstractmethod
    def to_key(self) -> str:
        """Return the canonical, sortable key of the period."""

    @abstractmethod
    def next(self) -> "BillingPeriod":
        """Return the period of the same kind that immediately follows."""

    @abstractmethod
    def previous(self) -> "BillingPeriod":
        """Return the period of the same kind that immediately precedes."""

    @classmethod
    @abstractmethod
    def _from_key_body(cls, body: str) -> "BillingPeriod":
        """Build a period from the part of its key after the prefix."""

    def contains(self, instant: datetime) -> bool:
        start, end = self.get_time_range()
        return start <= _as_utc(instant) <= end

    def __str__(self) -> str:
        return self.to_key()


@dataclass(frozen=True, order=True)
class DailyPeriod(BillingPeriod, prefix="daily"):
    """A single UTC calendar day."""

    day: date

    def __post_init__(self):
        # datetime is a date subclass; truncate it to its UTC calendar day
        if isinstance(self.day, datetime):
            object.__setattr__(self, "day", _as_utc(self.day).date())
        elif not isinstance(self.day, date):
            raise InvalidPeriodError(
                f"Daily period requires a date, got {type(self.day).__name__}"
            )

    @classmethod
    def containing(cls, instant: date | datetime) -> "DailyPeriod":
        """Return the day that contains an instant."""
        return cls(instant)

    def get_time_range(self) -> tuple[datetime, datetime]:
        return (
            datetime.combine(self.day, time.min, tzinfo=UTC),
            datetime.combine(self.day, time.max, tzinfo=UTC),
        )

    def to_key(self) -> str:
        return f"{self.key_prefix}-{self.day.isoformat()}"

    def next(self) -> "DailyPeriod":
        return self._shift(1)

    def previous(self) -> "DailyPeriod":
        return self._shift(-1)

    def _shift(self, days: int) -> "DailyPeriod":
        try:
            return DailyPeriod(self.day + timedelta(days=days))
        except OverflowError as e:
            raise InvalidPeriodError(f"No day adjacent to {self.day} is representable") from e

    @classmethod
    def _from_key_body(cls, body: str) -> "DailyPeriod":
        try:
            return cls(date.fromisoformat(body))
        except ValueError as e:
            raise InvalidPeriodError(f"Invalid daily period: {body!r}") from e


@dataclass(frozen=True, order=True)
class MonthlyPeriod(BillingPeriod, prefix="monthly"):
    """A UTC calendar month (proleptic Gregorian)."""

    year: int
    month: int

    def __post_init__(self):
        for name in ("year", "month"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidPeriodError(f"Monthly period {name} must be an int, got {value!r}")
        if not MINYEAR <= self.year <= MAXYEAR:
            raise InvalidPeriodError(f"Year out of range: {self.year}")
        if not 1 <= self.month <= 12:
            raise InvalidPeriodError(f"Month out of range: {self.month}")

    @classmethod
    def containing(cls, instant: date | datetime) -> "MonthlyPeriod":
        """Return the month that contains an instant."""
        if isinstance(instant, datetime):
            instant = _as_utc(instant)
        return cls(instant.year, instant.month)

    def get_time_range(self) -> tuple[datetime, datetime]:
        last_day = calendar.monthrange(self.year, self.month)[1]
        start = datetime(self.year, self.month, 1, tzinfo=UTC)
        end = datetime.combine(date(self.year, self.month, last_day), time.max, tzinfo=UTC)
        return start, end

    def to_key(self) -> str:
        return f"{self.key_prefix}-{self.year:04d}-{self.month:02d}"

    def next(self) -> "MonthlyPeriod":
        if self.month == 12:
            return MonthlyPeriod(self.year + 1, 1)
        return MonthlyPeriod(self.year, self.month + 1)

    def previous(self) -> "MonthlyPeriod":
        if self.month == 1:
            return MonthlyPeriod(self.year - 1, 12)
        return MonthlyPeriod(self.year, self.month - 1)

    @classmethod
    def _from_key_body(cls, body: str) -> "MonthlyPeriod":
        year, _, month = body.partition("-")
        if not (year.isascii() and year.isdigit() and month.isascii() and month.isdigit()):
            raise InvalidPeriodError(f"Invalid monthly period: {body!r}")
        return cls(int(year), int(month))


def parse_period_key(key: str) -> BillingPeriod:
    """
    Parse a canonical period key back into a period.

    Raises:
        InvalidPeriodError: Unknown prefix or a key that is not canonical
    """
    prefix, _, body = key.partition("-")
    kind = _PERIOD_KINDS.get(prefix)
    if kind is None or not body:
        raise InvalidPeriodError(f"Unknown period key: {key!r}")

    period = kind._from_key_body(body)
    if period.to_key() != key:
        raise InvalidPeriodError(f"Non-canonical period key: {key!r}")
    return period
