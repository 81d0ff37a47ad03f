"""Listening history domain entities.

Pure listen representations and throwback value objects with zero external dependencies.
"""

from datetime import datetime, timedelta
from enum import StrEnum
import re

from attrs import define, field, validators

from src.domain.errors import ValidationError

from .shared import ensure_utc

MIN_PERIOD_AMOUNT = 1
MAX_PERIOD_AMOUNT = 100

_PERIOD_PATTERN = re.compile(r"^(\d+)([dwmy])$")


@define(frozen=True, slots=True)
class Listen:
    """A single play of a song at a point in time.

    Listens are immutable once recorded. The same song may be listened to any
    number of times, so duplicates are expected.
    """

    song_id: str = field(validator=validators.instance_of(str))
    played_at: datetime = field(
        converter=ensure_utc, validator=validators.instance_of(datetime)
    )


class PeriodUnit(StrEnum):
    """Unit of a throwback look-back window."""

    DAYS = "d"
    WEEKS = "w"
    MONTHS = "m"
    YEARS = "y"


# Months and years are deliberately calendar-naive
_UNIT_DAYS = {
    PeriodUnit.DAYS: 1,
    PeriodUnit.WEEKS: 7,
    PeriodUnit.MONTHS: 30,
    PeriodUnit.YEARS: 365,
}


def _validate_amount(_instance, _attribute, value: int) -> None:
    if not MIN_PERIOD_AMOUNT <= value <= MAX_PERIOD_AMOUNT:
        raise ValidationError(
            f"Throwback period must be between {MIN_PERIOD_AMOUNT} and "
            f"{MAX_PERIOD_AMOUNT}, got {value}"
        )


@define(frozen=True, slots=True)
class ThrowbackPeriod:
    """Look-back window excluding recently replayed songs from a throwback."""

    unit: PeriodUnit = field(converter=PeriodUnit)
    amount: int = field(validator=_validate_amount)

    @classmethod
    def days(cls, amount: int) -> "ThrowbackPeriod":
        return cls(PeriodUnit.DAYS, amount)

    @classmethod
    def weeks(cls, amount: int) -> "ThrowbackPeriod":
        return cls(PeriodUnit.WEEKS, amount)

    @classmethod
    def months(cls, amount: int) -> "ThrowbackPeriod":
        return cls(PeriodUnit.MONTHS, amount)

    @classmethod
    def years(cls, amount: int) -> "ThrowbackPeriod":
        return cls(PeriodUnit.YEARS, amount)

    @classmethod
    def default(cls) -> "ThrowbackPeriod":
        return cls.weeks(25)

    @classmethod
    def parse(cls, text: str) -> "ThrowbackPeriod":
        """Parse the compact `<amount><unit>` form, e.g. `5m` or `25w`.

        Raises:
            ValidationError: If the text is malformed or the amount is out of range
        """
        match = _PERIOD_PATTERN.match(text.strip().lower())
        if match is None:
            raise ValidationError(
                f"Invalid throwback period '{text}': expected <number><d|w|m|y>"
            )
        return cls(PeriodUnit(match.group(2)), int(match.group(1)))

    @property
    def offset(self) -> timedelta:
        return timedelta(days=self.amount * _UNIT_DAYS[self.unit])

    def cutoff(self, now: datetime) -> datetime:
        """Listens strictly after the returned instant count as recent."""
        return now - self.offset

    def __str__(self) -> str:
        return f"{self.amount}{self.unit.value}"


@define(frozen=True, slots=True)
class ThrowbackEntry:
    """A song eligible for a throwback together with its play count."""

    song_id: str
    count: int
