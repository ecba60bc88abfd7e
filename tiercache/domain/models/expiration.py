"""Expiration policies for cache entries.

An ``Expiration`` describes when an entry goes stale. It is resolved to an
absolute POSIX timestamp exactly once, when the entry is written, and the
resulting timestamp is what gets stored and compared on every read.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from tiercache.domain.models.common import Timestamp

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR
SECONDS_PER_MONTH = 30 * SECONDS_PER_DAY  # Fixed 30-day month, not calendar aware

# 4001-01-01T00:00:00Z. Far enough that no realistic clock reading passes it.
DISTANT_FUTURE = Timestamp(64092211200.0)


class ExpirationKind(enum.Enum):
    NEVER = "never"
    SECONDS = "seconds"
    DATE = "date"


@dataclass(frozen=True)
class Expiration:
    """When an entry becomes stale: never, after a duration, or at a point in time."""

    kind: ExpirationKind
    amount: Optional[float] = None

    @classmethod
    def never(cls) -> "Expiration":
        return cls(ExpirationKind.NEVER)

    @classmethod
    def seconds(cls, seconds: float) -> "Expiration":
        return cls(ExpirationKind.SECONDS, float(seconds))

    @classmethod
    def minutes(cls, minutes: float) -> "Expiration":
        return cls.seconds(minutes * SECONDS_PER_MINUTE)

    @classmethod
    def hours(cls, hours: float) -> "Expiration":
        return cls.seconds(hours * SECONDS_PER_HOUR)

    @classmethod
    def days(cls, days: float) -> "Expiration":
        return cls.seconds(days * SECONDS_PER_DAY)

    @classmethod
    def months(cls, months: float) -> "Expiration":
        return cls.seconds(months * SECONDS_PER_MONTH)

    @classmethod
    def at(cls, point: Union[datetime, float]) -> "Expiration":
        """Expires at an absolute point in time.

        Args:
            point: A POSIX timestamp or a ``datetime``. Naive datetimes are
                interpreted in local time, as ``datetime.timestamp`` does.
        """
        if isinstance(point, datetime):
            point = point.timestamp()
        return cls(ExpirationKind.DATE, float(point))

    def resolve(self, now: float) -> Timestamp:
        """Converts the policy to an absolute expiration timestamp.

        Args:
            now: The current POSIX time, read by the caller at write time.

        Returns:
            The POSIX timestamp after which the entry counts as expired.
        """
        if self.kind is ExpirationKind.NEVER:
            return DISTANT_FUTURE
        if self.kind is ExpirationKind.SECONDS:
            return Timestamp(now + self.amount)
        return Timestamp(self.amount)
