"""
Clock Tool
Injectable source of the current date and time
"""

from datetime import datetime, date, timedelta
from typing import Optional
from zoneinfo import ZoneInfo


class Clock:
    """Base clock; subclasses decide where "now" comes from"""

    tz: Optional[ZoneInfo] = None

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()

    def to_local(self, moment: datetime) -> datetime:
        """
        Naive local time for a timestamp

        Aware values are converted to the clock's zone, or to the host
        zone when the clock has none. Naive values are already local.
        """
        if moment.tzinfo is None:
            return moment
        local = moment.astimezone(self.tz) if self.tz is not None else moment.astimezone()
        return local.replace(tzinfo=None)


class SystemClock(Clock):
    """Wall clock, optionally pinned to a timezone"""

    def __init__(self, timezone: Optional[str] = None):
        self.tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now()
        # Naive local time in the configured zone; stored timestamps are naive
        return datetime.now(self.tz).replace(tzinfo=None)


class FixedClock(Clock):
    """Clock frozen at a given instant; advance it explicitly"""

    def __init__(self, instant: datetime, timezone: Optional[str] = None):
        self.instant = instant
        self.tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        return self.instant

    def set(self, instant: datetime) -> None:
        self.instant = instant

    def advance(self, **kwargs) -> datetime:
        self.instant = self.instant + timedelta(**kwargs)
        return self.instant


def day_bounds(day: date) -> tuple:
    """Half-open [start, end) datetime range covering one calendar day"""
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)
