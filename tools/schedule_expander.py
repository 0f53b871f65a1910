"""
Schedule Expander Tool
Expands recurring medication schedules into concrete dose instances
"""

import logging
from dataclasses import dataclass
from datetime import datetime, date, time, timedelta
from typing import Any, Collection, Iterable, List, Optional

from tools.recurrence import ScheduleRule, to_rules


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DoseInstance:
    """One concrete dose due on a date at a time"""
    date: date
    time: Optional[time]
    quantity: str
    schedule_id: Optional[int] = None
    medication_id: Optional[int] = None

    @property
    def time_label(self) -> str:
        return self.time.strftime("%H:%M") if self.time else ""

    @property
    def sort_key(self):
        return (self.date, self.time or time.min)


def date_range(start: date, end: date) -> List[date]:
    """Inclusive list of dates from start to end (empty when inverted)"""
    days = []
    current = start
    while current <= end:
        days.append(current)
        current += timedelta(days=1)
    return days


class ScheduleExpander:
    """
    Turns schedule recurrence rules into dose instances.

    As-needed schedules never produce instances; they are offered
    separately as optional actions. Inactive rules produce nothing.
    """

    def expand(self, schedule: Any, dates: Iterable[date]) -> List[DoseInstance]:
        """
        Expand one schedule over a window of dates

        Args:
            schedule: ScheduleRule, ORM row or mapping
            dates: Candidate calendar dates

        Returns:
            Dose instances in date order
        """
        rule = ScheduleRule.from_schedule(schedule)
        if rule.as_needed or not rule.active:
            return []

        instances = []
        for day in sorted(set(dates)):
            if not rule.is_active_on(day):
                continue
            instances.append(DoseInstance(
                date=day,
                time=rule.time_of_day,
                quantity=rule.quantity_on(day),
                schedule_id=rule.schedule_id,
                medication_id=rule.medication_id
            ))
        return instances

    def expand_range(self, schedule: Any, start: date, end: date) -> List[DoseInstance]:
        """Expand over the inclusive range [start, end]"""
        return self.expand(schedule, date_range(start, end))

    def expand_all(self, schedules: Iterable[Any], dates: Iterable[date]) -> List[DoseInstance]:
        """Expand several schedules and merge in date/time order"""
        window = list(dates)
        instances = []
        for rule in to_rules(list(schedules)):
            instances.extend(self.expand(rule, window))
        instances.sort(key=lambda i: i.sort_key)
        return instances

    def upcoming(
        self,
        schedules: Iterable[Any],
        now: datetime,
        lookahead_days: int = 1,
        taken_today: Optional[Collection[int]] = None
    ) -> List[DoseInstance]:
        """
        What is left to do from now until the end of the lookahead window

        Today's instances are kept only when due strictly after the current
        minute and not already logged; later days keep every instance.

        Args:
            schedules: Schedules to expand
            now: Current local date and time
            lookahead_days: Number of days after today to include
            taken_today: Schedule IDs already logged as taken today
        """
        today = now.date()
        current_minute = now.time().replace(second=0, microsecond=0)
        taken_today = set(taken_today or ())

        window = [today + timedelta(days=offset) for offset in range(lookahead_days + 1)]
        upcoming = []
        for instance in self.expand_all(schedules, window):
            if instance.date == today:
                if instance.time is None:
                    continue
                if instance.time.replace(second=0, microsecond=0) <= current_minute:
                    continue
                if instance.schedule_id in taken_today:
                    continue
            upcoming.append(instance)

        logger.debug(f"{len(upcoming)} upcoming doses from {now.isoformat()}")
        return upcoming


# Singleton instance
schedule_expander = ScheduleExpander()


def expand(schedule: Any, dates: Iterable[date]) -> List[DoseInstance]:
    """Convenience wrapper around the shared expander"""
    return schedule_expander.expand(schedule, dates)
