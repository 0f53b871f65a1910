"""
Recurrence Tool
Normalizes stored medication schedule rows into well-formed recurrence rules
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, date, time
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

from tools.quantity import DoseQuantity


logger = logging.getLogger(__name__)


SPECIFIC_DAY_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")


# ==================== RECURRENCE VARIANTS ====================

@dataclass(frozen=True)
class AsNeeded:
    """PRN dose: always available, never required"""


@dataclass(frozen=True)
class Weekly:
    """Recurs on the given weekdays (0=Sunday .. 6=Saturday)"""
    weekdays: FrozenSet[int]


@dataclass(frozen=True)
class SpecificDates:
    """Recurs only on the listed calendar dates"""
    dates: FrozenSet[date]


@dataclass(frozen=True)
class Inactive:
    """Malformed or empty rule; never produces a dose"""
    reason: str


Recurrence = Union[AsNeeded, Weekly, SpecificDates, Inactive]


def weekday_number(day: date) -> int:
    """Weekday with Sunday=0, Saturday=6"""
    return day.isoweekday() % 7


def parse_days_of_week(value: Any) -> Optional[List[int]]:
    """
    Normalize stored days-of-week.

    Accepts a list, a JSON array string or a comma-separated string.
    Returns ``None`` when the value is absent or cannot be read as a list.
    Out-of-range entries are dropped.
    """
    if value is None:
        return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            value = json.loads(text)
        except ValueError:
            value = text.split(",")

    if not isinstance(value, (list, tuple, set, frozenset)):
        return None

    days = []
    for item in value:
        try:
            day = int(str(item).strip())
        except (TypeError, ValueError):
            continue
        if 0 <= day <= 6 and day not in days:
            days.append(day)
    return days


def parse_calendar_date(value: Any) -> Optional[date]:
    """Parse an ISO or US-style calendar date; ``None`` when unreadable"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()[:10]
    for fmt in SPECIFIC_DAY_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_specific_days(value: Any) -> Tuple[bool, FrozenSet[date]]:
    """
    Normalize stored specific calendar days.

    Returns ``(provided, dates)`` where ``provided`` tells whether the row
    listed any specific days at all, even unreadable ones.
    """
    if isinstance(value, str):
        text = value.strip()
        try:
            value = json.loads(text) if text else []
        except ValueError:
            value = [part for part in text.split(",") if part.strip()]

    if not isinstance(value, (list, tuple, set, frozenset)) or not value:
        return False, frozenset()

    dates = {parsed for parsed in (parse_calendar_date(v) for v in value) if parsed}
    return True, frozenset(dates)


def parse_recurrence(days_of_week: Any, specific_days: Any, as_needed: Any) -> Recurrence:
    """Build the recurrence variant for a schedule row"""
    if as_needed:
        return AsNeeded()

    provided, dates = parse_specific_days(specific_days)
    if provided:
        if dates:
            return SpecificDates(dates)
        return Inactive("specific days could not be parsed")

    weekdays = parse_days_of_week(days_of_week)
    if weekdays is None:
        return Inactive("days of week missing or malformed")
    if not weekdays:
        return Inactive("no days selected")
    return Weekly(frozenset(weekdays))


# ==================== TAPERING ====================

@dataclass(frozen=True)
class TaperingStep:
    """Dose override for an inclusive date range"""
    start_date: date
    end_date: date
    quantity: str

    def contains(self, day: date) -> bool:
        # Inverted ranges never match
        return self.start_date <= day <= self.end_date

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["TaperingStep"]:
        if isinstance(raw, TaperingStep):
            return raw
        if not isinstance(raw, dict):
            return None

        start = parse_calendar_date(raw.get("startDate", raw.get("start_date")))
        end = parse_calendar_date(raw.get("endDate", raw.get("end_date")))
        quantity = raw.get("quantity")
        if start is None or end is None or quantity in (None, ""):
            return None
        return cls(start_date=start, end_date=end, quantity=str(quantity))


def parse_tapering_schedule(value: Any) -> Tuple[TaperingStep, ...]:
    """Parse stored tapering steps, keeping list order and dropping bad entries"""
    if isinstance(value, str):
        try:
            value = json.loads(value) if value.strip() else []
        except ValueError:
            return ()
    if not isinstance(value, (list, tuple)):
        return ()

    steps = []
    for raw in value:
        step = TaperingStep.from_raw(raw)
        if step is None:
            logger.debug(f"Ignoring unreadable tapering step: {raw!r}")
            continue
        steps.append(step)
    return tuple(steps)


# ==================== SCHEDULE RULE ====================

def parse_time_of_day(value: Any) -> Optional[time]:
    """Accepts a time object or 'HH:MM' / 'HH:MM:SS' strings"""
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                return datetime.strptime(value.strip(), fmt).time()
            except ValueError:
                continue
    return None


@dataclass(frozen=True)
class ScheduleRule:
    """Immutable, validated view of one medication schedule"""
    schedule_id: Optional[int]
    medication_id: Optional[int]
    time_of_day: Optional[time]
    recurrence: Recurrence
    quantity: str = "1"
    is_tapering: bool = False
    tapering_steps: Tuple[TaperingStep, ...] = field(default_factory=tuple)
    active: bool = True
    raw_days_of_week: Any = None

    @property
    def as_needed(self) -> bool:
        return isinstance(self.recurrence, AsNeeded)

    @property
    def is_required(self) -> bool:
        """Counts toward required doses and usage forecasts"""
        return not self.as_needed

    def is_active_on(self, day: date) -> bool:
        recurrence = self.recurrence
        if isinstance(recurrence, SpecificDates):
            return day in recurrence.dates
        if isinstance(recurrence, Weekly):
            return weekday_number(day) in recurrence.weekdays
        return False

    def quantity_on(self, day: date) -> str:
        """Effective quantity for a day; first matching tapering step wins"""
        if self.is_tapering:
            for step in self.tapering_steps:
                if step.contains(day):
                    return step.quantity
        return self.quantity

    @property
    def dose_quantity(self) -> DoseQuantity:
        return DoseQuantity.parse(self.quantity)

    @classmethod
    def from_schedule(cls, schedule: Any) -> "ScheduleRule":
        """Build from an ORM row, a mapping or an existing rule"""
        if isinstance(schedule, ScheduleRule):
            return schedule

        get = _field_reader(schedule)
        days_of_week = get("days_of_week", "daysOfWeek")
        active = get("active")

        rule = cls(
            schedule_id=get("id", "schedule_id"),
            medication_id=get("medication_id", "medicationId"),
            time_of_day=parse_time_of_day(get("time")),
            recurrence=parse_recurrence(
                days_of_week,
                get("specific_days", "specificDays"),
                get("as_needed", "asNeeded"),
            ),
            quantity=str(get("quantity") or "1"),
            is_tapering=bool(get("is_tapering", "isTapering")),
            tapering_steps=parse_tapering_schedule(get("tapering_schedule", "taperingSchedule")),
            active=True if active is None else bool(active),
            raw_days_of_week=days_of_week,
        )

        if isinstance(rule.recurrence, Inactive):
            logger.warning(
                f"Schedule {rule.schedule_id} for medication {rule.medication_id} "
                f"is never active: {rule.recurrence.reason}"
            )
        return rule


def _field_reader(source: Any):
    """Return a getter that reads the first present attribute or key"""
    def get(*names: str) -> Any:
        for name in names:
            if isinstance(source, dict):
                if name in source:
                    return source[name]
            elif hasattr(source, name):
                return getattr(source, name)
        return None
    return get


def to_rules(schedules: List[Any]) -> List[ScheduleRule]:
    return [ScheduleRule.from_schedule(s) for s in schedules or []]


def serialize_tapering(steps: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Normalize tapering steps for storage"""
    stored = []
    for raw in steps or []:
        step = TaperingStep.from_raw(raw)
        if step is not None:
            stored.append({
                "startDate": step.start_date.isoformat(),
                "endDate": step.end_date.isoformat(),
                "quantity": step.quantity,
            })
    return stored
