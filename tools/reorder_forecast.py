"""
Reorder Forecast Tool
Projects medication consumption against remaining inventory
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from config import CareConfig
from tools.recurrence import parse_days_of_week, to_rules


logger = logging.getLogger(__name__)


REASON_BELOW_THRESHOLD = "below_threshold"
REASON_FORECAST = "forecast"
REASON_NONE = "none"


@dataclass(frozen=True)
class ReorderForecast:
    """Outcome of a reorder check, with the numbers behind it"""
    needs_reorder: bool
    reason: str
    estimated_daily_usage: float = 0.0
    days_until_threshold: Optional[int] = None

    def __bool__(self) -> bool:
        return self.needs_reorder


def _read(source: Any, name: str, default: Any = None) -> Any:
    if isinstance(source, dict):
        return source.get(name, default)
    return getattr(source, name, default)


def active_day_count(days_of_week: Any) -> int:
    """Weekdays per week a schedule fires; 7 when unknown"""
    days = parse_days_of_week(days_of_week)
    if days is None:
        return 7
    return len(days)


def estimate_daily_usage(schedules: Iterable[Any]) -> float:
    """
    Average units consumed per day across required schedules.

    Tapering windows and specific-date schedules are approximated by the
    base quantity on the weekly pattern.
    """
    usage = 0.0
    for rule in to_rules(list(schedules)):
        if rule.as_needed or not rule.active:
            continue
        units = rule.dose_quantity.forecast_units
        usage += units * active_day_count(rule.raw_days_of_week) / 7
    return usage


class ReorderForecaster:
    """Flags medications that will run low within their reorder lead time"""

    def __init__(
        self,
        default_threshold: int = CareConfig.DEFAULT_REORDER_THRESHOLD,
        default_lead_days: int = CareConfig.DEFAULT_DAYS_TO_REORDER
    ):
        self.default_threshold = default_threshold
        self.default_lead_days = default_lead_days

    def forecast(self, medication: Any, schedules: Iterable[Any]) -> ReorderForecast:
        """
        Decide whether a medication needs reordering

        Args:
            medication: Medication row or mapping with inventory fields
            schedules: The medication's schedules

        Returns:
            ReorderForecast
        """
        quantity = _read(medication, "current_quantity")
        threshold = _read(medication, "reorder_threshold")
        if threshold is None:
            threshold = self.default_threshold
        lead_days = _read(medication, "days_to_reorder")
        if lead_days is None:
            lead_days = self.default_lead_days

        if quantity is not None and quantity <= threshold:
            return ReorderForecast(needs_reorder=True, reason=REASON_BELOW_THRESHOLD)

        usage = estimate_daily_usage(schedules)
        if usage <= 0:
            return ReorderForecast(needs_reorder=False, reason=REASON_NONE)

        days_left = math.floor(((quantity or 0) - threshold) / usage)
        needs = days_left <= lead_days
        if needs:
            logger.debug(
                f"Medication {_read(medication, 'id')} reaches threshold in "
                f"{days_left} days (lead time {lead_days})"
            )

        return ReorderForecast(
            needs_reorder=needs,
            reason=REASON_FORECAST if needs else REASON_NONE,
            estimated_daily_usage=round(usage, 4),
            days_until_threshold=days_left
        )


# Singleton instance
reorder_forecaster = ReorderForecaster()


def forecast(medication: Any, schedules: Iterable[Any]) -> ReorderForecast:
    return reorder_forecaster.forecast(medication, schedules)


def needs_reorder(medication: Any, schedules: Iterable[Any]) -> bool:
    """True when the medication should be refilled now"""
    return reorder_forecaster.forecast(medication, schedules).needs_reorder
