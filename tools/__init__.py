"""
Tools Package
Pure medication-tracking computations for CareTrack
"""

from .clock import (
    Clock,
    SystemClock,
    FixedClock,
    day_bounds
)

from .quantity import DoseQuantity

from .recurrence import (
    AsNeeded,
    Weekly,
    SpecificDates,
    Inactive,
    Recurrence,
    TaperingStep,
    ScheduleRule,
    parse_recurrence,
    parse_days_of_week,
    weekday_number
)

from .schedule_expander import (
    ScheduleExpander,
    DoseInstance,
    schedule_expander,
    expand
)

from .completion_resolver import (
    CompletionResolver,
    CompletionState,
    CompletionSummary,
    completion_resolver,
    progress_percent,
    resolve
)

from .reorder_forecast import (
    ReorderForecaster,
    ReorderForecast,
    reorder_forecaster,
    estimate_daily_usage,
    forecast,
    needs_reorder
)

__all__ = [
    # Clock
    "Clock",
    "SystemClock",
    "FixedClock",
    "day_bounds",

    # Parsing
    "DoseQuantity",
    "AsNeeded",
    "Weekly",
    "SpecificDates",
    "Inactive",
    "Recurrence",
    "TaperingStep",
    "ScheduleRule",
    "parse_recurrence",
    "parse_days_of_week",
    "weekday_number",

    # Schedule Expander
    "ScheduleExpander",
    "DoseInstance",
    "schedule_expander",
    "expand",

    # Completion Resolver
    "CompletionResolver",
    "CompletionState",
    "CompletionSummary",
    "completion_resolver",
    "progress_percent",
    "resolve",

    # Reorder Forecast
    "ReorderForecaster",
    "ReorderForecast",
    "reorder_forecaster",
    "estimate_daily_usage",
    "forecast",
    "needs_reorder"
]
