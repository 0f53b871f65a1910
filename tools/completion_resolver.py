"""
Completion Resolver Tool
Decides whether a medication's doses for a day have been taken
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from tools.recurrence import to_rules


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionState:
    """Per-medication, per-date summary of required vs taken doses"""
    required_count: int
    taken_count: int
    is_complete: bool
    optional_taken_count: int = 0
    medication_id: Optional[int] = None


@dataclass
class CompletionSummary:
    """Aggregate completion for a care recipient on one date"""
    completed: int = 0
    total: int = 0
    states: Dict[int, CompletionState] = field(default_factory=dict)

    @property
    def progress(self) -> int:
        return progress_percent(self.completed, self.total)

    @property
    def completed_medication_ids(self) -> List[int]:
        return [mid for mid, state in self.states.items() if state.is_complete]


def progress_percent(completed: int, total: int) -> int:
    """Whole-number percentage, half rounded up; 0 when nothing to do"""
    if total <= 0:
        return 0
    ratio = Decimal(completed) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _read(source: Any, name: str, default: Any = None) -> Any:
    if isinstance(source, dict):
        return source.get(name, default)
    return getattr(source, name, default)


class CompletionResolver:
    """
    Resolves completion state from schedules and intake logs.

    Every required (not as-needed) schedule must have a taken log for the
    medication to count as complete. A medication with no schedules at all
    needs exactly one manual log.
    """

    def resolve(
        self,
        medication: Any,
        schedules: Iterable[Any],
        logs_for_date: Iterable[Any]
    ) -> CompletionState:
        """
        Compute the completion state of one medication on one date

        Args:
            medication: Medication row, mapping or bare ID
            schedules: The medication's schedules
            logs_for_date: The medication's logs for the date

        Returns:
            CompletionState
        """
        medication_id = medication if isinstance(medication, int) else _read(medication, "id")
        # Switched-off schedules are dropped before anything counts as required;
        # a medication whose schedules are all off falls back to one manual dose
        rules = [r for r in to_rules(list(schedules)) if r.active]
        logs = [log for log in logs_for_date if _read(log, "taken", True)]

        taken_schedule_ids = set()
        manual_logs = 0
        for log in logs:
            schedule_id = _read(log, "schedule_id")
            if schedule_id is None:
                manual_logs += 1
            else:
                taken_schedule_ids.add(schedule_id)

        if not rules:
            # Implicit single daily dose
            taken = 1 if manual_logs > 0 else 0
            return CompletionState(
                required_count=1,
                taken_count=taken,
                is_complete=taken == 1,
                optional_taken_count=max(manual_logs - 1, 0),
                medication_id=medication_id
            )

        required_ids = {r.schedule_id for r in rules if r.is_required}
        optional_ids = {r.schedule_id for r in rules if r.as_needed}

        taken_required = len(required_ids & taken_schedule_ids)
        optional_taken = manual_logs + len(optional_ids & taken_schedule_ids)

        return CompletionState(
            required_count=len(required_ids),
            taken_count=taken_required,
            is_complete=required_ids <= taken_schedule_ids,
            optional_taken_count=optional_taken,
            medication_id=medication_id
        )

    def summarize(
        self,
        medications: Iterable[Any],
        schedules_by_medication: Dict[int, List[Any]],
        logs_by_medication: Dict[int, List[Any]]
    ) -> CompletionSummary:
        """Aggregate completion over every medication of a care recipient"""
        summary = CompletionSummary()
        for medication in medications:
            medication_id = _read(medication, "id")
            state = self.resolve(
                medication,
                schedules_by_medication.get(medication_id, []),
                logs_by_medication.get(medication_id, [])
            )
            summary.states[medication_id] = state
            summary.total += 1
            if state.is_complete:
                summary.completed += 1

        logger.debug(
            f"Medication completion: {summary.completed}/{summary.total} "
            f"(complete: {summary.completed_medication_ids})"
        )
        return summary


# Singleton instance
completion_resolver = CompletionResolver()


def resolve(medication: Any, schedules: Iterable[Any], logs_for_date: Iterable[Any]) -> CompletionState:
    """Convenience wrapper around the shared resolver"""
    return completion_resolver.resolve(medication, schedules, logs_for_date)
