"""Domain models for adherence statistics."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from uuid import UUID

from medication_tracker.domain.medications import (
    Medication,
    MedicationColor,
    MedicationLog,
)


class DayStatus(StrEnum):
    """Calendar classification of a day."""

    NO_LOGS = "no_logs"
    PARTIAL = "partial"
    ALL_COMPLETED = "all_completed"


@dataclass(frozen=True)
class MedicationDayStatus:
    """Progress of one active medication on one day.

    ``taken_raw`` is the uncapped log count, kept so callers can flag doses
    above target. ``taken_capped`` is what counts towards completion.
    """

    medication_id: UUID
    target: int
    taken_raw: int
    taken_capped: int

    @property
    def is_over_target(self) -> bool:
        return self.taken_raw > self.target


@dataclass(frozen=True)
class DayStats:
    """Completion totals for the active medications of a day."""

    day: date
    medications: tuple[MedicationDayStatus, ...]
    total_target: int
    total_completed: int
    completion_rate: int
    is_fully_completed: bool


@dataclass(frozen=True)
class WeeklySummary:
    """Seven consecutive days of stats, oldest first."""

    days: tuple[DayStats, ...]
    average_completion_rate: int
    perfect_day_count: int


@dataclass(frozen=True)
class CalendarDay:
    """A single cell of the calendar month view."""

    day: date
    status: DayStatus
    log_count: int
    colors: tuple[MedicationColor, ...]
    is_today: bool
    is_future: bool
    stats: DayStats | None

    @property
    def disabled(self) -> bool:
        return self.is_future


@dataclass(frozen=True)
class CalendarMonth:
    """Calendar month grid with Sunday-first leading padding."""

    year: int
    month: int
    leading_padding: int
    days: tuple[CalendarDay, ...]


@dataclass(frozen=True)
class IntervalStats:
    """Gaps between consecutive logs, in milliseconds."""

    intervals_ms: tuple[int, ...]
    average_ms: float | None


@dataclass(frozen=True)
class MedicationDayDetail:
    """Logs of one medication on one day with their spacing."""

    medication: Medication
    logs: tuple[MedicationLog, ...]
    intervals: IntervalStats

    @property
    def taken(self) -> int:
        return len(self.logs)

    @property
    def target(self) -> int:
        return self.medication.times_per_day
