"""Adherence statistics for medications and their intake logs.

The module-level functions are pure: they read snapshots of medications and
logs and never mutate them. Days are local calendar days in the supplied
timezone, as defined in ``medication_tracker.services.days``.
"""

import calendar
from collections import Counter, defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from medication_tracker.domain.adherence import (
    CalendarDay,
    CalendarMonth,
    DayStats,
    DayStatus,
    IntervalStats,
    MedicationDayDetail,
    MedicationDayStatus,
    WeeklySummary,
)
from medication_tracker.domain.medications import Medication, MedicationLog
from medication_tracker.services.days import local_day
from medication_tracker.services.logs import MedicationLogRepository
from medication_tracker.services.medications import MedicationRepository

WEEK_DAYS = 7
_MS_PER_MINUTE = 60_000
_MS_PER_HOUR = 3_600_000


def is_active_on(medication: Medication, day: date, tz: ZoneInfo) -> bool:
    """Return True when the medication is due on the given day."""
    days_since_created = (day - local_day(medication.created_at, tz)).days
    if days_since_created < 0:
        return False
    return days_since_created % _interval(medication) == 0


def day_stats(
    medications: Iterable[Medication],
    logs: Iterable[MedicationLog],
    day: date,
    tz: ZoneInfo,
) -> DayStats:
    """Compute completion for the medications active on ``day``.

    Only the supplied medications are evaluated, so callers can pass a
    filtered subset. Logs beyond a medication's target count in
    ``taken_raw`` but not towards the completion rate.
    """
    counts = _count_by_day(tuple(logs), tz)
    return _day_stats(tuple(medications), counts, day, tz)


def streak_days(
    medication: Medication,
    logs: Iterable[MedicationLog],
    today: date,
    tz: ZoneInfo,
) -> int:
    """Return the current run of days with at least one log.

    Days on which the medication is not scheduled neither break nor extend
    the streak. Any log counts for the day; full completion is not required.
    """
    logged_days = _logged_days(medication.id, logs, tz)
    created_day = local_day(medication.created_at, tz)
    streak = 0
    current = today
    while current >= created_day:
        if is_active_on(medication, current, tz):
            if current not in logged_days:
                break
            streak += 1
        current -= timedelta(days=1)
    return streak


def longest_streak(
    medication: Medication,
    logs: Iterable[MedicationLog],
    today: date,
    tz: ZoneInfo,
) -> int:
    """Return the longest run of logged active days up to ``today``."""
    logged_days = _logged_days(medication.id, logs, tz)
    current = local_day(medication.created_at, tz)
    best = 0
    run = 0
    while current <= today:
        if is_active_on(medication, current, tz):
            if current in logged_days:
                run += 1
                best = max(best, run)
            else:
                run = 0
        current += timedelta(days=1)
    return best


def max_streak(
    medications: Iterable[Medication],
    logs: Iterable[MedicationLog],
    today: date,
    tz: ZoneInfo,
) -> int:
    """Return the best current streak across medications, 0 when empty."""
    snapshot = tuple(logs)
    return max(
        (streak_days(medication, snapshot, today, tz) for medication in medications),
        default=0,
    )


def weekly_completion(
    medications: Iterable[Medication],
    logs: Iterable[MedicationLog],
    end_day: date,
    tz: ZoneInfo,
) -> WeeklySummary:
    """Return stats for the seven days ending at ``end_day``, oldest first."""
    meds = tuple(medications)
    counts = _count_by_day(tuple(logs), tz)
    days = tuple(
        _day_stats(meds, counts, end_day - timedelta(days=offset), tz)
        for offset in range(WEEK_DAYS - 1, -1, -1)
    )
    return WeeklySummary(
        days=days,
        average_completion_rate=_round_ratio(
            sum(stats.completion_rate for stats in days), WEEK_DAYS
        ),
        perfect_day_count=sum(1 for stats in days if stats.is_fully_completed),
    )


def calendar_month(  # noqa: PLR0913
    medications: Iterable[Medication],
    logs: Iterable[MedicationLog],
    year: int,
    month: int,
    today: date,
    tz: ZoneInfo,
    selected_ids: Iterable[UUID] | None = None,
) -> CalendarMonth:
    """Classify each day of a month for the selected medications.

    Future days are disabled and never evaluated.
    """
    meds = tuple(medications)
    if selected_ids is not None:
        wanted = set(selected_ids)
        meds = tuple(medication for medication in meds if medication.id in wanted)
    med_ids = {medication.id for medication in meds}
    selected_logs = tuple(log for log in logs if log.medication_id in med_ids)
    counts = _count_by_day(selected_logs, tz)

    first_weekday, length = calendar.monthrange(year, month)
    cells = []
    for day_number in range(1, length + 1):
        day = date(year, month, day_number)
        if day > today:
            cells.append(
                CalendarDay(
                    day=day,
                    status=DayStatus.NO_LOGS,
                    log_count=0,
                    colors=(),
                    is_today=False,
                    is_future=True,
                    stats=None,
                )
            )
            continue
        stats = _day_stats(meds, counts, day, tz)
        log_count = sum(counts.get((med_id, day), 0) for med_id in med_ids)
        if log_count == 0:
            status = DayStatus.NO_LOGS
        elif stats.is_fully_completed:
            status = DayStatus.ALL_COMPLETED
        else:
            status = DayStatus.PARTIAL
        cells.append(
            CalendarDay(
                day=day,
                status=status,
                log_count=log_count,
                colors=tuple(
                    medication.color
                    for medication in meds
                    if counts.get((medication.id, day), 0) > 0
                ),
                is_today=day == today,
                is_future=False,
                stats=stats,
            )
        )
    return CalendarMonth(
        year=year,
        month=month,
        leading_padding=(first_weekday + 1) % WEEK_DAYS,
        days=tuple(cells),
    )


def interval_stats(logs: Iterable[MedicationLog]) -> IntervalStats:
    """Return gaps between consecutive logs sorted by timestamp."""
    ordered = sorted(logs, key=lambda log: log.timestamp)
    intervals = tuple(
        (later.timestamp - earlier.timestamp) // timedelta(milliseconds=1)
        for earlier, later in zip(ordered, ordered[1:], strict=False)
    )
    average = sum(intervals) / len(intervals) if intervals else None
    return IntervalStats(intervals_ms=intervals, average_ms=average)


def format_interval(milliseconds: float) -> str:
    """Format a duration as hours and whole minutes."""
    hours = int(milliseconds // _MS_PER_HOUR)
    minutes = int((milliseconds % _MS_PER_HOUR) // _MS_PER_MINUTE)
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def day_detail(
    medications: Iterable[Medication],
    logs: Iterable[MedicationLog],
    day: date,
    tz: ZoneInfo,
) -> list[MedicationDayDetail]:
    """Group a day's logs per medication in display order."""
    by_medication: dict[UUID, list[MedicationLog]] = defaultdict(list)
    for log in logs:
        if local_day(log.timestamp, tz) == day:
            by_medication[log.medication_id].append(log)
    details = []
    for medication in sorted(medications, key=lambda item: item.order):
        med_logs = sorted(
            by_medication.get(medication.id, []), key=lambda log: log.timestamp
        )
        if not med_logs:
            continue
        details.append(
            MedicationDayDetail(
                medication=medication,
                logs=tuple(med_logs),
                intervals=interval_stats(med_logs),
            )
        )
    return details


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AdherenceService:
    """Reads a snapshot from storage and derives adherence statistics."""

    medication_repository: MedicationRepository
    log_repository: MedicationLogRepository
    timezone_name: str = "UTC"
    clock: Callable[[], datetime] = field(default=_utc_now)

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)

    def today(self) -> date:
        """Return the current local date."""
        return self.clock().astimezone(self.tz).date()

    def get_day(self, day: date | None = None) -> DayStats:
        """Return completion stats for a day, today by default."""
        medications, logs = self._snapshot()
        return day_stats(medications, logs, day or self.today(), self.tz)

    def get_week(self, end_day: date | None = None) -> WeeklySummary:
        """Return the seven days ending at ``end_day``, today by default."""
        medications, logs = self._snapshot()
        return weekly_completion(medications, logs, end_day or self.today(), self.tz)

    def get_calendar(
        self, year: int, month: int, selected_ids: list[UUID] | None = None
    ) -> CalendarMonth:
        """Return the calendar month view for the selected medications."""
        medications, logs = self._snapshot()
        return calendar_month(
            medications, logs, year, month, self.today(), self.tz, selected_ids
        )

    def get_streaks(self) -> dict[UUID, tuple[int, int]]:
        """Return current and longest streaks keyed by medication id."""
        medications, logs = self._snapshot()
        today = self.today()
        return {
            medication.id: (
                streak_days(medication, logs, today, self.tz),
                longest_streak(medication, logs, today, self.tz),
            )
            for medication in medications
        }

    def get_max_streak(self) -> int:
        """Return the best current streak across all medications."""
        medications, logs = self._snapshot()
        return max_streak(medications, logs, self.today(), self.tz)

    def get_day_detail(self, day: date) -> list[MedicationDayDetail]:
        """Return per-medication logs and intervals for a day."""
        medications, logs = self._snapshot()
        return day_detail(medications, logs, day, self.tz)

    def _snapshot(self) -> tuple[tuple[Medication, ...], tuple[MedicationLog, ...]]:
        return (
            tuple(self.medication_repository.list_medications()),
            tuple(self.log_repository.list_logs()),
        )


def _interval(medication: Medication) -> int:
    return medication.days_interval if medication.days_interval > 0 else 1


def _round_ratio(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` half up using integer arithmetic."""
    return (2 * numerator + denominator) // (2 * denominator)


def _count_by_day(
    logs: tuple[MedicationLog, ...], tz: ZoneInfo
) -> Counter[tuple[UUID, date]]:
    return Counter((log.medication_id, local_day(log.timestamp, tz)) for log in logs)


def _logged_days(
    medication_id: UUID, logs: Iterable[MedicationLog], tz: ZoneInfo
) -> set[date]:
    return {
        local_day(log.timestamp, tz)
        for log in logs
        if log.medication_id == medication_id
    }


def _day_stats(
    medications: tuple[Medication, ...],
    counts: Counter[tuple[UUID, date]],
    day: date,
    tz: ZoneInfo,
) -> DayStats:
    statuses = []
    for medication in medications:
        if not is_active_on(medication, day, tz):
            continue
        taken = counts.get((medication.id, day), 0)
        statuses.append(
            MedicationDayStatus(
                medication_id=medication.id,
                target=medication.times_per_day,
                taken_raw=taken,
                taken_capped=min(taken, medication.times_per_day),
            )
        )
    total_target = sum(status.target for status in statuses)
    total_completed = sum(status.taken_capped for status in statuses)
    return DayStats(
        day=day,
        medications=tuple(statuses),
        total_target=total_target,
        total_completed=total_completed,
        completion_rate=(
            _round_ratio(100 * total_completed, total_target) if total_target > 0 else 0
        ),
        is_fully_completed=total_target > 0 and total_completed >= total_target,
    )
