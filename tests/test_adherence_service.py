"""Tests for the adherence service."""

from datetime import UTC, date, datetime, timedelta

from medication_tracker.domain.adherence import DayStatus
from medication_tracker.services.adherence import AdherenceService
from tests.conftest import (
    FixedClock,
    InMemoryMedicationLogRepository,
    InMemoryMedicationRepository,
    make_log,
    make_medication,
)

CREATED = datetime(2024, 3, 1, 8, 0, tzinfo=UTC)


def _service(
    medication_repository: InMemoryMedicationRepository,
    log_repository: InMemoryMedicationLogRepository,
    clock: FixedClock,
    timezone_name: str = "UTC",
) -> AdherenceService:
    return AdherenceService(
        medication_repository=medication_repository,
        log_repository=log_repository,
        timezone_name=timezone_name,
        clock=clock,
    )


def test_today_uses_configured_timezone(
    medication_repository: InMemoryMedicationRepository,
    log_repository: InMemoryMedicationLogRepository,
) -> None:
    clock = FixedClock(datetime(2024, 3, 15, 2, 0, tzinfo=UTC))

    utc = _service(medication_repository, log_repository, clock)
    pacific = _service(
        medication_repository, log_repository, clock, "America/Los_Angeles"
    )

    assert utc.today() == date(2024, 3, 15)
    assert pacific.today() == date(2024, 3, 14)


def test_get_day_defaults_to_today(
    medication_repository: InMemoryMedicationRepository,
    log_repository: InMemoryMedicationLogRepository,
    clock: FixedClock,
) -> None:
    medication = medication_repository.add(make_medication(CREATED, times_per_day=2))
    log_repository.add(make_log(medication, datetime(2024, 3, 15, 8, tzinfo=UTC)))
    service = _service(medication_repository, log_repository, clock)

    stats = service.get_day()

    assert stats.day == date(2024, 3, 15)
    assert stats.total_target == 2
    assert stats.completion_rate == 50


def test_get_week_and_streaks(
    medication_repository: InMemoryMedicationRepository,
    log_repository: InMemoryMedicationLogRepository,
    clock: FixedClock,
) -> None:
    medication = medication_repository.add(make_medication(CREATED))
    for offset in range(3):
        log_repository.add(
            make_log(medication, clock.now - timedelta(days=offset))
        )
    service = _service(medication_repository, log_repository, clock)

    week = service.get_week()
    streaks = service.get_streaks()

    assert week.days[-1].day == date(2024, 3, 15)
    assert week.perfect_day_count == 3
    assert streaks == {medication.id: (3, 3)}


def test_get_calendar_filters_selection(
    medication_repository: InMemoryMedicationRepository,
    log_repository: InMemoryMedicationLogRepository,
    clock: FixedClock,
) -> None:
    pill = medication_repository.add(make_medication(CREATED))
    other = medication_repository.add(make_medication(CREATED, name="Other", order=1))
    log_repository.add(make_log(pill, datetime(2024, 3, 5, 9, tzinfo=UTC)))
    service = _service(medication_repository, log_repository, clock)

    both = service.get_calendar(2024, 3)
    only_pill = service.get_calendar(2024, 3, [pill.id])
    only_other = service.get_calendar(2024, 3, [other.id])

    assert both.days[4].status is DayStatus.PARTIAL
    assert only_pill.days[4].status is DayStatus.ALL_COMPLETED
    assert only_other.days[4].status is DayStatus.NO_LOGS
    assert both.days[20].disabled


def test_get_day_detail(
    medication_repository: InMemoryMedicationRepository,
    log_repository: InMemoryMedicationLogRepository,
    clock: FixedClock,
) -> None:
    medication = medication_repository.add(make_medication(CREATED, times_per_day=2))
    log_repository.add(make_log(medication, datetime(2024, 3, 14, 8, tzinfo=UTC)))
    log_repository.add(make_log(medication, datetime(2024, 3, 14, 20, tzinfo=UTC)))
    service = _service(medication_repository, log_repository, clock)

    details = service.get_day_detail(date(2024, 3, 14))

    assert len(details) == 1
    assert details[0].intervals.average_ms == 12 * 3_600_000


def test_malformed_medication_does_not_affect_others(
    medication_repository: InMemoryMedicationRepository,
    log_repository: InMemoryMedicationLogRepository,
    clock: FixedClock,
) -> None:
    healthy = medication_repository.add(make_medication(CREATED))
    medication_repository.add(make_medication(CREATED, days_interval=0, name="Bad"))
    log_repository.add(make_log(healthy, clock.now))
    service = _service(medication_repository, log_repository, clock)

    streaks = service.get_streaks()

    assert streaks[healthy.id] == (1, 1)


def test_get_max_streak(
    medication_repository: InMemoryMedicationRepository,
    log_repository: InMemoryMedicationLogRepository,
    clock: FixedClock,
) -> None:
    short = medication_repository.add(make_medication(CREATED, name="Short"))
    long = medication_repository.add(make_medication(CREATED, name="Long"))
    log_repository.add(make_log(short, clock.now))
    for offset in range(4):
        log_repository.add(make_log(long, clock.now - timedelta(days=offset)))
    service = _service(medication_repository, log_repository, clock)

    assert service.get_max_streak() == 4


def test_get_max_streak_without_medications(
    medication_repository: InMemoryMedicationRepository,
    log_repository: InMemoryMedicationLogRepository,
    clock: FixedClock,
) -> None:
    service = _service(medication_repository, log_repository, clock)

    assert service.get_max_streak() == 0
