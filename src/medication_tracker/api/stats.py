"""Read-only adherence statistics and reminder endpoints."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Query, Request, status

from medication_tracker.api.medications import serialize_log
from medication_tracker.services.adherence import format_interval

if TYPE_CHECKING:
    from medication_tracker.containers import AppContainer
    from medication_tracker.domain.adherence import (
        CalendarDay,
        DayStats,
        MedicationDayDetail,
    )
    from medication_tracker.services.reminders import ReminderEntry

router = APIRouter(prefix="/api", tags=["stats"])

_MAX_MONTH = 12
_MAX_YEAR = 9999


@router.get("/stats/today")
async def today_stats(request: Request) -> dict[str, object]:
    """Return completion stats for today."""
    container: AppContainer = request.app.state.container
    return serialize_day_stats(container.adherence_service.get_day())


@router.get("/stats/week")
async def week_stats(request: Request, end: date | None = None) -> dict[str, object]:
    """Return the seven days ending today (or ``end``)."""
    container: AppContainer = request.app.state.container
    summary = container.adherence_service.get_week(end)
    return {
        "days": [serialize_day_stats(stats) for stats in summary.days],
        "averageCompletionRate": summary.average_completion_rate,
        "perfectDayCount": summary.perfect_day_count,
    }


@router.get("/stats/streaks")
async def streaks(request: Request) -> dict[str, object]:
    """Return current and longest streak per medication."""
    container: AppContainer = request.app.state.container
    per_medication = container.adherence_service.get_streaks()
    return {
        "maxStreak": container.adherence_service.get_max_streak(),
        "medications": [
            {"medicationId": str(medication_id), "current": current, "longest": longest}
            for medication_id, (current, longest) in per_medication.items()
        ],
    }


@router.get("/stats/calendar/{year}/{month}")
async def calendar_view(
    year: int,
    month: int,
    request: Request,
    medication_ids: list[UUID] | None = Query(default=None, alias="medicationIds"),
) -> dict[str, object]:
    """Return the month view, optionally restricted to selected medications."""
    if not 1 <= year <= _MAX_YEAR:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid year"
        )
    if not 1 <= month <= _MAX_MONTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid month"
        )
    container: AppContainer = request.app.state.container
    view = container.adherence_service.get_calendar(year, month, medication_ids)
    return {
        "year": view.year,
        "month": view.month,
        "leadingPadding": view.leading_padding,
        "days": [_serialize_calendar_day(day) for day in view.days],
    }


@router.get("/stats/day/{day}")
async def day_stats(day: date, request: Request) -> dict[str, object]:
    """Return completion stats for a past or current day."""
    container: AppContainer = request.app.state.container
    _reject_future(day, container)
    return serialize_day_stats(container.adherence_service.get_day(day))


@router.get("/stats/day/{day}/detail")
async def day_detail(day: date, request: Request) -> dict[str, object]:
    """Return each medication's logs and intake spacing for a day."""
    container: AppContainer = request.app.state.container
    _reject_future(day, container)
    details = container.adherence_service.get_day_detail(day)
    return {
        "day": day.isoformat(),
        "medications": [_serialize_detail(detail) for detail in details],
    }


@router.get("/reminders")
async def reminders(request: Request) -> dict[str, object]:
    """Plan today's reminders and return the state table."""
    container: AppContainer = request.app.state.container
    entries = container.reminder_scheduler.plan(
        container.medication_service.list_medications(),
        container.adherence_service.clock(),
    )
    return {"reminders": [_serialize_reminder(entry) for entry in entries]}


@router.post("/reminders/fire")
async def fire_reminders(request: Request) -> dict[str, object]:
    """Deliver reminders that are due now."""
    container: AppContainer = request.app.state.container
    fired = container.reminder_scheduler.fire_due(
        container.adherence_service.clock(), container.reminder_notifier
    )
    return {"fired": [_serialize_reminder(entry) for entry in fired]}


def _reject_future(day: date, container: AppContainer) -> None:
    if day > container.adherence_service.today():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Future days cannot be evaluated",
        )


def serialize_day_stats(stats: DayStats) -> dict[str, object]:
    return {
        "date": stats.day.isoformat(),
        "totalTarget": stats.total_target,
        "totalCompleted": stats.total_completed,
        "completionRate": stats.completion_rate,
        "isFullyCompleted": stats.is_fully_completed,
        "medications": [
            {
                "medicationId": str(status_.medication_id),
                "target": status_.target,
                "taken": status_.taken_raw,
                "counted": status_.taken_capped,
                "isOverTarget": status_.is_over_target,
            }
            for status_ in stats.medications
        ],
    }


def _serialize_calendar_day(day: CalendarDay) -> dict[str, object]:
    return {
        "date": day.day.isoformat(),
        "status": day.status.value,
        "logCount": day.log_count,
        "colors": [color.value for color in day.colors],
        "isToday": day.is_today,
        "disabled": day.disabled,
    }


def _serialize_detail(detail: MedicationDayDetail) -> dict[str, object]:
    average = detail.intervals.average_ms
    return {
        "medicationId": str(detail.medication.id),
        "name": detail.medication.name,
        "taken": detail.taken,
        "target": detail.target,
        "logs": [serialize_log(log) for log in detail.logs],
        "intervals": [format_interval(ms) for ms in detail.intervals.intervals_ms],
        "averageInterval": format_interval(average) if average is not None else None,
    }


def _serialize_reminder(entry: ReminderEntry) -> dict[str, object]:
    return {
        "medicationId": str(entry.key.medication_id),
        "period": entry.key.period.value,
        "date": entry.key.day.isoformat(),
        "fireAt": entry.fire_at.isoformat(),
        "state": entry.state.value,
        "title": entry.title,
        "body": entry.body,
    }
