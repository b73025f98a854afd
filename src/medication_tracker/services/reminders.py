"""Reminder scheduling state for medications.

The scheduler keeps an explicit table keyed by ``(medication_id, period, day)``
instead of timer handles. Callers drive it with ``plan`` whenever the
medication list changes and ``fire_due`` on a tick; a notifier delivers the
message. Each medication fires at most once per period per day.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from medication_tracker.domain.medications import Medication, ReminderPeriod

logger = logging.getLogger(__name__)


class ReminderState(StrEnum):
    """Lifecycle of a reminder entry."""

    SCHEDULED = "scheduled"
    FIRED = "fired"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ReminderKey:
    """Identifies one reminder slot."""

    medication_id: UUID
    period: ReminderPeriod
    day: date


@dataclass
class ReminderEntry:
    """A reminder slot and its state."""

    key: ReminderKey
    fire_at: datetime
    title: str
    body: str
    state: ReminderState = ReminderState.SCHEDULED


class ReminderNotifier(Protocol):
    """Delivers a reminder to the user."""

    def notify(self, title: str, body: str) -> None:
        """Deliver a reminder message."""


def reminder_message(medication: Medication, period: ReminderPeriod) -> tuple[str, str]:
    """Return the title and body of a reminder."""
    return (
        f"{period.label.capitalize()} medication reminder",
        f"Time to take {medication.name} ({medication.dosage})",
    )


@dataclass
class ReminderScheduler:
    """State table of today's reminders."""

    timezone_name: str = "UTC"
    _entries: dict[ReminderKey, ReminderEntry] = field(default_factory=dict)
    _day: date | None = None

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)

    def plan(
        self, medications: Iterable[Medication], now: datetime
    ) -> list[ReminderEntry]:
        """Rebuild pending reminders for the rest of today.

        Fired entries are kept so a replan never repeats a reminder. Entries
        from a previous day are discarded.
        """
        local_now = now.astimezone(self.tz)
        today = local_now.date()
        self._reset_if_new_day(today)
        self._entries = {
            key: entry
            for key, entry in self._entries.items()
            if entry.state is ReminderState.FIRED
        }
        for medication in medications:
            if not medication.reminder_enabled:
                continue
            for period in medication.reminder_times:
                key = ReminderKey(medication.id, period, today)
                if key in self._entries:
                    continue
                fire_at = datetime.combine(today, period.time_of_day, tzinfo=self.tz)
                if fire_at <= local_now:
                    continue
                title, body = reminder_message(medication, period)
                self._entries[key] = ReminderEntry(
                    key=key, fire_at=fire_at, title=title, body=body
                )
        return self.entries()

    def due(self, now: datetime) -> list[ReminderEntry]:
        """Return scheduled reminders whose fire time has passed."""
        self._reset_if_new_day(now.astimezone(self.tz).date())
        return [
            entry
            for entry in self.entries()
            if entry.state is ReminderState.SCHEDULED and entry.fire_at <= now
        ]

    def fire_due(
        self, now: datetime, notifier: ReminderNotifier
    ) -> list[ReminderEntry]:
        """Deliver due reminders once and mark them fired."""
        fired = []
        for entry in self.due(now):
            notifier.notify(entry.title, entry.body)
            entry.state = ReminderState.FIRED
            fired.append(entry)
            logger.info(
                "Reminder fired",
                extra={
                    "medication_id": str(entry.key.medication_id),
                    "period": entry.key.period.value,
                },
            )
        return fired

    def cancel_all(self) -> None:
        """Cancel every pending reminder."""
        for entry in self._entries.values():
            if entry.state is ReminderState.SCHEDULED:
                entry.state = ReminderState.CANCELLED

    def entries(self) -> list[ReminderEntry]:
        """Return all tracked entries ordered by fire time."""
        return sorted(self._entries.values(), key=lambda entry: entry.fire_at)

    def _reset_if_new_day(self, today: date) -> None:
        if self._day != today:
            self._entries = {}
            self._day = today
