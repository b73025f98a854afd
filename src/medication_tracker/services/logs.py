"""Medication intake logging service."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from medication_tracker.domain.errors import LogNotFoundError, MedicationNotFoundError
from medication_tracker.domain.medications import Medication, MedicationLog
from medication_tracker.services.days import day_bounds


class MedicationLogRepository(Protocol):
    """Persistence interface for medication logs."""

    def list_logs(self) -> list[MedicationLog]:
        """Return all logs, newest first."""

    def get_log(self, log_id: UUID) -> MedicationLog | None:
        """Return a log by id, if present."""

    def create_log(
        self, medication_id: UUID, timestamp: datetime, is_manual: bool
    ) -> MedicationLog:
        """Create a log row and return it."""

    def delete_log(self, log_id: UUID) -> None:
        """Delete a log row."""

    def list_logs_between(self, start: datetime, end: datetime) -> list[MedicationLog]:
        """Return logs with start <= timestamp <= end, newest first."""

    def list_logs_for_medication(self, medication_id: UUID) -> list[MedicationLog]:
        """Return logs of one medication, newest first."""


class MedicationLookup(Protocol):
    """Resolves medication ids before logging against them."""

    def get_medication(self, medication_id: UUID) -> Medication | None:
        """Return a medication by id, if present."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MedicationLogService:
    """Application service for recording and removing intake logs."""

    repository: MedicationLogRepository
    medications: MedicationLookup
    clock: Callable[[], datetime] = field(default=_utc_now)

    def list_logs(self) -> list[MedicationLog]:
        """Return all logs, newest first."""
        return self.repository.list_logs()

    def list_logs_between(self, start: datetime, end: datetime) -> list[MedicationLog]:
        """Return logs within an inclusive time range."""
        return self.repository.list_logs_between(start, end)

    def list_logs_for_medication(self, medication_id: UUID) -> list[MedicationLog]:
        """Return logs for one medication."""
        return self.repository.list_logs_for_medication(medication_id)

    def quick_log(self, medication_id: UUID) -> MedicationLog:
        """Record an intake happening now."""
        self._require_medication(medication_id)
        return self.repository.create_log(medication_id, self.clock(), is_manual=False)

    def manual_log(self, medication_id: UUID, timestamp: datetime) -> MedicationLog:
        """Record an intake at a user-chosen, possibly backdated, time."""
        self._require_medication(medication_id)
        return self.repository.create_log(medication_id, timestamp, is_manual=True)

    def delete_log(self, log_id: UUID) -> None:
        """Delete a log or raise when it does not exist."""
        if self.repository.get_log(log_id) is None:
            raise LogNotFoundError(log_id)
        self.repository.delete_log(log_id)

    def today_logs_for_medication(
        self, medication_id: UUID, timezone_name: str
    ) -> list[MedicationLog]:
        """Return today's logs for a medication in the given timezone."""
        tz = ZoneInfo(timezone_name)
        start, end = day_bounds(self.clock().astimezone(tz).date(), tz)
        return [
            log
            for log in self.repository.list_logs_between(start, end)
            if log.medication_id == medication_id
        ]

    def _require_medication(self, medication_id: UUID) -> None:
        if self.medications.get_medication(medication_id) is None:
            raise MedicationNotFoundError(medication_id)
