"""Supabase repository for medication logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from medication_tracker.domain.medications import MedicationLog
from medication_tracker.services.logs import MedicationLogRepository

_COLUMNS = "id, medication_id, timestamp, is_manual"


@dataclass
class SupabaseMedicationLogRepository(MedicationLogRepository):
    """Supabase implementation for medication logs."""

    client: Client

    def list_logs(self) -> list[MedicationLog]:
        """Return all logs, newest first."""
        response = (
            self.client.table("medication_logs")
            .select(_COLUMNS)
            .order("timestamp", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_log(self, log_id: UUID) -> MedicationLog | None:
        """Return a log by id."""
        response = (
            self.client.table("medication_logs")
            .select(_COLUMNS)
            .eq("id", str(log_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_log(
        self, medication_id: UUID, timestamp: datetime, is_manual: bool
    ) -> MedicationLog:
        """Insert a log row and return it."""
        response = (
            self.client.table("medication_logs")
            .insert(
                {
                    "medication_id": str(medication_id),
                    "timestamp": timestamp.isoformat(),
                    "is_manual": is_manual,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create medication log")
        return _parse_row(response.data[0])

    def delete_log(self, log_id: UUID) -> None:
        """Delete a log row."""
        self.client.table("medication_logs").delete().eq("id", str(log_id)).execute()

    def list_logs_between(self, start: datetime, end: datetime) -> list[MedicationLog]:
        """Return logs in the inclusive time range."""
        response = (
            self.client.table("medication_logs")
            .select(_COLUMNS)
            .gte("timestamp", start.isoformat())
            .lte("timestamp", end.isoformat())
            .order("timestamp", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_logs_for_medication(self, medication_id: UUID) -> list[MedicationLog]:
        """Return logs for a medication."""
        response = (
            self.client.table("medication_logs")
            .select(_COLUMNS)
            .eq("medication_id", str(medication_id))
            .order("timestamp", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> MedicationLog:
    return MedicationLog(
        id=UUID(str(row["id"])),
        medication_id=UUID(str(row["medication_id"])),
        timestamp=datetime.fromisoformat(str(row["timestamp"])),
        is_manual=bool(row.get("is_manual", False)),
    )
