"""Supabase repository for medications."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from supabase import Client

from medication_tracker.domain.medications import (
    Medication,
    MedicationColor,
    MedicationDraft,
    MedicationIcon,
    ReminderPeriod,
)
from medication_tracker.services.medications import MedicationRepository

_COLUMNS = (
    "id, name, dosage, times_per_day, days_interval, color, icon, order, "
    "reminder_enabled, reminder_times, created_at"
)


@dataclass
class SupabaseMedicationRepository(MedicationRepository):
    """Supabase implementation for medications."""

    client: Client

    def list_medications(self) -> list[Medication]:
        """Return all medications sorted by order."""
        response = (
            self.client.table("medications")
            .select(_COLUMNS)
            .order("order", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_medication(self, medication_id: UUID) -> Medication | None:
        """Return a medication by id."""
        response = (
            self.client.table("medications")
            .select(_COLUMNS)
            .eq("id", str(medication_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_medication(self, draft: MedicationDraft) -> Medication:
        """Insert a medication row and return it."""
        response = (
            self.client.table("medications")
            .insert(
                {
                    "name": draft.name,
                    "dosage": draft.dosage,
                    "times_per_day": draft.times_per_day,
                    "days_interval": draft.days_interval,
                    "color": draft.color.value,
                    "icon": draft.icon.value,
                    "order": draft.order or 0,
                    "reminder_enabled": draft.reminder_enabled,
                    "reminder_times": [period.value for period in draft.reminder_times],
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create medication")
        return _parse_row(response.data[0])

    def update_medication(
        self, medication_id: UUID, changes: dict[str, object]
    ) -> Medication | None:
        """Update a medication row and return it."""
        response = (
            self.client.table("medications")
            .update(_serialize_changes(changes))
            .eq("id", str(medication_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_medication(self, medication_id: UUID) -> None:
        """Delete a medication; logs go with it via ON DELETE CASCADE."""
        self.client.table("medications").delete().eq(
            "id", str(medication_id)
        ).execute()

    def reorder_medications(self, orders: list[tuple[UUID, int]]) -> None:
        """Persist the new order through a single database function call."""
        self.client.rpc(
            "reorder_medications",
            {
                "orders": [
                    {"id": str(medication_id), "order": order}
                    for medication_id, order in orders
                ]
            },
        ).execute()


def _serialize_changes(changes: dict[str, object]) -> dict[str, object]:
    payload: dict[str, object] = {}
    for key, value in changes.items():
        if key == "reminder_times" and value is not None:
            payload[key] = [
                period.value if isinstance(period, Enum) else str(period)
                for period in value  # type: ignore[attr-defined]
            ]
        elif isinstance(value, Enum):
            payload[key] = value.value
        else:
            payload[key] = value
    return payload


def _parse_row(row: dict[str, object]) -> Medication:
    return Medication(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        dosage=str(row.get("dosage", "")),
        times_per_day=int(row.get("times_per_day") or 1),
        days_interval=int(row.get("days_interval") or 1),
        color=MedicationColor(row.get("color") or MedicationColor.CYAN),
        icon=MedicationIcon(row.get("icon") or MedicationIcon.PILL),
        order=int(row.get("order") or 0),
        reminder_enabled=bool(row.get("reminder_enabled", False)),
        reminder_times=tuple(
            ReminderPeriod(value) for value in row.get("reminder_times") or []
        ),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
