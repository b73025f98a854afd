"""Pydantic models for API request payloads.

Payloads use the camelCase field names of the web client; snake_case names
are accepted as well.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from medication_tracker.domain.medications import (
    MedicationColor,
    MedicationDraft,
    MedicationIcon,
    ReminderPeriod,
)


class ApiModel(BaseModel):
    """Base model accepting camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MedicationCreate(ApiModel):
    """Payload for creating a medication."""

    name: str = Field(min_length=1)
    dosage: str
    times_per_day: int = Field(default=1, ge=1)
    days_interval: int = Field(default=1, ge=1)
    color: MedicationColor = MedicationColor.CYAN
    icon: MedicationIcon = MedicationIcon.PILL
    order: int | None = None
    reminder_enabled: bool = False
    reminder_times: list[ReminderPeriod] | None = None

    def to_draft(self) -> MedicationDraft:
        return MedicationDraft(
            name=self.name,
            dosage=self.dosage,
            times_per_day=self.times_per_day,
            days_interval=self.days_interval,
            color=self.color,
            icon=self.icon,
            order=self.order,
            reminder_enabled=self.reminder_enabled,
            reminder_times=list(self.reminder_times or []),
        )


class MedicationUpdate(ApiModel):
    """Partial update for a medication.

    Omitted fields are left unchanged. Only ``reminderTimes`` may be sent as
    ``null``, which clears the reminder periods.
    """

    name: str | None = Field(default=None, min_length=1)
    dosage: str | None = None
    times_per_day: int | None = Field(default=None, ge=1)
    days_interval: int | None = Field(default=None, ge=1)
    color: MedicationColor | None = None
    icon: MedicationIcon | None = None
    order: int | None = None
    reminder_enabled: bool | None = None
    reminder_times: list[ReminderPeriod] | None = None

    @field_validator(
        "name",
        "dosage",
        "times_per_day",
        "days_interval",
        "color",
        "icon",
        "order",
        "reminder_enabled",
    )
    @classmethod
    def reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("must not be null")
        return value

    def to_changes(self) -> dict[str, object]:
        """Return only the fields the client sent."""
        changes = self.model_dump(exclude_unset=True, by_alias=False)
        if "reminder_times" in changes and changes["reminder_times"] is None:
            changes["reminder_times"] = []
        return changes


class MedicationOrder(ApiModel):
    """One entry of an explicit order list."""

    id: UUID
    order: int


class ReorderRequest(ApiModel):
    """New medication order, as an id list or as id/order pairs."""

    ids: list[UUID] | None = None
    medications: list[MedicationOrder] | None = None

    def ordered_ids(self) -> list[UUID]:
        if self.ids is not None:
            return self.ids
        entries = sorted(self.medications or [], key=lambda entry: entry.order)
        return [entry.id for entry in entries]


class LogCreate(ApiModel):
    """Payload for logging an intake; a timestamp marks it as manual."""

    medication_id: UUID
    timestamp: datetime | None = None
