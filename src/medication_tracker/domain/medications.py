"""Domain models for medications and intake logs."""

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum, StrEnum
from uuid import UUID


class MedicationColor(StrEnum):
    """Display colors available for a medication."""

    CYAN = "cyan"
    MAGENTA = "magenta"
    GREEN = "green"
    ORANGE = "orange"
    PURPLE = "purple"
    BLUE = "blue"


class MedicationIcon(StrEnum):
    """Display icons available for a medication."""

    PILL = "pill"
    CAPSULE = "capsule"
    SYRINGE = "syringe"
    DROPLET = "droplet"
    HEART = "heart"
    SUN = "sun"
    MOON = "moon"
    LEAF = "leaf"
    ZAP = "zap"
    SHIELD = "shield"
    ACTIVITY = "activity"
    THERMOMETER = "thermometer"


class ReminderPeriod(Enum):
    """Named times of day at which a reminder can fire."""

    MORNING = "08:00"
    NOON = "12:00"
    EVENING = "20:00"

    @property
    def time_of_day(self) -> time:
        """Return the local wall-clock time for the period."""
        return time.fromisoformat(self.value)

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Medication:
    """A medication the user tracks."""

    id: UUID
    name: str
    dosage: str
    times_per_day: int
    days_interval: int
    color: MedicationColor
    icon: MedicationIcon
    order: int
    reminder_enabled: bool
    reminder_times: tuple[ReminderPeriod, ...]
    created_at: datetime


@dataclass
class MedicationDraft:
    """Fields supplied when creating a medication."""

    name: str
    dosage: str
    times_per_day: int = 1
    days_interval: int = 1
    color: MedicationColor = MedicationColor.CYAN
    icon: MedicationIcon = MedicationIcon.PILL
    order: int | None = None
    reminder_enabled: bool = False
    reminder_times: list[ReminderPeriod] = field(default_factory=list)


@dataclass(frozen=True)
class MedicationLog:
    """A single recorded intake of a medication."""

    id: UUID
    medication_id: UUID
    timestamp: datetime
    is_manual: bool
