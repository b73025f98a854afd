"""Domain errors raised by the medication tracker services."""

from uuid import UUID


class MedicationTrackerError(Exception):
    """Base class for medication tracker errors."""


class MedicationNotFoundError(MedicationTrackerError):
    """Raised when a medication id does not exist."""

    def __init__(self, medication_id: UUID) -> None:
        super().__init__(f"Medication not found: {medication_id}")
        self.medication_id = medication_id


class LogNotFoundError(MedicationTrackerError):
    """Raised when a medication log id does not exist."""

    def __init__(self, log_id: UUID) -> None:
        super().__init__(f"Medication log not found: {log_id}")
        self.log_id = log_id


class InvalidScheduleError(MedicationTrackerError, ValueError):
    """Raised when times per day or the days interval is not positive."""
