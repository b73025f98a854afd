"""Medication management service."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from medication_tracker.domain.errors import (
    InvalidScheduleError,
    MedicationNotFoundError,
)
from medication_tracker.domain.medications import Medication, MedicationDraft
from medication_tracker.services.cache import Cache

logger = logging.getLogger(__name__)

MEDICATIONS_CACHE_KEY = "medications"
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class MedicationRepository(Protocol):
    """Persistence interface for medications."""

    def list_medications(self) -> list[Medication]:
        """Return all medications sorted by order."""

    def get_medication(self, medication_id: UUID) -> Medication | None:
        """Return a medication by id, if present."""

    def create_medication(self, draft: MedicationDraft) -> Medication:
        """Create a medication and return it."""

    def update_medication(
        self, medication_id: UUID, changes: dict[str, object]
    ) -> Medication | None:
        """Apply a partial update and return the medication, if present."""

    def delete_medication(self, medication_id: UUID) -> None:
        """Delete a medication together with its logs."""

    def reorder_medications(self, orders: list[tuple[UUID, int]]) -> None:
        """Assign new order values to every listed medication in one transaction."""


def validate_schedule(times_per_day: int, days_interval: int) -> None:
    """Reject schedules the adherence statistics cannot evaluate."""
    if times_per_day < 1:
        raise InvalidScheduleError(f"times_per_day must be >= 1, got {times_per_day}")
    if days_interval < 1:
        raise InvalidScheduleError(f"days_interval must be >= 1, got {days_interval}")


@dataclass
class MedicationService:
    """Application service for medication CRUD and ordering."""

    repository: MedicationRepository
    cache: Cache
    cache_ttl_seconds: int = 30

    def list_medications(self) -> list[Medication]:
        """Return medications in display order."""
        cached = self.cache.get(MEDICATIONS_CACHE_KEY)
        if isinstance(cached, list):
            return list(cached)
        medications = sorted(
            self.repository.list_medications(), key=lambda item: item.order
        )
        self.cache.set(MEDICATIONS_CACHE_KEY, medications, self.cache_ttl_seconds)
        return list(medications)

    def get_medication(self, medication_id: UUID) -> Medication:
        """Return a medication or raise when it does not exist."""
        medication = self.repository.get_medication(medication_id)
        if medication is None:
            raise MedicationNotFoundError(medication_id)
        return medication

    def create_medication(self, draft: MedicationDraft) -> Medication:
        """Create a medication, appending it to the end of the list."""
        validate_schedule(draft.times_per_day, draft.days_interval)
        if draft.order is None:
            draft = replace(draft, order=len(self.list_medications()))
        medication = self.repository.create_medication(draft)
        self.cache.delete(MEDICATIONS_CACHE_KEY)
        logger.info("Medication created", extra={"medication_id": str(medication.id)})
        return medication

    def update_medication(
        self, medication_id: UUID, changes: dict[str, object]
    ) -> Medication:
        """Apply a partial update; id and creation time never change."""
        current = self.get_medication(medication_id)
        allowed = {
            key: value for key, value in changes.items() if key not in IMMUTABLE_FIELDS
        }
        validate_schedule(
            int(allowed.get("times_per_day", current.times_per_day)),
            int(allowed.get("days_interval", current.days_interval)),
        )
        updated = self.repository.update_medication(medication_id, allowed)
        if updated is None:
            raise MedicationNotFoundError(medication_id)
        self.cache.delete(MEDICATIONS_CACHE_KEY)
        return updated

    def delete_medication(self, medication_id: UUID) -> None:
        """Delete a medication and, through the repository, its logs."""
        self.get_medication(medication_id)
        self.repository.delete_medication(medication_id)
        self.cache.delete(MEDICATIONS_CACHE_KEY)
        logger.info("Medication deleted", extra={"medication_id": str(medication_id)})

    def reorder(self, medication_ids: list[UUID]) -> list[Medication]:
        """Reorder medications to match ``medication_ids``, assigning order = index.

        The new order is applied to the cached list first and then persisted.
        If persisting fails the cache is restored to the previous order and
        the error is re-raised.
        """
        previous = self.list_medications()
        by_id = {medication.id: medication for medication in previous}
        for medication_id in medication_ids:
            if medication_id not in by_id:
                raise MedicationNotFoundError(medication_id)
        # Unlisted medications keep their relative order after the listed ones.
        sequence = list(dict.fromkeys(medication_ids))
        listed = set(sequence)
        sequence += [item.id for item in previous if item.id not in listed]
        reordered = [
            replace(by_id[medication_id], order=index)
            for index, medication_id in enumerate(sequence)
        ]
        self.cache.set(MEDICATIONS_CACHE_KEY, reordered, self.cache_ttl_seconds)
        try:
            self.repository.reorder_medications(
                [(medication.id, medication.order) for medication in reordered]
            )
        except Exception:
            logger.exception("Failed to persist medication order, rolling back")
            self.cache.set(MEDICATIONS_CACHE_KEY, previous, self.cache_ttl_seconds)
            raise
        return list(reordered)
