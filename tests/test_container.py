"""Tests for container wiring."""

from medication_tracker.adapters.logging_notifier import LoggingReminderNotifier
from medication_tracker.adapters.supabase_medication_repository import (
    SupabaseMedicationRepository,
)
from medication_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.settings is settings
    assert isinstance(
        container.medication_service.repository, SupabaseMedicationRepository
    )
    assert container.adherence_service.timezone_name == "UTC"
    assert container.reminder_scheduler.timezone_name == "UTC"
    assert isinstance(container.reminder_notifier, LoggingReminderNotifier)
