"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from medication_tracker.adapters.logging_notifier import LoggingReminderNotifier
from medication_tracker.adapters.supabase_medication_log_repository import (
    SupabaseMedicationLogRepository,
)
from medication_tracker.adapters.supabase_medication_repository import (
    SupabaseMedicationRepository,
)
from medication_tracker.config import Settings
from medication_tracker.services.adherence import AdherenceService
from medication_tracker.services.cache import InMemoryCache
from medication_tracker.services.logs import MedicationLogService
from medication_tracker.services.medications import MedicationService
from medication_tracker.services.reminders import ReminderNotifier, ReminderScheduler


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    medication_service: MedicationService
    log_service: MedicationLogService
    adherence_service: AdherenceService
    reminder_scheduler: ReminderScheduler
    reminder_notifier: ReminderNotifier


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    medication_repository = SupabaseMedicationRepository(supabase_client)
    log_repository = SupabaseMedicationLogRepository(supabase_client)
    medication_service = MedicationService(
        repository=medication_repository,
        cache=InMemoryCache(),
        cache_ttl_seconds=resolved_settings.medication_cache_ttl_seconds,
    )
    log_service = MedicationLogService(
        repository=log_repository,
        medications=medication_repository,
    )
    adherence_service = AdherenceService(
        medication_repository=medication_repository,
        log_repository=log_repository,
        timezone_name=resolved_settings.timezone,
    )

    return AppContainer(
        settings=resolved_settings,
        medication_service=medication_service,
        log_service=log_service,
        adherence_service=adherence_service,
        reminder_scheduler=ReminderScheduler(timezone_name=resolved_settings.timezone),
        reminder_notifier=LoggingReminderNotifier(),
    )
