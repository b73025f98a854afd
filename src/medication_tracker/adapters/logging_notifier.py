"""Reminder notifier that writes to the application log."""

import logging
from dataclasses import dataclass, field

from medication_tracker.services.reminders import ReminderNotifier


@dataclass
class LoggingReminderNotifier(ReminderNotifier):
    """Delivers reminders as log records."""

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("medication_tracker.reminders")
    )

    def notify(self, title: str, body: str) -> None:
        self.logger.info("%s: %s", title, body)
