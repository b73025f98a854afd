"""CRUD endpoints for medications and intake logs."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Request, Response, status

from medication_tracker.api.models import (
    LogCreate,
    MedicationCreate,
    MedicationUpdate,
    ReorderRequest,
)
from medication_tracker.services.days import ensure_aware

if TYPE_CHECKING:
    from medication_tracker.containers import AppContainer
    from medication_tracker.domain.medications import Medication, MedicationLog

router = APIRouter(prefix="/api", tags=["medications"])


@router.get("/medications")
async def list_medications(request: Request) -> list[dict[str, object]]:
    """Return medications in display order."""
    container: AppContainer = request.app.state.container
    return [
        serialize_medication(item)
        for item in container.medication_service.list_medications()
    ]


@router.post("/medications", status_code=status.HTTP_201_CREATED)
async def create_medication(
    payload: MedicationCreate, request: Request
) -> dict[str, object]:
    """Create a medication."""
    container: AppContainer = request.app.state.container
    medication = container.medication_service.create_medication(payload.to_draft())
    return serialize_medication(medication)


@router.post("/medications/reorder", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_medications(payload: ReorderRequest, request: Request) -> Response:
    """Persist a new medication order."""
    container: AppContainer = request.app.state.container
    container.medication_service.reorder(payload.ordered_ids())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/medications/{medication_id}")
async def update_medication(
    medication_id: UUID, payload: MedicationUpdate, request: Request
) -> dict[str, object]:
    """Apply a partial update to a medication."""
    container: AppContainer = request.app.state.container
    medication = container.medication_service.update_medication(
        medication_id, payload.to_changes()
    )
    return serialize_medication(medication)


@router.delete("/medications/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medication(medication_id: UUID, request: Request) -> Response:
    """Delete a medication and its logs."""
    container: AppContainer = request.app.state.container
    container.medication_service.delete_medication(medication_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/logs")
async def list_logs(request: Request) -> list[dict[str, object]]:
    """Return all logs, newest first."""
    container: AppContainer = request.app.state.container
    return [serialize_log(log) for log in container.log_service.list_logs()]


@router.post("/logs", status_code=status.HTTP_201_CREATED)
async def create_log(payload: LogCreate, request: Request) -> dict[str, object]:
    """Log an intake now, or at the given time as a manual entry."""
    container: AppContainer = request.app.state.container
    if payload.timestamp is None:
        log = container.log_service.quick_log(payload.medication_id)
    else:
        log = container.log_service.manual_log(
            payload.medication_id,
            ensure_aware(payload.timestamp, container.adherence_service.tz),
        )
    return serialize_log(log)


@router.delete("/logs/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_log(log_id: UUID, request: Request) -> Response:
    """Delete a log."""
    container: AppContainer = request.app.state.container
    container.log_service.delete_log(log_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def serialize_medication(medication: Medication) -> dict[str, object]:
    return {
        "id": str(medication.id),
        "name": medication.name,
        "dosage": medication.dosage,
        "timesPerDay": medication.times_per_day,
        "daysInterval": medication.days_interval,
        "color": medication.color.value,
        "icon": medication.icon.value,
        "order": medication.order,
        "reminderEnabled": medication.reminder_enabled,
        "reminderTimes": [period.value for period in medication.reminder_times],
        "createdAt": medication.created_at.isoformat(),
    }


def serialize_log(log: MedicationLog) -> dict[str, object]:
    return {
        "id": str(log.id),
        "medicationId": str(log.medication_id),
        "timestamp": log.timestamp.isoformat(),
        "isManual": log.is_manual,
    }
