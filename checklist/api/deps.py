# checklist/api/deps.py
from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, Request

from checklist.core.config import settings
from checklist.services.checklist_templates import EquipmentType
from checklist.services.inspection_repository import InspectionStore
from checklist.services.inspection_workflow import InspectionWorkflow
from checklist.services.workflow_sessions import SessionNotFound, WorkflowSessions


# -----------------------------------------------------------------------------
# Process-wide handles (built once at startup, see checklist.main)
# -----------------------------------------------------------------------------


def get_repository(request: Request) -> InspectionStore:
    return request.app.state.repository


def get_sessions(request: Request) -> WorkflowSessions:
    return request.app.state.workflow_sessions


def get_default_equipment_type() -> EquipmentType:
    try:
        return EquipmentType(settings.default_equipment_type)
    except ValueError:
        return EquipmentType.CAEX_797F


def get_workflow(
    session_id: UUID,
    sessions: WorkflowSessions = Depends(get_sessions),
) -> InspectionWorkflow:
    try:
        return sessions.get(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail="Workflow session not found") from e
