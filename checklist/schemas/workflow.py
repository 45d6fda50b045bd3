from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from checklist.fsm.inspection_fsm import InspectionStage
from checklist.schemas.inspection import InspectionRead
from checklist.services.checklist_templates import EquipmentType
from checklist.services.inspection_workflow import InspectionWorkflow
from checklist.services.post_inspection_service import FindingType, PostInspectionWorkflow


class StrictBaseModel(BaseModel):
    """Request models: unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


# ============================================================================
# REQUESTS
# ============================================================================


class WorkflowCreateRequest(StrictBaseModel):
    equipment_type: EquipmentType | None = Field(
        default=None,
        description="Checklist template to load. Defaults to the configured equipment type.",
        examples=["CAEX_797F"],
    )


class PostInspectionCreateRequest(StrictBaseModel):
    control_inspection_id: UUID = Field(
        ...,
        description="Completed inspection the delivery check is derived from.",
        examples=["11111111-1111-1111-1111-111111111111"],
    )


class InitialInfoUpdate(StrictBaseModel):
    """Partial update of the initial-info form. Omitted fields are left alone."""

    equipment_type: EquipmentType | None = None
    equipment_number: str | None = Field(default=None, examples=["301"])
    inspector: str | None = Field(default=None, examples=["Juan"])
    supervisor: str | None = Field(default=None, examples=["Pedro"])
    horometer: str | None = Field(default=None, examples=["1200"])


class AnswerRequest(StrictBaseModel):
    is_conform: bool = Field(..., description="false = finding (non-conforming).")
    comment: str = Field(
        default="",
        max_length=2000,
        description=(
            "Required before the item can be completed when is_conform=false; "
            "may stay empty while the inspector is still typing."
        ),
        examples=["Fuga visible en manguera"],
    )


class PhotoAddRequest(StrictBaseModel):
    uri: str = Field(..., min_length=1, description="Opaque reference into image storage.")


class DrawingRequest(StrictBaseModel):
    drawing_uri: str = Field(..., min_length=1, description="Reference to the annotated copy.")

    @model_validator(mode="after")
    def _strip(self):
        if not self.drawing_uri.strip():
            raise ValueError("drawing_uri must not be blank")
        return self


# ============================================================================
# RESPONSES
# ============================================================================


class FieldErrors(BaseModel):
    equipment: bool
    inspector: bool
    supervisor: bool
    horometer: bool


class WorkflowStateRead(BaseModel):
    session_id: UUID
    kind: Literal["inspection", "post_inspection"]

    stage: InspectionStage
    current_item_index: int
    can_proceed: bool
    field_errors: FieldErrors

    equipment_type: EquipmentType
    equipment_number: str

    is_loading: bool
    is_saving: bool
    save_success: bool | None = None
    error_message: str | None = None

    inspection: InspectionRead

    control_inspection_id: UUID | None = None
    finding_types: dict[UUID, FindingType] = Field(default_factory=dict)

    @classmethod
    def from_workflow(cls, session_id: UUID, workflow: InspectionWorkflow) -> WorkflowStateRead:
        is_post = isinstance(workflow, PostInspectionWorkflow)
        control = workflow.selected_control_inspection if is_post else None

        return cls(
            session_id=session_id,
            kind="post_inspection" if is_post else "inspection",
            stage=workflow.current_stage,
            current_item_index=workflow.current_item_index,
            can_proceed=workflow.can_proceed,
            field_errors=FieldErrors(
                equipment=workflow.equipment_error,
                inspector=workflow.inspector_error,
                supervisor=workflow.supervisor_error,
                horometer=workflow.horometer_error,
            ),
            equipment_type=workflow.selected_equipment_type,
            equipment_number=workflow.equipment_number,
            is_loading=workflow.is_loading,
            is_saving=workflow.is_saving,
            save_success=workflow.save_success,
            error_message=workflow.error_message,
            inspection=InspectionRead.from_inspection(workflow.inspection),
            control_inspection_id=control.id if control is not None else None,
            finding_types=workflow.finding_types if is_post else {},
        )


class BackResponse(BaseModel):
    moved: bool
    state: WorkflowStateRead
