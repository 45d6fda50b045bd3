# checklist/api/workflows.py

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from checklist.api.deps import get_default_equipment_type, get_repository, get_sessions, get_workflow
from checklist.domain.inspection import Answer, InspectionQuestion, find_question
from checklist.schemas.inspection import HistoricalQuestionRead, PhotoRead
from checklist.schemas.workflow import (
    AnswerRequest,
    BackResponse,
    DrawingRequest,
    InitialInfoUpdate,
    PhotoAddRequest,
    PostInspectionCreateRequest,
    WorkflowCreateRequest,
    WorkflowStateRead,
)
from checklist.services.checklist_templates import EquipmentType
from checklist.services.inspection_repository import InspectionStore, StorageError
from checklist.services.inspection_workflow import InspectionWorkflow
from checklist.services.post_inspection_service import ControlLoadError, PostInspectionWorkflow
from checklist.services.workflow_sessions import WorkflowSessions

router = APIRouter()


def _state(session_id: UUID, workflow: InspectionWorkflow) -> WorkflowStateRead:
    return WorkflowStateRead.from_workflow(session_id, workflow)


def _question(workflow: InspectionWorkflow, question_id: UUID) -> InspectionQuestion:
    question = workflow.get_question_by_id(question_id)
    if question is None:
        raise HTTPException(status_code=404, detail="Question not found in this inspection")
    return question


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@router.post("/workflows", response_model=WorkflowStateRead, status_code=status.HTTP_201_CREATED)
def open_inspection_workflow(
    body: WorkflowCreateRequest,
    repository: InspectionStore = Depends(get_repository),
    sessions: WorkflowSessions = Depends(get_sessions),
    default_type: EquipmentType = Depends(get_default_equipment_type),
):
    """Start a new inspection at the initial-info stage."""
    workflow = InspectionWorkflow(repository, default_equipment_type=body.equipment_type or default_type)
    session_id = sessions.open(workflow)
    return _state(session_id, workflow)


@router.post(
    "/workflows/post-inspection",
    response_model=WorkflowStateRead,
    status_code=status.HTTP_201_CREATED,
)
def open_post_inspection_workflow(
    body: PostInspectionCreateRequest,
    repository: InspectionStore = Depends(get_repository),
    sessions: WorkflowSessions = Depends(get_sessions),
    default_type: EquipmentType = Depends(get_default_equipment_type),
):
    """Start a post-intervention delivery check derived from a completed control inspection."""
    workflow = PostInspectionWorkflow(repository, default_equipment_type=default_type)
    if not workflow.initialize_post_inspection(body.control_inspection_id):
        if workflow.control_load_error is ControlLoadError.NOT_FOUND:
            raise HTTPException(status_code=404, detail="Control inspection not found")
        raise HTTPException(status_code=503, detail=workflow.error_message)

    session_id = sessions.open(workflow)
    return _state(session_id, workflow)


@router.get("/workflows/{session_id}", response_model=WorkflowStateRead)
def get_workflow_state(session_id: UUID, workflow: InspectionWorkflow = Depends(get_workflow)):
    return _state(session_id, workflow)


@router.delete("/workflows/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def close_workflow(
    session_id: UUID,
    _workflow: InspectionWorkflow = Depends(get_workflow),
    sessions: WorkflowSessions = Depends(get_sessions),
):
    sessions.close(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


@router.patch("/workflows/{session_id}/initial-info", response_model=WorkflowStateRead)
def update_initial_info(
    session_id: UUID,
    body: InitialInfoUpdate,
    workflow: InspectionWorkflow = Depends(get_workflow),
):
    if body.equipment_type is not None:
        workflow.update_equipment_type(body.equipment_type)
    if body.equipment_number is not None:
        workflow.update_equipment_number(body.equipment_number)
    if body.inspector is not None:
        workflow.update_inspector(body.inspector)
    if body.supervisor is not None:
        workflow.update_supervisor(body.supervisor)
    if body.horometer is not None:
        workflow.update_horometer(body.horometer)
    return _state(session_id, workflow)


@router.post("/workflows/{session_id}/next", response_model=WorkflowStateRead)
def proceed(session_id: UUID, workflow: InspectionWorkflow = Depends(get_workflow)):
    """Forward one step. Blocked guards leave the state unchanged (see can_proceed / field_errors)."""
    workflow.proceed_to_next_stage()
    return _state(session_id, workflow)


@router.post("/workflows/{session_id}/back", response_model=BackResponse)
def go_back(session_id: UUID, workflow: InspectionWorkflow = Depends(get_workflow)):
    moved = workflow.go_back()
    return BackResponse(moved=moved, state=_state(session_id, workflow))


@router.post("/workflows/{session_id}/retry-save", response_model=WorkflowStateRead)
def retry_save(session_id: UUID, workflow: InspectionWorkflow = Depends(get_workflow)):
    workflow.retry_save()
    return _state(session_id, workflow)


@router.post("/workflows/{session_id}/reset", response_model=WorkflowStateRead)
def reset(session_id: UUID, workflow: InspectionWorkflow = Depends(get_workflow)):
    workflow.reset_inspection()
    return _state(session_id, workflow)


# ---------------------------------------------------------------------------
# Answers and photos
# ---------------------------------------------------------------------------


@router.put("/workflows/{session_id}/questions/{question_id}/answer", response_model=WorkflowStateRead)
def answer_question(
    session_id: UUID,
    question_id: UUID,
    body: AnswerRequest,
    workflow: InspectionWorkflow = Depends(get_workflow),
):
    question = _question(workflow, question_id)
    if not workflow.update_question_answer(question, Answer(is_conform=body.is_conform, comment=body.comment)):
        raise HTTPException(status_code=409, detail="Question is not part of the current checklist item")
    return _state(session_id, workflow)


@router.post(
    "/workflows/{session_id}/questions/{question_id}/photos",
    response_model=PhotoRead,
    status_code=status.HTTP_201_CREATED,
)
def add_photo(
    session_id: UUID,
    question_id: UUID,
    body: PhotoAddRequest,
    workflow: InspectionWorkflow = Depends(get_workflow),
):
    photo = workflow.add_photo_to_question(question_id, body.uri)
    if photo is None:
        raise HTTPException(status_code=404, detail="Question not found in this inspection")
    return PhotoRead.model_validate(photo)


@router.delete(
    "/workflows/{session_id}/questions/{question_id}/photos/{photo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remove_photo(
    session_id: UUID,
    question_id: UUID,
    photo_id: UUID,
    workflow: InspectionWorkflow = Depends(get_workflow),
):
    if not workflow.remove_photo_from_question(question_id, photo_id):
        raise HTTPException(status_code=404, detail="Photo not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/workflows/{session_id}/questions/{question_id}/photos/{photo_id}/drawing",
    response_model=PhotoRead,
)
def attach_drawing(
    session_id: UUID,
    question_id: UUID,
    photo_id: UUID,
    body: DrawingRequest,
    workflow: InspectionWorkflow = Depends(get_workflow),
):
    if not workflow.update_photo_with_drawing(question_id, photo_id, body.drawing_uri):
        raise HTTPException(status_code=404, detail="Photo not found")
    photo = next(p for p in _question(workflow, question_id).photos if p.id == photo_id)
    return PhotoRead.model_validate(photo)


@router.get(
    "/workflows/{session_id}/questions/{question_id}/similar",
    response_model=list[HistoricalQuestionRead],
)
def similar_findings(
    session_id: UUID,
    question_id: UUID,
    workflow: InspectionWorkflow = Depends(get_workflow),
    repository: InspectionStore = Depends(get_repository),
):
    """Recurring-defect warning for one question of the inspection being filled in."""
    found = find_question(workflow.inspection, question_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Question not found in this inspection")
    item_index, question = found
    item = workflow.inspection.items[item_index]
    try:
        return repository.find_similar_non_conformities(
            question_text=question.text,
            item_name=item.name,
            equipment=workflow.inspection.equipment,
            exclude_inspection_id=workflow.inspection.id,
        )
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
