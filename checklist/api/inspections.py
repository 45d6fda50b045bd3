# checklist/api/inspections.py

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from checklist.api.deps import get_repository
from checklist.schemas.inspection import HistoricalQuestionRead, InspectionRead, InspectionSummaryRead
from checklist.services.inspection_repository import InspectionNotFound, InspectionStore, StorageError

router = APIRouter()


@router.get("/inspections", response_model=list[InspectionSummaryRead])
def list_inspections(
    search: str | None = Query(default=None, description="Substring of equipment or inspector"),
    min_conformity: float | None = Query(default=None, ge=0, le=100),
    max_conformity: float | None = Query(default=None, ge=0, le=100),
    completed: bool = Query(default=False, description="Only completed inspections"),
    repository: InspectionStore = Depends(get_repository),
):
    """History, newest first."""
    if min_conformity is not None and max_conformity is not None and min_conformity > max_conformity:
        raise HTTPException(status_code=422, detail="min_conformity must be <= max_conformity")
    try:
        return repository.list_inspections(
            search=search,
            min_percentage=min_conformity,
            max_percentage=max_conformity,
            completed_only=completed,
        )
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


# declared before /inspections/{inspection_id} so the literal path wins
@router.get("/inspections/similar-non-conformities", response_model=list[HistoricalQuestionRead])
def similar_non_conformities(
    question_text: str,
    item_name: str,
    equipment: str,
    exclude_inspection_id: UUID,
    repository: InspectionStore = Depends(get_repository),
):
    """
    Earlier findings for the same question/item on the same equipment (max 10, newest first).
    Used to warn the inspector that a defect is recurring.
    """
    try:
        return repository.find_similar_non_conformities(
            question_text=question_text,
            item_name=item_name,
            equipment=equipment,
            exclude_inspection_id=exclude_inspection_id,
        )
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/inspections/{inspection_id}", response_model=InspectionRead)
def get_inspection(inspection_id: UUID, repository: InspectionStore = Depends(get_repository)):
    try:
        inspection = repository.get_full_inspection(inspection_id)
    except InspectionNotFound:
        raise HTTPException(status_code=404, detail="Inspection not found")
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return InspectionRead.from_inspection(inspection)


@router.delete("/inspections/{inspection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inspection(inspection_id: UUID, repository: InspectionStore = Depends(get_repository)):
    try:
        repository.delete_inspection(inspection_id)
    except InspectionNotFound:
        raise HTTPException(status_code=404, detail="Inspection not found")
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
