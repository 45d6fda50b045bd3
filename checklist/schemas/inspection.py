from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from checklist.domain.inspection import Conformity, Inspection, conformity_percentage


class PhotoRead(BaseModel):
    id: UUID
    uri: str
    has_drawings: bool
    drawing_uri: str | None = None
    timestamp: datetime

    model_config = {"from_attributes": True}


class AnswerRead(BaseModel):
    is_conform: bool
    comment: str
    photos: list[PhotoRead]
    timestamp: datetime

    model_config = {"from_attributes": True}


class QuestionRead(BaseModel):
    id: UUID
    text: str
    conformity: Conformity
    answer: AnswerRead | None = None

    model_config = {"from_attributes": True}


class ItemRead(BaseModel):
    id: UUID
    name: str
    questions: list[QuestionRead]

    model_config = {"from_attributes": True}


class InspectionRead(BaseModel):
    id: UUID
    equipment: str
    inspector: str
    supervisor: str
    horometer: str
    date: datetime
    is_completed: bool
    items: list[ItemRead]

    conformity_percentage: float

    model_config = {"from_attributes": True}

    @classmethod
    def from_inspection(cls, inspection: Inspection) -> InspectionRead:
        # the percentage is derived, never stored on the entity
        return cls(
            id=inspection.id,
            equipment=inspection.equipment,
            inspector=inspection.inspector,
            supervisor=inspection.supervisor,
            horometer=inspection.horometer,
            date=inspection.date,
            is_completed=inspection.is_completed,
            items=[ItemRead.model_validate(item) for item in inspection.items],
            conformity_percentage=conformity_percentage(inspection),
        )


class InspectionSummaryRead(BaseModel):
    id: UUID
    equipment: str
    inspector: str
    supervisor: str
    horometer: str
    date: datetime
    is_completed: bool
    conformity_percentage: float

    model_config = {"from_attributes": True}


class HistoricalQuestionRead(BaseModel):
    question_id: UUID
    question_text: str
    comment: str
    item_name: str
    inspection_id: UUID
    equipment: str
    inspection_date: datetime

    model_config = {"from_attributes": True}
