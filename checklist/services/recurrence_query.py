# checklist/services/recurrence_query.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from checklist.models.inspection import InspectionRecord
from checklist.models.inspection_item import InspectionItemRecord
from checklist.models.inspection_question import InspectionQuestionRecord

RECURRENCE_LIMIT = 10


@dataclass(frozen=True)
class HistoricalQuestion:
    """A non-conforming answer recorded in an earlier inspection."""

    question_id: UUID
    question_text: str
    comment: str
    item_name: str
    inspection_id: UUID
    equipment: str
    inspection_date: datetime


def find_similar_non_conformities(
    db: Session,
    *,
    question_text: str,
    item_name: str,
    equipment: str,
    exclude_inspection_id: UUID,
    limit: int = RECURRENCE_LIMIT,
) -> list[HistoricalQuestion]:
    """Past findings on the same equipment for the same item/question.

    Unanchored, case-insensitive substring match on all three texts; the
    inspection being filled in is excluded. Newest inspection first.
    """
    stmt = (
        select(
            InspectionQuestionRecord,
            InspectionItemRecord.name,
            InspectionRecord.id,
            InspectionRecord.equipment,
            InspectionRecord.date,
        )
        .join(InspectionItemRecord, InspectionQuestionRecord.item_id == InspectionItemRecord.id)
        .join(InspectionRecord, InspectionItemRecord.inspection_id == InspectionRecord.id)
        .where(
            InspectionQuestionRecord.text.icontains(question_text, autoescape=True),
            InspectionItemRecord.name.icontains(item_name, autoescape=True),
            InspectionRecord.equipment.icontains(equipment, autoescape=True),
            InspectionRecord.id != exclude_inspection_id,
            InspectionQuestionRecord.is_conform.is_(False),
        )
        .order_by(InspectionRecord.date.desc(), InspectionQuestionRecord.position)
        .limit(limit)
    )

    return [
        HistoricalQuestion(
            question_id=q.id,
            question_text=q.text,
            comment=q.comment or "",
            item_name=name,
            inspection_id=inspection_id,
            equipment=equip,
            inspection_date=date,
        )
        for q, name, inspection_id, equip, date in db.execute(stmt).all()
    ]
