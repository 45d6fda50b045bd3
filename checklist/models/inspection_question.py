# checklist/models/inspection_question.py
from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import Boolean, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from checklist.models.base import Base


class InspectionQuestionRecord(Base):
    __tablename__ = "inspection_questions"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    item_id: Mapped[UUID] = mapped_column(
        "itemId",
        Uuid,
        ForeignKey("inspection_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)

    # NULL = unanswered, true/false = answered
    is_conform: Mapped[bool | None] = mapped_column("isConform", Boolean, nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
