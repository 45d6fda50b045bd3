# checklist/models/photo.py
from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from checklist.models.base import Base, IsoDateTime


class PhotoRecord(Base):
    __tablename__ = "photos"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    question_id: Mapped[UUID] = mapped_column(
        "questionId",
        Uuid,
        ForeignKey("inspection_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # opaque references into external image storage
    uri: Mapped[str] = mapped_column(Text, nullable=False)
    has_drawings: Mapped[bool] = mapped_column("hasDrawings", Boolean, nullable=False, default=False)
    drawing_uri: Mapped[str | None] = mapped_column("drawingUri", Text, nullable=True)

    timestamp: Mapped[datetime] = mapped_column(IsoDateTime, nullable=False)

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
