# checklist/models/inspection_item.py
from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from checklist.models.base import Base


class InspectionItemRecord(Base):
    __tablename__ = "inspection_items"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    inspection_id: Mapped[UUID] = mapped_column(
        "inspectionId",
        Uuid,
        ForeignKey("inspections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)

    # order of the item inside the inspection
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
