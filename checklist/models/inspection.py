# checklist/models/inspection.py
from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, Float, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from checklist.models.base import Base, IsoDateTime


class InspectionRecord(Base):
    __tablename__ = "inspections"
    __table_args__ = (
        Index("ix_inspections_equipment_date", "equipment", "date"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    equipment: Mapped[str] = mapped_column(Text, nullable=False)
    inspector: Mapped[str] = mapped_column(Text, nullable=False)
    supervisor: Mapped[str] = mapped_column(Text, nullable=False)
    horometer: Mapped[str] = mapped_column(Text, nullable=False)

    date: Mapped[datetime] = mapped_column(IsoDateTime, nullable=False)

    is_completed: Mapped[bool] = mapped_column("isCompleted", Boolean, nullable=False, default=False)

    # redundant copy of the value derived from the answers, for filtering/sorting
    conformity_percentage: Mapped[float] = mapped_column(
        "conformityPercentage", Float, nullable=False, default=0.0
    )
