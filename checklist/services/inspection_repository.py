# checklist/services/inspection_repository.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol
from uuid import UUID

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from checklist.core.config import Settings
from checklist.core.db import initialize_database, make_engine, make_session_factory
from checklist.domain.inspection import (
    Answer,
    Inspection,
    InspectionItem,
    InspectionQuestion,
    InspectionSummary,
    Photo,
    conformity_percentage,
)
from checklist.models.inspection import InspectionRecord
from checklist.models.inspection_item import InspectionItemRecord
from checklist.models.inspection_question import InspectionQuestionRecord
from checklist.models.photo import PhotoRecord
from checklist.services.recurrence_query import HistoricalQuestion, find_similar_non_conformities

logger = logging.getLogger(__name__)


class InspectionNotFound(KeyError):
    pass


class StorageError(Exception):
    """Driver / I/O failure in the inspection store. Persisted state is unknown."""
    pass


class InspectionStore(Protocol):
    def save_inspection(self, inspection: Inspection) -> None: ...

    def get_full_inspection(self, inspection_id: UUID) -> Inspection: ...

    def delete_inspection(self, inspection_id: UUID) -> None: ...

    def list_inspections(
        self,
        *,
        search: str | None = None,
        min_percentage: float | None = None,
        max_percentage: float | None = None,
        completed_only: bool = False,
    ) -> list[InspectionSummary]: ...

    def find_similar_non_conformities(
        self,
        *,
        question_text: str,
        item_name: str,
        equipment: str,
        exclude_inspection_id: UUID,
    ) -> list[HistoricalQuestion]: ...

    def ping(self) -> bool: ...


def _summary(row: InspectionRecord) -> InspectionSummary:
    return InspectionSummary(
        id=row.id,
        equipment=row.equipment,
        inspector=row.inspector,
        supervisor=row.supervisor,
        horometer=row.horometer,
        date=row.date,
        is_completed=row.is_completed,
        conformity_percentage=row.conformity_percentage,
    )


class SqlInspectionRepository:
    """
    Maps the nested Inspection graph onto the four relational tables.
    Every public method runs in its own session; writes are one transaction each.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    # ---------- Writes ----------

    def save_inspection(self, inspection: Inspection) -> None:
        logger.debug("Saving inspection %s", inspection.id)
        try:
            with self._session_factory.begin() as db:
                self._write_graph(db, inspection)
        except SQLAlchemyError as e:
            logger.exception("Error saving inspection %s", inspection.id)
            raise StorageError(f"Could not save inspection {inspection.id}") from e
        logger.info("Saved inspection %s", inspection.id)

    def delete_inspection(self, inspection_id: UUID) -> None:
        try:
            with self._session_factory.begin() as db:
                if db.get(InspectionRecord, inspection_id) is None:
                    raise InspectionNotFound(f"Inspection {inspection_id} not found")

                item_ids = select(InspectionItemRecord.id).where(
                    InspectionItemRecord.inspection_id == inspection_id
                )
                question_ids = select(InspectionQuestionRecord.id).where(
                    InspectionQuestionRecord.item_id.in_(item_ids)
                )

                # bottom-up, so engines without cascade support leave no orphans
                db.execute(delete(PhotoRecord).where(PhotoRecord.question_id.in_(question_ids)))
                db.execute(
                    delete(InspectionQuestionRecord).where(InspectionQuestionRecord.item_id.in_(item_ids))
                )
                db.execute(
                    delete(InspectionItemRecord).where(InspectionItemRecord.inspection_id == inspection_id)
                )
                db.execute(delete(InspectionRecord).where(InspectionRecord.id == inspection_id))
        except SQLAlchemyError as e:
            logger.exception("Error deleting inspection %s", inspection_id)
            raise StorageError(f"Could not delete inspection {inspection_id}") from e
        logger.info("Deleted inspection %s", inspection_id)

    # ---------- Reads ----------

    def get_full_inspection(self, inspection_id: UUID) -> Inspection:
        try:
            with self._session_factory() as db:
                return self._read_graph(db, inspection_id)
        except SQLAlchemyError as e:
            logger.exception("Error loading inspection %s", inspection_id)
            raise StorageError(f"Could not load inspection {inspection_id}") from e

    def list_inspections(
        self,
        *,
        search: str | None = None,
        min_percentage: float | None = None,
        max_percentage: float | None = None,
        completed_only: bool = False,
    ) -> list[InspectionSummary]:
        stmt = select(InspectionRecord)
        if search:
            stmt = stmt.where(
                InspectionRecord.equipment.icontains(search, autoescape=True)
                | InspectionRecord.inspector.icontains(search, autoescape=True)
            )
        if min_percentage is not None:
            stmt = stmt.where(InspectionRecord.conformity_percentage >= min_percentage)
        if max_percentage is not None:
            stmt = stmt.where(InspectionRecord.conformity_percentage <= max_percentage)
        if completed_only:
            stmt = stmt.where(InspectionRecord.is_completed.is_(True))
        stmt = stmt.order_by(InspectionRecord.date.desc())

        try:
            with self._session_factory() as db:
                return [_summary(row) for row in db.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.exception("Error listing inspections")
            raise StorageError("Could not list inspections") from e

    def find_similar_non_conformities(
        self,
        *,
        question_text: str,
        item_name: str,
        equipment: str,
        exclude_inspection_id: UUID,
    ) -> list[HistoricalQuestion]:
        try:
            with self._session_factory() as db:
                return find_similar_non_conformities(
                    db,
                    question_text=question_text,
                    item_name=item_name,
                    equipment=equipment,
                    exclude_inspection_id=exclude_inspection_id,
                )
        except SQLAlchemyError as e:
            logger.exception("Error querying similar non-conformities")
            raise StorageError("Could not query similar non-conformities") from e

    def ping(self) -> bool:
        try:
            with self._session_factory() as db:
                db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.exception("Inspection store connection test failed")
            return False

    # ---------- Mapping ----------

    @staticmethod
    def _write_graph(db: Session, inspection: Inspection) -> None:
        keep_items = [item.id for item in inspection.items]
        keep_questions = [q.id for q in inspection.questions()]
        keep_photos = [p.id for q in inspection.questions() for p in q.photos]

        item_ids = select(InspectionItemRecord.id).where(
            InspectionItemRecord.inspection_id == inspection.id
        )
        question_ids = select(InspectionQuestionRecord.id).where(
            InspectionQuestionRecord.item_id.in_(item_ids)
        )

        # rows of an earlier save that are no longer part of the graph
        db.execute(
            delete(PhotoRecord).where(
                PhotoRecord.question_id.in_(question_ids),
                PhotoRecord.id.not_in(keep_photos),
            )
        )
        db.execute(
            delete(InspectionQuestionRecord).where(
                InspectionQuestionRecord.item_id.in_(item_ids),
                InspectionQuestionRecord.id.not_in(keep_questions),
            )
        )
        db.execute(
            delete(InspectionItemRecord).where(
                InspectionItemRecord.inspection_id == inspection.id,
                InspectionItemRecord.id.not_in(keep_items),
            )
        )

        item_rows: list[InspectionItemRecord] = []
        question_rows: list[InspectionQuestionRecord] = []
        photo_rows: list[PhotoRecord] = []

        for item_pos, item in enumerate(inspection.items):
            item_rows.append(
                InspectionItemRecord(
                    id=item.id,
                    inspection_id=inspection.id,
                    name=item.name,
                    position=item_pos,
                )
            )
            for question_pos, question in enumerate(item.questions):
                answer = question.answer
                question_rows.append(
                    InspectionQuestionRecord(
                        id=question.id,
                        item_id=item.id,
                        text=question.text,
                        is_conform=answer.is_conform if answer is not None else None,
                        comment=answer.comment if answer is not None else None,
                        position=question_pos,
                    )
                )
                for photo_pos, photo in enumerate(question.photos):
                    photo_rows.append(
                        PhotoRecord(
                            id=photo.id,
                            question_id=question.id,
                            uri=photo.uri,
                            has_drawings=photo.has_drawings,
                            drawing_uri=photo.drawing_uri,
                            timestamp=photo.timestamp,
                            position=photo_pos,
                        )
                    )

        # merge == insert-or-replace by primary key.
        # No relationship() between the records, so flush level by level (parents first).
        db.merge(
            InspectionRecord(
                id=inspection.id,
                equipment=inspection.equipment,
                inspector=inspection.inspector,
                supervisor=inspection.supervisor,
                horometer=inspection.horometer,
                date=inspection.date,
                is_completed=inspection.is_completed,
                conformity_percentage=conformity_percentage(inspection),
            )
        )
        for rows in (item_rows, question_rows, photo_rows):
            db.flush()
            for row in rows:
                db.merge(row)
        db.flush()

    @staticmethod
    def _read_graph(db: Session, inspection_id: UUID) -> Inspection:
        row = db.get(InspectionRecord, inspection_id)
        if row is None:
            raise InspectionNotFound(f"Inspection {inspection_id} not found")

        item_rows = db.scalars(
            select(InspectionItemRecord)
            .where(InspectionItemRecord.inspection_id == inspection_id)
            .order_by(InspectionItemRecord.position)
        ).all()

        items: list[InspectionItem] = []
        for item_row in item_rows:
            question_rows = db.scalars(
                select(InspectionQuestionRecord)
                .where(InspectionQuestionRecord.item_id == item_row.id)
                .order_by(InspectionQuestionRecord.position)
            ).all()

            questions: list[InspectionQuestion] = []
            for q_row in question_rows:
                answer = None
                if q_row.is_conform is not None:
                    photo_rows = db.scalars(
                        select(PhotoRecord)
                        .where(PhotoRecord.question_id == q_row.id)
                        .order_by(PhotoRecord.position)
                    ).all()
                    answer = Answer(
                        is_conform=q_row.is_conform,
                        comment=q_row.comment or "",
                        photos=tuple(
                            Photo(
                                id=p.id,
                                uri=p.uri,
                                has_drawings=p.has_drawings,
                                drawing_uri=p.drawing_uri,
                                timestamp=p.timestamp,
                            )
                            for p in photo_rows
                        ),
                        # answer time is not stored; "now" is a placeholder
                        timestamp=datetime.now(),
                    )
                questions.append(InspectionQuestion(id=q_row.id, text=q_row.text, answer=answer))

            items.append(InspectionItem(id=item_row.id, name=item_row.name, questions=tuple(questions)))

        return Inspection(
            id=row.id,
            equipment=row.equipment,
            inspector=row.inspector,
            supervisor=row.supervisor,
            horometer=row.horometer,
            date=row.date,
            items=tuple(items),
            is_completed=row.is_completed,
        )


class NullInspectionRepository:
    """
    Stand-in used when the real store could not be initialized at startup.
    Logs every call; reads come back empty, writes fail with StorageError.
    """

    def _unavailable(self, method: str) -> None:
        logger.error("Inspection store unavailable: %s called", method)

    def save_inspection(self, inspection: Inspection) -> None:
        self._unavailable("save_inspection")
        raise StorageError("Inspection store is not available")

    def get_full_inspection(self, inspection_id: UUID) -> Inspection:
        self._unavailable("get_full_inspection")
        raise InspectionNotFound(f"Inspection {inspection_id} not found")

    def delete_inspection(self, inspection_id: UUID) -> None:
        self._unavailable("delete_inspection")
        raise StorageError("Inspection store is not available")

    def list_inspections(
        self,
        *,
        search: str | None = None,
        min_percentage: float | None = None,
        max_percentage: float | None = None,
        completed_only: bool = False,
    ) -> list[InspectionSummary]:
        self._unavailable("list_inspections")
        return []

    def find_similar_non_conformities(
        self,
        *,
        question_text: str,
        item_name: str,
        equipment: str,
        exclude_inspection_id: UUID,
    ) -> list[HistoricalQuestion]:
        self._unavailable("find_similar_non_conformities")
        return []

    def ping(self) -> bool:
        self._unavailable("ping")
        return False


def build_repository(settings: Settings) -> InspectionStore:
    """Pick the store once at startup: the SQL repository, or the null one if it can't come up."""
    try:
        engine = make_engine(settings.database_url, echo=settings.debug)
        initialize_database(engine)
        repository = SqlInspectionRepository(make_session_factory(engine))
    except (SQLAlchemyError, OSError, ImportError):
        logger.exception("Error initializing inspection store (%s)", settings.db_driver)
        logger.error("Falling back to the null inspection store (read-only, empty)")
        return NullInspectionRepository()

    if not repository.ping():
        logger.error("Falling back to the null inspection store (read-only, empty)")
        return NullInspectionRepository()

    logger.info("Inspection store ready (%s)", settings.db_driver)
    return repository
