# tests/test_inspection_repository.py
"""
SQL store: graph round-trip, single-transaction save, stale-row pruning,
cascade delete, listing/filtering.
"""

from __future__ import annotations

import dataclasses
import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy import delete, func, select, text

from checklist.domain.inspection import conformity_percentage, update_question, with_answer
from checklist.models.inspection import InspectionRecord
from checklist.models.inspection_item import InspectionItemRecord
from checklist.models.inspection_question import InspectionQuestionRecord
from checklist.models.photo import PhotoRecord
from checklist.services.inspection_repository import InspectionNotFound, StorageError

from tests.factories import (
    make_answer,
    make_finding_inspection,
    make_inspection,
    make_item,
    make_photo,
    make_question,
)


# ============================================================================
# Helpers
# ============================================================================

def _count(db, record) -> int:
    return db.scalar(select(func.count()).select_from(record))


def _full_inspection():
    photo = make_photo("file:///p/1.jpg").with_drawing("file:///p/1_drawn.png")
    return make_inspection(
        date=datetime(2024, 5, 1, 8, 30, 0, 123456),
        items=[
            make_item(
                "Sistema Hidráulico",
                [
                    make_question("¿Fugas?", make_answer(False, "fuga visible", photos=[photo, make_photo("file:///p/2.jpg")])),
                    make_question("¿Nivel de aceite?", make_answer(True)),
                    make_question("¿Mangueras sin roce?"),
                ],
            ),
            make_item("Cabina Operador", [make_question("¿Bocina?", make_answer(True, "ok"))]),
            make_item("Sin preguntas", []),
        ],
    )


# ============================================================================
# Round-trip
# ============================================================================

def test_round_trip_reproduces_graph(repository):
    inspection = _full_inspection()

    repository.save_inspection(inspection)
    loaded = repository.get_full_inspection(inspection.id)

    # answer timestamps are not stored and do not take part in equality
    assert loaded == inspection
    assert [i.name for i in loaded.items] == ["Sistema Hidráulico", "Cabina Operador", "Sin preguntas"]
    assert [p.uri for p in loaded.items[0].questions[0].photos] == ["file:///p/1.jpg", "file:///p/2.jpg"]
    assert loaded.items[0].questions[0].photos[0].drawing_uri == "file:///p/1_drawn.png"
    assert loaded.items[0].questions[2].answer is None

    # reloaded answers are stamped at load time
    now = datetime.now()
    for question in loaded.questions():
        if question.answer is not None:
            assert timedelta(0) <= now - question.answer.timestamp < timedelta(seconds=5)


def test_scenario_single_finding_is_zero_percent(repository, db):
    inspection = make_inspection(
        equipment="CAEX 301",
        inspector="Juan",
        supervisor="Pedro",
        horometer="1200",
        items=[make_item("Hydraulic System", [make_question("Leaks?", make_answer(False, "visible leak"))])],
    )
    assert conformity_percentage(inspection) == 0.0

    repository.save_inspection(inspection)
    loaded = repository.get_full_inspection(inspection.id)

    assert loaded == inspection
    assert loaded.equipment == "CAEX 301"
    assert loaded.items[0].questions[0].answer.comment == "visible leak"
    assert db.get(InspectionRecord, inspection.id).conformity_percentage == 0.0


def test_date_is_stored_as_iso_local_string(repository, db):
    inspection = make_inspection(date=datetime(2024, 5, 1, 8, 30, 0))
    repository.save_inspection(inspection)

    raw = db.execute(text("select date from inspections")).scalar_one()
    assert raw == "2024-05-01T08:30:00.000000"


def test_stored_percentage_tracks_answers(repository, db):
    inspection = make_inspection(
        items=[make_item(questions=[make_question(answer=make_answer(True)), make_question(answer=make_answer(False, "x"))])]
    )
    repository.save_inspection(inspection)
    assert db.get(InspectionRecord, inspection.id).conformity_percentage == 50.0


def test_get_full_unknown_id_raises_not_found(repository):
    with pytest.raises(InspectionNotFound):
        repository.get_full_inspection(uuid.uuid4())


# ============================================================================
# Re-save
# ============================================================================

def test_resave_is_upsert_and_prunes_stale_rows(repository, db):
    inspection = _full_inspection()
    repository.save_inspection(inspection)

    first_q = inspection.items[0].questions[0]
    kept_photo = first_q.photos[1]

    # drop one photo, one question and one item, change an answer
    updated = update_question(
        inspection,
        first_q.id,
        lambda q: with_answer(q, dataclasses.replace(q.answer, photos=(kept_photo,))),
    )
    first_item = updated.items[0]
    updated = dataclasses.replace(
        updated,
        inspector="Ana",
        items=(dataclasses.replace(first_item, questions=first_item.questions[:2]), updated.items[1]),
    )

    repository.save_inspection(updated)

    assert repository.get_full_inspection(inspection.id) == updated
    assert _count(db, InspectionRecord) == 1
    assert _count(db, InspectionItemRecord) == 2
    assert _count(db, InspectionQuestionRecord) == 3
    assert _count(db, PhotoRecord) == 1


def test_failed_save_leaves_no_partial_rows(repository, db):
    inspection = _full_inspection()
    # header and first item are flushed before the NOT NULL violation on question text
    broken = make_inspection(
        items=[
            make_item("ok", [make_question("¿Fugas?", make_answer(True))]),
            make_item("broken", [make_question(None)]),
        ]
    )

    repository.save_inspection(inspection)
    with pytest.raises(StorageError):
        repository.save_inspection(broken)

    assert db.get(InspectionRecord, broken.id) is None
    assert _count(db, InspectionRecord) == 1
    assert repository.get_full_inspection(inspection.id) == inspection


# ============================================================================
# Delete
# ============================================================================

def test_delete_removes_whole_graph(repository, db):
    inspection = _full_inspection()
    other = make_finding_inspection()
    repository.save_inspection(inspection)
    repository.save_inspection(other)

    repository.delete_inspection(inspection.id)

    with pytest.raises(InspectionNotFound):
        repository.get_full_inspection(inspection.id)
    assert _count(db, InspectionItemRecord) == 1
    assert _count(db, InspectionQuestionRecord) == 1
    assert _count(db, PhotoRecord) == 0
    assert repository.get_full_inspection(other.id) == other


def test_delete_unknown_id_raises_not_found(repository):
    with pytest.raises(InspectionNotFound):
        repository.delete_inspection(uuid.uuid4())


def test_database_level_cascade(repository, db):
    inspection = _full_inspection()
    repository.save_inspection(inspection)

    # plain DELETE on the parent only, children go through ON DELETE CASCADE
    db.execute(delete(InspectionRecord).where(InspectionRecord.id == inspection.id))
    db.commit()

    assert _count(db, InspectionItemRecord) == 0
    assert _count(db, InspectionQuestionRecord) == 0
    assert _count(db, PhotoRecord) == 0


# ============================================================================
# Listing
# ============================================================================

def _seed_history(repository):
    rows = [
        make_inspection(equipment="CAEX 797F 301", inspector="Juan", date=datetime(2024, 1, 1, 8, 0),
                        items=[make_item(questions=[make_question(answer=make_answer(True))])]),
        make_inspection(equipment="CAEX 797F 302", inspector="María", date=datetime(2024, 2, 1, 8, 0),
                        items=[make_item(questions=[make_question(answer=make_answer(False, "x"))])]),
        make_inspection(equipment="CAEX 798AC 410", inspector="Juan", date=datetime(2024, 3, 1, 8, 0),
                        is_completed=False,
                        items=[make_item(questions=[make_question(answer=make_answer(True)), make_question(answer=make_answer(False, "y"))])]),
    ]
    for row in rows:
        repository.save_inspection(row)
    return rows


def test_list_newest_first(repository):
    rows = _seed_history(repository)

    summaries = repository.list_inspections()

    assert [s.id for s in summaries] == [rows[2].id, rows[1].id, rows[0].id]
    assert summaries[0].conformity_percentage == 50.0
    assert summaries[0].is_completed is False


def test_list_search_matches_equipment_or_inspector(repository):
    rows = _seed_history(repository)

    assert {s.id for s in repository.list_inspections(search="juan")} == {rows[0].id, rows[2].id}
    assert [s.id for s in repository.list_inspections(search="302")] == [rows[1].id]
    assert repository.list_inspections(search="%") == []


def test_list_filters(repository):
    rows = _seed_history(repository)

    assert [s.id for s in repository.list_inspections(min_percentage=60)] == [rows[0].id]
    assert [s.id for s in repository.list_inspections(max_percentage=40)] == [rows[1].id]
    assert [s.id for s in repository.list_inspections(min_percentage=40, max_percentage=60)] == [rows[2].id]
    assert [s.id for s in repository.list_inspections(completed_only=True)] == [rows[1].id, rows[0].id]


def test_ping(repository):
    assert repository.ping() is True
