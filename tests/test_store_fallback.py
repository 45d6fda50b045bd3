# tests/test_store_fallback.py
from __future__ import annotations

import logging
import uuid

import pytest

from checklist.core.config import Settings
from checklist.services.inspection_repository import (
    InspectionNotFound,
    NullInspectionRepository,
    SqlInspectionRepository,
    StorageError,
    build_repository,
)

from tests.factories import make_inspection


def test_null_store_reads_are_empty_and_logged(caplog):
    store = NullInspectionRepository()

    with caplog.at_level(logging.ERROR):
        assert store.list_inspections(search="301") == []
        assert store.find_similar_non_conformities(
            question_text="q", item_name="i", equipment="e", exclude_inspection_id=uuid.uuid4()
        ) == []
        assert store.ping() is False

    assert len([r for r in caplog.records if "unavailable" in r.getMessage()]) == 3


def test_null_store_get_full_is_not_found():
    with pytest.raises(InspectionNotFound):
        NullInspectionRepository().get_full_inspection(uuid.uuid4())


def test_null_store_writes_fail():
    store = NullInspectionRepository()
    with pytest.raises(StorageError):
        store.save_inspection(make_inspection())
    with pytest.raises(StorageError):
        store.delete_inspection(uuid.uuid4())


def test_build_repository_with_sqlite_file(tmp_path):
    settings = Settings(db_driver="sqlite", sqlite_path=str(tmp_path / "checklist.db"))

    repository = build_repository(settings)

    assert isinstance(repository, SqlInspectionRepository)
    inspection = make_inspection()
    repository.save_inspection(inspection)
    assert repository.get_full_inspection(inspection.id) == inspection


def test_build_repository_falls_back_when_store_cannot_open(tmp_path, caplog):
    # parent directory does not exist, sqlite cannot create the file
    settings = Settings(db_driver="sqlite", sqlite_path=str(tmp_path / "missing" / "checklist.db"))

    with caplog.at_level(logging.ERROR):
        repository = build_repository(settings)

    assert isinstance(repository, NullInspectionRepository)
    assert any("null inspection store" in r.getMessage() for r in caplog.records)
