# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from checklist.core.db import initialize_database, make_engine, make_session_factory
from checklist.main import create_app
from checklist.services.inspection_repository import SqlInspectionRepository


@pytest.fixture()
def engine():
    """
    Fresh in-memory sqlite per test:
      - one shared connection (StaticPool), so every session sees the same data
      - PRAGMA foreign_keys=ON, so ON DELETE CASCADE is real
      - schema via create_all, same as the embedded startup path
    """
    eng = make_engine("sqlite+pysqlite://")
    initialize_database(eng)

    with eng.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar_one() == 1

    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def repository(session_factory):
    return SqlInspectionRepository(session_factory)


@pytest.fixture()
def client(repository):
    # context manager runs the lifespan (repository + session registry on app.state)
    with TestClient(create_app(repository)) as c:
        yield c
