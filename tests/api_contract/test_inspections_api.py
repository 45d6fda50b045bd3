# tests/api_contract/test_inspections_api.py
from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from fastapi.testclient import TestClient

from checklist.main import create_app
from checklist.services.inspection_repository import NullInspectionRepository

from tests.factories import make_answer, make_finding_inspection, make_inspection, make_item, make_photo, make_question


def test_health_reports_storage(client):
    r = client.get("/health")
    assert r.status_code == 200, r.text
    assert r.json() == {"status": "ok", "storage": "available"}


def test_get_inspection_returns_graph_and_percentage(client, repository):
    inspection = make_inspection(
        items=[
            make_item(
                "Sistema Hidráulico",
                [
                    make_question("¿Fugas?", make_answer(False, "fuga", photos=[make_photo("file:///p/1.jpg")])),
                    make_question("¿Nivel?", make_answer(True)),
                    make_question("¿Mangueras?"),
                ],
            )
        ]
    )
    repository.save_inspection(inspection)

    r = client.get(f"/inspections/{inspection.id}")
    assert r.status_code == 200, r.text

    body = r.json()
    assert body["id"] == str(inspection.id)
    assert body["conformity_percentage"] == 50.0
    questions = body["items"][0]["questions"]
    assert [q["conformity"] for q in questions] == ["non_conforming", "conforming", "unanswered"]
    assert questions[0]["answer"]["photos"][0]["uri"] == "file:///p/1.jpg"
    assert questions[2]["answer"] is None


def test_get_unknown_inspection_is_404(client):
    r = client.get(f"/inspections/{uuid4()}")
    assert r.status_code == 404, r.text


def test_get_rejects_malformed_id(client):
    r = client.get("/inspections/not-a-uuid")
    assert r.status_code == 422, r.text


def test_list_inspections_with_filters(client, repository):
    older = make_inspection(equipment="CAEX 797F 301", date=datetime(2024, 1, 1, 8, 0),
                            items=[make_item(questions=[make_question(answer=make_answer(True))])])
    newer = make_inspection(equipment="CAEX 797F 302", date=datetime(2024, 2, 1, 8, 0),
                            items=[make_item(questions=[make_question(answer=make_answer(False, "x"))])])
    repository.save_inspection(older)
    repository.save_inspection(newer)

    r = client.get("/inspections")
    assert r.status_code == 200, r.text
    assert [s["id"] for s in r.json()] == [str(newer.id), str(older.id)]

    r = client.get("/inspections", params={"search": "301"})
    assert [s["id"] for s in r.json()] == [str(older.id)]

    r = client.get("/inspections", params={"min_conformity": 50})
    assert [s["id"] for s in r.json()] == [str(older.id)]


def test_list_rejects_inverted_range(client):
    r = client.get("/inspections", params={"min_conformity": 80, "max_conformity": 20})
    assert r.status_code == 422, r.text


def test_list_rejects_out_of_range_percentage(client):
    r = client.get("/inspections", params={"min_conformity": 120})
    assert r.status_code == 422, r.text


def test_delete_inspection(client, repository):
    inspection = make_inspection()
    repository.save_inspection(inspection)

    r = client.delete(f"/inspections/{inspection.id}")
    assert r.status_code == 204, r.text

    r = client.delete(f"/inspections/{inspection.id}")
    assert r.status_code == 404, r.text


def test_similar_non_conformities(client, repository):
    earlier = make_finding_inspection(comment="fuga en manguera")
    repository.save_inspection(earlier)

    r = client.get(
        "/inspections/similar-non-conformities",
        params={
            "question_text": "fugas",
            "item_name": "Hidráulico",
            "equipment": "301",
            "exclude_inspection_id": str(uuid4()),
        },
    )
    assert r.status_code == 200, r.text
    (hit,) = r.json()
    assert hit["inspection_id"] == str(earlier.id)
    assert hit["comment"] == "fuga en manguera"

    r = client.get(
        "/inspections/similar-non-conformities",
        params={
            "question_text": "fugas",
            "item_name": "Hidráulico",
            "equipment": "301",
            "exclude_inspection_id": str(earlier.id),
        },
    )
    assert r.json() == []


def test_null_store_maps_to_empty_reads_and_503_writes():
    with TestClient(create_app(NullInspectionRepository())) as c:
        assert c.get("/health").json()["storage"] == "unavailable"
        assert c.get("/inspections").json() == []
        assert c.get(f"/inspections/{uuid4()}").status_code == 404
        assert c.delete(f"/inspections/{uuid4()}").status_code == 503
