# tests/factories.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from checklist.domain.inspection import Answer, Inspection, InspectionItem, InspectionQuestion, Photo


def make_photo(uri: str = "file:///photos/p1.jpg", **overrides: Any) -> Photo:
    return Photo(uri=uri, **overrides)


def make_answer(is_conform: bool = True, comment: str = "", *, photos=(), **overrides: Any) -> Answer:
    return Answer(is_conform=is_conform, comment=comment, photos=tuple(photos), **overrides)


def make_question(text: str = "¿Fugas?", answer: Answer | None = None, **overrides: Any) -> InspectionQuestion:
    return InspectionQuestion(text=text, answer=answer, **overrides)


def make_item(name: str = "Sistema Hidráulico", questions=None, **overrides: Any) -> InspectionItem:
    """
    Item with the given questions; by default one unanswered question.
    """
    if questions is None:
        questions = [make_question()]
    return InspectionItem(name=name, questions=tuple(questions), **overrides)


def make_inspection(
    *,
    equipment: str = "CAEX 797F 301",
    inspector: str = "Juan",
    supervisor: str = "Pedro",
    horometer: str = "1200",
    date: datetime | None = None,
    items=None,
    is_completed: bool = True,
    **overrides: Any,
) -> Inspection:
    """
    Completed inspection with one item / one unanswered question unless told otherwise.
    Microseconds are kept, the store round-trips them.
    """
    if items is None:
        items = [make_item()]
    kwargs: dict[str, Any] = dict(
        equipment=equipment,
        inspector=inspector,
        supervisor=supervisor,
        horometer=horometer,
        items=tuple(items),
        is_completed=is_completed,
        **overrides,
    )
    if date is not None:
        kwargs["date"] = date
    return Inspection(**kwargs)


def make_finding_inspection(
    *,
    equipment: str = "CAEX 797F 301",
    item_name: str = "Sistema Hidráulico",
    question_text: str = "¿Fugas?",
    comment: str = "fuga visible",
    date: datetime | None = None,
) -> Inspection:
    """Inspection whose only question is a non-conforming answer (a finding)."""
    question = make_question(question_text, make_answer(False, comment))
    return make_inspection(
        equipment=equipment,
        date=date,
        items=[make_item(item_name, [question])],
    )
