# checklist/domain/inspection.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Iterator
from uuid import UUID, uuid4

"""Inspection entity graph.

    Inspection 1--* InspectionItem 1--* InspectionQuestion 1--(0..1) Answer 1--* Photo

All types are frozen. A change anywhere in the graph rebuilds the path from
the changed node up to the Inspection (question -> item -> inspection), so
"did anything change" is always an identity/equality check on the root.
"""


def _now() -> datetime:
    # local wall-clock time, stored as ISO local date-time
    return datetime.now()


class Conformity(str, enum.Enum):
    unanswered = "unanswered"
    conforming = "conforming"
    non_conforming = "non_conforming"


@dataclass(frozen=True)
class Photo:
    """Evidence photo. `uri` is never rewritten; annotation only adds `drawing_uri`."""

    uri: str
    id: UUID = field(default_factory=uuid4)
    has_drawings: bool = False
    drawing_uri: str | None = None
    timestamp: datetime = field(default_factory=_now)

    def with_drawing(self, drawing_uri: str) -> Photo:
        return replace(self, has_drawings=True, drawing_uri=drawing_uri)


@dataclass(frozen=True)
class Answer:
    is_conform: bool
    comment: str = ""
    photos: tuple[Photo, ...] = ()
    # not persisted, so it does not take part in equality
    timestamp: datetime = field(default_factory=_now, compare=False)

    @property
    def needs_comment(self) -> bool:
        return not self.is_conform and not self.comment.strip()


@dataclass(frozen=True)
class InspectionQuestion:
    text: str
    id: UUID = field(default_factory=uuid4)
    answer: Answer | None = None

    @property
    def conformity(self) -> Conformity:
        if self.answer is None:
            return Conformity.unanswered
        return Conformity.conforming if self.answer.is_conform else Conformity.non_conforming

    @property
    def photos(self) -> tuple[Photo, ...]:
        return self.answer.photos if self.answer is not None else ()


@dataclass(frozen=True)
class InspectionItem:
    """One checklist category (e.g. "Sistema de frenos")."""

    name: str
    id: UUID = field(default_factory=uuid4)
    questions: tuple[InspectionQuestion, ...] = ()


@dataclass(frozen=True)
class Inspection:
    id: UUID = field(default_factory=uuid4)
    equipment: str = ""
    inspector: str = ""
    supervisor: str = ""
    horometer: str = ""
    date: datetime = field(default_factory=_now)
    items: tuple[InspectionItem, ...] = ()
    is_completed: bool = False

    def questions(self) -> Iterator[InspectionQuestion]:
        for item in self.items:
            yield from item.questions


@dataclass(frozen=True)
class InspectionSummary:
    """Header row of a stored inspection (no items), as listed in history."""

    id: UUID
    equipment: str
    inspector: str
    supervisor: str
    horometer: str
    date: datetime
    is_completed: bool
    conformity_percentage: float


@dataclass(frozen=True)
class InspectionStats:
    total_questions: int
    answered: int
    conforming: int
    non_conforming: int
    conformity_percentage: float


# ---------------------------------------------------------------------------
# Copy-on-write helpers
# ---------------------------------------------------------------------------


def with_answer(question: InspectionQuestion, answer: Answer | None) -> InspectionQuestion:
    return replace(question, answer=answer)


def replace_question(item: InspectionItem, question: InspectionQuestion) -> InspectionItem:
    """New item with the question of the same id swapped in. Unknown id -> item unchanged."""
    questions = tuple(question if q.id == question.id else q for q in item.questions)
    return replace(item, questions=questions)


def replace_item(inspection: Inspection, index: int, item: InspectionItem) -> Inspection:
    items = list(inspection.items)
    items[index] = item
    return replace(inspection, items=tuple(items))


def find_question(inspection: Inspection, question_id: UUID) -> tuple[int, InspectionQuestion] | None:
    """(item index, question) for a question id, searching every item."""
    for index, item in enumerate(inspection.items):
        for question in item.questions:
            if question.id == question_id:
                return index, question
    return None


def update_question(
    inspection: Inspection,
    question_id: UUID,
    fn: Callable[[InspectionQuestion], InspectionQuestion],
) -> Inspection:
    """Rebuild the path to `question_id` with `fn` applied. Unknown id -> same inspection."""
    found = find_question(inspection, question_id)
    if found is None:
        return inspection

    item_index, question = found
    item = replace_question(inspection.items[item_index], fn(question))
    return replace_item(inspection, item_index, item)


# ---------------------------------------------------------------------------
# Completion and conformity
# ---------------------------------------------------------------------------


def item_is_complete(item: InspectionItem) -> bool:
    """Every question answered and every non-conforming answer commented."""
    return all(q.answer is not None and not q.answer.needs_comment for q in item.questions)


def conformity_percentage(inspection: Inspection) -> float:
    answered = 0
    conforming = 0
    for question in inspection.questions():
        if question.answer is None:
            continue
        answered += 1
        if question.answer.is_conform:
            conforming += 1

    if answered == 0:
        return 0.0
    return conforming / answered * 100


def summarize(inspection: Inspection) -> InspectionStats:
    total = answered = conforming = 0
    for question in inspection.questions():
        total += 1
        if question.answer is not None:
            answered += 1
            conforming += question.answer.is_conform

    return InspectionStats(
        total_questions=total,
        answered=answered,
        conforming=conforming,
        non_conforming=answered - conforming,
        conformity_percentage=conformity_percentage(inspection),
    )


def non_conformities(inspection: Inspection) -> list[tuple[InspectionItem, InspectionQuestion]]:
    return [
        (item, question)
        for item in inspection.items
        for question in item.questions
        if question.conformity is Conformity.non_conforming
    ]
