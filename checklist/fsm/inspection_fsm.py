# checklist/fsm/inspection_fsm.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Inspection wizard FSM.

Strictly linear, no skipping:
  initial_info -> checklist (one step per item) -> summary -> completed

NEXT walks forward, BACK walks backward (completed -> summary is allowed,
the record is already saved by then). Guards that need the inspection itself
(blank fields, unanswered questions) are checked by the workflow service
before it calls into this module; this module only knows stage + index.
"""


class TransitionNotAllowed(Exception):
    pass


class InspectionStage(str, Enum):
    initial_info = "initial_info"
    checklist = "checklist"
    summary = "summary"
    completed = "completed"


class Action(str, Enum):
    NEXT = "next"
    BACK = "back"


# side effect kinds, executed by the workflow
LOAD_CHECKLIST = "load_checklist"  # initial_info -> checklist
COMPLETE_AND_SAVE = "complete_and_save"  # summary -> completed


@dataclass(frozen=True)
class Position:
    stage: InspectionStage = InspectionStage.initial_info
    item_index: int = 0


@dataclass(frozen=True)
class SideEffect:
    """Declarative side effects for the workflow to execute."""

    kind: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransitionResult:
    position: Position
    moved: bool
    side_effects: list[SideEffect]


TERMINAL = {InspectionStage.completed}


def _next(current: Position, item_count: int) -> TransitionResult:
    stage = current.stage

    if stage is InspectionStage.initial_info:
        return TransitionResult(
            Position(InspectionStage.checklist, 0),
            True,
            [SideEffect(kind=LOAD_CHECKLIST)],
        )

    if stage is InspectionStage.checklist:
        if current.item_index < item_count - 1:
            return TransitionResult(Position(InspectionStage.checklist, current.item_index + 1), True, [])
        return TransitionResult(Position(InspectionStage.summary, current.item_index), True, [])

    if stage is InspectionStage.summary:
        return TransitionResult(
            Position(InspectionStage.completed, current.item_index),
            True,
            [SideEffect(kind=COMPLETE_AND_SAVE)],
        )

    # completed: terminal, NEXT is a no-op
    return TransitionResult(current, False, [])


def _back(current: Position, item_count: int) -> TransitionResult:
    stage = current.stage

    if stage is InspectionStage.initial_info:
        return TransitionResult(current, False, [])

    if stage is InspectionStage.checklist:
        if current.item_index > 0:
            return TransitionResult(Position(InspectionStage.checklist, current.item_index - 1), True, [])
        return TransitionResult(Position(InspectionStage.initial_info, 0), True, [])

    if stage is InspectionStage.summary:
        last = max(item_count - 1, 0)
        return TransitionResult(Position(InspectionStage.checklist, last), True, [])

    # completed -> summary
    return TransitionResult(Position(InspectionStage.summary, current.item_index), True, [])


def apply_transition(current: Position, action_raw: str, *, item_count: int) -> TransitionResult:
    """Returns the new position, whether it moved, and side effects.

    `item_count` is the number of checklist items the inspection will have once
    in the checklist stage.
    """
    action_raw = action_raw.strip()

    try:
        action = Action(action_raw)
    except ValueError:
        allowed = ", ".join(a.value for a in Action)
        raise TransitionNotAllowed(f"Unknown action: '{action_raw}'. Allowed actions: {allowed}")

    if action is Action.NEXT:
        return _next(current, item_count)
    return _back(current, item_count)
