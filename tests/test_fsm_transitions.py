# tests/test_fsm_transitions.py
"""
Wizard FSM transition table.

Pure module: no inspection, no store. Guards that look at answers or
form fields live in the workflow and are covered in test_inspection_workflow.
"""

from __future__ import annotations

import pytest

from checklist.fsm.inspection_fsm import (
    COMPLETE_AND_SAVE,
    LOAD_CHECKLIST,
    InspectionStage,
    Position,
    TransitionNotAllowed,
    apply_transition,
)

S = InspectionStage


# ============================================================================
# NEXT
# ============================================================================

@pytest.mark.parametrize(
    "current, item_count, expected, effects",
    [
        (Position(S.initial_info, 0), 3, Position(S.checklist, 0), [LOAD_CHECKLIST]),
        (Position(S.checklist, 0), 3, Position(S.checklist, 1), []),
        (Position(S.checklist, 2), 3, Position(S.summary, 2), []),
        (Position(S.summary, 2), 3, Position(S.completed, 2), [COMPLETE_AND_SAVE]),
    ],
)
def test_next(current, item_count, expected, effects):
    result = apply_transition(current, "next", item_count=item_count)

    assert result.moved is True
    assert result.position == expected
    assert [e.kind for e in result.side_effects] == effects


def test_next_from_completed_is_noop():
    current = Position(S.completed, 2)
    result = apply_transition(current, "next", item_count=3)

    assert result.moved is False
    assert result.position == current
    assert result.side_effects == []


# ============================================================================
# BACK
# ============================================================================

@pytest.mark.parametrize(
    "current, item_count, expected",
    [
        (Position(S.checklist, 2), 3, Position(S.checklist, 1)),
        (Position(S.checklist, 0), 3, Position(S.initial_info, 0)),
        (Position(S.summary, 0), 3, Position(S.checklist, 2)),
        (Position(S.summary, 0), 0, Position(S.checklist, 0)),
        (Position(S.completed, 2), 3, Position(S.summary, 2)),
    ],
)
def test_back(current, item_count, expected):
    result = apply_transition(current, "back", item_count=item_count)

    assert result.moved is True
    assert result.position == expected
    assert result.side_effects == []


def test_back_from_initial_info_does_not_move():
    result = apply_transition(Position(), "back", item_count=3)

    assert result.moved is False
    assert result.position == Position(S.initial_info, 0)


# ============================================================================
# Input
# ============================================================================

def test_action_is_stripped():
    assert apply_transition(Position(), "  next ", item_count=1).position.stage is S.checklist


def test_unknown_action_rejected():
    with pytest.raises(TransitionNotAllowed, match="Unknown action"):
        apply_transition(Position(), "skip", item_count=1)
