# checklist/services/inspection_workflow.py
from __future__ import annotations

import logging
from dataclasses import replace
from uuid import UUID

from checklist.domain.inspection import (
    Answer,
    Inspection,
    InspectionItem,
    InspectionQuestion,
    Photo,
    find_question,
    item_is_complete,
    replace_item,
    replace_question,
    update_question,
    with_answer,
)
from checklist.fsm.inspection_fsm import (
    COMPLETE_AND_SAVE,
    LOAD_CHECKLIST,
    Action,
    InspectionStage,
    Position,
    apply_transition,
)
from checklist.services.checklist_templates import (
    EquipmentType,
    build_checklist_items,
    format_equipment,
)
from checklist.services.inspection_repository import InspectionStore, StorageError

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "No se pudo guardar la inspección en la base de datos."


class InspectionWorkflow:
    """
    One inspection wizard session: initial info -> checklist -> summary -> completed.

    Owns exactly one Inspection graph and rebuilds it on every change (the
    attribute is reassigned, never mutated). All other attributes are the
    observable state read by the UI. Not thread-safe: one session, one owner.
    """

    def __init__(
        self,
        repository: InspectionStore,
        *,
        default_equipment_type: EquipmentType = EquipmentType.CAEX_797F,
    ):
        self.repository = repository
        self.default_equipment_type = default_equipment_type
        self.reset_inspection()

    # ---------- State ----------

    def reset_inspection(self) -> None:
        """Back to an empty inspection at initial info (start of a new inspection)."""
        self.inspection = Inspection()
        self.selected_equipment_type = self.default_equipment_type
        self.equipment_number = ""
        self.position = Position()

        self.equipment_error = False
        self.inspector_error = False
        self.supervisor_error = False
        self.horometer_error = False

        self.is_loading = False
        self.is_saving = False
        self.save_success: bool | None = None
        self.error_message: str | None = None

    @property
    def current_stage(self) -> InspectionStage:
        return self.position.stage

    @property
    def current_item_index(self) -> int:
        return self.position.item_index

    @property
    def current_item(self) -> InspectionItem | None:
        if self.current_stage is not InspectionStage.checklist:
            return None
        if 0 <= self.current_item_index < len(self.inspection.items):
            return self.inspection.items[self.current_item_index]
        return None

    @property
    def can_proceed(self) -> bool:
        """Whether the forward action should be enabled (no flags are touched)."""
        if self.current_stage is InspectionStage.initial_info:
            return not any(self._blank_fields().values())
        if self.current_stage is InspectionStage.checklist:
            item = self.current_item
            return item is None or item_is_complete(item)
        return self.current_stage is InspectionStage.summary

    def clear_error(self) -> None:
        self.error_message = None

    # ---------- Initial info ----------

    def update_equipment_type(self, equipment_type: EquipmentType) -> None:
        self.selected_equipment_type = equipment_type
        self._update_formatted_equipment()

    def update_equipment_number(self, value: str) -> None:
        self.equipment_number = value
        self.equipment_error = not value.strip()
        self._update_formatted_equipment()

    def _update_formatted_equipment(self) -> None:
        equipment = format_equipment(self.selected_equipment_type, self.equipment_number)
        self.inspection = replace(self.inspection, equipment=equipment)

    def update_inspector(self, value: str) -> None:
        self.inspection = replace(self.inspection, inspector=value)
        self.inspector_error = not value.strip()

    def update_supervisor(self, value: str) -> None:
        self.inspection = replace(self.inspection, supervisor=value)
        self.supervisor_error = not value.strip()

    def update_horometer(self, value: str) -> None:
        self.inspection = replace(self.inspection, horometer=value)
        self.horometer_error = not value.strip()

    def _blank_fields(self) -> dict[str, bool]:
        return {
            "equipment": not self.inspection.equipment.strip(),
            "inspector": not self.inspection.inspector.strip(),
            "supervisor": not self.inspection.supervisor.strip(),
            "horometer": not self.inspection.horometer.strip(),
        }

    def validate_initial_fields(self) -> bool:
        """Set every field error flag; True when none is blank."""
        blank = self._blank_fields()
        self.equipment_error = blank["equipment"]
        self.inspector_error = blank["inspector"]
        self.supervisor_error = blank["supervisor"]
        self.horometer_error = blank["horometer"]
        return not any(blank.values())

    # ---------- Navigation ----------

    def proceed_to_next_stage(self) -> InspectionStage:
        """Move forward one step if the current stage's guard holds. Returns the stage."""
        stage = self.current_stage

        if stage is InspectionStage.initial_info and not self.validate_initial_fields():
            return stage

        if stage is InspectionStage.checklist and not self.can_proceed:
            logger.debug(
                "Inspection %s: item %s incomplete, staying put", self.inspection.id, self.current_item_index
            )
            return stage

        result = apply_transition(self.position, Action.NEXT.value, item_count=len(self.inspection.items))

        for effect in result.side_effects:
            if effect.kind == LOAD_CHECKLIST:
                self._load_checklist_items()
            elif effect.kind == COMPLETE_AND_SAVE:
                self._complete_and_save()

        self.position = result.position
        return self.current_stage

    def go_back(self) -> bool:
        result = apply_transition(self.position, Action.BACK.value, item_count=len(self.inspection.items))
        self.position = result.position
        return result.moved

    def _load_checklist_items(self) -> None:
        self.is_loading = True
        try:
            items = build_checklist_items(self.selected_equipment_type)
            self.inspection = replace(self.inspection, items=items)
        finally:
            self.is_loading = False

    def _complete_and_save(self) -> None:
        self.is_saving = True
        self.save_success = None
        self.error_message = None

        self.inspection = replace(self.inspection, is_completed=True)
        try:
            self.repository.save_inspection(self.inspection)
        except StorageError as e:
            # in-memory state stays completed; persisted state is unknown, the caller may retry
            logger.error("Inspection %s could not be saved: %s", self.inspection.id, e)
            self.save_success = False
            self.error_message = SAVE_FAILED_MESSAGE
        else:
            self.save_success = True
            logger.info("Inspection %s completed and saved", self.inspection.id)
        finally:
            self.is_saving = False

    def retry_save(self) -> bool:
        """Re-attempt the save of a completed inspection after a storage failure."""
        if self.current_stage is not InspectionStage.completed:
            return False
        self._complete_and_save()
        return bool(self.save_success)

    # ---------- Answers ----------

    def get_question_by_id(self, question_id: UUID) -> InspectionQuestion | None:
        found = find_question(self.inspection, question_id)
        return found[1] if found is not None else None

    def update_question_answer(self, question: InspectionQuestion, answer: Answer) -> bool:
        """Answer a question of the CURRENT item only.

        A question that belongs to another item is not found and nothing
        changes (returns False). Photos already attached survive an answer
        that carries none.
        """
        index = self.current_item_index
        if not 0 <= index < len(self.inspection.items):
            return False

        item = self.inspection.items[index]
        existing = next((q for q in item.questions if q.id == question.id), None)
        if existing is None:
            return False

        if not answer.photos and existing.answer is not None:
            answer = replace(answer, photos=existing.answer.photos)

        self._on_answer_recorded(existing, answer)

        item = replace_question(item, with_answer(existing, answer))
        self.inspection = replace_item(self.inspection, index, item)
        return True

    def _on_answer_recorded(self, question: InspectionQuestion, answer: Answer) -> None:
        """Hook for subclasses, called before the answer is stored."""

    # ---------- Photos (any item) ----------

    def add_photo_to_question(self, question_id: UUID, photo_uri: str) -> Photo | None:
        question = self.get_question_by_id(question_id)
        if question is None:
            return None

        photo = Photo(uri=photo_uri)
        # a photo taken before answering starts a non-conforming answer
        current = question.answer or Answer(is_conform=False)
        answer = replace(current, photos=current.photos + (photo,))
        self._set_answer(question_id, answer)
        return photo

    def remove_photo_from_question(self, question_id: UUID, photo_id: UUID) -> bool:
        question = self.get_question_by_id(question_id)
        if question is None or question.answer is None:
            return False

        photos = tuple(p for p in question.answer.photos if p.id != photo_id)
        if len(photos) == len(question.answer.photos):
            return False

        self._set_answer(question_id, replace(question.answer, photos=photos))
        return True

    def update_photo_with_drawing(self, question_id: UUID, photo_id: UUID, drawing_uri: str) -> bool:
        question = self.get_question_by_id(question_id)
        if question is None or question.answer is None:
            return False

        photos = question.answer.photos
        if not any(p.id == photo_id for p in photos):
            return False

        photos = tuple(p.with_drawing(drawing_uri) if p.id == photo_id else p for p in photos)
        self._set_answer(question_id, replace(question.answer, photos=photos))
        return True

    def _set_answer(self, question_id: UUID, answer: Answer) -> None:
        self.inspection = update_question(self.inspection, question_id, lambda q: with_answer(q, answer))
