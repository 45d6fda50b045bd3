# checklist/services/post_inspection_service.py
from __future__ import annotations

import enum
import logging
from uuid import UUID

from checklist.domain.inspection import (
    Answer,
    Conformity,
    Inspection,
    InspectionItem,
    InspectionQuestion,
    InspectionSummary,
)
from checklist.fsm.inspection_fsm import Position
from checklist.services.inspection_repository import InspectionNotFound, StorageError
from checklist.services.inspection_workflow import InspectionWorkflow

logger = logging.getLogger(__name__)

CONTROL_NOT_FOUND_MESSAGE = "No se encontró la inspección de control"
CONTROL_LOAD_FAILED_MESSAGE = "Error iniciando inspección."


class FindingType(str, enum.Enum):
    REPEATED = "repeated"  # already non-conforming in the control inspection
    POST_INTERVENTION = "post_intervention"  # first found in the delivery check


def derive_post_inspection(control: Inspection) -> tuple[Inspection, dict[UUID, FindingType]]:
    """
    Delivery-check inspection built from a control inspection.

    Same equipment and checklist (item names / question texts), fresh ids
    everywhere, no answers, personnel and horometer left blank. The map marks
    every new question whose control counterpart was a finding.
    """
    findings: dict[UUID, FindingType] = {}
    items: list[InspectionItem] = []

    for control_item in control.items:
        questions: list[InspectionQuestion] = []
        for control_question in control_item.questions:
            question = InspectionQuestion(text=control_question.text)
            if control_question.conformity is Conformity.non_conforming:
                findings[question.id] = FindingType.REPEATED
            questions.append(question)
        items.append(InspectionItem(name=control_item.name, questions=tuple(questions)))

    post = Inspection(
        equipment=control.equipment,
        inspector="",
        supervisor="",
        horometer="",
        items=tuple(items),
        is_completed=False,
    )
    return post, findings


class ControlLoadError(str, enum.Enum):
    NOT_FOUND = "not_found"
    STORAGE = "storage"


class PostInspectionWorkflow(InspectionWorkflow):
    """
    Post-intervention (equipment delivery) inspection.

    Same wizard as a new inspection, but the checklist comes from a control
    inspection instead of a template, and every finding is tagged REPEATED
    or POST_INTERVENTION. Finding types live only as long as this object.
    """

    def reset_inspection(self) -> None:
        """Start over. Once a control is selected, a reset derives a fresh inspection from it."""
        control = getattr(self, "selected_control_inspection", None)
        super().reset_inspection()
        self.selected_control_inspection: Inspection | None = None
        self.control_inspections: list[InspectionSummary] = []
        self.control_load_error: ControlLoadError | None = None
        self._finding_types: dict[UUID, FindingType] = {}
        if control is not None:
            self._start_from_control(control)

    # ---------- Control inspection ----------

    def load_control_inspections(self, search: str = "") -> list[InspectionSummary]:
        """Completed inspections that can serve as control, filtered by equipment/inspector."""
        self.is_loading = True
        try:
            self.control_inspections = self.repository.list_inspections(
                search=search.strip() or None,
                completed_only=True,
            )
        except StorageError as e:
            logger.error("Error loading control inspections: %s", e)
            self.error_message = "Error cargando inspecciones."
            self.control_inspections = []
        finally:
            self.is_loading = False
        return self.control_inspections

    def initialize_post_inspection(self, control_inspection_id: UUID) -> bool:
        """Derive the delivery check from a stored inspection. On failure `control_load_error` says why."""
        self.is_loading = True
        self.control_load_error = None
        try:
            control = self.repository.get_full_inspection(control_inspection_id)
        except InspectionNotFound:
            logger.error("Control inspection %s not found", control_inspection_id)
            self.control_load_error = ControlLoadError.NOT_FOUND
            self.error_message = CONTROL_NOT_FOUND_MESSAGE
            return False
        except StorageError as e:
            logger.error("Error loading control inspection %s: %s", control_inspection_id, e)
            self.control_load_error = ControlLoadError.STORAGE
            self.error_message = CONTROL_LOAD_FAILED_MESSAGE
            return False
        finally:
            self.is_loading = False

        self._start_from_control(control)
        self.error_message = None

        logger.info(
            "Post inspection %s derived from %s (%d repeated findings)",
            self.inspection.id,
            control.id,
            len(self._finding_types),
        )
        return True

    def _start_from_control(self, control: Inspection) -> None:
        self.selected_control_inspection = control
        self.inspection, self._finding_types = derive_post_inspection(control)
        self.equipment_number = ""
        self.position = Position()

    # ---------- Findings ----------

    def was_control_finding(self, question_id: UUID) -> bool:
        return self._finding_types.get(question_id) is FindingType.REPEATED

    def get_finding_type(self, question_id: UUID) -> FindingType | None:
        return self._finding_types.get(question_id)

    @property
    def finding_types(self) -> dict[UUID, FindingType]:
        return dict(self._finding_types)

    # ---------- Overrides ----------

    def _load_checklist_items(self) -> None:
        # items were derived from the control inspection
        pass

    def _update_formatted_equipment(self) -> None:
        # equipment is inherited from the control inspection
        pass

    def _on_answer_recorded(self, question: InspectionQuestion, answer: Answer) -> None:
        if question.id not in self._finding_types and not answer.is_conform:
            self._finding_types[question.id] = FindingType.POST_INTERVENTION
