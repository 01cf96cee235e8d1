"""Section traversal state machine and completion gate for an assessment."""

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Tuple

from fse_compliance.domain.entities.assessment import Assessment
from fse_compliance.domain.exceptions import InvalidTransitionError, SignaturesRequiredError
from fse_compliance.domain.services.compliance_classifier import ComplianceClassifier
from fse_compliance.domain.services.section_scorer import SectionScorer
from fse_compliance.domain.value_objects.assessment_result import AssessmentResult, SectionScore
from fse_compliance.domain.value_objects.checklist_section import ChecklistSection
from fse_compliance.infrastructure.logging import (
    get_logger,
    log_business_rule_violation,
    log_with_extra,
    log_workflow_transition
)

BACKGROUND_STEP = "background"

# Background is unscored and always first.
WORKFLOW_STEPS: Tuple[str, ...] = (BACKGROUND_STEP,) + tuple(section.value for section in ChecklistSection)

CompletionListener = Callable[[AssessmentResult], None]


class WorkflowState(Enum):
    """Workflow state enumeration."""
    EDITING = "editing"
    AWAITING_SIGNATURES = "awaiting_signatures"
    COMPLETED = "completed"


class WorkflowController:
    """Drives an assessment from editing through signatures to completion."""

    def __init__(
        self,
        model_factory: Callable[[], Assessment] = Assessment,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        """Initialize in Editing(0) with a fresh model."""
        self._model_factory = model_factory
        self._clock = clock
        self._model = model_factory()
        self._state = WorkflowState.EDITING
        self._section_index = 0
        self._result: Optional[AssessmentResult] = None
        self._listeners: List[CompletionListener] = []
        self._logger = get_logger(__name__)

    @property
    def state(self) -> WorkflowState:
        """Get workflow state."""
        return self._state

    @property
    def section_index(self) -> int:
        """Get the index of the current step in WORKFLOW_STEPS."""
        return self._section_index

    @property
    def current_step(self) -> str:
        """Get the key of the current step."""
        return WORKFLOW_STEPS[self._section_index]

    @property
    def last_section_index(self) -> int:
        """Get the index of the final step."""
        return len(WORKFLOW_STEPS) - 1

    @property
    def model(self) -> Assessment:
        """Get the assessment being edited."""
        return self._model

    @property
    def result(self) -> Optional[AssessmentResult]:
        """Get the result, available once completed."""
        return self._result

    @property
    def is_at_first_section(self) -> bool:
        """Check if the current step is the first one."""
        return self._section_index == 0

    @property
    def is_at_last_section(self) -> bool:
        """Check if the current step is the last one."""
        return self._section_index == self.last_section_index

    def add_completion_listener(self, listener: CompletionListener) -> None:
        """Register a callback invoked with the result after a successful finalize."""
        self._listeners.append(listener)

    def next_section(self) -> str:
        """Move to the next step. No-op on the last step."""
        self._require_state("move to the next section", WorkflowState.EDITING)
        if not self.is_at_last_section:
            self._section_index += 1
        return self.current_step

    def previous_section(self) -> str:
        """Move to the previous step. No-op on the first step."""
        self._require_state("move to the previous section", WorkflowState.EDITING)
        if not self.is_at_first_section:
            self._section_index -= 1
        return self.current_step

    def go_to(self, step: str) -> str:
        """Jump directly to a step, as selecting a tab does."""
        self._require_state("change section", WorkflowState.EDITING)
        if step not in WORKFLOW_STEPS:
            raise ValueError(f"Unknown workflow step '{step}'")
        self._section_index = WORKFLOW_STEPS.index(step)
        return self.current_step

    def request_signatures(self) -> None:
        """Leave the last section and start collecting signatures."""
        self._require_state("request signatures", WorkflowState.EDITING)
        if not self.is_at_last_section:
            log_business_rule_violation(
                self._logger,
                "signatures_before_last_section",
                f"Signatures requested from step {self.current_step}",
                assessment_id=str(self._model.id)
            )
            raise InvalidTransitionError("request signatures", f"on step {self.current_step}")

        self._transition("request_signatures", WorkflowState.AWAITING_SIGNATURES)

    def cancel_signatures(self) -> None:
        """Return to the last section without discarding any data."""
        self._require_state("cancel signatures", WorkflowState.AWAITING_SIGNATURES)
        self._section_index = self.last_section_index
        self._transition("cancel_signatures", WorkflowState.EDITING)

    def finalize(self) -> AssessmentResult:
        """Score the assessment, freeze it and notify listeners.

        Raises:
            InvalidTransitionError: If not awaiting signatures
            SignaturesRequiredError: If either signature is missing
        """
        self._require_state("finalize", WorkflowState.AWAITING_SIGNATURES)
        if not self._model.is_ready_to_finalize():
            missing = [party.value for party in self._model.signatures.missing_parties]
            log_business_rule_violation(
                self._logger,
                "finalize_without_signatures",
                "Attempted to finalize without both signatures",
                assessment_id=str(self._model.id),
                missing_signatures=missing
            )
            raise SignaturesRequiredError()

        result = self._compute_result()

        # Nothing below can fail, so a partial completion is never observable.
        self._model.freeze()
        self._result = result
        self._transition("finalize", WorkflowState.COMPLETED)

        log_with_extra(
            self._logger,
            logging.INFO,
            f"Assessment {self._model.id} completed with score {result.total_score}",
            assessment_id=str(self._model.id),
            facility_name=result.background.facility_name,
            total_score=result.total_score,
            stars=result.stars,
            tier=result.tier.value
        )

        self._notify_listeners(result)
        return result

    def reset(self) -> Assessment:
        """Discard the completed assessment and start a fresh one."""
        self._require_state("start a new assessment", WorkflowState.COMPLETED)
        self._model = self._model_factory()
        self._result = None
        self._section_index = 0
        self._transition("reset", WorkflowState.EDITING)
        return self._model

    def preview_section_scores(self) -> Tuple[SectionScore, ...]:
        """Score the current answers without finalizing."""
        return tuple(self._score_section(section) for section in ChecklistSection)

    def _compute_result(self) -> AssessmentResult:
        section_scores = self.preview_section_scores()
        total_score = sum(score.earned for score in section_scores)
        return AssessmentResult(
            assessment_id=self._model.id,
            background=self._model.background,
            section_scores=section_scores,
            signatures=self._model.signatures,
            total_score=total_score,
            rating=ComplianceClassifier.classify(total_score),
            completed_at=self._clock()
        )

    def _score_section(self, section: ChecklistSection) -> SectionScore:
        answers = self._model.section_answers(section)
        return SectionScore(
            section=section,
            earned=SectionScorer.score(section, answers.answers),
            max_score=section.definition.max_score,
            answers=answers.snapshot()
        )

    def _notify_listeners(self, result: AssessmentResult) -> None:
        for listener in self._listeners:
            try:
                listener(result)
            except Exception:
                # Completion stands regardless of side effects.
                self._logger.warning(
                    f"Completion listener failed for assessment {result.assessment_id}",
                    exc_info=True
                )

    def _require_state(self, operation: str, expected: WorkflowState) -> None:
        if self._state != expected:
            log_business_rule_violation(
                self._logger,
                "invalid_workflow_transition",
                f"Cannot {operation} while {self._state.value}",
                assessment_id=str(self._model.id),
                workflow_state=self._state.value
            )
            raise InvalidTransitionError(operation, self._state.value.replace("_", " "))

    def _transition(self, operation: str, target: WorkflowState) -> None:
        previous = self._state
        self._state = target
        log_workflow_transition(
            self._logger,
            operation,
            previous.value,
            target.value,
            assessment_id=str(self._model.id),
            step=self.current_step
        )
