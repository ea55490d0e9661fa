# src/app/services/modification_workflow.py
"""
Suggest / approve / reject workflow for AI recipe edits.

One instance belongs to one editing session:

    IDLE -> VALIDATING -> GENERATING -> SUGGESTED -> IDLE
              |              |
              +-> IDLE       +-> IDLE (error or missing preferences)

A generation call that is in flight is never cancelled. If the suggestion
is rejected or a new one is requested meanwhile, the late result still
overwrites the state when it arrives.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from starlette.concurrency import run_in_threadpool

from src.app.domain.content import format_content, validate_text_for_ai
from src.app.domain.errors import (
    ExternalErrorKind,
    ExternalServiceError,
    PreferencesRequiredError,
    ValidationError,
)
from src.app.domain.models import Recipe, UpdateRecipeCommand
from src.app.services.ai_modification_service import AiModificationOrchestrator
from src.app.services.recipe_service import RecipeMutationService

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "AI modification failed."
UNEXPECTED_FAILURE_MESSAGE = "An unexpected error occurred."

_KIND_MESSAGES = {
    ExternalErrorKind.AUTHENTICATION: "AI service authentication failed.",
    ExternalErrorKind.RATE_LIMIT: "AI service is busy. Try again in a moment.",
    ExternalErrorKind.NETWORK: "Could not reach the AI service. Check your connection and try again.",
}


class WorkflowState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    GENERATING = "GENERATING"
    SUGGESTED = "SUGGESTED"


@dataclass(frozen=True)
class AiModificationState:
    state: WorkflowState = WorkflowState.IDLE
    original_text: str = ""
    suggestion: Optional[str] = None
    error: Optional[str] = None
    missing_preferences: bool = False

    @property
    def is_loading(self) -> bool:
        return self.state == WorkflowState.GENERATING


class ModificationWorkflow:
    def __init__(self, orchestrator: AiModificationOrchestrator, user_id: str):
        self._orchestrator = orchestrator
        self._user_id = user_id
        self._state = AiModificationState()

    @property
    def state(self) -> AiModificationState:
        return self._state

    def reset_ai_state(self, original_text: str) -> None:
        self._state = AiModificationState(original_text=original_text)

    async def generate_suggestion(self, recipe_text: str) -> None:
        self._state = replace(self._state, state=WorkflowState.VALIDATING)

        validation_error = validate_text_for_ai(recipe_text)
        if validation_error:
            self._to_idle(error=validation_error)
            return

        self._state = replace(
            self._state,
            state=WorkflowState.GENERATING,
            suggestion=None,
            error=None,
            missing_preferences=False,
        )

        try:
            suggestion = await run_in_threadpool(self._orchestrator.modify, recipe_text, self._user_id)
        except PreferencesRequiredError:
            self._to_idle(missing_preferences=True)
            return
        except ValidationError as error:
            self._to_idle(error=str(error))
            return
        except ExternalServiceError as error:
            self._to_idle(error=_KIND_MESSAGES.get(error.kind, GENERIC_FAILURE_MESSAGE))
            return
        except Exception:
            logger.exception("Unexpected failure generating suggestion for user=%s", self._user_id)
            self._to_idle(error=UNEXPECTED_FAILURE_MESSAGE)
            return

        self._state = replace(
            self._state,
            state=WorkflowState.SUGGESTED,
            suggestion=suggestion,
            error=None,
            missing_preferences=False,
        )

    def approve_suggestion(self) -> Optional[str]:
        return self._state.suggestion

    def reject_suggestion(self) -> None:
        self._to_idle()

    def apply_suggestion(
        self,
        recipe_id: int,
        mutation_service: RecipeMutationService,
    ) -> Optional[Recipe]:
        """Persist the approved suggestion as the recipe's new content."""
        suggestion = self.approve_suggestion()
        if suggestion is None:
            return None

        recipe = mutation_service.update_recipe(
            recipe_id,
            self._user_id,
            UpdateRecipeCommand(content=format_content(suggestion)),
            ai_model=self._orchestrator.model_name,
        )
        self.reset_ai_state(suggestion)
        return recipe

    def _to_idle(self, error: Optional[str] = None, missing_preferences: bool = False) -> None:
        self._state = AiModificationState(
            original_text=self._state.original_text,
            error=error,
            missing_preferences=missing_preferences,
        )
