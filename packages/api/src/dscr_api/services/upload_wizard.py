"""Upload wizard state machine.

select file -> categorize -> submit -> done, with a failed submit returning to
categorization. The disposition rules run on the categorizing -> submitting
edge, so a mutation only exists once the choice has been validated.
"""

import enum
import logging
from collections.abc import Sequence
from typing import Any

from ..schemas.document import (
    DocumentMutation,
    ExistingDocumentChoice,
    FileMeta,
    MissingRequirementChoice,
    NewCategoryChoice,
)
from ..schemas.requirements import RequirementDefinition
from .disposition import DispositionError, resolve_disposition

logger = logging.getLogger(__name__)


class UploadStage(str, enum.Enum):
    SELECTING_FILE = "selecting_file"
    CATEGORIZING = "categorizing"
    SUBMITTING = "submitting"
    DONE = "done"
    FAILED = "failed"

    @classmethod
    def terminal_stages(cls) -> frozenset["UploadStage"]:
        return frozenset({cls.DONE})

    @classmethod
    def valid_transitions(cls) -> dict["UploadStage", frozenset["UploadStage"]]:
        """Allowed stage transitions. FAILED only ever goes back to CATEGORIZING."""
        return {
            cls.SELECTING_FILE: frozenset({cls.CATEGORIZING}),
            cls.CATEGORIZING: frozenset({cls.SUBMITTING}),
            cls.SUBMITTING: frozenset({cls.DONE, cls.FAILED}),
            cls.FAILED: frozenset({cls.CATEGORIZING}),
            cls.DONE: frozenset(),
        }


class InvalidTransitionError(ValueError):
    """Raised when an upload wizard transition is not allowed."""

    pass


class UploadWizard:
    """Tracks one upload from file selection to a persisted document."""

    def __init__(self) -> None:
        self.stage = UploadStage.SELECTING_FILE
        self.file: FileMeta | None = None
        self.mutation: DocumentMutation | None = None
        self.error: str | None = None

    def _transition(self, target: UploadStage) -> None:
        allowed = UploadStage.valid_transitions()[self.stage]
        if target not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition from '{self.stage.value}' to '{target.value}'. "
                f"Allowed: {sorted(s.value for s in allowed) if allowed else 'none (terminal stage)'}."
            )
        logger.debug("Upload wizard: %s -> %s", self.stage.value, target.value)
        self.stage = target

    def select_file(self, file: FileMeta) -> None:
        self._transition(UploadStage.CATEGORIZING)
        self.file = file
        self.error = None

    def submit(
        self,
        choice: MissingRequirementChoice | ExistingDocumentChoice | NewCategoryChoice,
        *,
        missing: Sequence[RequirementDefinition],
        documents: Sequence[Any],
    ) -> DocumentMutation:
        """Validate the choice and move to SUBMITTING.

        On a ``DispositionError`` the wizard stays in CATEGORIZING with
        ``error`` set, and the error propagates.
        """
        if self.stage is not UploadStage.CATEGORIZING:
            raise InvalidTransitionError(
                f"Cannot submit from '{self.stage.value}'; the wizard must be categorizing."
            )
        try:
            mutation = resolve_disposition(
                choice, self.file, missing=missing, documents=documents
            )
        except DispositionError as exc:
            self.error = str(exc)
            raise
        self._transition(UploadStage.SUBMITTING)
        self.mutation = mutation
        self.error = None
        return mutation

    def complete(self) -> None:
        self._transition(UploadStage.DONE)

    def fail(self, reason: str) -> None:
        self._transition(UploadStage.FAILED)
        self.error = reason

    def recategorize(self) -> None:
        """Return from FAILED to CATEGORIZING; the previous mutation is discarded."""
        self._transition(UploadStage.CATEGORIZING)
        self.mutation = None

    @property
    def is_finished(self) -> bool:
        return self.stage in UploadStage.terminal_stages()
