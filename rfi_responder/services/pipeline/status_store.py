"""In-memory per-document processing status."""

import time
from collections import OrderedDict
from typing import Callable, Dict, Optional

from rfi_responder.schemas.processing import (
    ERROR_PROGRESS,
    HAPPY_PATH,
    STEP_PROGRESS,
    ProcessingStatus,
    ProcessingStep,
)
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)

UNKNOWN_ERROR = "Unknown error occurred"


class ProcessingStatusStore:
    """Status slots keyed by document id.

    Each pipeline run only writes its own document's slot. Progress never
    decreases on the happy path and the completed-steps list only grows.
    A failure moves the slot to ``error`` with progress pinned to 0.

    Terminal slots (``complete`` or ``error``) are evicted once they are
    older than ``terminal_ttl`` seconds or when more than ``max_terminal``
    of them are held, oldest first. Callers fall back to
    ``derive_from_document`` for evicted documents.
    """

    def __init__(
        self,
        terminal_ttl: float = 3600.0,
        max_terminal: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._statuses: Dict[int, ProcessingStatus] = {}
        # document id -> time the slot became terminal, oldest first
        self._finished: "OrderedDict[int, float]" = OrderedDict()
        self.terminal_ttl = terminal_ttl
        self.max_terminal = max_terminal
        self._clock = clock

    def start(self, document_id: int) -> ProcessingStatus:
        status = ProcessingStatus(
            current_step=ProcessingStep.PREPARATION,
            completed_steps=[],
            progress=STEP_PROGRESS[ProcessingStep.PREPARATION],
        )
        self._statuses[document_id] = status
        self._finished.pop(document_id, None)
        LOGGER.info(f"Document {document_id}: {ProcessingStep.PREPARATION.value}", extra={"progress": 0})
        return status

    def advance(self, document_id: int, step: ProcessingStep) -> ProcessingStatus:
        """Move a document forward to ``step``.

        Raises:
            ValueError: If ``step`` is not a happy-path step or lies behind
                the current step
        """
        step = ProcessingStep(step)
        if step not in STEP_PROGRESS:
            raise ValueError(f"Cannot advance to {step.value}; use fail() for errors")

        current = self._statuses.get(document_id) or self.start(document_id)
        if current.is_terminal:
            LOGGER.warning(
                f"Ignoring transition of document {document_id} to {step.value} "
                f"after terminal step {current.current_step.value}"
            )
            return current

        if HAPPY_PATH.index(step) < HAPPY_PATH.index(current.current_step):
            raise ValueError(
                f"Document {document_id} cannot move back from {current.current_step.value} to {step.value}"
            )

        status = ProcessingStatus(
            current_step=step,
            completed_steps=HAPPY_PATH[: HAPPY_PATH.index(step)],
            progress=max(current.progress, STEP_PROGRESS[step]),
        )
        self._statuses[document_id] = status
        LOGGER.info(f"Document {document_id}: {step.value}", extra={"progress": status.progress})
        if status.is_terminal:
            self._mark_finished(document_id)
        return status

    def fail(self, document_id: int, message: str) -> ProcessingStatus:
        current = self._statuses.get(document_id)
        status = ProcessingStatus(
            current_step=ProcessingStep.ERROR,
            completed_steps=list(current.completed_steps) if current else [],
            progress=ERROR_PROGRESS,
            error=message or UNKNOWN_ERROR,
        )
        self._statuses[document_id] = status
        LOGGER.info(f"Document {document_id}: error", extra={"error": status.error})
        self._mark_finished(document_id)
        return status

    def get(self, document_id: int) -> Optional[ProcessingStatus]:
        self.evict_expired()
        return self._statuses.get(document_id)

    def discard(self, document_id: int) -> None:
        self._statuses.pop(document_id, None)
        self._finished.pop(document_id, None)

    def _mark_finished(self, document_id: int) -> None:
        self._finished[document_id] = self._clock()
        self._finished.move_to_end(document_id)
        self.evict_expired()

    def evict_expired(self) -> int:
        """Drop terminal slots past their TTL or beyond the size bound.

        Returns:
            Number of evicted slots
        """
        now = self._clock()
        evicted = 0
        while self._finished:
            document_id, finished_at = next(iter(self._finished.items()))
            if now - finished_at <= self.terminal_ttl and len(self._finished) <= self.max_terminal:
                break
            self._finished.popitem(last=False)
            self._statuses.pop(document_id, None)
            evicted += 1

        if evicted:
            LOGGER.debug(f"Evicted {evicted} finished status slots", extra={"remaining": len(self._statuses)})
        return evicted

    def __contains__(self, document_id: int) -> bool:
        return document_id in self._statuses

    def __len__(self) -> int:
        return len(self._statuses)

    @staticmethod
    def derive_from_document(document) -> ProcessingStatus:
        """Best-effort status for a document with no in-memory slot."""
        if document.status == "processed":
            return ProcessingStatus(
                current_step=ProcessingStep.COMPLETE,
                completed_steps=HAPPY_PATH[:-1],
                progress=STEP_PROGRESS[ProcessingStep.COMPLETE],
            )
        if document.status == "error":
            metadata = document.document_metadata or {}
            return ProcessingStatus(
                current_step=ProcessingStep.ERROR,
                completed_steps=[],
                progress=ERROR_PROGRESS,
                error=metadata.get("error") or UNKNOWN_ERROR,
            )
        return ProcessingStatus(
            current_step=ProcessingStep.PREPARATION,
            completed_steps=[],
            progress=STEP_PROGRESS[ProcessingStep.PREPARATION],
        )
