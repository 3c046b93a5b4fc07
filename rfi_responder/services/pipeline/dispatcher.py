import asyncio
from typing import Dict, Optional

from rfi_responder.services.pipeline.orchestrator import DocumentPipeline
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


class PipelineDispatcher:
    """Starts pipeline runs as background tasks, at most one per document.

    Strong references to in-flight tasks are kept until they finish so the
    event loop cannot garbage collect them.
    """

    def __init__(self, pipeline: DocumentPipeline):
        self.pipeline = pipeline
        self._tasks: Dict[int, asyncio.Task] = {}

    def dispatch(self, document_id: int, mime_type: str, content: bytes, filename: str) -> bool:
        """Schedule a run. Returns False if one is already running for the id."""
        existing = self._tasks.get(document_id)
        if existing is not None and not existing.done():
            LOGGER.warning(f"Pipeline already running for document {document_id}, ignoring dispatch")
            return False

        task = asyncio.create_task(
            self.pipeline.run(document_id, mime_type, content, filename),
            name=f"pipeline-{document_id}",
        )
        self._tasks[document_id] = task
        task.add_done_callback(lambda t: self._on_done(document_id, t))
        LOGGER.info(f"Dispatched pipeline for document {document_id}", extra={"mime_type": mime_type})
        return True

    def is_running(self, document_id: int) -> bool:
        task = self._tasks.get(document_id)
        return task is not None and not task.done()

    @property
    def in_flight(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight runs, cancelling whatever is left after ``timeout``."""
        tasks = [task for task in self._tasks.values() if not task.done()]
        if not tasks:
            return

        LOGGER.info(f"Waiting for {len(tasks)} pipeline runs")
        _, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            LOGGER.warning(f"Cancelled {len(pending)} unfinished pipeline runs")

    def _on_done(self, document_id: int, task: asyncio.Task) -> None:
        if self._tasks.get(document_id) is task:
            del self._tasks[document_id]
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            LOGGER.error(f"Pipeline task for document {document_id} crashed: {error}", exc_info=error)
