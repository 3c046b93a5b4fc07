"""Per-document processing pipeline.

preparation -> extraction -> questions -> analysis -> complete, with a
terminal error state reachable from every step. Each transition is written
to the status store before the step's work starts so pollers can follow
long-running documents. Questions are written in the same transaction that
flips the document to ``processed``.
"""

from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rfi_responder.core.exceptions import AppError, OracleAuthError, OracleQuotaError
from rfi_responder.repositories.document_repository import DocumentRepository
from rfi_responder.repositories.question_repository import QuestionRepository
from rfi_responder.schemas.processing import ProcessingStatus, ProcessingStep
from rfi_responder.services.chunking.text_chunker import TextChunker
from rfi_responder.services.extraction.content_extractor import ContentExtractor
from rfi_responder.services.extraction.models import TextUnit
from rfi_responder.services.pipeline.status_store import ProcessingStatusStore
from rfi_responder.services.questions.base_classifier import QuestionClassifier
from rfi_responder.services.questions.runner import ExtractionOutcome, extract_from_chunks
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)

AUTH_ERROR_MESSAGE = "LLM provider authentication failed. Please check the API key configuration."
QUOTA_ERROR_MESSAGE = "LLM provider quota exceeded. Please check your usage limits."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def user_message(error: Exception) -> str:
    """Human readable failure reason stored on the document."""
    if isinstance(error, OracleAuthError):
        return AUTH_ERROR_MESSAGE
    if isinstance(error, OracleQuotaError):
        return QUOTA_ERROR_MESSAGE
    if isinstance(error, AppError):
        return error.message
    return str(error) or UNEXPECTED_ERROR_MESSAGE


class DocumentPipeline:
    """Runs extraction, chunking and question extraction for one document."""

    def __init__(
        self,
        extractor: ContentExtractor,
        chunker: TextChunker,
        classifier: QuestionClassifier,
        status_store: ProcessingStatusStore,
        session_factory: Callable[[], AsyncSession],
        chunk_concurrency: int = 4,
    ):
        """Initialize the pipeline.

        Args:
            extractor: Content extractor
            chunker: Text chunker
            classifier: Question classifier applied to every chunk
            status_store: Per-document status slots
            session_factory: Creates a database session per persistence step
            chunk_concurrency: Chunks classified at the same time
        """
        self.extractor = extractor
        self.chunker = chunker
        self.classifier = classifier
        self.status_store = status_store
        self.session_factory = session_factory
        self.chunk_concurrency = chunk_concurrency

    async def run(
        self,
        document_id: int,
        mime_type: str,
        content: bytes,
        filename: str,
    ) -> Optional[ProcessingStatus]:
        """Process one document to completion or failure.

        Never raises. Returns the final status, or None when the document was
        deleted while it was being processed.
        """
        self.status_store.start(document_id)

        try:
            self.status_store.advance(document_id, ProcessingStep.EXTRACTION)
            units = await self.extractor.extract(mime_type, content, filename)
            chunks = self.chunker.chunk_units(units, document_id=document_id)
            LOGGER.info(
                f"Document {document_id} split into {len(chunks)} chunks",
                extra=self.chunker.get_chunk_statistics(chunks),
            )

            self.status_store.advance(document_id, ProcessingStep.QUESTIONS)
            outcome = await extract_from_chunks(self.classifier, chunks, self.chunk_concurrency)

            self.status_store.advance(document_id, ProcessingStep.ANALYSIS)
            persisted = await self._persist(document_id, outcome, units, len(chunks))
            if not persisted:
                self.status_store.discard(document_id)
                return None

            status = self.status_store.advance(document_id, ProcessingStep.COMPLETE)
            LOGGER.info(
                f"Document {document_id} complete with {len(outcome.questions)} questions",
                extra={"failed_chunks": outcome.failed_chunks},
            )
            return status

        except Exception as e:
            message = user_message(e)
            LOGGER.error(
                f"Failed to process document {document_id}: {message}",
                exc_info=True,
                extra={"document_id": document_id, "error_type": type(e).__name__},
            )
            status = self.status_store.fail(document_id, message)
            await self._record_failure(document_id, message)
            return status

    async def _persist(
        self,
        document_id: int,
        outcome: ExtractionOutcome,
        units: List[TextUnit],
        chunk_count: int,
    ) -> bool:
        skipped_sheets = sorted(
            {sheet for unit in units for sheet in unit.metadata.get("skipped_sheets", [])}
        )
        metadata = {
            "question_count": len(outcome.questions),
            "unit_count": len(units),
            "chunk_count": chunk_count,
            "failed_chunks": outcome.failed_chunks,
        }
        if skipped_sheets:
            metadata["skipped_sheets"] = skipped_sheets

        async with self.session_factory() as session:
            document_repo = DocumentRepository(session)
            if await document_repo.get_by_id(document_id) is None:
                LOGGER.warning(f"Document {document_id} was deleted during processing, dropping results")
                return False

            try:
                await QuestionRepository(session).bulk_create(document_id, outcome.questions)
                await document_repo.mark_processed(document_id, commit=False, metadata=metadata)
                await session.commit()
            except IntegrityError:
                await session.rollback()
                LOGGER.warning(f"Document {document_id} was deleted before its questions were stored")
                return False

        return True

    async def _record_failure(self, document_id: int, message: str) -> None:
        try:
            async with self.session_factory() as session:
                document = await DocumentRepository(session).mark_error(document_id, message)
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Could not store failure of document {document_id}: {e}",
                exc_info=True,
            )
            return

        if document is None:
            LOGGER.warning(f"Document {document_id} no longer exists, failure not stored")
