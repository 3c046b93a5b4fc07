"""Document intake, lookup and status."""

import base64
from typing import List, Optional, Sequence

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from rfi_responder.core.exceptions import NotFoundError, UploadRejectedError
from rfi_responder.database.models import Document
from rfi_responder.repositories.document_repository import DocumentRepository
from rfi_responder.schemas.documents import DocumentResponse, RejectedUpload, UploadResult
from rfi_responder.schemas.processing import ProcessingStatus
from rfi_responder.services.base_service import BaseService
from rfi_responder.services.intake import validate_upload
from rfi_responder.services.pipeline.dispatcher import PipelineDispatcher
from rfi_responder.services.pipeline.status_store import ProcessingStatusStore

DEFAULT_MIME_TYPE = "application/octet-stream"


class DocumentService(BaseService):
    """Stores uploaded RFI files and hands them to the pipeline."""

    def __init__(
        self,
        session: AsyncSession,
        dispatcher: Optional[PipelineDispatcher],
        status_store: ProcessingStatusStore,
        allowed_mime_types: Sequence[str],
        max_upload_bytes: int,
    ):
        super().__init__(DocumentRepository(session))
        self.dispatcher = dispatcher
        self.status_store = status_store
        self.allowed_mime_types = list(allowed_mime_types)
        self.max_upload_bytes = max_upload_bytes

    def validate(self, files: List[UploadFile]):
        if not files:
            raise UploadRejectedError("No files uploaded")

    async def run(self, files: List[UploadFile]) -> UploadResult:
        return await self.upload(files)

    async def upload(self, files: List[UploadFile]) -> UploadResult:
        """Accept valid files and start one pipeline run per stored document.

        Rejected files are reported individually and never stored.
        """
        result = UploadResult()

        for upload in files:
            filename = upload.filename or "untitled"
            mime_type = upload.content_type or DEFAULT_MIME_TYPE
            content = await upload.read()

            try:
                validate_upload(
                    filename, mime_type, len(content), self.allowed_mime_types, self.max_upload_bytes
                )
            except UploadRejectedError as e:
                self.logger.warning(f"Rejected upload {filename}: {e.message}", extra={"mime_type": mime_type})
                result.rejected.append(RejectedUpload(filename=filename, error=e.message, too_large=e.too_large))
                continue

            document = await self.repository.create_document(
                name=filename,
                mime_type=mime_type,
                content=base64.b64encode(content).decode("ascii"),
            )
            self.status_store.start(document.id)
            if self.dispatcher is not None:
                self.dispatcher.dispatch(document.id, mime_type, content, filename)

            self.logger.info(
                f"Accepted document {document.id} ({filename})",
                extra={"document_id": document.id, "size_bytes": len(content)},
            )
            result.documents.append(DocumentResponse.from_model(document))

        return result

    async def list_documents(self) -> List[Document]:
        return await self.repository.list_documents()

    async def get_document(self, document_id: int) -> Document:
        document = await self.repository.get_by_id(document_id)
        if document is None:
            raise NotFoundError(f"Document {document_id} not found")
        return document

    async def delete_document(self, document_id: int) -> None:
        """Delete a document and, by cascade, its questions."""
        if not await self.repository.delete(document_id):
            raise NotFoundError(f"Document {document_id} not found")
        self.status_store.discard(document_id)
        self.logger.info(f"Deleted document {document_id}")

    async def get_status(self, document_id: int) -> ProcessingStatus:
        """In-memory status, or one derived from the stored document."""
        document = await self.get_document(document_id)
        status = self.status_store.get(document_id)
        if status is not None:
            return status
        return self.status_store.derive_from_document(document)
