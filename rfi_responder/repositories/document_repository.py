from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rfi_responder.database.models import Document
from rfi_responder.repositories.base_repository import BaseRepository
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


class DocumentRepository(BaseRepository[Document]):
    """Repository for managing Document records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Document)

    async def create_document(
        self,
        name: str,
        mime_type: str,
        content: str,
        status: str = "processing",
    ) -> Document:
        """Create a new document record.

        Args:
            name: Display name (original filename)
            mime_type: Declared content type
            content: Base64 encoded payload
            status: Initial status
        """
        return await self.create(
            name=name,
            mime_type=mime_type,
            content=content,
            status=status,
            document_metadata={},
        )

    async def list_documents(self, skip: int = 0, limit: int = 500) -> List[Document]:
        return await self.get_all(skip=skip, limit=limit)

    async def mark_processed(
        self,
        document_id: int,
        commit: bool = True,
        metadata: Optional[dict] = None,
    ) -> Optional[Document]:
        """Flip a document to ``processed``, merging ``metadata`` into its metadata.

        Returns:
            The document, or None if it no longer exists
        """
        document = await self.get_by_id(document_id)
        if document is None:
            return None

        merged = dict(document.document_metadata or {})
        merged.update(metadata or {})
        merged.pop("error", None)
        return await self.update(document_id, commit=commit, status="processed", document_metadata=merged)

    async def mark_error(self, document_id: int, message: str) -> Optional[Document]:
        """Flip a document to ``error`` and keep the failure reason in its metadata."""
        document = await self.get_by_id(document_id)
        if document is None:
            return None

        metadata = dict(document.document_metadata or {})
        metadata["error"] = message
        return await self.update(document_id, status="error", document_metadata=metadata)
