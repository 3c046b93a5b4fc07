"""Context library: authoring, document and website ingestion, search."""

from typing import List, Optional, Sequence, Tuple

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from rfi_responder.core.exceptions import ExtractionError, NotFoundError
from rfi_responder.database.models import ContextEntry
from rfi_responder.repositories.context_repository import ContextRepository
from rfi_responder.schemas.contexts import ContextType, IngestionReport, SearchCorpus, SimilarityResult
from rfi_responder.services.base_service import BaseService
from rfi_responder.services.embeddings.index_service import EmbeddingIndexService
from rfi_responder.services.extraction.content_extractor import ContentExtractor
from rfi_responder.services.intake import validate_upload
from rfi_responder.services.web_scraper import WebScraper

DEFAULT_MIME_TYPE = "application/octet-stream"


class ContextService(BaseService):
    """Creates context entries and keeps their embeddings in sync.

    All three sources (authored text, uploaded document, scraped website)
    end in ``create_context``. The entry is committed before embedding, and
    embedding failures are reported, not rolled back; ``reindex_context``
    retries them.
    """

    def __init__(
        self,
        session: AsyncSession,
        index_service: EmbeddingIndexService,
        extractor: ContentExtractor,
        scraper: WebScraper,
        allowed_mime_types: Sequence[str],
        max_upload_bytes: int,
    ):
        super().__init__(ContextRepository(session))
        self.index_service = index_service
        self.extractor = extractor
        self.scraper = scraper
        self.allowed_mime_types = list(allowed_mime_types)
        self.max_upload_bytes = max_upload_bytes

    async def run(
        self,
        title: str,
        content: str,
        type: str = ContextType.KNOWLEDGE_BASE.value,
        metadata: Optional[dict] = None,
    ) -> Tuple[ContextEntry, IngestionReport]:
        return await self.create_context(title, content, type, metadata)

    async def create_context(
        self,
        title: str,
        content: str,
        type: str = ContextType.KNOWLEDGE_BASE.value,
        metadata: Optional[dict] = None,
    ) -> Tuple[ContextEntry, IngestionReport]:
        context_type = ContextType(type).value
        context = await self.repository.create_context(
            title=title,
            content=content,
            type=context_type,
            metadata=metadata,
        )
        self.logger.info(f"Created context {context.id} ({context_type}): {title}")

        report = await self.index_service.ingest_context(context.id, content)
        return context, report

    async def create_from_document(self, upload: UploadFile) -> Tuple[ContextEntry, IngestionReport]:
        """Extract an uploaded document and store its text as a context entry."""
        filename = upload.filename or "untitled"
        mime_type = upload.content_type or DEFAULT_MIME_TYPE
        content = await upload.read()

        validate_upload(filename, mime_type, len(content), self.allowed_mime_types, self.max_upload_bytes)

        units = await self.extractor.extract(mime_type, content, filename)
        text = "\n\n".join(unit.text for unit in units)

        return await self.create_context(
            title=filename,
            content=text,
            type=ContextType.DOCUMENT.value,
            metadata={"filename": filename, "mime_type": mime_type, "units": len(units)},
        )

    async def create_from_url(self, url: str) -> Tuple[ContextEntry, IngestionReport]:
        page = await self.scraper.scrape(url)
        if not page.content.strip():
            raise ExtractionError(f"No readable content found at {url}")

        return await self.create_context(
            title=page.title,
            content=page.content,
            type=ContextType.WEBSITE.value,
            metadata={"url": url},
        )

    async def list_contexts(self) -> List[ContextEntry]:
        return await self.repository.list_contexts()

    async def get_context(self, context_id: int) -> ContextEntry:
        context = await self.repository.get_by_id(context_id)
        if context is None:
            raise NotFoundError(f"Context {context_id} not found")
        return context

    async def delete_context(self, context_id: int) -> None:
        """Delete an entry and every embedding it owns."""
        await self.get_context(context_id)
        await self.index_service.delete_for_context(context_id)
        await self.repository.delete(context_id)
        self.logger.info(f"Deleted context {context_id}")

    async def reindex_context(self, context_id: int) -> Tuple[ContextEntry, IngestionReport]:
        """Rebuild the embeddings of one entry from its stored content."""
        context = await self.get_context(context_id)
        await self.index_service.delete_for_context(context_id)
        report = await self.index_service.ingest_context(context_id, context.content)
        return context, report

    async def search(
        self,
        query: str,
        corpus: SearchCorpus = SearchCorpus.BOTH,
        limit: int = 5,
    ) -> List[SimilarityResult]:
        return await self.index_service.search(query, corpus=corpus, limit=limit)
