"""Centralized dependency injection for the FastAPI application.

Request scoped services get a fresh database session; long-lived objects
(status store, dispatcher, embedding client, content extractor) are created
once in the application lifespan and read from ``app.state``.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rfi_responder.config import settings
from rfi_responder.core.embedding_client import EmbeddingClient
from rfi_responder.database.base import get_async_session
from rfi_responder.repositories.embedding_repository import (
    AnswerEmbeddingRepository,
    QuestionEmbeddingRepository,
)
from rfi_responder.services.context_service import ContextService
from rfi_responder.services.document_service import DocumentService
from rfi_responder.services.embeddings.index_service import EmbeddingIndexService
from rfi_responder.services.extraction.content_extractor import ContentExtractor
from rfi_responder.services.pipeline.dispatcher import PipelineDispatcher
from rfi_responder.services.pipeline.status_store import ProcessingStatusStore
from rfi_responder.services.question_service import QuestionService
from rfi_responder.services.web_scraper import WebScraper


async def get_status_store(request: Request) -> ProcessingStatusStore:
    return request.app.state.status_store


async def get_dispatcher(request: Request) -> PipelineDispatcher:
    return request.app.state.dispatcher


async def get_embedding_client(request: Request) -> EmbeddingClient:
    return request.app.state.embedding_client


async def get_content_extractor(request: Request) -> ContentExtractor:
    return request.app.state.extractor


async def get_web_scraper() -> WebScraper:
    """Get web scraper instance.

    Returns:
        WebScraper: Scraper configured from processing settings
    """
    return WebScraper(
        timeout=settings.processing.scrape_timeout,
        min_snippet_length=settings.processing.min_scraped_snippet_length,
    )


async def get_document_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
    dispatcher: Annotated[PipelineDispatcher, Depends(get_dispatcher)],
    status_store: Annotated[ProcessingStatusStore, Depends(get_status_store)],
) -> DocumentService:
    """Get document service instance.

    Args:
        db_session: Database session from dependency injection
        dispatcher: Background pipeline dispatcher
        status_store: Per-document processing status

    Returns:
        DocumentService: Service for uploads, lookups and status
    """
    return DocumentService(
        db_session,
        dispatcher=dispatcher,
        status_store=status_store,
        allowed_mime_types=settings.processing.allowed_mime_types,
        max_upload_bytes=settings.processing.max_upload_bytes,
    )


async def get_question_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> QuestionService:
    return QuestionService(db_session)


async def get_embedding_index_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
    embedding_client: Annotated[EmbeddingClient, Depends(get_embedding_client)],
) -> EmbeddingIndexService:
    return EmbeddingIndexService(
        embedding_client,
        QuestionEmbeddingRepository(db_session),
        AnswerEmbeddingRepository(db_session),
    )


async def get_context_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
    index_service: Annotated[EmbeddingIndexService, Depends(get_embedding_index_service)],
    extractor: Annotated[ContentExtractor, Depends(get_content_extractor)],
    scraper: Annotated[WebScraper, Depends(get_web_scraper)],
) -> ContextService:
    """Get context service instance.

    Returns:
        ContextService: Service for the context library and similarity search
    """
    return ContextService(
        db_session,
        index_service=index_service,
        extractor=extractor,
        scraper=scraper,
        allowed_mime_types=settings.processing.allowed_mime_types,
        max_upload_bytes=settings.processing.max_upload_bytes,
    )
