"""Context library endpoints."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from rfi_responder.dependencies import get_context_service
from rfi_responder.schemas.contexts import (
    ContextCreate,
    ContextResponse,
    ScrapeRequest,
    SearchCorpus,
    SimilarityResult,
)
from rfi_responder.services.context_service import ContextService

router = APIRouter()


@router.get(
    "",
    response_model=List[ContextResponse],
    summary="List context entries",
    operation_id="list_contexts",
)
async def list_contexts(
    context_service: Annotated[ContextService, Depends(get_context_service)],
) -> List[ContextResponse]:
    return [ContextResponse.from_model(c) for c in await context_service.list_contexts()]


@router.post(
    "",
    response_model=ContextResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a context entry",
    operation_id="create_context",
)
async def create_context(
    payload: ContextCreate,
    context_service: Annotated[ContextService, Depends(get_context_service)],
) -> ContextResponse:
    """Store an authored entry and index its snippets.

    The response carries an ingestion report; snippet failures do not undo
    the entry.
    """
    context, report = await context_service.execute(
        title=payload.title,
        content=payload.content,
        type=payload.type.value,
        metadata=payload.metadata,
    )
    return ContextResponse.from_model(context, ingestion=report)


@router.post(
    "/upload",
    response_model=ContextResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a context entry from a document",
    operation_id="upload_context_document",
)
async def upload_context_document(
    file: UploadFile = File(..., description="Word, Excel or PDF file"),
    context_service: Annotated[ContextService, Depends(get_context_service)] = None,
) -> ContextResponse:
    context, report = await context_service.create_from_document(file)
    return ContextResponse.from_model(context, ingestion=report)


@router.post(
    "/scrape",
    response_model=ContextResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a context entry from a website",
    operation_id="scrape_context_website",
)
async def scrape_context_website(
    payload: ScrapeRequest,
    context_service: Annotated[ContextService, Depends(get_context_service)],
) -> ContextResponse:
    context, report = await context_service.create_from_url(payload.url)
    return ContextResponse.from_model(context, ingestion=report)


@router.get(
    "/search",
    response_model=List[SimilarityResult],
    summary="Similarity search over context snippets",
    operation_id="search_contexts",
)
async def search_contexts(
    query: Annotated[str, Query(min_length=1)],
    context_service: Annotated[ContextService, Depends(get_context_service)],
    corpus: SearchCorpus = SearchCorpus.BOTH,
    limit: Annotated[int, Query(ge=1, le=50)] = 5,
) -> List[SimilarityResult]:
    return await context_service.search(query, corpus=corpus, limit=limit)


@router.get(
    "/{context_id}",
    response_model=ContextResponse,
    summary="Get a context entry",
    operation_id="get_context",
)
async def get_context(
    context_id: int,
    context_service: Annotated[ContextService, Depends(get_context_service)],
) -> ContextResponse:
    return ContextResponse.from_model(await context_service.get_context(context_id))


@router.delete(
    "/{context_id}",
    summary="Delete a context entry",
    operation_id="delete_context",
)
async def delete_context(
    context_id: int,
    context_service: Annotated[ContextService, Depends(get_context_service)],
):
    """Delete an entry together with all of its embeddings."""
    await context_service.delete_context(context_id)
    return {"message": "Context deleted", "status": "success"}


@router.post(
    "/{context_id}/reindex",
    response_model=ContextResponse,
    summary="Rebuild the embeddings of a context entry",
    operation_id="reindex_context",
)
async def reindex_context(
    context_id: int,
    context_service: Annotated[ContextService, Depends(get_context_service)],
) -> ContextResponse:
    context, report = await context_service.reindex_context(context_id)
    return ContextResponse.from_model(context, ingestion=report)
