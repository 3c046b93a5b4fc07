from typing import Annotated

from fastapi import APIRouter, Depends, Query

from rfi_responder.dependencies import get_document_service
from rfi_responder.schemas.processing import ProcessingStatus
from rfi_responder.services.document_service import DocumentService

router = APIRouter()


@router.get(
    "/status",
    response_model=ProcessingStatus,
    summary="Get processing status of a document",
    operation_id="get_processing_status",
)
async def get_processing_status(
    document_id: Annotated[int, Query(alias="documentId")],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> ProcessingStatus:
    """Live pipeline status, or one derived from the stored document status."""
    return await document_service.get_status(document_id)
