"""Document upload and management endpoints."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, File, UploadFile, status

from rfi_responder.core.exceptions import UploadRejectedError
from rfi_responder.dependencies import get_document_service
from rfi_responder.schemas.documents import DocumentResponse, UploadResult
from rfi_responder.services.document_service import DocumentService
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "/upload",
    response_model=UploadResult,
    status_code=status.HTTP_201_CREATED,
    summary="Upload one or more RFI documents",
    operation_id="upload_documents",
)
async def upload_documents(
    files: List[UploadFile] = File(..., description="Word, Excel or PDF files"),
    document_service: Annotated[DocumentService, Depends(get_document_service)] = None,
) -> UploadResult:
    """Store the accepted files and start processing them in the background.

    Returns immediately; poll ``/processing/status`` for progress. Files that
    fail intake are listed under ``rejected``. If no file is accepted the
    request fails with 400, or 413 when every file was too large.
    """
    result = await document_service.execute(files)

    if not result.documents:
        too_large = bool(result.rejected) and all(r.too_large for r in result.rejected)
        raise UploadRejectedError(
            "; ".join(r.error for r in result.rejected) or "No files uploaded",
            too_large=too_large,
        )

    return result


@router.get(
    "",
    response_model=List[DocumentResponse],
    summary="List documents",
    operation_id="list_documents",
)
async def list_documents(
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> List[DocumentResponse]:
    documents = await document_service.list_documents()
    return [DocumentResponse.from_model(d) for d in documents]


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    summary="Get document details",
    operation_id="get_document",
)
async def get_document(
    document_id: int,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> DocumentResponse:
    """Retrieve document metadata by ID."""
    return DocumentResponse.from_model(await document_service.get_document(document_id))


@router.delete(
    "/{document_id}",
    summary="Delete document",
    operation_id="delete_document",
)
async def delete_document(
    document_id: int,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    """Delete a document and its questions."""
    await document_service.delete_document(document_id)
    return {"message": "Document deleted", "status": "success"}
