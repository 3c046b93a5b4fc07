"""Question retrieval, review and export endpoints."""

from typing import Annotated, List

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from rfi_responder.dependencies import get_question_service
from rfi_responder.schemas.questions import QuestionResponse, QuestionUpdate
from rfi_responder.services.question_service import QuestionService

router = APIRouter()

EXPORT_FILENAME = "rfi-questions.csv"


@router.get(
    "",
    response_model=List[QuestionResponse],
    summary="List questions of all documents",
    operation_id="list_questions",
)
async def list_questions(
    question_service: Annotated[QuestionService, Depends(get_question_service)],
) -> List[QuestionResponse]:
    return [QuestionResponse.from_model(q) for q in await question_service.execute()]


# Declared before /{document_id} so "export" is not parsed as an id
@router.get(
    "/export",
    summary="Export all questions as CSV",
    operation_id="export_questions",
    response_class=Response,
)
async def export_questions(
    question_service: Annotated[QuestionService, Depends(get_question_service)],
) -> Response:
    csv_text = await question_service.export_csv()
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.get(
    "/{document_id}",
    response_model=List[QuestionResponse],
    summary="List questions of one document",
    operation_id="list_document_questions",
)
async def list_document_questions(
    document_id: int,
    question_service: Annotated[QuestionService, Depends(get_question_service)],
) -> List[QuestionResponse]:
    questions = await question_service.list_for_document(document_id)
    return [QuestionResponse.from_model(q) for q in questions]


@router.patch(
    "/item/{question_id}",
    response_model=QuestionResponse,
    summary="Edit a question in place",
    operation_id="update_question",
)
async def update_question(
    question_id: int,
    update: QuestionUpdate,
    question_service: Annotated[QuestionService, Depends(get_question_service)],
) -> QuestionResponse:
    """Apply a reviewer's edit (text, answer, type or confidence)."""
    return QuestionResponse.from_model(await question_service.update_question(question_id, update))
