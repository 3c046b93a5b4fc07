from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from rfi_responder.core.exceptions import NotFoundError
from rfi_responder.database.models import Question
from rfi_responder.repositories.document_repository import DocumentRepository
from rfi_responder.repositories.question_repository import QuestionRepository
from rfi_responder.schemas.questions import QuestionUpdate
from rfi_responder.services.base_service import BaseService
from rfi_responder.services.export_service import ExportService


class QuestionService(BaseService):
    """Read and review access to extracted questions."""

    def __init__(self, session: AsyncSession, export_service: ExportService = None):
        super().__init__(QuestionRepository(session))
        self.documents = DocumentRepository(session)
        self.export_service = export_service or ExportService()

    async def run(self) -> List[Question]:
        return await self.list_all()

    async def list_all(self) -> List[Question]:
        return await self.repository.list_all()

    async def list_for_document(self, document_id: int) -> List[Question]:
        if await self.documents.get_by_id(document_id) is None:
            raise NotFoundError(f"Document {document_id} not found")
        return await self.repository.get_by_document(document_id)

    async def update_question(self, question_id: int, update: QuestionUpdate) -> Question:
        """Apply a reviewer's partial edit in place."""
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if "type" in changes:
            changes["type"] = changes["type"].value

        question = await self.repository.update(question_id, **changes)
        if question is None:
            raise NotFoundError(f"Question {question_id} not found")

        self.logger.info(f"Updated question {question_id}", extra={"fields": sorted(changes)})
        return question

    async def export_csv(self) -> str:
        return await self.export_service.execute(await self.list_all())
