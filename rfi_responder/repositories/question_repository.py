from typing import Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession

from rfi_responder.database.models import Question
from rfi_responder.repositories.base_repository import BaseRepository
from rfi_responder.schemas.questions import ProcessedQuestion


class QuestionRepository(BaseRepository[Question]):
    """Repository for extracted questions."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Question)

    async def bulk_create(
        self,
        document_id: int,
        questions: Iterable[ProcessedQuestion],
    ) -> List[Question]:
        """Stage validated questions for one document.

        Rows are flushed, not committed; the caller commits together with the
        document status change.
        """
        records = [
            Question(
                document_id=document_id,
                text=question.text,
                type=question.type.value,
                confidence=question.confidence,
                answer=question.answer,
                source_document=question.source_document,
                question_metadata=question.metadata or {},
            )
            for question in questions
        ]
        self.session.add_all(records)
        await self.session.flush()
        return records

    async def get_by_document(self, document_id: int) -> List[Question]:
        return await self.get_all(limit=10_000, filters={"document_id": document_id})

    async def list_all(self) -> List[Question]:
        return await self.get_all(limit=100_000)
