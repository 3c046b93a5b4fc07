from typing import List, Tuple, Type, Union

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rfi_responder.database.models import AnswerEmbedding, QuestionEmbedding
from rfi_responder.repositories.base_repository import BaseRepository

EmbeddingModel = Union[QuestionEmbedding, AnswerEmbedding]


class SnippetEmbeddingRepository(BaseRepository[EmbeddingModel]):
    """Shared pgvector operations for the question and answer snippet tables.

    ``text_field`` names the column that holds the snippet text.
    """

    text_field: str = ""

    def __init__(self, session: AsyncSession, model: Type[EmbeddingModel]):
        super().__init__(session, model)

    async def add_embedding(
        self,
        context_id: int,
        text: str,
        embedding: List[float],
        commit: bool = True,
    ) -> EmbeddingModel:
        """Persist one embedded snippet."""
        return await self.create(
            commit=commit,
            context_id=context_id,
            embedding=embedding,
            **{self.text_field: text},
        )

    async def semantic_search(
        self,
        embedding: List[float],
        top_k: int = 5,
    ) -> List[Tuple[str, float]]:
        """Rank snippets by cosine similarity to ``embedding``.

        Returns:
            ``(snippet_text, similarity)`` pairs, most similar first
        """
        distance_expr = self.model.embedding.cosine_distance(embedding)
        text_column = getattr(self.model, self.text_field)

        query = (
            select(text_column, distance_expr.label("distance"))
            .order_by(distance_expr)
            .limit(top_k)
        )

        result = await self.session.execute(query)
        return [(row[0], 1.0 - float(row[1])) for row in result.all()]

    async def delete_by_context(self, context_id: int, commit: bool = True) -> int:
        """Delete every snippet owned by one context entry.

        Returns:
            Number of deleted rows
        """
        result = await self.session.execute(
            delete(self.model).where(self.model.context_id == context_id)
        )
        if commit:
            await self.session.commit()
        return result.rowcount or 0


class QuestionEmbeddingRepository(SnippetEmbeddingRepository):
    """Question-like snippets (text ending in ``?``)."""

    text_field = "question_text"

    def __init__(self, session: AsyncSession):
        super().__init__(session, QuestionEmbedding)


class AnswerEmbeddingRepository(SnippetEmbeddingRepository):
    """Statement snippets."""

    text_field = "answer_text"

    def __init__(self, session: AsyncSession):
        super().__init__(session, AnswerEmbedding)
