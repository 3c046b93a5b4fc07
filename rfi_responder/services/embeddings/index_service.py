"""Embedding index over context library snippets.

Context content is split into sentence-like snippets; snippets ending in
``?`` go to the question corpus and everything else to the answer corpus.
Each snippet is embedded and committed on its own, so one failed oracle
call only loses that snippet. Writes run inside a savepoint so a failed
insert never expires other objects held by the caller's session.
"""

from typing import List

from sqlalchemy.exc import SQLAlchemyError

from rfi_responder.core.embedding_client import EmbeddingClient
from rfi_responder.core.exceptions import OracleAuthError, OracleError, OracleQuotaError
from rfi_responder.repositories.embedding_repository import (
    AnswerEmbeddingRepository,
    QuestionEmbeddingRepository,
    SnippetEmbeddingRepository,
)
from rfi_responder.schemas.contexts import IngestionReport, SearchCorpus, SimilarityResult
from rfi_responder.services.embeddings.snippets import is_question_snippet, split_into_snippets
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


class EmbeddingIndexService:
    """Embeds, stores and searches question and answer snippets."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        question_repo: QuestionEmbeddingRepository,
        answer_repo: AnswerEmbeddingRepository,
    ):
        self.embedding_client = embedding_client
        self.question_repo = question_repo
        self.answer_repo = answer_repo

    async def embed(self, text: str) -> List[float]:
        return await self.embedding_client.embed(text)

    async def index_question(self, vector: List[float], text: str, context_id: int):
        return await self._store(self.question_repo, vector, text, context_id)

    async def index_answer(self, vector: List[float], text: str, context_id: int):
        return await self._store(self.answer_repo, vector, text, context_id)

    async def _store(
        self,
        repo: SnippetEmbeddingRepository,
        vector: List[float],
        text: str,
        context_id: int,
    ):
        session = repo.session
        async with session.begin_nested():
            row = await repo.add_embedding(context_id=context_id, text=text, embedding=vector, commit=False)
        await session.commit()
        return row

    async def ingest_context(self, context_id: int, content: str) -> IngestionReport:
        """Embed and store every snippet of one context entry.

        Failures are counted in the report and never raised. Credential or
        quota errors stop the run and count the remaining snippets as failed.
        """
        snippets = split_into_snippets(content)
        report = IngestionReport()

        for position, snippet in enumerate(snippets):
            is_question = is_question_snippet(snippet)
            try:
                vector = await self.embed(snippet)
                if is_question:
                    await self.index_question(vector, snippet, context_id)
                    report.questions_indexed += 1
                else:
                    await self.index_answer(vector, snippet, context_id)
                    report.answers_indexed += 1
            except (OracleAuthError, OracleQuotaError) as e:
                remaining = len(snippets) - position
                report.failures += remaining
                report.errors.append(e.message)
                LOGGER.error(
                    f"Embedding oracle rejected context {context_id}, {remaining} snippets not indexed: {e}",
                    extra={"context_id": context_id},
                )
                break
            except OracleError as e:
                report.failures += 1
                report.errors.append(e.message)
                LOGGER.warning(
                    f"Failed to embed snippet {position} of context {context_id}: {e}",
                    extra={"context_id": context_id, "snippet_preview": snippet[:100]},
                )
            except SQLAlchemyError as e:
                report.failures += 1
                report.errors.append(str(e))
                LOGGER.warning(
                    f"Failed to store snippet {position} of context {context_id}: {e}",
                    extra={"context_id": context_id},
                )

        LOGGER.info(
            f"Indexed context {context_id}: {report.questions_indexed} questions, "
            f"{report.answers_indexed} answers, {report.failures} failures",
            extra={"context_id": context_id, "snippets": len(snippets)},
        )
        return report

    async def search(
        self,
        query: str,
        corpus: SearchCorpus = SearchCorpus.BOTH,
        limit: int = 5,
    ) -> List[SimilarityResult]:
        """Rank stored snippets by cosine similarity to ``query``.

        With ``SearchCorpus.BOTH`` the two corpora are merged, re-sorted and
        truncated to ``limit``.
        """
        corpus = SearchCorpus(corpus)
        if limit <= 0:
            return []

        vector = await self.embed(query)
        results: List[SimilarityResult] = []

        if corpus in (SearchCorpus.QUESTIONS, SearchCorpus.BOTH):
            for text, similarity in await self.question_repo.semantic_search(vector, top_k=limit):
                results.append(SimilarityResult(text=text, similarity=similarity, corpus=SearchCorpus.QUESTIONS))

        if corpus in (SearchCorpus.ANSWERS, SearchCorpus.BOTH):
            for text, similarity in await self.answer_repo.semantic_search(vector, top_k=limit):
                results.append(SimilarityResult(text=text, similarity=similarity, corpus=SearchCorpus.ANSWERS))

        results.sort(key=lambda r: r.similarity, reverse=True)
        return results[:limit]

    async def delete_for_context(self, context_id: int) -> int:
        """Remove every snippet of one context entry from both corpora."""
        deleted = await self.question_repo.delete_by_context(context_id, commit=False)
        deleted += await self.answer_repo.delete_by_context(context_id, commit=False)
        await self.question_repo.session.commit()
        LOGGER.info(f"Deleted {deleted} embeddings of context {context_id}")
        return deleted
