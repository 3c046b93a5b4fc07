"""Concurrent per-chunk question extraction."""

import asyncio
from dataclasses import dataclass, field
from typing import List, Sequence

from rfi_responder.core.exceptions import OracleAuthError, OracleQuotaError
from rfi_responder.schemas.questions import ProcessedQuestion
from rfi_responder.services.chunking.models import TextChunk
from rfi_responder.services.questions.base_classifier import QuestionClassifier
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class ExtractionOutcome:
    """Accumulated result of classifying every chunk of one document.

    Attributes:
        questions: Questions in chunk order, duplicates removed
        questions_per_chunk: Records returned by each chunk
        failed_chunks: Chunks whose classification raised
        duplicates_removed: Records dropped because an earlier chunk had them
    """

    questions: List[ProcessedQuestion] = field(default_factory=list)
    questions_per_chunk: List[int] = field(default_factory=list)
    failed_chunks: int = 0
    duplicates_removed: int = 0


def _dedupe_key(question: ProcessedQuestion):
    return " ".join(question.text.lower().split()), question.type


async def extract_from_chunks(
    classifier: QuestionClassifier,
    chunks: Sequence[TextChunk],
    concurrency: int = 4,
) -> ExtractionOutcome:
    """Classify chunks concurrently, isolating failures per chunk.

    Overlapping chunks can report the same question twice; only the first
    occurrence (in chunk order) is kept.

    Raises:
        OracleAuthError: Credentials rejected; remaining chunks are cancelled
        OracleQuotaError: Quota exhausted; remaining chunks are cancelled
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def run_one(chunk: TextChunk):
        async with semaphore:
            try:
                return await classifier.classify(chunk)
            except (OracleAuthError, OracleQuotaError):
                raise
            except Exception as e:
                LOGGER.warning(
                    f"Question extraction failed for chunk {chunk}: {e}",
                    exc_info=True,
                    extra={"document_id": chunk.metadata.document_id, "source_label": chunk.source_label},
                )
                return None

    tasks = [asyncio.create_task(run_one(chunk)) for chunk in chunks]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise

    outcome = ExtractionOutcome()
    seen = set()
    for chunk_questions in results:
        if chunk_questions is None:
            outcome.failed_chunks += 1
            outcome.questions_per_chunk.append(0)
            continue
        outcome.questions_per_chunk.append(len(chunk_questions))
        for question in chunk_questions:
            key = _dedupe_key(question)
            if key in seen:
                outcome.duplicates_removed += 1
                continue
            seen.add(key)
            outcome.questions.append(question)

    LOGGER.info(
        f"Extracted {len(outcome.questions)} questions from {len(chunks)} chunks",
        extra={
            "failed_chunks": outcome.failed_chunks,
            "duplicates_removed": outcome.duplicates_removed,
        },
    )
    return outcome
