"""Oracle backed question and requirement extraction."""

from collections import Counter
from typing import List

from rfi_responder.core.exceptions import (
    OracleAuthError,
    OracleError,
    OracleQuotaError,
    RecordValidationError,
)
from rfi_responder.prompts.system_prompts import (
    QUESTION_EXTRACTION_PROMPT,
    QUESTION_EXTRACTION_SYSTEM_PROMPT,
)
from rfi_responder.schemas.questions import ProcessedQuestion
from rfi_responder.services.chunking.models import TextChunk
from rfi_responder.services.questions.base_classifier import QuestionClassifier
from rfi_responder.services.questions.validator import validate_question_record
from rfi_responder.utils.json_parser import parse_json_array
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


class LLMQuestionExtractor(QuestionClassifier):
    """Asks the generative oracle for a JSON array of question records.

    Chunk-scoped failures (malformed output, timeouts and outages that
    survive the client's retries) yield zero questions for the chunk.
    Credential and quota errors are re-raised because they will fail every
    other chunk as well.
    """

    def __init__(self, llm_client, temperature: float = 0.0, max_tokens: int = 2000):
        """Initialize the extractor.

        Args:
            llm_client: Client exposing ``generate_content`` (``UnifiedLLMClient``)
            temperature: Sampling temperature
            max_tokens: Output token limit per chunk
        """
        self.client = llm_client
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_prompt(self, chunk: TextChunk) -> str:
        return QUESTION_EXTRACTION_PROMPT.format(source_label=chunk.source_label, text=chunk.text)

    async def classify(self, chunk: TextChunk) -> List[ProcessedQuestion]:
        try:
            response = await self.client.generate_content(
                contents=self.build_prompt(chunk),
                system_instruction=QUESTION_EXTRACTION_SYSTEM_PROMPT,
                generation_config={
                    "temperature": self.temperature,
                    "max_output_tokens": self.max_tokens,
                },
            )
        except (OracleAuthError, OracleQuotaError):
            raise
        except OracleError as e:
            LOGGER.warning(
                f"Oracle call failed for chunk {chunk}: {e}",
                extra={
                    "document_id": chunk.metadata.document_id,
                    "source_label": chunk.source_label,
                    "error_type": type(e).__name__,
                },
            )
            return []

        records = parse_json_array(response)
        if records is None:
            LOGGER.warning(
                f"Malformed oracle output for chunk {chunk}",
                extra={
                    "document_id": chunk.metadata.document_id,
                    "source_label": chunk.source_label,
                    "raw_response": (response or "")[:500],
                },
            )
            return []

        questions: List[ProcessedQuestion] = []
        rejections: Counter = Counter()
        base_metadata = self.chunk_metadata(chunk)

        for raw in records:
            try:
                question = validate_question_record(raw)
            except RecordValidationError as e:
                rejections[e.reason] += 1
                continue
            question.metadata = {**base_metadata, **question.metadata}
            questions.append(question)

        if rejections:
            LOGGER.info(
                f"Dropped {sum(rejections.values())} invalid records from chunk {chunk}",
                extra={"reasons": dict(rejections)},
            )

        LOGGER.debug(f"Extracted {len(questions)} questions from chunk {chunk}")
        return questions
