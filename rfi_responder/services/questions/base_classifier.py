from abc import ABC, abstractmethod
from typing import List

from rfi_responder.schemas.questions import ProcessedQuestion
from rfi_responder.services.chunking.models import TextChunk


class QuestionClassifier(ABC):
    """Finds questions and requirements in one chunk of text."""

    @abstractmethod
    async def classify(self, chunk: TextChunk) -> List[ProcessedQuestion]:
        """Return the validated question records found in ``chunk``."""
        pass

    @staticmethod
    def chunk_metadata(chunk: TextChunk) -> dict:
        """Citation details attached to every record taken from ``chunk``."""
        return {
            "chunk_label": chunk.metadata.source_label,
            "unit_index": chunk.metadata.unit_index,
            "chunk_index": chunk.metadata.chunk_index,
        }
