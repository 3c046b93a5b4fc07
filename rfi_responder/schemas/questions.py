"""Question schemas."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class QuestionType(str, Enum):
    """Classification of an extracted question."""
    EXPLICIT = "explicit"
    IMPLICIT = "implicit"


class ProcessedQuestion(BaseModel):
    """Validated question record produced by a classifier.

    Attributes:
        text: Verbatim (or minimally reformatted) question or requirement
        type: explicit question or implicit requirement
        confidence: Oracle certainty in [0, 1]
        answer: Draft answer
        source_document: Where in the chunk the record was found
        metadata: Optional extra data (e.g. the chunk citation label)
    """

    text: str = Field(..., min_length=1)
    type: QuestionType
    confidence: float = Field(..., ge=0.0, le=1.0)
    answer: str = Field(..., min_length=1)
    source_document: str = Field(..., min_length=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class QuestionResponse(BaseModel):
    """Persisted question as returned by the API."""

    id: int
    document_id: int = Field(..., serialization_alias="documentId")
    text: str
    type: str
    confidence: Optional[float] = None
    answer: Optional[str] = None
    source_document: str = Field(..., serialization_alias="sourceDocument")
    metadata: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @classmethod
    def from_model(cls, question) -> "QuestionResponse":
        return cls(
            id=question.id,
            document_id=question.document_id,
            text=question.text,
            type=question.type,
            confidence=question.confidence,
            answer=question.answer,
            source_document=question.source_document,
            metadata=question.question_metadata,
        )


class QuestionUpdate(BaseModel):
    """Partial update applied by a reviewer."""

    text: Optional[str] = Field(default=None, min_length=1)
    type: Optional[QuestionType] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    answer: Optional[str] = Field(default=None, min_length=1)
