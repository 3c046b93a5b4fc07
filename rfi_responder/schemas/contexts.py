"""Context library schemas."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ContextType(str, Enum):
    """Where a context entry came from."""
    KNOWLEDGE_BASE = "knowledge_base"
    WEBSITE = "website"
    DOCUMENT = "document"


class SearchCorpus(str, Enum):
    """Snippet table(s) searched by similarity queries."""
    QUESTIONS = "questions"
    ANSWERS = "answers"
    BOTH = "both"


class ContextCreate(BaseModel):
    """Directly authored context entry."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    type: ContextType = ContextType.KNOWLEDGE_BASE
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ScrapeRequest(BaseModel):
    url: str = Field(..., min_length=1)


class IngestionReport(BaseModel):
    """Result of embedding one context entry's snippets."""

    questions_indexed: int = 0
    answers_indexed: int = 0
    failures: int = 0
    errors: List[str] = Field(default_factory=list)


class ContextResponse(BaseModel):
    id: int
    title: str
    content: str
    type: str
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    ingestion: Optional[IngestionReport] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_model(cls, context, ingestion: Optional[IngestionReport] = None) -> "ContextResponse":
        return cls(
            id=context.id,
            title=context.title,
            content=context.content,
            type=context.type,
            metadata=context.context_metadata,
            created_at=context.created_at,
            ingestion=ingestion,
        )


class SimilarityResult(BaseModel):
    """One ranked snippet."""

    text: str
    similarity: float
    corpus: SearchCorpus
