"""Data access layer."""

from rfi_responder.repositories.base_repository import BaseRepository
from rfi_responder.repositories.context_repository import ContextRepository
from rfi_responder.repositories.document_repository import DocumentRepository
from rfi_responder.repositories.embedding_repository import (
    AnswerEmbeddingRepository,
    QuestionEmbeddingRepository,
    SnippetEmbeddingRepository,
)
from rfi_responder.repositories.question_repository import QuestionRepository

__all__ = [
    "BaseRepository",
    "ContextRepository",
    "DocumentRepository",
    "QuestionRepository",
    "SnippetEmbeddingRepository",
    "QuestionEmbeddingRepository",
    "AnswerEmbeddingRepository",
]
