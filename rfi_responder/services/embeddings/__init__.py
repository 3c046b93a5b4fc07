"""Context embedding index."""

from rfi_responder.services.embeddings.index_service import EmbeddingIndexService
from rfi_responder.services.embeddings.snippets import is_question_snippet, split_into_snippets

__all__ = ["EmbeddingIndexService", "is_question_snippet", "split_into_snippets"]
