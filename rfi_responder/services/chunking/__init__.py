"""Chunking services."""

from rfi_responder.services.chunking.models import ChunkMetadata, TextChunk
from rfi_responder.services.chunking.text_chunker import TextChunker

__all__ = ["ChunkMetadata", "TextChunk", "TextChunker"]
