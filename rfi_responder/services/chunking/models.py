"""Data models for chunking."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ChunkMetadata:
    """Metadata for a text chunk.

    Attributes:
        source_label: Citation label of the unit the chunk came from
        unit_index: Index of the source unit within the document
        chunk_index: Index of this chunk within its unit
        start_char: Starting character position in the unit text
        end_char: Ending character position in the unit text (exclusive)
        document_id: Document the unit belongs to, when known
    """

    source_label: str = ""
    unit_index: int = 0
    chunk_index: int = 0
    start_char: int = 0
    end_char: int = 0
    document_id: Optional[int] = None


@dataclass
class TextChunk:
    """A bounded span of unit text sent to the question classifier."""

    text: str
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    @property
    def source_label(self) -> str:
        return self.metadata.source_label

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return (
            f"TextChunk(document={self.metadata.document_id}, "
            f"source={self.metadata.source_label}, "
            f"unit={self.metadata.unit_index}, "
            f"index={self.metadata.chunk_index}, "
            f"chars={self.metadata.start_char}:{self.metadata.end_char})"
        )
