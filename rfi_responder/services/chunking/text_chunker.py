"""Character based chunking of extracted text units.

Windows are at most ``chunk_size`` characters. Each window ends at the last
paragraph break, then line break, then space found in the back half of the
window, falling back to a hard cut. Consecutive chunks of one unit share
``chunk_overlap`` characters. Chunk text is always an exact slice of the
unit text, so the non-overlapping parts of the chunks rebuild the unit.
"""

from typing import List, Optional, Sequence, Tuple

from rfi_responder.services.chunking.models import ChunkMetadata, TextChunk
from rfi_responder.services.extraction.models import TextUnit
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)

SEPARATORS = ("\n\n", "\n", " ")


class TextChunker:
    """Splits text units into overlapping, boundary-aware chunks."""

    def __init__(self, chunk_size: int = 2000, chunk_overlap: int = 500, min_chunk_length: int = 20):
        """Initialize the chunker.

        Args:
            chunk_size: Maximum characters per chunk
            chunk_overlap: Characters shared by consecutive chunks of a unit
            min_chunk_length: Units and trailing remainders shorter than this
                (after stripping) are skipped or merged

        Raises:
            ValueError: If the sizes are inconsistent
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0:
            raise ValueError("chunk_overlap must not be negative")
        if chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
            )

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.min_chunk_length = min_chunk_length

    def chunk_units(self, units: Sequence[TextUnit], document_id: Optional[int] = None) -> List[TextChunk]:
        """Chunk every unit of one document, preserving unit order.

        ``document_id`` is copied into every chunk for log correlation.

        Raises:
            ValueError: If ``units`` is empty
        """
        if not units:
            raise ValueError("Cannot chunk an empty list of text units")

        chunks: List[TextChunk] = []
        for unit_index, unit in enumerate(units):
            if len(unit.text.strip()) < self.min_chunk_length:
                LOGGER.debug(
                    f"Skipping short unit '{unit.label}'",
                    extra={"unit_index": unit_index, "length": len(unit.text.strip())},
                )
                continue

            for chunk_index, (start, end) in enumerate(self.split_spans(unit.text)):
                chunks.append(
                    TextChunk(
                        text=unit.text[start:end],
                        metadata=ChunkMetadata(
                            source_label=unit.label,
                            unit_index=unit_index,
                            chunk_index=chunk_index,
                            start_char=start,
                            end_char=end,
                            document_id=document_id,
                        ),
                    )
                )

        LOGGER.info(
            f"Created {len(chunks)} chunks from {len(units)} units",
            extra={"chunk_size": self.chunk_size, "chunk_overlap": self.chunk_overlap},
        )
        return chunks

    def split_spans(self, text: str) -> List[Tuple[int, int]]:
        """Return ``(start, end)`` character spans covering ``text``."""
        length = len(text)
        if length <= self.chunk_size:
            return [(0, length)]

        spans: List[Tuple[int, int]] = []
        start = 0
        while start < length:
            limit = min(start + self.chunk_size, length)
            end = length if limit == length else self._find_break(text, start, limit)
            spans.append((start, end))
            if end >= length:
                break
            start = self._next_start(text, start, end)

        if len(spans) > 1:
            previous_end = spans[-2][1]
            remainder = text[previous_end:length]
            if len(remainder.strip()) < self.min_chunk_length:
                LOGGER.debug(
                    "Merging short trailing remainder into previous chunk",
                    extra={"remainder_length": len(remainder)},
                )
                spans.pop()
                spans[-1] = (spans[-1][0], length)

        return spans

    def _find_break(self, text: str, start: int, limit: int) -> int:
        # Only the back half of the window is searched
        earliest = start + self.chunk_size // 2
        for separator in SEPARATORS:
            idx = text.rfind(separator, earliest, limit)
            if idx != -1:
                return idx + len(separator)
        return limit

    def _next_start(self, text: str, start: int, end: int) -> int:
        next_start = max(end - self.chunk_overlap, start + 1)

        # Snap forward to the start of a word when landing mid-word
        if 0 < next_start < end and not text[next_start - 1].isspace() and not text[next_start].isspace():
            for idx in range(next_start, end):
                if text[idx].isspace():
                    next_start = idx + 1
                    break

        return next_start

    def get_chunk_statistics(self, chunks: List[TextChunk]) -> dict:
        """Get statistics about chunks.

        Args:
            chunks: List of chunks

        Returns:
            dict: Statistics about the chunks
        """
        if not chunks:
            return {
                "total_chunks": 0,
                "total_characters": 0,
                "avg_characters_per_chunk": 0,
                "max_characters": 0,
                "min_characters": 0,
                "units": 0,
            }

        lengths = [len(c) for c in chunks]
        units = set(c.metadata.unit_index for c in chunks)

        stats = {
            "total_chunks": len(chunks),
            "total_characters": sum(lengths),
            "avg_characters_per_chunk": sum(lengths) / len(chunks),
            "max_characters": max(lengths),
            "min_characters": min(lengths),
            "units": len(units),
        }

        LOGGER.debug("Chunk statistics", extra=stats)
        return stats
