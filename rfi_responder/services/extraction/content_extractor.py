"""Content extraction.

Turns raw upload bytes into an ordered list of ``TextUnit`` objects using a
registry of format adapters keyed by MIME type. The payload is written to a
scoped temporary directory (some parsers only accept paths) and parsing runs
in a worker thread so the event loop keeps serving other documents.
"""

import asyncio
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from rfi_responder.config import PDF_MIME_TYPES, SPREADSHEET_MIME_TYPES, WORD_MIME_TYPES
from rfi_responder.core.exceptions import AppError, ExtractionError, UnsupportedFormatError
from rfi_responder.services.extraction.base_adapter import FormatAdapter
from rfi_responder.services.extraction.models import TextUnit
from rfi_responder.services.extraction.pdf_adapter import PdfAdapter
from rfi_responder.services.extraction.spreadsheet_adapter import SpreadsheetAdapter
from rfi_responder.services.extraction.word_adapter import WordAdapter
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


def default_adapters() -> Dict[str, FormatAdapter]:
    """Adapter registry for the supported document families."""
    word, spreadsheet, pdf = WordAdapter(), SpreadsheetAdapter(), PdfAdapter()
    registry: Dict[str, FormatAdapter] = {}
    registry.update({mime: word for mime in WORD_MIME_TYPES})
    registry.update({mime: spreadsheet for mime in SPREADSHEET_MIME_TYPES})
    registry.update({mime: pdf for mime in PDF_MIME_TYPES})
    return registry


class ContentExtractor:
    """Dispatches raw bytes to the adapter registered for their MIME type."""

    def __init__(
        self,
        adapters: Optional[Dict[str, FormatAdapter]] = None,
        temp_dir: Optional[str] = None,
    ):
        """Initialize the extractor.

        Args:
            adapters: MIME type to adapter mapping (defaults to Word, Excel, PDF)
            temp_dir: Parent directory for transient files (system default if None)
        """
        self.adapters = adapters if adapters is not None else default_adapters()
        self.temp_dir = temp_dir

    def supports(self, mime_type: str) -> bool:
        return mime_type in self.adapters

    async def extract(self, mime_type: str, content: bytes, filename: str) -> List[TextUnit]:
        """Extract text units from a document payload.

        Args:
            mime_type: Declared media type
            content: Raw file bytes
            filename: Original file name, used for citation labels

        Returns:
            Text units in document order

        Raises:
            UnsupportedFormatError: If no adapter handles ``mime_type``
            ExtractionError: If the payload cannot be parsed or holds no text
        """
        adapter = self.adapters.get(mime_type)
        if adapter is None:
            raise UnsupportedFormatError(f"Unsupported file type: {mime_type}")

        LOGGER.info(
            f"Extracting {filename} with {adapter.name} adapter",
            extra={"mime_type": mime_type, "size_bytes": len(content)},
        )

        with tempfile.TemporaryDirectory(prefix="rfi-", dir=self.temp_dir) as tmp:
            # Only the suffix of the client supplied name is used on disk
            path = Path(tmp) / f"upload{Path(filename).suffix.lower()}"
            try:
                await asyncio.to_thread(path.write_bytes, content)
                units = await asyncio.to_thread(adapter.parse, path, filename)
            except AppError:
                raise
            except Exception as e:
                LOGGER.warning(
                    f"Failed to extract {filename}: {e}",
                    extra={"mime_type": mime_type, "adapter": adapter.name},
                )
                raise ExtractionError(f"Failed to extract content from {filename}: {e}", original_error=e) from e

        if not units:
            raise ExtractionError(f"No extractable text found in {filename}")

        LOGGER.info(
            f"Extracted {len(units)} text units from {filename}",
            extra={"unit_count": len(units), "characters": sum(len(u) for u in units)},
        )
        return units
