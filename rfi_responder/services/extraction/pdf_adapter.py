from pathlib import Path
from typing import List

import pdfplumber

from rfi_responder.services.extraction.base_adapter import FormatAdapter
from rfi_responder.services.extraction.models import TextUnit


class PdfAdapter(FormatAdapter):
    """PDF documents via pdfplumber, one unit per non-blank page."""

    name = "pdf"

    def parse(self, path: Path, filename: str) -> List[TextUnit]:
        units: List[TextUnit] = []

        with pdfplumber.open(str(path)) as pdf:
            for page_number, page in enumerate(pdf.pages, start=1):
                text = page.extract_text() or ""
                if not text.strip():
                    continue
                units.append(
                    TextUnit(
                        text=text,
                        label=f"{filename} - Page {page_number}",
                        metadata={"page_number": page_number, "total_pages": len(pdf.pages)},
                    )
                )

        return units
