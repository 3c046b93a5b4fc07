from pathlib import Path
from typing import List

from docx import Document as DocxDocument

from rfi_responder.services.extraction.base_adapter import FormatAdapter
from rfi_responder.services.extraction.models import TextUnit


class WordAdapter(FormatAdapter):
    """Word documents via python-docx.

    Produces a single unit: non-empty paragraphs separated by blank lines,
    followed by table rows with cells joined by `` | ``.
    """

    name = "word"

    def parse(self, path: Path, filename: str) -> List[TextUnit]:
        doc = DocxDocument(str(path))

        blocks = [p.text.strip() for p in doc.paragraphs if p.text and p.text.strip()]

        table_count = 0
        for table in doc.tables:
            rows = []
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells]
                if any(cells):
                    rows.append(" | ".join(cells))
            if rows:
                table_count += 1
                blocks.append("\n".join(rows))

        text = "\n\n".join(blocks)
        if not text.strip():
            return []

        return [
            TextUnit(
                text=text,
                label=filename,
                metadata={"paragraphs": len(doc.paragraphs), "tables": table_count},
            )
        ]
