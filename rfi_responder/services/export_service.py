"""CSV export of extracted questions."""

import csv
import io
import math
from typing import Iterable, Optional

from rfi_responder.services.base_service import BaseService

CSV_HEADER = ["Question", "Type", "Confidence", "Answer", "Source Document"]


def format_confidence(value: Optional[float]) -> str:
    """Render a 0-1 confidence as a percentage with one decimal place."""
    if value is None:
        return "0.0%"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "0.0%"
    if math.isnan(number):
        return "0.0%"
    return f"{number * 100:.1f}%"


class ExportService(BaseService):
    """Renders questions as a fully quoted CSV document."""

    async def run(self, questions: Iterable) -> str:
        return self.questions_to_csv(questions)

    @staticmethod
    def questions_to_csv(questions: Iterable) -> str:
        """Build the CSV text.

        ``questions`` are objects with ``text``, ``type``, ``confidence``,
        ``answer`` and ``source_document`` attributes. Output only depends on
        the input, so identical input gives byte-identical output.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        for question in questions:
            question_type = getattr(question.type, "value", question.type)
            writer.writerow(
                [
                    question.text or "",
                    question_type or "",
                    format_confidence(question.confidence),
                    question.answer or "",
                    question.source_document or "",
                ]
            )

        return buffer.getvalue()
