import csv
import io
from pathlib import Path
from typing import List

from openpyxl import load_workbook

from rfi_responder.core.exceptions import ExtractionError
from rfi_responder.services.extraction.base_adapter import FormatAdapter
from rfi_responder.services.extraction.models import TextUnit
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)

SHEET_MARKER = "Sheet: {name}"


class SpreadsheetAdapter(FormatAdapter):
    """Excel workbooks via openpyxl.

    Every sheet becomes one unit. Rows are serialized as CSV with the first
    non-empty row acting as the header, and the unit text starts with a
    ``Sheet: <name>`` marker so citations can attribute content to a sheet.

    A sheet that cannot be read is skipped with a warning; the names of
    skipped sheets are recorded in ``metadata["skipped_sheets"]`` of every
    unit of the workbook.
    """

    name = "spreadsheet"

    def parse(self, path: Path, filename: str) -> List[TextUnit]:
        workbook = load_workbook(filename=str(path), data_only=True, read_only=True)
        units: List[TextUnit] = []
        skipped_sheets: List[str] = []

        try:
            for sheet in workbook.worksheets:
                sheet_name = sheet.title
                try:
                    csv_text, row_count = self._sheet_to_csv(sheet)
                except Exception as e:
                    LOGGER.warning(
                        f"Skipping unreadable sheet '{sheet_name}' in {filename}: {e}",
                        extra={"document_name": filename, "sheet": sheet_name},
                    )
                    skipped_sheets.append(sheet_name)
                    continue

                if not csv_text:
                    LOGGER.debug(f"Sheet '{sheet_name}' in {filename} is empty")
                    continue

                marker = SHEET_MARKER.format(name=sheet_name)
                units.append(
                    TextUnit(
                        text=f"{marker}\n{csv_text}",
                        label=f"{filename} - {marker}",
                        metadata={"sheet": sheet_name, "rows": row_count},
                    )
                )
        finally:
            workbook.close()

        if skipped_sheets and not units:
            raise ExtractionError(
                f"No readable sheets in {filename} (skipped: {', '.join(skipped_sheets)})"
            )

        for unit in units:
            unit.metadata["skipped_sheets"] = list(skipped_sheets)

        return units

    @staticmethod
    def _sheet_to_csv(sheet):
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        row_count = 0

        for row in sheet.iter_rows(values_only=True):
            values = ["" if value is None else str(value) for value in row]
            if not any(v.strip() for v in values):
                continue
            writer.writerow(values)
            row_count += 1

        return buffer.getvalue().strip(), row_count
