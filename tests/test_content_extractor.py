from unittest.mock import patch

import pytest

from rfi_responder.core.exceptions import ExtractionError, UnsupportedFormatError
from rfi_responder.services.extraction.content_extractor import ContentExtractor
from rfi_responder.services.extraction.spreadsheet_adapter import SpreadsheetAdapter
from tests.builders import DOCX_MIME, PDF_MIME, XLSX_MIME, build_docx, build_pdf, build_xlsx


@pytest.fixture
def extractor(tmp_path):
    return ContentExtractor(temp_dir=str(tmp_path))


@pytest.mark.asyncio
async def test_word_paragraphs_and_tables(extractor):
    content = build_docx(
        ["What is your data retention policy?", "Vendor must provide SOC 2 certification."],
        table=[["Requirement", "Response"], ["Uptime SLA", "99.9%"]],
    )

    units = await extractor.extract(DOCX_MIME, content, "rfi.docx")

    assert len(units) == 1
    assert units[0].label == "rfi.docx"
    assert units[0].text.startswith(
        "What is your data retention policy?\n\nVendor must provide SOC 2 certification."
    )
    assert "Requirement | Response\nUptime SLA | 99.9%" in units[0].text
    assert units[0].metadata["tables"] == 1


@pytest.mark.asyncio
async def test_spreadsheet_sheets_become_cited_units(extractor):
    content = build_xlsx(
        {
            "Pricing": [["Item", "Price"], ["License", 100], [None, None], ["Support", 25]],
            "Security": [["Control", "Status"], ["SOC 2", "Yes"]],
        }
    )

    units = await extractor.extract(XLSX_MIME, content, "rfi.xlsx")

    assert [u.label for u in units] == ["rfi.xlsx - Sheet: Pricing", "rfi.xlsx - Sheet: Security"]
    assert units[0].text == "Sheet: Pricing\nItem,Price\nLicense,100\nSupport,25"
    assert units[1].text == "Sheet: Security\nControl,Status\nSOC 2,Yes"
    assert units[0].metadata["rows"] == 3
    assert units[0].metadata["skipped_sheets"] == []


@pytest.mark.asyncio
async def test_empty_sheet_is_omitted(extractor):
    content = build_xlsx({"Empty": [], "Questions": [["Describe your onboarding process."]]})

    units = await extractor.extract(XLSX_MIME, content, "rfi.xlsx")

    assert [u.metadata["sheet"] for u in units] == ["Questions"]


@pytest.mark.asyncio
async def test_unreadable_sheet_is_skipped_and_recorded(extractor):
    original = SpreadsheetAdapter._sheet_to_csv

    def flaky(sheet):
        if sheet.title == "Broken":
            raise ValueError("bad cell")
        return original(sheet)

    content = build_xlsx({"Broken": [["x"]], "Security": [["Control", "Status"], ["SOC 2", "Yes"]]})

    with patch.object(SpreadsheetAdapter, "_sheet_to_csv", side_effect=flaky):
        units = await extractor.extract(XLSX_MIME, content, "rfi.xlsx")

    assert [u.metadata["sheet"] for u in units] == ["Security"]
    assert units[0].metadata["skipped_sheets"] == ["Broken"]


@pytest.mark.asyncio
async def test_all_sheets_unreadable_fails(extractor):
    content = build_xlsx({"Broken": [["x"]]})

    with patch.object(SpreadsheetAdapter, "_sheet_to_csv", side_effect=ValueError("bad cell")):
        with pytest.raises(ExtractionError, match="No readable sheets"):
            await extractor.extract(XLSX_MIME, content, "rfi.xlsx")


@pytest.mark.asyncio
async def test_pdf_pages_are_labelled_and_blank_pages_skipped(extractor):
    content = build_pdf([["Describe your incident response plan."], [], ["Do you encrypt data at rest?"]])

    units = await extractor.extract(PDF_MIME, content, "rfi.pdf")

    assert [u.label for u in units] == ["rfi.pdf - Page 1", "rfi.pdf - Page 3"]
    assert "incident response plan" in units[0].text
    assert units[1].metadata == {"page_number": 3, "total_pages": 3}


@pytest.mark.asyncio
async def test_unsupported_media_type(extractor):
    with pytest.raises(UnsupportedFormatError, match="image/png"):
        await extractor.extract("image/png", b"\x89PNG\r\n", "diagram.png")


@pytest.mark.asyncio
async def test_corrupt_payload_raises_extraction_error(extractor):
    with pytest.raises(ExtractionError) as exc_info:
        await extractor.extract(DOCX_MIME, b"this is not a zip archive", "broken.docx")
    assert exc_info.value.original_error is not None


@pytest.mark.asyncio
async def test_document_without_text_fails(extractor):
    with pytest.raises(ExtractionError, match="No extractable text"):
        await extractor.extract(DOCX_MIME, build_docx([]), "empty.docx")


@pytest.mark.asyncio
async def test_temporary_files_are_removed(tmp_path, extractor):
    await extractor.extract(DOCX_MIME, build_docx(["Provide pricing details."]), "rfi.docx")
    with pytest.raises(ExtractionError):
        await extractor.extract(DOCX_MIME, b"garbage", "broken.docx")

    assert list(tmp_path.iterdir()) == []


def test_supports():
    extractor = ContentExtractor()
    assert extractor.supports(DOCX_MIME)
    assert extractor.supports(XLSX_MIME)
    assert extractor.supports(PDF_MIME)
    assert not extractor.supports("text/plain")
