"""
OOXML 추출기 테스트 (DOCX, XLSX, PPTX)
- 테스트용 아카이브는 conftest 의 빌더로 메모리에서 생성
"""
from unittest.mock import patch

import pytest

from docparse.core.extractors.docx_extractor import DOCXExtractor, extract_paragraphs, heading_level
from docparse.core.extractors.pptx_extractor import PPTXExtractor
from docparse.core.extractors.xlsx_extractor import XLSXExtractor, parse_shared_strings, resolve_cell
from docparse.helper.pptx_helper import parse_pptx, pptx_to_structured, pptx_to_text
from docparse.models.document_model import ExtractionRequest


def _request(name: str, type_key: str) -> ExtractionRequest:
    return ExtractionRequest(file_name=name, type_key=type_key)


DOCX_TABLE = (
    "<w:tbl>"
    "<w:tr><w:tc><w:p><w:r><w:t>Name</w:t></w:r></w:p></w:tc><w:tc><w:p><w:r><w:t>Days</w:t></w:r></w:p></w:tc></w:tr>"
    "<w:tr><w:tc><w:p><w:r><w:t>Alice</w:t></w:r></w:p></w:tc><w:tc><w:p><w:r><w:t>20</w:t></w:r></w:p></w:tc></w:tr>"
    "</w:tbl>"
)


class TestDOCXExtractor:
    """Word 문서"""

    def test_heading_level_from_style(self):
        assert heading_level('<w:pStyle w:val="Heading2"/>') == 2
        assert heading_level('<w:pStyle w:val="heading"/>') == 1
        assert heading_level('<w:pStyle w:val="Normal"/>') is None
        assert heading_level("<w:r><w:t>plain</w:t></w:r>") is None

    def test_paragraph_properties_do_not_split_paragraphs(self, ooxml):
        xml = ooxml.docx_paragraph("Leave Policy", "Heading2") + ooxml.docx_paragraph("Body text")
        parsed = extract_paragraphs(xml)
        assert parsed["paragraphs"] == ["Leave Policy", "Body text"]
        assert parsed["headings"] == [{"level": 2, "text": "Leave Policy"}]

    @pytest.mark.asyncio
    async def test_extracts_paragraphs_headings_and_tables(self, ooxml):
        body = (
            ooxml.docx_paragraph("Leave Policy", "Heading2")
            + ooxml.docx_paragraph("Employees get 20 days &amp; holidays.")
            + DOCX_TABLE
        )
        result = await DOCXExtractor().extract(ooxml.docx(body), _request("policy.docx", "docx"))

        assert result.method == "docx-xml"
        assert result.confidence == 0.9
        assert result.text.startswith("Leave Policy\n\nEmployees get 20 days & holidays.")
        assert result.structured_data["headings"] == [{"level": 2, "text": "Leave Policy"}]
        assert result.structured_data["tableCount"] == 1
        assert result.structured_data["tables"] == [["Name | Days", "Alice | 20"]]
        assert result.extras["paragraphCount"] >= 2

    @pytest.mark.asyncio
    async def test_empty_document_gets_placeholder(self, ooxml):
        result = await DOCXExtractor().extract(ooxml.docx(""), _request("empty.docx", "docx"))
        assert result.text == "Document processed successfully."
        assert result.confidence == 0.9

    @pytest.mark.asyncio
    async def test_missing_document_part(self, ooxml):
        data = ooxml.zip({"word/styles.xml": "<w:styles/>"})
        result = await DOCXExtractor().extract(data, _request("broken.docx", "docx"))
        assert result.confidence == 0
        assert result.text == "DOCX file uploaded but no document.xml found."

    @pytest.mark.asyncio
    async def test_corrupt_archive_is_contained(self):
        result = await DOCXExtractor().extract(b"not a zip", _request("broken.docx", "docx"))
        assert result.confidence == 0
        assert result.text == "DOCX extraction encountered an issue."
        assert result.method == "docx-xml"


class TestXLSXExtractor:
    """Excel 통합 문서"""

    def test_shared_strings_with_rich_text_runs(self):
        xml = "<sst><si><t>Plain</t></si><si><r><t>Ri</t></r><r><t>ch</t></r></si><si><t>Last</t></si></sst>"
        assert parse_shared_strings(xml) == ["Plain", "Rich", "Last"]

    def test_resolve_cell_variants(self):
        shared = ["Alice"]
        assert resolve_cell(' t="s"', "<v>0</v>", shared) == "Alice"
        assert resolve_cell(' t="s"', "<v>7</v>", shared) == "7"
        assert resolve_cell("", "<v>42</v>", shared) == "42"
        assert resolve_cell(' t="inlineStr"', "<is><t>Inline</t></is>", shared) == "Inline"
        assert resolve_cell("", "", shared) == ""

    @pytest.mark.asyncio
    async def test_renders_sheets_in_workbook_order(self, ooxml):
        data = ooxml.xlsx({
            "Staff": [["Name", "Dept"], ["Alice", "HR"], ["", ""]],
            "Leave": [["Days"], ["20"]],
        })
        result = await XLSXExtractor().extract(data, _request("staff.xlsx", "xlsx"))

        assert result.method == "xlsx-xml"
        assert result.confidence == 0.9
        assert result.text == "=== Staff ===\nName | Dept\nAlice | HR\n\n=== Leave ===\nDays\n20\n"
        assert result.structured_data == {"sheets": [{"name": "Staff", "rowCount": 2}, {"name": "Leave", "rowCount": 2}]}
        assert result.extras == {"sheetCount": 2, "totalRows": 4}

    @pytest.mark.asyncio
    async def test_inline_strings(self, ooxml):
        data = ooxml.xlsx({"Sheet": [["Inline", "Value"]]}, inline_cells=True)
        result = await XLSXExtractor().extract(data, _request("inline.xlsx", "xlsx"))
        assert "Inline | Value" in result.text

    @pytest.mark.asyncio
    async def test_row_limit_per_sheet(self, ooxml):
        rows = [[f"row{i}"] for i in range(10)]
        result = await XLSXExtractor(max_rows=3).extract(ooxml.xlsx({"Big": rows}), _request("big.xlsx", "xlsx"))
        assert result.extras["totalRows"] == 3
        assert "row3" not in result.text

    @pytest.mark.asyncio
    async def test_corrupt_workbook(self):
        result = await XLSXExtractor().extract(b"\x00\x01", _request("bad.xlsx", "xlsx"))
        assert result.confidence == 0
        assert result.text == "XLSX extraction encountered an issue."
        assert result.extras == {"sheetCount": 0, "totalRows": 0}


class TestPPTXExtractor:
    """PowerPoint 프레젠테이션"""

    def _deck(self, ooxml) -> bytes:
        slides = [
            ooxml.pptx_slide(title="Onboarding", subtitle="HR Team"),
            ooxml.pptx_slide(
                title="Benefits",
                body=["Health insurance", "Pension plan"],
                table=[["Plan", "Cost"], ["Basic", "0"]],
            ),
        ]
        return ooxml.pptx(slides, notes={2: "Mention enrollment deadline"}, title="Employee Onboarding", author="HR")

    def test_parse_structure(self, ooxml):
        doc = parse_pptx(self._deck(ooxml))

        assert doc.metadata.slide_count == 2
        assert doc.metadata.title == "Employee Onboarding"
        assert doc.metadata.author == "HR"
        assert doc.metadata.created_at.startswith("2024-01-01T00:00:00")

        first, second = doc.slides
        assert (first.title, first.subtitle, first.body_text) == ("Onboarding", "HR Team", [])
        assert second.body_text == ["Health insurance", "Pension plan"]
        assert second.tables == [[["Plan", "Cost"], ["Basic", "0"]]]
        assert second.notes == "Mention enrollment deadline"

    def test_slides_follow_presentation_order(self, ooxml):
        slides = [ooxml.pptx_slide(title=f"Slide title {i + 1}") for i in range(11)]
        doc = parse_pptx(ooxml.pptx(slides))
        assert [s.slide_number for s in doc.slides] == list(range(1, 12))

    def test_text_rendering(self, ooxml):
        text = pptx_to_text(parse_pptx(self._deck(ooxml)))

        assert text.startswith("Presentation: Employee Onboarding\n")
        assert "--- Slide 1 ---\nTitle: Onboarding\nSubtitle: HR Team" in text
        assert "Content:\n  • Health insurance\n  • Pension plan" in text
        assert "Table:\n  | Plan | Cost |\n  | Basic | 0 |" in text
        assert "Notes: Mention enrollment deadline" in text

    def test_structured_rendering(self, ooxml):
        structured = pptx_to_structured(parse_pptx(self._deck(ooxml)))
        assert structured["metadata"]["slideCount"] == 2
        assert structured["slides"][1]["tables"] == [{"rows": [["Plan", "Cost"], ["Basic", "0"]]}]

    @pytest.mark.asyncio
    async def test_extractor_result(self, ooxml):
        result = await PPTXExtractor().extract(self._deck(ooxml), _request("deck.pptx", "pptx"))

        assert result.method == "pptx-full"
        assert result.confidence == 0.95
        assert result.extras["slideCount"] == 2
        assert result.extras["presentationTitle"] == "Employee Onboarding"
        assert result.extras["author"] == "HR"
        assert result.extras["slides"] == [
            {"number": 1, "title": "Onboarding", "hasNotes": False, "contentLength": 0},
            {"number": 2, "title": "Benefits", "hasNotes": True, "contentLength": len("Health insurance Pension plan")},
        ]

    @pytest.mark.asyncio
    async def test_parse_error_is_reported(self):
        result = await PPTXExtractor().extract(b"garbage", _request("deck.pptx", "pptx"))
        assert result.confidence == 0
        assert result.method == "pptx-failed"
        assert result.text.startswith("PowerPoint parsing error: ")
        assert result.extras["error"]

    def test_subtitle_slide_with_extra_text_box(self, ooxml):
        deck = ooxml.pptx([ooxml.pptx_slide(title="Orientation", subtitle="Week one", body=["Badge pickup"])])
        slide = parse_pptx(deck).slides[0]
        assert (slide.title, slide.subtitle, slide.body_text) == ("Orientation", "Week one", ["Badge pickup"])

    def test_untitled_slide_uses_first_text_as_title(self, ooxml):
        deck = ooxml.pptx([ooxml.pptx_slide(body=["Holiday calendar", "Office closed Dec 25"])])
        slide = parse_pptx(deck).slides[0]
        assert slide.title == "Holiday calendar"
        assert slide.body_text == ["Office closed Dec 25"]

    @pytest.mark.asyncio
    async def test_rendering_error_is_reported(self, ooxml):
        with patch("docparse.core.extractors.pptx_extractor.pptx_to_text", side_effect=RuntimeError("render failed")):
            result = await PPTXExtractor().extract(self._deck(ooxml), _request("deck.pptx", "pptx"))

        assert result.method == "pptx-failed"
        assert result.confidence == 0
        assert result.text == "PowerPoint parsing error: render failed"
        assert result.extras["error"] == "render failed"
