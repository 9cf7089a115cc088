#!/usr/bin/env python3
"""
pytest 설정 파일
- 테스트 환경 구성 (src 를 import 경로에 추가)
- 메모리 상 DOCX / XLSX 생성 픽스처, python-pptx 로 PPTX 생성
- 가짜 completer 픽스처
"""
import asyncio
import io
import os
import sys
import zipfile
from datetime import datetime
from typing import Dict, List, Optional

import pytest
from pptx import Presentation
from pptx.util import Inches

# src 디렉토리를 Python path에 추가
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from docparse.core.config import Settings  # noqa: E402
from docparse.schemas.llm_schema import LLMConfig, LLMProvider  # noqa: E402
from docparse.service.llm_factory import TextCompleter  # noqa: E402


def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "integration: API 통합 테스트 마커"
    )
    config.addinivalue_line(
        "markers", "slow: 느린 테스트 마커"
    )


# =============================================================================
# OOXML 빌더
# =============================================================================


def build_zip(parts: Dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in parts.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def docx_paragraph(text: str, style: Optional[str] = None) -> str:
    props = f'<w:pPr><w:pStyle w:val="{style}"/></w:pPr>' if style else ""
    return f'<w:p w:rsidR="00A1">{props}<w:r><w:t xml:space="preserve">{text}</w:t></w:r></w:p>'


def build_docx(body: str) -> bytes:
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{body}</w:body></w:document>"
    )
    return build_zip({"word/document.xml": document, "[Content_Types].xml": "<Types/>"})


def build_xlsx(sheets: Dict[str, List[List[str]]], inline_cells: bool = False) -> bytes:
    """시트 이름 -> 행 목록, 문자열은 공유 문자열 테이블로 저장"""
    shared: List[str] = []
    parts: Dict[str, str] = {}

    sheet_entries = "".join(
        f'<sheet name="{name}" sheetId="{i + 1}" r:id="rId{i + 1}"/>' for i, name in enumerate(sheets)
    )
    parts["xl/workbook.xml"] = f"<workbook><sheets>{sheet_entries}</sheets></workbook>"

    for i, rows in enumerate(sheets.values()):
        row_xml = []
        for r, row in enumerate(rows):
            cells = []
            for c, value in enumerate(row):
                ref = f"{chr(65 + c)}{r + 1}"
                if value == "":
                    cells.append(f'<c r="{ref}"/>')
                elif value.isdigit():
                    cells.append(f'<c r="{ref}"><v>{value}</v></c>')
                elif inline_cells:
                    cells.append(f'<c r="{ref}" t="inlineStr"><is><t>{value}</t></is></c>')
                else:
                    shared.append(value)
                    cells.append(f'<c r="{ref}" t="s"><v>{len(shared) - 1}</v></c>')
            row_xml.append(f'<row r="{r + 1}">{"".join(cells)}</row>')
        parts[f"xl/worksheets/sheet{i + 1}.xml"] = f'<worksheet><sheetData>{"".join(row_xml)}</sheetData></worksheet>'

    items = "".join(f"<si><t>{s}</t></si>" for s in shared)
    parts["xl/sharedStrings.xml"] = f'<sst count="{len(shared)}">{items}</sst>'
    return build_zip(parts)


def pptx_slide(title: str = "", subtitle: str = "", body: Optional[List[str]] = None, table: Optional[List[List[str]]] = None) -> Dict:
    return {"title": title, "subtitle": subtitle, "body": body or [], "table": table or []}


def _fill_text_frame(text_frame, lines: List[str]) -> None:
    text_frame.text = lines[0]
    for line in lines[1:]:
        text_frame.add_paragraph().text = line


def build_pptx(slides: List[Dict], notes: Optional[Dict[int, str]] = None, title: str = "", author: str = "") -> bytes:
    """python-pptx 기본 템플릿으로 실제 프레젠테이션 생성 (notes 는 1부터 시작하는 슬라이드 번호 기준)"""
    prs = Presentation()
    notes = notes or {}

    for number, spec in enumerate(slides, start=1):
        subtitle = spec.get("subtitle", "")
        body = spec.get("body") or []
        table = spec.get("table") or []

        # 0: Title Slide, 1: Title and Content, 5: Title Only
        if subtitle:
            layout = prs.slide_layouts[0]
        elif body:
            layout = prs.slide_layouts[1]
        else:
            layout = prs.slide_layouts[5]
        slide = prs.slides.add_slide(layout)

        if spec.get("title"):
            slide.shapes.title.text = spec["title"]
        if subtitle:
            slide.placeholders[1].text = subtitle
        if body:
            if subtitle:
                textbox = slide.shapes.add_textbox(Inches(1), Inches(5), Inches(8), Inches(1))
                _fill_text_frame(textbox.text_frame, body)
            else:
                _fill_text_frame(slide.placeholders[1].text_frame, body)
        if table:
            shape = slide.shapes.add_table(len(table), len(table[0]), Inches(1), Inches(5), Inches(8), Inches(1.5))
            for r, row in enumerate(table):
                for c, value in enumerate(row):
                    shape.table.cell(r, c).text = value
        if number in notes:
            slide.notes_slide.notes_text_frame.text = notes[number]

    props = prs.core_properties
    props.title = title
    props.author = author
    props.created = datetime(2024, 1, 1)

    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()


# =============================================================================
# 가짜 completer
# =============================================================================


class FakeCompleter(TextCompleter):
    """호출을 기록하고 정해진 응답을 돌려주는 completer"""

    def __init__(self, response: str = "", image_response: str = "", error: Optional[Exception] = None, delay: float = 0.0):
        super().__init__(LLMConfig(provider=LLMProvider.OPENAI, model_name="fake-model", vision_model_name="fake-vision"))
        self.response = response
        self.image_response = image_response
        self.error = error
        self.delay = delay
        self.calls: List[Dict] = []

    async def _respond(self, value: str) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return value

    async def complete(self, prompt, system_prompt=None, max_tokens=4000):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "max_tokens": max_tokens})
        return await self._respond(self.response)

    async def complete_with_image(self, prompt, image_data_url, max_tokens=4000):
        self.calls.append({"prompt": prompt, "image_data_url": image_data_url, "max_tokens": max_tokens})
        return await self._respond(self.image_response)


# =============================================================================
# 픽스처
# =============================================================================


@pytest.fixture
def ooxml():
    """DOCX / XLSX / PPTX 빌더 모음"""
    class Builders:
        zip = staticmethod(build_zip)
        docx = staticmethod(build_docx)
        docx_paragraph = staticmethod(docx_paragraph)
        xlsx = staticmethod(build_xlsx)
        pptx = staticmethod(build_pptx)
        pptx_slide = staticmethod(pptx_slide)

    return Builders


@pytest.fixture
def fake_completer_class():
    return FakeCompleter


@pytest.fixture
def test_settings():
    """API 키 없는 테스트 설정 (환경 변수와 무관)"""
    return Settings(OPENAI_API_KEY=None, LOG_TO_FILE=False)


@pytest.fixture
def garbled_text():
    """100자를 넘는 낮은 품질 추출 텍스트"""
    return " ".join(["Th1s  d0cum3nt  h@s  g@rbl3d  t3xt  fr0m  @  b@d  PDF  3xtr@ct10n"] * 4)
