"""
📘 DOCX Extractor (ZIP + WordprocessingML regex traversal)
"""
import logging
import re
from typing import Any, Dict, List, Optional

from .base import DocumentExtractor, ExtractorInfo
from ...helper.ooxml_helper import OOXMLPackage, decode_xml_text
from ...models.document_model import ExtractionRequest, ExtractionResult

logger = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"

# <w:p> 또는 <w:p w:rsidR=...> 만 일치 (<w:pPr>, <w:pStyle> 제외)
_PARAGRAPH_OPEN_RE = re.compile(r"<w:p(?:\s[^>]*)?>")
_RUN_TEXT_RE = re.compile(r"<w:t(?:\s[^>]*)?>([^<]*)</w:t>")
_PSTYLE_RE = re.compile(r"<w:pStyle\s+w:val=\"([^\"]+)\"")
_DIGITS_RE = re.compile(r"\d+")
_TABLE_RE = re.compile(r"<w:tbl>[\s\S]*?</w:tbl>")
_ROW_RE = re.compile(r"<w:tr[\s>][\s\S]*?</w:tr>")
_CELL_RE = re.compile(r"<w:tc[\s>][\s\S]*?</w:tc>")


def collect_run_text(xml: str) -> str:
    """<w:t> 런 텍스트 연결 (나머지 마크업 무시)"""
    return "".join(decode_xml_text(t) for t in _RUN_TEXT_RE.findall(xml))


def heading_level(paragraph_xml: str) -> Optional[int]:
    """pStyle 값에 heading 포함 시 레벨 (첫 숫자, 기본 1), 아니면 None"""
    style_match = _PSTYLE_RE.search(paragraph_xml)
    if not style_match:
        return None
    style = style_match.group(1)
    if "heading" not in style.lower():
        return None
    digits = _DIGITS_RE.search(style)
    level = int(digits.group(0)) if digits else 0
    return level or 1


def extract_paragraphs(document_xml: str) -> Dict[str, List[Any]]:
    """문단 목록과 제목 목록"""
    paragraphs: List[str] = []
    headings: List[Dict[str, Any]] = []

    for chunk in _PARAGRAPH_OPEN_RE.split(document_xml):
        paragraph_text = collect_run_text(chunk)
        if not paragraph_text.strip():
            continue

        level = heading_level(chunk)
        if level is not None:
            headings.append({"level": level, "text": paragraph_text})
        paragraphs.append(paragraph_text)

    return {"paragraphs": paragraphs, "headings": headings}


def extract_tables(document_xml: str) -> List[List[str]]:
    """표 -> 행 목록 (셀은 ' | ' 로 연결)"""
    tables: List[List[str]] = []
    for table_xml in _TABLE_RE.findall(document_xml):
        rows: List[str] = []
        for row_xml in _ROW_RE.findall(table_xml):
            cells = [collect_run_text(cell_xml) for cell_xml in _CELL_RE.findall(row_xml)]
            rows.append(" | ".join(cells))
        tables.append(rows)
    return tables


class DOCXExtractor(DocumentExtractor):
    """Word 문서 추출기"""

    stage_label = "DOCX extraction"

    def __init__(self):
        super().__init__("docx-xml")

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        try:
            with OOXMLPackage(data) as package:
                document_xml = package.read_part(DOCUMENT_PART)

            if not document_xml:
                logger.warning(f"WARNING {DOCUMENT_PART} 없음: {request.file_name}")
                return ExtractionResult.failed(
                    "DOCX file uploaded but no document.xml found.",
                    "docx-xml",
                    paragraphCount=0,
                )

            parsed = extract_paragraphs(document_xml)
            tables = extract_tables(document_xml)
            paragraphs = parsed["paragraphs"]

            text = "\n\n".join(paragraphs)
            logger.info(
                f"SUCCESS DOCX 추출: {request.file_name} "
                f"(문단 {len(paragraphs)}, 제목 {len(parsed['headings'])}, 표 {len(tables)})"
            )

            return ExtractionResult(
                text=text or "Document processed successfully.",
                confidence=0.9,
                method="docx-xml",
                structured_data={
                    "headings": parsed["headings"],
                    "tableCount": len(tables),
                    "tables": tables,
                },
                extras={"paragraphCount": len(paragraphs)},
            )

        except Exception as e:
            logger.error(f"ERROR DOCX 추출 실패: {request.file_name} ({e})")
            return ExtractionResult.failed(
                "DOCX extraction encountered an issue.",
                "docx-xml",
                paragraphCount=0,
            )

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description="word/document.xml 문단/제목/표 정규식 추출",
            type_keys=["docx"],
        )
