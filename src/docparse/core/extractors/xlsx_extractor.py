"""
📗 XLSX Extractor (ZIP + SpreadsheetML regex traversal)
"""
import logging
import re
from typing import Any, Dict, List, Optional

from .base import DocumentExtractor, ExtractorInfo
from ...helper.ooxml_helper import OOXMLPackage, decode_xml_text
from ...models.document_model import ExtractionRequest, ExtractionResult

logger = logging.getLogger(__name__)

SHARED_STRINGS_PART = "xl/sharedStrings.xml"
WORKBOOK_PART = "xl/workbook.xml"
WORKSHEET_PATTERN = r"xl/worksheets/sheet\d+\.xml$"
DEFAULT_MAX_ROWS = 500

_SHARED_ITEM_RE = re.compile(r"<si(?:\s[^>]*)?>([\s\S]*?)</si>")
_TEXT_NODE_RE = re.compile(r"<t(?:\s[^>]*)?>([^<]*)</t>")
_SHEET_NAME_RE = re.compile(r"<sheet\b[^>]*?\bname=\"([^\"]+)\"")
_ROW_RE = re.compile(r"<row\b[^>]*>[\s\S]*?</row>")
# 자기 종료 셀(<c r="A1"/>)이 다음 셀을 삼키지 않도록 분기
_CELL_RE = re.compile(r"<c\b([^>]*?)(?:/>|>([\s\S]*?)</c>)")
_VALUE_RE = re.compile(r"<v>([^<]*)</v>")
_SHARED_TYPE_RE = re.compile(r"\bt=\"s\"")
_INLINE_TYPE_RE = re.compile(r"\bt=\"inlineStr\"")
_SHEET_NUMBER_RE = re.compile(r"sheet(\d+)\.xml$")


def parse_shared_strings(xml: Optional[str]) -> List[str]:
    """공유 문자열 테이블 (<si> 하나당 한 항목, 서식 런은 연결)"""
    if not xml:
        return []
    return [
        "".join(decode_xml_text(t) for t in _TEXT_NODE_RE.findall(item))
        for item in _SHARED_ITEM_RE.findall(xml)
    ]


def parse_sheet_names(xml: Optional[str]) -> List[str]:
    """workbook.xml 선언 순서대로 시트 이름"""
    if not xml:
        return []
    return [decode_xml_text(name) for name in _SHEET_NAME_RE.findall(xml)]


def resolve_cell(attributes: str, body: str, shared_strings: List[str]) -> str:
    """셀 값 해석 - 공유 문자열 인덱스, 인라인 문자열, 리터럴"""
    if _INLINE_TYPE_RE.search(attributes):
        return "".join(decode_xml_text(t) for t in _TEXT_NODE_RE.findall(body))

    value_match = _VALUE_RE.search(body)
    if not value_match:
        return ""
    raw = value_match.group(1)

    if _SHARED_TYPE_RE.search(attributes):
        try:
            index = int(raw)
        except ValueError:
            return raw
        if 0 <= index < len(shared_strings) and shared_strings[index]:
            return shared_strings[index]
        return raw

    return decode_xml_text(raw)


def parse_sheet_rows(sheet_xml: str, shared_strings: List[str], max_rows: int = DEFAULT_MAX_ROWS) -> List[List[str]]:
    """시트의 행 목록 (앞 max_rows 개 행만, 모두 빈 행 제외)"""
    rows: List[List[str]] = []
    for row_xml in _ROW_RE.findall(sheet_xml)[:max_rows]:
        values = [
            resolve_cell(attributes, body or "", shared_strings)
            for attributes, body in _CELL_RE.findall(row_xml)
        ]
        if any(v.strip() for v in values):
            rows.append(values)
    return rows


def _sheet_number(part_name: str) -> int:
    match = _SHEET_NUMBER_RE.search(part_name)
    return int(match.group(1)) if match else 0


def render_sheets(sheets: List[Dict[str, Any]]) -> str:
    parts: List[str] = []
    for sheet in sheets:
        parts.append(f"=== {sheet['name']} ===")
        for row in sheet["rows"]:
            parts.append(" | ".join(row))
        parts.append("")
    return "\n".join(parts)


class XLSXExtractor(DocumentExtractor):
    """Excel 통합 문서 추출기"""

    stage_label = "Excel extraction"

    def __init__(self, max_rows: int = DEFAULT_MAX_ROWS):
        super().__init__("xlsx-xml")
        self.max_rows = max_rows

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        try:
            sheets: List[Dict[str, Any]] = []
            total_rows = 0

            with OOXMLPackage(data) as package:
                shared_strings = parse_shared_strings(package.read_part(SHARED_STRINGS_PART))
                sheet_names = parse_sheet_names(package.read_part(WORKBOOK_PART))

                for i, part_name in enumerate(sorted(package.find_parts(WORKSHEET_PATTERN), key=_sheet_number)):
                    sheet_xml = package.read_part(part_name)
                    if not sheet_xml:
                        continue

                    name = sheet_names[i] if i < len(sheet_names) else f"Sheet {i + 1}"
                    rows = parse_sheet_rows(sheet_xml, shared_strings, self.max_rows)
                    total_rows += len(rows)
                    if rows:
                        sheets.append({"name": name, "rows": rows})

            logger.info(f"SUCCESS XLSX 추출: {request.file_name} (시트 {len(sheets)}, 행 {total_rows})")

            return ExtractionResult(
                text=render_sheets(sheets) or "Spreadsheet processed successfully.",
                confidence=0.9,
                method="xlsx-xml",
                structured_data={
                    "sheets": [{"name": s["name"], "rowCount": len(s["rows"])} for s in sheets],
                },
                extras={"sheetCount": len(sheets), "totalRows": total_rows},
            )

        except Exception as e:
            logger.error(f"ERROR XLSX 추출 실패: {request.file_name} ({e})")
            return ExtractionResult.failed(
                "XLSX extraction encountered an issue.",
                "xlsx-xml",
                sheetCount=0,
                totalRows=0,
            )

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description="공유 문자열 해석 + 시트별 행 추출 (시트당 최대 행 제한)",
            type_keys=["xlsx", "xls"],
        )
