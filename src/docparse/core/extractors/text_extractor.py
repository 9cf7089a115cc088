"""
📝 Text-Family Extractors (TXT/MD, CSV, JSON, HTML/XML, fallback)
"""
import json
import logging
import re
from typing import Dict, List

from .base import DocumentExtractor, ExtractorInfo
from ...helper.text_helper import decode_text, is_printable_text
from ...models.document_model import ExtractionRequest, ExtractionResult

logger = logging.getLogger(__name__)

_SCRIPT_RE = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")

# 순서 중요: &amp; 를 마지막에 처리하지 않으면 "&amp;lt;" 가 "<" 로 이중 디코딩됨
_NAMED_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
)


# =============================================================================
# 순수 함수 (단위 테스트 대상)
# =============================================================================


def parse_csv_row(line: str) -> List[str]:
    """따옴표 안의 쉼표는 분리하지 않는 한 줄 토크나이저"""
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def parse_csv(content: str) -> Dict[str, List]:
    """CSV 텍스트 -> {headers, rows} (공백 줄 제외)"""
    lines = [line for line in content.split("\n") if line.strip()]
    if not lines:
        return {"headers": [], "rows": []}

    headers = parse_csv_row(lines[0])
    rows = [parse_csv_row(line) for line in lines[1:]]
    return {"headers": headers, "rows": rows}


def decode_named_entities(text: str) -> str:
    for entity, replacement in _NAMED_ENTITIES:
        text = text.replace(entity, replacement)
    return text


def strip_markup(markup: str, remove_scripts: bool = False) -> str:
    """태그 제거 + 엔티티 디코딩 + 공백 정리"""
    if remove_scripts:
        markup = _SCRIPT_RE.sub("", markup)
        markup = _STYLE_RE.sub("", markup)
    text = _TAG_RE.sub(" ", markup)
    text = decode_named_entities(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


# =============================================================================
# 추출기
# =============================================================================


class PlainTextExtractor(DocumentExtractor):
    """TXT / Markdown 추출기"""

    def __init__(self):
        super().__init__("plain-text")

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        content = decode_text(data)
        return ExtractionResult(
            text=content,
            confidence=1.0,
            method="direct-text",
            extras={"lineCount": len(content.split("\n"))},
        )

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description="UTF-8 텍스트를 그대로 사용",
            type_keys=["txt", "md"],
        )


class CSVExtractor(DocumentExtractor):
    """CSV 추출기"""

    def __init__(self):
        super().__init__("csv")

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        content = decode_text(data)
        csv_data = parse_csv(content)
        return ExtractionResult(
            text=content,
            confidence=1.0,
            method="csv-parse",
            structured_data=csv_data,
            extras={"headers": csv_data["headers"], "rowCount": len(csv_data["rows"])},
        )

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description="따옴표를 처리하는 CSV 토크나이저",
            type_keys=["csv"],
        )


class JSONExtractor(DocumentExtractor):
    """JSON 추출기 - 파싱 실패 시 원문 사용"""

    def __init__(self):
        super().__init__("json")

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        raw = decode_text(data)
        try:
            parsed = json.loads(raw)
            pretty = json.dumps(parsed, indent=2, ensure_ascii=False)
        except (ValueError, RecursionError) as e:
            # 중첩이 너무 깊은 입력도 파싱 실패로 취급
            logger.info(f"JSON 파싱 실패, 원문 사용: {request.file_name} ({type(e).__name__})")
            return ExtractionResult(text=raw, confidence=0.5, method="json-raw")

        return ExtractionResult(
            text=pretty,
            confidence=1.0,
            method="json-parse",
            structured_data=parsed,
        )

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description="JSON 파싱 후 들여쓰기 직렬화",
            type_keys=["json"],
        )


class MarkupExtractor(DocumentExtractor):
    """HTML / XML 태그 제거 추출기"""

    def __init__(self, kind: str):
        super().__init__(f"{kind}-strip")
        self.kind = kind

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        text = strip_markup(decode_text(data), remove_scripts=self.kind == "html")
        return ExtractionResult(text=text, confidence=0.9, method=self.name)

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description=f"{self.kind.upper()} 태그 제거 및 엔티티 디코딩",
            type_keys=[self.kind],
        )


class FallbackTextExtractor(DocumentExtractor):
    """미지원 포맷 - 텍스트로 읽을 수 있으면 사용"""

    def __init__(self):
        super().__init__("fallback")

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        try:
            content = decode_text(data)
        except Exception as e:
            logger.warning(f"WARNING 텍스트 디코딩 실패: {request.file_name} ({e})")
            return ExtractionResult.failed("File uploaded but could not be read as text.", "failed")

        if content and is_printable_text(content):
            return ExtractionResult(text=content, confidence=0.5, method="fallback-text")

        return ExtractionResult.failed(
            "File uploaded but text extraction is not supported for this format.",
            "unsupported",
        )

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description="출력 가능 문자 비율 0.8 초과 시 텍스트로 수용",
            type_keys=[],
        )
