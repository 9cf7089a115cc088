"""
📕 PDF Heuristic Extractor

No PDF library is involved: the binary is decoded leniently and mined with
three independent regex strategies over the decoded text. Each strategy is a
pure function so it can be tested without building a real PDF.
"""
import asyncio
import logging
import re
from typing import List

from .base import DocumentExtractor, ExtractorInfo
from ...helper.text_helper import decode_text
from ...models.document_model import ExtractionRequest, ExtractionResult

logger = logging.getLogger(__name__)

MIN_EXTRACTED_CHARS = 100

PDF_LIMITED_MESSAGE = (
    "PDF uploaded. Complex formatting detected - some content may not be extracted. "
    "Consider using OCR for scanned documents."
)
PDF_ERROR_MESSAGE = "PDF processing encountered an issue."

_TEXT_BLOCK_RE = re.compile(r"BT[\s\S]*?ET")
_TJ_SINGLE_RE = re.compile(r"\(([^)]*)\)\s*Tj")
_TJ_ARRAY_RE = re.compile(r"\[([^\]]*)\]\s*TJ", re.IGNORECASE)
_STRING_LITERAL_RE = re.compile(r"\(([^)]*)\)")
_PLAIN_RUN_RE = re.compile(r"[A-Za-z][A-Za-z0-9\s.,;:!?'\"()-]{20,}")
_STREAM_RE = re.compile(r"stream\s*([\s\S]*?)\s*endstream")
_STREAM_READABLE_RE = re.compile(r"[A-Za-z\s]{10,}")
_PAGE_RE = re.compile(r"/Type\s*/Page[^s]")

_WHITESPACE_RE = re.compile(r"\s+")
_OUTSIDE_LATIN_RE = re.compile(r"[^\x20-\x7E\n\u00C0-\u024F]")


# =============================================================================
# 휴리스틱 (순수 함수)
# =============================================================================


def extract_text_operators(text: str) -> List[str]:
    """BT...ET 블록 안의 Tj / TJ 문자열 리터럴"""
    matches: List[str] = []
    for block in _TEXT_BLOCK_RE.findall(text):
        for literal in _TJ_SINGLE_RE.findall(block):
            if literal:
                matches.append(literal)
        for array_body in _TJ_ARRAY_RE.findall(block):
            for literal in _STRING_LITERAL_RE.findall(array_body):
                if literal:
                    matches.append(literal)
    return matches


def extract_plain_runs(text: str) -> List[str]:
    """구조와 무관한 20자 이상 출력 가능 ASCII 연속 구간"""
    return _PLAIN_RUN_RE.findall(text)


def extract_stream_runs(text: str) -> List[str]:
    """stream...endstream 내부의 10자 이상 문자/공백 연속 구간"""
    matches: List[str] = []
    for stream_body in _STREAM_RE.findall(text):
        matches.extend(_STREAM_READABLE_RE.findall(stream_body))
    return matches


def clean_extracted_text(text: str) -> str:
    """이스케이프 복원, 공백 정리, 라틴 확장 범위 밖 문자 제거"""
    text = text.replace("\\n", "\n").replace("\\r", "").replace("\\t", " ")
    text = _WHITESPACE_RE.sub(" ", text)
    text = _OUTSIDE_LATIN_RE.sub(" ", text)
    return text.strip()


def count_pages(text: str) -> int:
    """/Type /Page 개수 (/Type /Pages 제외) - 근사치"""
    return len(_PAGE_RE.findall(text))


def merge_unique(*groups: List[str]) -> List[str]:
    """등장 순서를 유지한 중복 제거 합집합"""
    seen: dict = {}
    for group in groups:
        for item in group:
            seen.setdefault(item, None)
    return list(seen)


# =============================================================================
# 추출기
# =============================================================================


class PDFHeuristicExtractor(DocumentExtractor):
    """정규식 기반 PDF 텍스트 추출기"""

    stage_label = "PDF extraction"

    def __init__(self):
        super().__init__("pdf-binary-parse")

    def _parse(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        """동기 휴리스틱 추출 (예외는 호출자가 처리)"""
        text = decode_text(data)

        operator_matches = extract_text_operators(text) + extract_stream_runs(text)
        plain_matches = extract_plain_runs(text)
        page_count = count_pages(text)

        merged = " ".join(merge_unique(operator_matches, plain_matches))
        cleaned = clean_extracted_text(merged)

        if len(cleaned) > MIN_EXTRACTED_CHARS:
            logger.info(f"SUCCESS PDF 휴리스틱 추출: {request.file_name} ({len(cleaned)}자, {page_count}페이지)")
            return ExtractionResult(
                text=cleaned,
                confidence=0.7,
                method="pdf-binary-parse",
                extras={"pageCount": page_count},
            )

        logger.info(f"WARNING PDF 추출 텍스트 부족: {request.file_name} ({len(cleaned)}자)")
        return ExtractionResult(
            text=PDF_LIMITED_MESSAGE,
            confidence=0.3,
            method="pdf-limited",
            extras={"pageCount": page_count},
        )

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        try:
            # CPU 집약적 정규식 탐색은 별도 스레드에서 실행
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, self._parse, data, request)
        except Exception as e:
            logger.error(f"ERROR PDF 추출 실패: {request.file_name} ({e})")
            return ExtractionResult.failed(PDF_ERROR_MESSAGE, "pdf-error")

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description="BT/ET 연산자, 평문 구간, 스트림 구간 정규식 탐색",
            type_keys=["pdf"],
        )
