"""
🏭 Document Extractor Factory
"""
import logging
from typing import Any, Dict, List, Optional

from .base import DocumentExtractor
from .docx_extractor import DOCXExtractor
from .image_extractor import ImageOCRExtractor
from .pdf_extractor import PDFHeuristicExtractor
from .pptx_extractor import PPTXExtractor
from .text_extractor import (
    CSVExtractor,
    FallbackTextExtractor,
    JSONExtractor,
    MarkupExtractor,
    PlainTextExtractor,
)
from .xlsx_extractor import DEFAULT_MAX_ROWS, XLSXExtractor
from ...service.llm_factory import TextCompleter

logger = logging.getLogger(__name__)


class ExtractorFactory:
    """타입 키 -> 추출기 매핑 (미등록/미지원 타입은 fallback)

    doc, rtf 는 전용 추출기가 없어 fallback 으로 처리된다.
    """

    def __init__(
        self,
        completer: Optional[TextCompleter] = None,
        timeout_seconds: float = 60.0,
        xlsx_max_rows: int = DEFAULT_MAX_ROWS,
    ):
        spreadsheet = XLSXExtractor(max_rows=xlsx_max_rows)
        presentation = PPTXExtractor()
        plain_text = PlainTextExtractor()
        image = ImageOCRExtractor(completer=completer, timeout_seconds=timeout_seconds)

        self._fallback = FallbackTextExtractor()
        self._extractors: Dict[str, DocumentExtractor] = {
            "pdf": PDFHeuristicExtractor(),
            "docx": DOCXExtractor(),
            "xlsx": spreadsheet,
            "xls": spreadsheet,
            "pptx": presentation,
            "ppt": presentation,
            "txt": plain_text,
            "md": plain_text,
            "csv": CSVExtractor(),
            "json": JSONExtractor(),
            "html": MarkupExtractor("html"),
            "xml": MarkupExtractor("xml"),
            "jpg": image,
            "jpeg": image,
            "png": image,
            "tiff": image,
            "webp": image,
        }

    def create(self, type_key: str) -> DocumentExtractor:
        """타입 키에 해당하는 추출기 (없으면 fallback)"""
        extractor = self._extractors.get(type_key)
        if extractor is None:
            logger.debug(f"전용 추출기 없음, fallback 사용: {type_key}")
            return self._fallback
        return extractor

    def get_supported_types(self) -> List[str]:
        return list(self._extractors.keys())

    def get_all_extractors_info(self) -> Dict[str, Dict[str, Any]]:
        """추출기별 정보 (이름 기준 중복 제거)"""
        all_info: Dict[str, Dict[str, Any]] = {}
        for extractor in [*self._extractors.values(), self._fallback]:
            info = extractor.get_extractor_info()
            all_info[info.name] = {"description": info.description, "typeKeys": info.type_keys}
        return all_info
