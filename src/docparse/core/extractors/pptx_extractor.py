"""
📙 PPTX Extractor
"""
import asyncio
import logging

from .base import DocumentExtractor, ExtractorInfo
from ..exceptions import DocParseException
from ...helper.pptx_helper import PresentationDocument, parse_pptx, pptx_to_structured, pptx_to_text
from ...models.document_model import ExtractionRequest, ExtractionResult

logger = logging.getLogger(__name__)


class PPTXExtractor(DocumentExtractor):
    """PowerPoint 추출기 (python-pptx 기반 슬라이드 파서 사용)"""

    stage_label = "PowerPoint extraction"

    def __init__(self):
        super().__init__("pptx-full")

    def _build_result(self, doc: PresentationDocument) -> ExtractionResult:
        return ExtractionResult(
            text=pptx_to_text(doc),
            confidence=0.95,
            method="pptx-full",
            structured_data=pptx_to_structured(doc),
            extras={
                "slideCount": doc.metadata.slide_count,
                "presentationTitle": doc.metadata.title,
                "author": doc.metadata.author,
                "slides": [
                    {
                        "number": slide.slide_number,
                        "title": slide.title,
                        "hasNotes": bool(slide.notes),
                        "contentLength": len(" ".join(slide.body_text)),
                    }
                    for slide in doc.slides
                ],
            },
        )

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        try:
            # CPU 집약적 파싱은 별도 스레드에서 실행
            loop = asyncio.get_running_loop()
            doc = await loop.run_in_executor(None, parse_pptx, data)
            result = self._build_result(doc)
        except Exception as e:
            message = e.message if isinstance(e, DocParseException) else str(e) or "Unknown error"
            logger.error(f"ERROR PPTX 파싱 실패: {request.file_name} ({message})")
            return ExtractionResult.failed(
                f"PowerPoint parsing error: {message}",
                "pptx-failed",
                error=message,
            )

        logger.info(f"SUCCESS PPTX 추출: {request.file_name} (슬라이드 {doc.metadata.slide_count}개)")
        return result

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description="슬라이드 제목/부제목/본문/표/노트 + 문서 속성",
            type_keys=["pptx", "ppt"],
        )
