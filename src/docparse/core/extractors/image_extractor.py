"""
🖼️ Image Extractor (AI vision OCR)
"""
import asyncio
import base64
import io
import logging
from typing import Dict, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .base import DocumentExtractor, ExtractorInfo
from ..exceptions import CompletionError
from ...models.document_model import ExtractionRequest, ExtractionResult
from ...service.llm_factory import TextCompleter

logger = logging.getLogger(__name__)

OCR_INSTRUCTION = (
    "Extract ALL text from this image. Include every word, number, and symbol you can see. "
    "Preserve the original formatting and structure as much as possible. "
    "If this is a scanned document, extract the full document text. "
    "Output ONLY the extracted text, nothing else."
)
OCR_MAX_TOKENS = 4000
MIN_CONFIDENT_CHARS = 50

_DEFAULT_MIME: Dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "tiff": "image/tiff",
    "webp": "image/webp",
}


def read_image_size(data: bytes) -> Optional[Tuple[int, int]]:
    """Pillow 로 헤더만 읽어 (width, height), 디코딩 불가면 None"""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.debug(f"이미지 크기 확인 불가: {e}")
        return None


def to_data_url(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class ImageOCRExtractor(DocumentExtractor):
    """이미지 OCR 추출기 - completer 가 없으면 네트워크 호출 없이 안내문 반환"""

    stage_label = "Image OCR"

    def __init__(self, completer: Optional[TextCompleter] = None, timeout_seconds: float = 60.0):
        super().__init__("ai-vision-ocr")
        self.completer = completer
        self.timeout_seconds = timeout_seconds

    async def _run_ocr(self, data_url: str) -> str:
        try:
            return await asyncio.wait_for(
                self.completer.complete_with_image(OCR_INSTRUCTION, data_url, max_tokens=OCR_MAX_TOKENS),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise CompletionError("OCR 요청 시간 초과", details={"timeout": self.timeout_seconds}) from e

    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        extras = {}
        size = read_image_size(data)
        if size:
            extras["imageWidth"], extras["imageHeight"] = size

        if self.completer is None:
            return ExtractionResult.failed(
                "Image uploaded. OCR requires AI API key to extract text from images.",
                "ocr-unavailable",
                **extras,
            )

        mime_type = request.mime_type or _DEFAULT_MIME.get(request.type_key, "application/octet-stream")

        try:
            logger.info(f"STEP OCR 요청: {request.file_name} ({len(data)} bytes)")
            extracted = (await self._run_ocr(to_data_url(data, mime_type))).strip()
        except Exception as e:
            logger.error(f"ERROR OCR 실패: {request.file_name} ({e})")
            return ExtractionResult.failed("Image OCR processing failed.", "ocr-error", **extras)

        logger.info(f"SUCCESS OCR 완료: {request.file_name} ({len(extracted)}자)")
        return ExtractionResult(
            text=extracted or "No text could be extracted from this image.",
            confidence=0.85 if len(extracted) > MIN_CONFIDENT_CHARS else 0.5,
            method="ai-vision-ocr",
            extras=extras,
        )

    def get_extractor_info(self) -> ExtractorInfo:
        return ExtractorInfo(
            name=self.name,
            description="멀티모달 LLM 으로 이미지 내 텍스트 추출 (API 키 필요)",
            type_keys=list(_DEFAULT_MIME),
        )
