"""
🧠 Document Parse Service
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..core.config import Settings, get_settings
from ..core.extractors.factory import ExtractorFactory
from ..core.file_types import DEFAULT_REGISTRY, FileTypeRegistry, get_extension, resolve_type
from ..helper.text_helper import TextHelper
from ..models.document_model import (
    ExtractionRequest,
    ExtractionResult,
    ProcessingMetadata,
    UploadedDocument,
)
from .enhancement_service import ContentEnhancer
from .llm_factory import TextCompleter

logger = logging.getLogger(__name__)


class DocumentParseService:
    """업로드 문서 파싱 파이프라인

    타입 결정 -> 포맷별 추출 -> (선택) AI 보정 -> 통계/언어 -> 응답 구성.
    요청 간 공유 상태가 없어 동시 호출에 안전하다.
    """

    def __init__(
        self,
        completer: Optional[TextCompleter] = None,
        settings: Optional[Settings] = None,
        registry: FileTypeRegistry = DEFAULT_REGISTRY,
    ):
        self.settings = settings or get_settings()
        self.registry = registry
        self.text_helper = TextHelper()
        self.extractors = ExtractorFactory(
            completer=completer,
            timeout_seconds=self.settings.LLM_TIMEOUT_SECONDS,
            xlsx_max_rows=self.settings.XLSX_MAX_ROWS,
        )
        self.enhancer = ContentEnhancer(
            completer=completer,
            threshold=self.settings.ENHANCEMENT_CONFIDENCE_THRESHOLD,
            min_length=self.settings.ENHANCEMENT_MIN_LENGTH,
            slice_chars=self.settings.ENHANCEMENT_SLICE_CHARS,
            timeout_seconds=self.settings.LLM_TIMEOUT_SECONDS,
            max_tokens=self.settings.LLM_MAX_TOKENS,
        )

    async def _extract(self, data: bytes, request: ExtractionRequest, metadata: ProcessingMetadata) -> ExtractionResult:
        """포맷별 추출기 실행 - 추출기 밖으로 새어 나온 예외도 결과로 변환"""
        extractor = self.extractors.create(request.type_key)
        label = extractor.stage_label

        try:
            if label:
                metadata.add_stage(f"{label} starting")
            result = await extractor.extract(data, request)
            if label:
                metadata.add_stage(f"{label} complete")
            return result
        except Exception as e:
            message = str(e) or "Unknown"
            logger.exception(f"ERROR 추출기 예외: {request.file_name} ({extractor.name})")
            metadata.merge({"extractionError": message})
            return ExtractionResult.failed(f"Extraction error: {message}", "error")

    async def parse(self, file_name: str, declared_mime: str, data: bytes) -> Dict[str, Any]:
        """문서 하나를 파싱해 응답 본문(dict) 반환"""
        declared_mime = declared_mime or ""
        metadata = ProcessingMetadata(
            file_name=file_name,
            file_type=declared_mime,
            extension=get_extension(file_name),
            size=len(data),
        )
        metadata.add_stage("File received")

        logger.info(f"STEP1 문서 파싱 시작: {file_name} ({metadata.size} bytes, {declared_mime or 'MIME 없음'})")
        metadata.add_stage("Buffer loaded")

        # 1. 타입 결정
        type_key = resolve_type(file_name, declared_mime, self.registry)
        metadata.detected_type = type_key
        metadata.category = self.registry.category_for(type_key)
        logger.info(f"STEP2 타입 결정: {type_key} ({metadata.category})")

        # 2. 포맷별 추출
        request = ExtractionRequest(file_name=file_name, type_key=type_key, mime_type=declared_mime, size=len(data))
        result = await self._extract(data, request, metadata)
        metadata.merge(result.extras)
        metadata.add_stage("Content extraction complete")
        logger.info(f"STEP3 추출 완료: {result.method} (신뢰도 {result.confidence})")

        content = result.text
        confidence = result.confidence

        # 3. 낮은 신뢰도 AI 보정
        if self.enhancer.should_enhance(content, confidence):
            metadata.add_stage("AI enhancement starting")
            outcome = await self.enhancer.maybe_enhance(content, confidence, file_name)
            if outcome.enhanced:
                content = outcome.text
                confidence = outcome.confidence
                metadata.merge({"aiEnhanced": True, "originalConfidence": outcome.original_confidence})
            metadata.add_stage("AI enhancement complete")

        # 4. 통계 / 언어 / 미리보기
        stats = self.text_helper.summarize(content)
        language = self.text_helper.detect_language(content)
        preview = self.text_helper.make_preview(content, self.settings.PREVIEW_CHARS)

        processing_time = metadata.elapsed_ms()
        metadata.add_stage("Processing complete")
        logger.info(f"SUCCESS 문서 파싱 완료: {file_name} ({processing_time}ms, {stats.word_count} words)")

        return {
            "success": True,
            "content": content,
            "structuredData": result.structured_data,
            "preview": preview,
            "metadata": {
                **metadata.to_dict(),
                "type": type_key,
                "extractionMethod": result.method,
                "confidence": confidence,
                "language": language,
                "processingTimeMs": processing_time,
            },
            "stats": stats.to_dict(),
            "characterCount": len(content),
            "wordCount": stats.word_count,
        }

    async def parse_batch(self, uploads: List[UploadedDocument]) -> Dict[str, Any]:
        """여러 문서를 동시성 제한 하에 파싱 (항목별 실패 격리, 입력 순서 유지)"""
        semaphore = asyncio.Semaphore(self.settings.BATCH_CONCURRENCY)

        async def run(index: int, upload: UploadedDocument) -> Dict[str, Any]:
            item = {"index": index, "fileName": upload.file_name}
            if upload.error is not None or upload.data is None:
                return {**item, "success": False, "error": upload.error or "No file provided"}

            async with semaphore:
                try:
                    result = await self.parse(upload.file_name, upload.mime_type, upload.data)
                    return {**item, "success": True, "result": result}
                except Exception as e:
                    logger.exception(f"ERROR 배치 항목 실패: {upload.file_name}")
                    return {**item, "success": False, "error": str(e) or "Unknown error"}

        logger.info(f"STEP_BATCH 배치 파싱 시작: {len(uploads)}개 (동시 {self.settings.BATCH_CONCURRENCY})")
        results = await asyncio.gather(*(run(i, upload) for i, upload in enumerate(uploads)))

        successful = sum(1 for r in results if r["success"])
        logger.info(f"SUCCESS 배치 파싱 완료: 성공 {successful}, 실패 {len(results) - successful}")

        return {
            "success": True,
            "totalProcessed": len(uploads),
            "successful": successful,
            "failed": len(results) - successful,
            "results": list(results),
        }
