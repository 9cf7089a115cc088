"""
✨ Confidence-Gated Content Enhancer
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .llm_factory import TextCompleter

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.7
MIN_CONTENT_LENGTH = 100
SLICE_CHARS = 3000
CONFIDENCE_BOOST = 0.2
MAX_ENHANCED_CONFIDENCE = 0.9
MIN_LENGTH_RATIO = 0.5

ENHANCEMENT_PROMPT = (
    'The following text was extracted from a file named "{file_name}" but may have formatting '
    "issues or garbled characters. Clean it up and make it readable while preserving the original "
    "meaning. If the text looks fine, return it as-is. Only output the cleaned text, nothing else.\n\n"
    "Extracted text:\n{content}"
)


@dataclass
class EnhancementOutcome:
    """보정 결과"""
    text: str
    enhanced: bool
    confidence: float
    original_confidence: Optional[float] = None


class ContentEnhancer:
    """낮은 신뢰도 추출 결과를 LLM 으로 정리"""

    def __init__(
        self,
        completer: Optional[TextCompleter] = None,
        threshold: float = CONFIDENCE_THRESHOLD,
        min_length: int = MIN_CONTENT_LENGTH,
        slice_chars: int = SLICE_CHARS,
        timeout_seconds: float = 60.0,
        max_tokens: int = 4000,
    ):
        self.completer = completer
        self.threshold = threshold
        self.min_length = min_length
        self.slice_chars = slice_chars
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens

    def should_enhance(self, text: str, confidence: float) -> bool:
        return (
            self.completer is not None
            and confidence < self.threshold
            and len(text) > self.min_length
        )

    async def maybe_enhance(self, text: str, confidence: float, file_name: str) -> EnhancementOutcome:
        """조건 충족 시 보정 시도, 실패하면 원문 그대로"""
        unchanged = EnhancementOutcome(text=text, enhanced=False, confidence=confidence)
        if not self.should_enhance(text, confidence):
            return unchanged

        content_slice = text[:self.slice_chars]
        prompt = ENHANCEMENT_PROMPT.format(file_name=file_name, content=content_slice)

        try:
            response = await asyncio.wait_for(
                self.completer.complete(prompt, max_tokens=self.max_tokens),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"WARNING AI 보정 시간 초과: {file_name} ({self.timeout_seconds}s)")
            return unchanged
        except Exception as e:
            logger.warning(f"WARNING AI 보정 실패, 원문 유지: {file_name} ({e})")
            return unchanged

        enhanced = (response or "").strip()
        if enhanced == content_slice or len(enhanced) < MIN_LENGTH_RATIO * len(content_slice):
            logger.info(f"AI 보정 결과 미채택: {file_name}")
            return unchanged

        new_confidence = min(confidence + CONFIDENCE_BOOST, MAX_ENHANCED_CONFIDENCE)
        logger.info(f"SUCCESS AI 보정 채택: {file_name} (신뢰도 {confidence} -> {new_confidence})")
        return EnhancementOutcome(
            text=enhanced,
            enhanced=True,
            confidence=new_confidence,
            original_confidence=confidence,
        )
