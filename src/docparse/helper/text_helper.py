"""
📝 Text Helper
"""
import logging
import math
import re
from typing import Dict, List

from ..models.document_model import DocumentStats

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200
LANGUAGE_SAMPLE_CHARS = 1000

_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_NON_LETTER_RE = re.compile(r"[^a-z]")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E\n\r\t]")

LANGUAGE_PATTERNS: Dict[str, List[re.Pattern]] = {
    "english": [re.compile(rf"\b{w}\b") for w in ("the", "and", "is", "of", "to")],
    "spanish": [re.compile(rf"\b{w}\b") for w in ("el", "la", "de", "y", "que")],
    "french": [re.compile(rf"\b{w}\b") for w in ("le", "la", "de", "et", "est")],
    "german": [re.compile(rf"\b{w}\b") for w in ("der", "die", "und", "ist", "ein")],
}


def decode_text(data: bytes) -> str:
    """UTF-8 관대한 디코딩 (잘못된 시퀀스는 대체 문자, BOM 제거)"""
    text = data.decode("utf-8", errors="replace")
    if text.startswith("\ufeff"):
        text = text[1:]
    return text


def is_printable_text(text: str) -> bool:
    """출력 가능 문자 비율이 0.8 초과인지"""
    if not text:
        return False
    printable = _NON_PRINTABLE_RE.sub("", text)
    return len(printable) / len(text) > 0.8


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class TextHelper:
    """텍스트 통계 및 언어 감지 유틸리티"""

    @staticmethod
    def summarize(text: str) -> DocumentStats:
        """단어/문장/문단 수, 읽기 시간, 고유 단어 수 계산"""
        words = [w for w in _WHITESPACE_RE.split(text) if w]
        sentences = [s for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]
        paragraphs = [p for p in _PARAGRAPH_SPLIT_RE.split(text) if p.strip()]

        # 빈 문자열도 하나의 고유 단어로 센다 (숫자/기호만 있는 토큰)
        unique_words = {_NON_LETTER_RE.sub("", w.lower()) for w in words}

        word_count = len(words)
        sentence_count = len(sentences)

        return DocumentStats(
            word_count=word_count,
            sentence_count=sentence_count,
            paragraph_count=len(paragraphs),
            avg_words_per_sentence=_round_half_up(word_count / sentence_count) if sentence_count else 0,
            reading_time_minutes=math.ceil(word_count / WORDS_PER_MINUTE),
            unique_words=len(unique_words),
        )

    @staticmethod
    def detect_language(text: str) -> str:
        """흔한 단어 매칭 기반 언어 추정 (동점/무매칭 시 english)"""
        sample = text[:LANGUAGE_SAMPLE_CHARS].lower()

        best_match = "english"
        best_score = 0
        for language, patterns in LANGUAGE_PATTERNS.items():
            score = sum(1 for pattern in patterns if pattern.search(sample))
            if score > best_score:
                best_score = score
                best_match = language

        return best_match

    @staticmethod
    def make_preview(text: str, limit: int = 500) -> str:
        """앞부분 미리보기 (잘린 경우 ... 추가)"""
        return text[:limit] + ("..." if len(text) > limit else "")


# 모듈 수준 단축 함수
summarize = TextHelper.summarize
detect_language = TextHelper.detect_language
