"""
📄 Document Data Models
"""
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class ExtractionRequest:
    """추출기에 전달되는 업로드 정보"""
    file_name: str
    type_key: str
    mime_type: str = ""
    size: int = 0


@dataclass
class UploadedDocument:
    """배치 처리 입력 항목 (입력 검증 실패 시 error 만 설정)"""
    file_name: str
    mime_type: str = ""
    data: Optional[bytes] = None
    error: Optional[str] = None


@dataclass
class ExtractionResult:
    """모든 포맷 추출기의 공통 결과"""
    text: str
    confidence: float
    method: str
    structured_data: Optional[Any] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence는 [0, 1] 범위여야 합니다: {self.confidence}")
        if self.confidence == 0 and not self.text.strip():
            raise ValueError("confidence 0 결과는 설명 메시지가 필요합니다")

    @classmethod
    def failed(cls, message: str, method: str, **extras: Any) -> "ExtractionResult":
        """실패 결과 (confidence 0, 사람이 읽을 수 있는 안내문)"""
        return cls(text=message, confidence=0.0, method=method, extras=extras)


@dataclass
class DocumentStats:
    """최종 텍스트에서 계산된 통계"""
    word_count: int
    sentence_count: int
    paragraph_count: int
    avg_words_per_sentence: int
    reading_time_minutes: int
    unique_words: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "wordCount": self.word_count,
            "sentenceCount": self.sentence_count,
            "paragraphCount": self.paragraph_count,
            "avgWordsPerSentence": self.avg_words_per_sentence,
            "readingTimeMinutes": self.reading_time_minutes,
            "uniqueWords": self.unique_words,
        }


def format_file_size(size: int) -> str:
    """바이트 수를 B/KB/MB 문자열로"""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def now_iso() -> str:
    """UTC ISO-8601 (밀리초, Z 접미사)"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class ProcessingMetadata:
    """요청 단위 처리 메타데이터"""
    file_name: str
    file_type: str
    extension: str
    size: int
    started_at: float = field(default_factory=time.perf_counter)
    processed_at: str = field(default_factory=now_iso)
    processing_stages: List[str] = field(default_factory=list)
    detected_type: str = "unknown"
    category: str = "unknown"
    extras: Dict[str, Any] = field(default_factory=dict)

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)

    def add_stage(self, stage: str) -> None:
        """처리 단계 기록 - "{단계} ({경과}ms)" """
        self.processing_stages.append(f"{stage} ({self.elapsed_ms()}ms)")

    def merge(self, values: Dict[str, Any]) -> None:
        self.extras.update(values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileName": self.file_name,
            "fileType": self.file_type,
            "extension": self.extension,
            "size": self.size,
            "sizeFormatted": format_file_size(self.size),
            "processedAt": self.processed_at,
            "processingStages": list(self.processing_stages),
            "detectedType": self.detected_type,
            "category": self.category,
            **self.extras,
        }
