"""
📋 Document API Schemas
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """camelCase 응답 키 (snake_case 로도 생성 가능)"""
    model_config = ConfigDict(populate_by_name=True)


class DocumentStatsResponse(CamelModel):
    """문서 통계"""
    word_count: int = Field(..., alias="wordCount")
    sentence_count: int = Field(..., alias="sentenceCount")
    paragraph_count: int = Field(..., alias="paragraphCount")
    avg_words_per_sentence: int = Field(..., alias="avgWordsPerSentence")
    reading_time_minutes: int = Field(..., alias="readingTimeMinutes")
    unique_words: int = Field(..., alias="uniqueWords")


class ParseDocumentResponse(CamelModel):
    """단일 문서 파싱 응답"""
    success: bool = True
    content: str
    structured_data: Optional[Any] = Field(None, alias="structuredData")
    preview: str
    metadata: Dict[str, Any] = Field(..., description="처리 메타데이터 (단계, 타입, 신뢰도 등)")
    stats: DocumentStatsResponse
    character_count: int = Field(..., alias="characterCount")
    word_count: int = Field(..., alias="wordCount")


class BatchItemResult(CamelModel):
    """배치 항목 결과 (성공 시 result, 실패 시 error)"""
    index: int
    file_name: str = Field("", alias="fileName")
    success: bool
    result: Optional[ParseDocumentResponse] = None
    error: Optional[str] = None


class BatchParseResponse(CamelModel):
    """배치 파싱 응답 (입력 순서 유지)"""
    success: bool
    total_processed: int = Field(..., alias="totalProcessed")
    successful: int
    failed: int
    results: List[BatchItemResult]


class SupportedTypeInfo(CamelModel):
    mime_types: List[str] = Field(..., alias="mimeTypes")
    category: str


class SupportedTypesResponse(BaseModel):
    """지원 파일 타입 목록"""
    types: Dict[str, SupportedTypeInfo]
    categories: List[str]


class HealthResponse(CamelModel):
    status: str
    service: str
    version: str
    ai_enabled: bool = Field(..., alias="aiEnabled")


class ErrorResponse(BaseModel):
    """오류 응답"""
    error: str
    details: Optional[str] = None
