"""
LLM 연동 스키마
텍스트 정리 / 이미지 OCR 호출에 쓰이는 제공업체 설정
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LLMProvider(Enum):
    """지원하는 LLM 제공업체 (OpenAI 호환 API)"""
    OPENAI = "openai"
    XAI = "xai"  # OpenAI 호환 엔드포인트 (base_url 지정)


@dataclass
class LLMConfig:
    """LLM 설정"""
    provider: LLMProvider
    model_name: str
    vision_model_name: str
    api_key: Optional[str] = None
    api_base: Optional[str] = None
    temperature: float = 0.0
    max_tokens: int = 4000
    timeout_seconds: float = 60.0

    def __post_init__(self):
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds는 0보다 커야 합니다")
        if self.max_tokens <= 0:
            raise ValueError("max_tokens는 0보다 커야 합니다")
