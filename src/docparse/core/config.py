"""
⚙️ Application Configuration
"""
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # API 설정
    PROJECT_NAME: str = "HR Document Parser API"
    API_VERSION: str = "1.0.0"

    # LLM 설정 (OpenAI 호환 엔드포인트)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_API_BASE: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_VISION_MODEL: str = "gpt-4o"
    LLM_TEMPERATURE: float = 0.0
    LLM_MAX_TOKENS: int = 4000
    LLM_TIMEOUT_SECONDS: float = 60.0

    # 파일 업로드 설정
    MAX_FILE_SIZE: int = 50 * 1024 * 1024  # 50MB
    PREVIEW_CHARS: int = 500
    BATCH_CONCURRENCY: int = 3

    # 추출 설정
    ENHANCEMENT_CONFIDENCE_THRESHOLD: float = 0.7
    ENHANCEMENT_MIN_LENGTH: int = 100
    ENHANCEMENT_SLICE_CHARS: int = 3000
    XLSX_MAX_ROWS: int = 500

    # 로깅 설정
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    model_config = {
        "env_file": ".env",
        "extra": "allow"  # 추가 필드 허용
    }

    @property
    def ai_enabled(self) -> bool:
        return bool(self.OPENAI_API_KEY)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """캐시된 설정 인스턴스 반환"""
    return Settings()


# 전역 설정 인스턴스
settings = get_settings()
