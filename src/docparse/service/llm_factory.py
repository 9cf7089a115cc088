"""
LLM 팩토리 패턴 구현
텍스트 정리(enhancement)와 이미지 OCR 에 쓰이는 completion 클라이언트를 추상화
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import openai

from ..core.config import Settings, get_settings
from ..core.exceptions import CompletionError
from ..schemas.llm_schema import LLMConfig, LLMProvider

logger = logging.getLogger(__name__)


class TextCompleter(ABC):
    """텍스트 / 멀티모달 completion 추상 클래스"""

    def __init__(self, config: LLMConfig):
        self.config = config
        self.provider = config.provider
        self.model_name = config.model_name

    @abstractmethod
    async def complete(self, prompt: str, system_prompt: Optional[str] = None, max_tokens: int = 4000) -> str:
        """프롬프트 -> 응답 텍스트"""
        pass

    @abstractmethod
    async def complete_with_image(self, prompt: str, image_data_url: str, max_tokens: int = 4000) -> str:
        """이미지(data URL) + 지시문 -> 응답 텍스트"""
        pass


class OpenAITextCompleter(TextCompleter):
    """OpenAI 호환 Chat Completions 기반 구현"""

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self._setup_client()

    def _setup_client(self):
        """AsyncOpenAI 클라이언트 설정"""
        try:
            self.client = openai.AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.api_base,
                timeout=self.config.timeout_seconds,
            )
            logger.info(f"OpenAI 클라이언트 초기화 완료: {self.model_name} ({self.provider.value})")
        except Exception as e:
            logger.error(f"OpenAI 클라이언트 초기화 실패: {e}")
            raise

    async def _create(self, model: str, messages: List[Dict], max_tokens: int) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=self.config.temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            raise CompletionError(f"{model} 호출 실패", details={"error": str(e)}) from e

        content = response.choices[0].message.content
        if content is None:
            raise CompletionError(f"{model} 응답이 비어있습니다")
        return content

    async def complete(self, prompt: str, system_prompt: Optional[str] = None, max_tokens: int = 4000) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return await self._create(self.model_name, messages, max_tokens)

    async def complete_with_image(self, prompt: str, image_data_url: str, max_tokens: int = 4000) -> str:
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": image_data_url}},
                ],
            }
        ]
        return await self._create(self.config.vision_model_name, messages, max_tokens)


class LLMFactory:
    """LLM 팩토리 클래스"""

    _completers: Dict[LLMProvider, Type[TextCompleter]] = {
        LLMProvider.OPENAI: OpenAITextCompleter,
        LLMProvider.XAI: OpenAITextCompleter,
    }

    @classmethod
    def create_completer(cls, config: LLMConfig) -> TextCompleter:
        """completer 인스턴스 생성"""
        if config.provider not in cls._completers:
            raise ValueError(f"지원하지 않는 LLM 제공업체: {config.provider}")

        completer_class = cls._completers[config.provider]
        return completer_class(config)

    @classmethod
    def get_available_providers(cls) -> List[str]:
        return [provider.value for provider in cls._completers.keys()]

    @staticmethod
    def config_from_settings(settings: Settings) -> LLMConfig:
        base_url = settings.OPENAI_API_BASE or ""
        provider = LLMProvider.XAI if "x.ai" in base_url else LLMProvider.OPENAI
        return LLMConfig(
            provider=provider,
            model_name=settings.OPENAI_MODEL,
            vision_model_name=settings.OPENAI_VISION_MODEL,
            api_key=settings.OPENAI_API_KEY,
            api_base=settings.OPENAI_API_BASE,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout_seconds=settings.LLM_TIMEOUT_SECONDS,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> Optional[TextCompleter]:
        """API 키가 없으면 None (AI 기능 비활성화)"""
        settings = settings or get_settings()
        if not settings.ai_enabled:
            logger.info("OPENAI_API_KEY 미설정 - AI 보정 및 OCR 비활성화")
            return None
        return cls.create_completer(cls.config_from_settings(settings))


# 전역 기본 completer (싱글톤 패턴)
_default_completer: Optional[TextCompleter] = None
_default_initialized = False


def get_default_completer() -> Optional[TextCompleter]:
    """기본 completer 반환 (API 키가 없으면 None)"""
    global _default_completer, _default_initialized

    if not _default_initialized:
        _default_completer = LLMFactory.from_settings(get_settings())
        _default_initialized = True

    return _default_completer


def set_default_completer(completer: Optional[TextCompleter]):
    """기본 completer 설정"""
    global _default_completer, _default_initialized
    _default_completer = completer
    _default_initialized = True
    logger.info(f"기본 completer 변경: {completer.model_name if completer else 'None'}")
