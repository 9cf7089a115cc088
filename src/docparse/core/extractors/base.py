"""
📄 Document Extractor Abstract Interface
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from ...models.document_model import ExtractionRequest, ExtractionResult


@dataclass
class ExtractorInfo:
    """추출기 정보"""
    name: str
    description: str
    type_keys: List[str]


class DocumentExtractor(ABC):
    """포맷별 추출기 추상 인터페이스

    구현체는 전체 함수여야 한다: 어떤 입력에도 ExtractionResult를 반환하고
    예외를 호출자에게 전파하지 않는다.
    """

    # 처리 단계 접두사 ("PDF extraction" -> "PDF extraction starting"), 비어 있으면 기록 안 함
    stage_label: str = ""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def extract(self, data: bytes, request: ExtractionRequest) -> ExtractionResult:
        """원본 바이트에서 텍스트 추출"""
        pass

    @abstractmethod
    def get_extractor_info(self) -> ExtractorInfo:
        """추출기 정보 반환"""
        pass
