"""
🗂️ File Type Registry & Resolver

Browsers and users mislabel office formats constantly, so the filename
extension takes precedence and the declared MIME type is only a fallback.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "unknown"


class FileCategory(Enum):
    """파일 카테고리"""
    DOCUMENT = "document"
    TEXT = "text"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    IMAGE = "image"
    DATA = "data"


@dataclass(frozen=True)
class FileTypeDescriptor:
    """레지스트리 항목 (확장자 키, MIME 패턴, 카테고리)"""
    extension_key: str
    mime_patterns: Tuple[str, ...]
    category: FileCategory


class FileTypeRegistry:
    """불변 파일 타입 레지스트리 - 선언 순서가 MIME 검색 순서"""

    def __init__(self, descriptors: Iterable[FileTypeDescriptor]):
        entries: Dict[str, FileTypeDescriptor] = {}
        for descriptor in descriptors:
            key = descriptor.extension_key
            if key != key.lower() or key.startswith(".") or not key:
                raise ValueError(f"레지스트리 키는 점 없는 소문자 확장자여야 합니다: {key!r}")
            if key in entries:
                raise ValueError(f"중복된 레지스트리 키: {key}")
            entries[key] = descriptor
        self._entries: Mapping[str, FileTypeDescriptor] = MappingProxyType(entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[FileTypeDescriptor]:
        return self._entries.get(key)

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def category_for(self, type_key: str) -> str:
        """타입 키의 카테고리 (미등록 시 unknown)"""
        descriptor = self._entries.get(type_key)
        return descriptor.category.value if descriptor else UNKNOWN_TYPE

    def to_dict(self) -> Dict[str, Dict[str, object]]:
        return {
            key: {"mimeTypes": list(d.mime_patterns), "category": d.category.value}
            for key, d in self._entries.items()
        }


def _entry(key: str, mimes: Tuple[str, ...], category: FileCategory) -> FileTypeDescriptor:
    return FileTypeDescriptor(extension_key=key, mime_patterns=mimes, category=category)


DEFAULT_REGISTRY = FileTypeRegistry([
    # 문서
    _entry("pdf", ("application/pdf",), FileCategory.DOCUMENT),
    _entry("docx", ("application/vnd.openxmlformats-officedocument.wordprocessingml.document",), FileCategory.DOCUMENT),
    _entry("doc", ("application/msword",), FileCategory.DOCUMENT),
    _entry("txt", ("text/plain",), FileCategory.TEXT),
    _entry("rtf", ("application/rtf", "text/rtf"), FileCategory.DOCUMENT),
    # 스프레드시트
    _entry("xlsx", ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",), FileCategory.SPREADSHEET),
    _entry("xls", ("application/vnd.ms-excel",), FileCategory.SPREADSHEET),
    _entry("csv", ("text/csv", "application/csv"), FileCategory.SPREADSHEET),
    # 프레젠테이션
    _entry("pptx", ("application/vnd.openxmlformats-officedocument.presentationml.presentation",), FileCategory.PRESENTATION),
    _entry("ppt", ("application/vnd.ms-powerpoint",), FileCategory.PRESENTATION),
    # 이미지 (OCR)
    _entry("jpg", ("image/jpeg",), FileCategory.IMAGE),
    _entry("jpeg", ("image/jpeg",), FileCategory.IMAGE),
    _entry("png", ("image/png",), FileCategory.IMAGE),
    _entry("tiff", ("image/tiff",), FileCategory.IMAGE),
    _entry("webp", ("image/webp",), FileCategory.IMAGE),
    # 기타
    _entry("json", ("application/json",), FileCategory.DATA),
    _entry("xml", ("application/xml", "text/xml"), FileCategory.DATA),
    _entry("html", ("text/html",), FileCategory.DOCUMENT),
    _entry("md", ("text/markdown",), FileCategory.TEXT),
])


def get_extension(file_name: str) -> str:
    """마지막 '.' 이후 문자열 (소문자), 점이 없으면 빈 문자열"""
    name = (file_name or "").lower()
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1]


def resolve_type(
    file_name: str,
    declared_mime: str,
    registry: FileTypeRegistry = DEFAULT_REGISTRY
) -> str:
    """확장자 우선, 다음으로 MIME 부분 일치, 마지막으로 원본 확장자"""
    ext = get_extension(file_name)

    # 1. 확장자 정확히 일치
    if ext and ext in registry:
        return ext

    # 2. MIME 패턴 부분 일치 (벤더 접두사/파라미터 허용)
    mime = declared_mime or ""
    if mime:
        for descriptor in registry:
            key = descriptor.extension_key
            if any(pattern in mime for pattern in descriptor.mime_patterns) or key in mime:
                logger.debug(f"MIME 기반 타입 결정: {file_name} ({mime}) -> {key}")
                return key

    # 3. 알 수 없는 타입
    return ext or UNKNOWN_TYPE
