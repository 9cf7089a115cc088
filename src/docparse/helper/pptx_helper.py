"""
📊 PPTX Parser Helper

python-pptx 기반 슬라이드 파서: 제목, 부제목, 본문, 표, 발표자 노트,
문서 속성(core properties) 을 읽어 직렬화 가능한 구조로 변환한다.
"""
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from pptx import Presentation
from pptx.enum.shapes import PP_PLACEHOLDER
from pptx.shapes.group import GroupShape

logger = logging.getLogger(__name__)

TITLE_PLACEHOLDERS = (PP_PLACEHOLDER.TITLE, PP_PLACEHOLDER.CENTER_TITLE, PP_PLACEHOLDER.VERTICAL_TITLE)
SUBTITLE_PLACEHOLDERS = (PP_PLACEHOLDER.SUBTITLE,)


@dataclass
class SlideContent:
    """슬라이드 내용"""
    slide_number: int
    title: str = ""
    subtitle: str = ""
    body_text: List[str] = field(default_factory=list)
    notes: str = ""
    tables: List[List[List[str]]] = field(default_factory=list)


@dataclass
class PresentationMetadata:
    """프레젠테이션 문서 속성"""
    title: str = ""
    author: str = ""
    created_at: str = ""
    modified_at: str = ""
    slide_count: int = 0


@dataclass
class PresentationDocument:
    """파싱된 프레젠테이션"""
    slides: List[SlideContent]
    metadata: PresentationMetadata


def _iter_shapes(shapes) -> Iterator[Any]:
    """그룹 도형 안쪽까지 펼쳐서 순회"""
    for shape in shapes:
        if isinstance(shape, GroupShape):
            yield from _iter_shapes(shape.shapes)
        else:
            yield shape


def _placeholder_type(shape) -> Optional[PP_PLACEHOLDER]:
    if not shape.is_placeholder:
        return None
    return shape.placeholder_format.type


def _paragraph_texts(text_frame) -> List[str]:
    texts = []
    for paragraph in text_frame.paragraphs:
        text = paragraph.text.strip()
        if text:
            texts.append(text)
    return texts


def _shape_text(shape) -> str:
    return " ".join(_paragraph_texts(shape.text_frame)) if shape.has_text_frame else ""


def _table_rows(table) -> List[List[str]]:
    return [[cell.text.strip() for cell in row.cells] for row in table.rows]


def parse_slide(slide, slide_number: int) -> SlideContent:
    """python-pptx 슬라이드 하나를 구조화"""
    title_shape = slide.shapes.title
    title = _shape_text(title_shape) if title_shape is not None else ""
    subtitle = ""
    body: List[str] = []
    tables: List[List[List[str]]] = []

    for shape in _iter_shapes(slide.shapes):
        if getattr(shape, "has_table", False):
            rows = _table_rows(shape.table)
            if rows:
                tables.append(rows)
            continue

        if not shape.has_text_frame:
            continue

        kind = _placeholder_type(shape)
        if kind in TITLE_PLACEHOLDERS:
            continue
        if kind in SUBTITLE_PLACEHOLDERS:
            subtitle = subtitle or _shape_text(shape)
            continue

        for text in _paragraph_texts(shape.text_frame):
            if text not in body:
                body.append(text)

    # 제목 자리표시자가 없으면 첫 번째 텍스트를 제목으로
    if not title and body:
        title = body.pop(0)

    body = [text for text in body if text not in (title, subtitle)]

    notes = ""
    if slide.has_notes_slide:
        notes_frame = slide.notes_slide.notes_text_frame
        if notes_frame is not None:
            notes = " ".join(_paragraph_texts(notes_frame))

    return SlideContent(
        slide_number=slide_number,
        title=title,
        subtitle=subtitle,
        body_text=body,
        notes=notes,
        tables=tables,
    )


def _timestamp(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""


def parse_core_properties(core_properties) -> PresentationMetadata:
    return PresentationMetadata(
        title=core_properties.title or "",
        author=core_properties.author or "",
        created_at=_timestamp(core_properties.created),
        modified_at=_timestamp(core_properties.modified),
    )


def parse_pptx(data: bytes) -> PresentationDocument:
    """PPTX 바이트 -> PresentationDocument (열 수 없는 파일이면 예외 전파)"""
    prs = Presentation(io.BytesIO(data))

    slides = [parse_slide(slide, number) for number, slide in enumerate(prs.slides, start=1)]
    metadata = parse_core_properties(prs.core_properties)
    metadata.slide_count = len(slides)

    logger.debug(f"PPTX 파싱 완료: 슬라이드 {len(slides)}개")
    return PresentationDocument(slides=slides, metadata=metadata)


def pptx_to_text(doc: PresentationDocument) -> str:
    """읽기용 텍스트 렌더링"""
    lines: List[str] = []

    if doc.metadata.title:
        lines.append(f"Presentation: {doc.metadata.title}")
        lines.append("")

    for slide in doc.slides:
        lines.append(f"--- Slide {slide.slide_number} ---")
        if slide.title:
            lines.append(f"Title: {slide.title}")
        if slide.subtitle:
            lines.append(f"Subtitle: {slide.subtitle}")

        if slide.body_text:
            lines.append("")
            lines.append("Content:")
            lines.extend(f"  • {text}" for text in slide.body_text)

        for table in slide.tables:
            lines.append("")
            lines.append("Table:")
            lines.extend(f"  | {' | '.join(row)} |" for row in table)

        if slide.notes:
            lines.append("")
            lines.append(f"Notes: {slide.notes}")
        lines.append("")

    return "\n".join(lines)


def pptx_to_structured(doc: PresentationDocument) -> Dict[str, Any]:
    """JSON 직렬화용 구조"""
    meta = doc.metadata
    return {
        "metadata": {
            "title": meta.title,
            "author": meta.author,
            "slideCount": meta.slide_count,
            "createdAt": meta.created_at,
            "modifiedAt": meta.modified_at,
        },
        "slides": [
            {
                "slideNumber": slide.slide_number,
                "title": slide.title,
                "subtitle": slide.subtitle,
                "content": slide.body_text,
                "tables": [{"rows": table} for table in slide.tables],
                "notes": slide.notes,
            }
            for slide in doc.slides
        ],
    }
