"""
📄 Document Parse API Routes
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from ..core.config import get_settings
from ..core.exceptions import (
    DocParseException,
    FileTooLargeError,
    InputValidationError,
    NoFileProvidedError,
)
from ..core.file_types import DEFAULT_REGISTRY, FileCategory
from ..models.document_model import UploadedDocument
from ..schemas.document_schema import (
    BatchParseResponse,
    ErrorResponse,
    ParseDocumentResponse,
    SupportedTypesResponse,
)
from ..service.document_service import DocumentParseService
from ..service.llm_factory import get_default_completer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


# 서비스 의존성 주입
async def get_document_service() -> DocumentParseService:
    """문서 파싱 서비스 의존성 주입"""
    return DocumentParseService(completer=get_default_completer(), settings=get_settings())


async def read_upload(file: UploadFile, max_size: int) -> bytes:
    """크기 제한을 지키며 업로드 읽기 - 선언 크기 먼저, 이후 최대 max_size+1 바이트만 읽음"""
    if file.size is not None and file.size > max_size:
        raise FileTooLargeError(file.size, max_size, file.filename or "")

    data = await file.read(max_size + 1)
    if len(data) > max_size:
        raise FileTooLargeError(len(data), max_size, file.filename or "")
    return data


def _failure_response(e: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to parse document", "details": str(e) or "Unknown error"},
    )


@router.post(
    "/parse-document",
    response_model=ParseDocumentResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def parse_document(
    file: Optional[UploadFile] = File(None),
    service: DocumentParseService = Depends(get_document_service),
) -> JSONResponse:
    """
    📄 문서 하나 업로드 후 텍스트 추출
    - 확장자 우선 타입 결정
    - 포맷별 추출 + 신뢰도
    - 낮은 신뢰도는 AI 보정 (API 키 설정 시)
    """
    if file is None:
        raise NoFileProvidedError()

    try:
        data = await read_upload(file, service.settings.MAX_FILE_SIZE)
        result = await service.parse(file.filename or "", file.content_type or "", data)
        response = ParseDocumentResponse.model_validate(result)
        return JSONResponse(content=response.model_dump(by_alias=True))

    except DocParseException:
        raise
    except Exception as e:
        logger.exception(f"ERROR 문서 파싱 실패: {file.filename}")
        return _failure_response(e)


@router.post(
    "/parse-documents",
    response_model=BatchParseResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def parse_documents(
    files: Optional[List[UploadFile]] = File(None),
    service: DocumentParseService = Depends(get_document_service),
) -> JSONResponse:
    """📚 여러 문서 일괄 파싱 (항목별 실패는 결과에 기록)"""
    if not files:
        raise NoFileProvidedError()

    try:
        uploads: List[UploadedDocument] = []
        for file in files:
            name = file.filename or ""
            try:
                data = await read_upload(file, service.settings.MAX_FILE_SIZE)
                uploads.append(UploadedDocument(file_name=name, mime_type=file.content_type or "", data=data))
            except InputValidationError as e:
                logger.warning(f"WARNING 배치 항목 거부: {name} ({e.message})")
                uploads.append(UploadedDocument(file_name=name, error=e.message))

        result = await service.parse_batch(uploads)
        response = BatchParseResponse.model_validate(result)
        return JSONResponse(content=response.model_dump(by_alias=True))

    except DocParseException:
        raise
    except Exception as e:
        logger.exception("ERROR 배치 파싱 실패")
        return _failure_response(e)


@router.get("/supported-types", response_model=SupportedTypesResponse)
async def get_supported_types() -> SupportedTypesResponse:
    """🗂️ 지원 파일 타입과 카테고리"""
    return SupportedTypesResponse.model_validate({
        "types": DEFAULT_REGISTRY.to_dict(),
        "categories": [category.value for category in FileCategory],
    })
