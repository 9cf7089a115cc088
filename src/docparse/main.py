#!/usr/bin/env python3
"""
🚀 FastAPI HR Document Parser
"""
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import document_routes
from .core.config import settings
from .core.exceptions import DocParseException, docparse_exception_handler
from .core.file_types import DEFAULT_REGISTRY
from .schemas.document_schema import HealthResponse


def setup_logging():
    """로깅 설정 (콘솔 + 선택적 파일)"""
    handlers = [logging.StreamHandler()]
    if settings.LOG_TO_FILE:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(settings.LOG_DIR, "app.log"), encoding="utf-8"))

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 시 실행"""
    logger.info(f"🚀 {settings.PROJECT_NAME} 시작 (AI 기능: {'사용' if settings.ai_enabled else '미사용'})")
    yield
    logger.info(f"🛑 {settings.PROJECT_NAME} 종료")


# FastAPI 앱 생성
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="HR 문서 업로드 텍스트 추출 (확장자 우선 타입 결정, 포맷별 휴리스틱, 신뢰도 기반 AI 보정)",
    version=settings.API_VERSION,
    lifespan=lifespan
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 예외 핸들러 / 라우터 등록
app.add_exception_handler(DocParseException, docparse_exception_handler)
app.include_router(document_routes.router)


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "message": settings.PROJECT_NAME,
        "version": settings.API_VERSION,
        "supportedTypes": DEFAULT_REGISTRY.keys(),
        "endpoints": {
            "parse_document": "/parse-document",
            "parse_documents": "/parse-documents",
            "supported_types": "/supported-types",
            "health": "/health"
        }
    }


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """헬스체크 엔드포인트"""
    return HealthResponse(
        status="healthy",
        service=settings.PROJECT_NAME,
        version=settings.API_VERSION,
        ai_enabled=settings.ai_enabled
    )


def main():
    """개발 서버 실행"""
    logger.info("🎯 서버 시작: http://localhost:7000")
    uvicorn.run(
        "docparse.main:app",
        host="0.0.0.0",
        port=7000,
        reload=False,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
