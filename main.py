"""
AI Secretary FastAPI Application
아파트 관리사무소 민원 접수/티켓 관리 백엔드
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

# 환경 변수를 가장 먼저 로드
from dotenv import load_dotenv

env_path = Path(__file__).parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from aisecretary.api.routers import health, intake_router, ticket_router
from aisecretary.core.di_container import AppContainer, cleanup_resources, create_container
from aisecretary.lib.config_loader import ConfigLoader
from aisecretary.lib.errors import (
    AISecretaryException,
    ErrorCode,
    IntakeError,
    language_from_header,
    wrap_exception,
)
from aisecretary.lib.logger import get_logger

logger = get_logger(__name__)


def _error_response(request: Request, exc: AISecretaryException) -> JSONResponse:
    content: dict[str, Any] = {
        "success": False,
        "error": True,
        **exc.to_dict(
            lang=language_from_header(request.headers.get("Accept-Language")),
            include_solutions=True,
        ),
    }

    # DEBUG 모드에서만 컨텍스트 노출
    if os.getenv("DEBUG", "False").lower() == "true":
        content["context"] = {k: str(v) for k, v in exc.context.items()}

    return JSONResponse(status_code=exc.status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """통합 에러 핸들러 등록 (양언어 지원)"""

    @app.exception_handler(AISecretaryException)
    async def aisecretary_exception_handler(
        request: Request, exc: AISecretaryException
    ) -> JSONResponse:
        """도메인 예외 → 예외 타입별 HTTP 상태 코드 (400/404/409/503/500)"""
        logger.info(
            "요청 처리 실패",
            path=request.url.path,
            error_code=exc.error_code,
            status_code=exc.status_code,
        )
        return _error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """요청 본문 검증 실패 → INTAKE-001 (400)"""
        fields = sorted(
            {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
        )
        return _error_response(request, IntakeError(ErrorCode.INTAKE_001, fields=", ".join(fields)))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """일반 예외 핸들러 (fallback)"""
        logger.error("처리되지 않은 예외", path=request.url.path, error=str(exc), exc_info=True)
        wrapped = wrap_exception(exc, default_code=ErrorCode.GENERAL_001)
        return _error_response(request, wrapped)


def create_app(config: dict[str, Any] | None = None) -> FastAPI:
    """
    FastAPI 앱 생성

    Args:
        config: 설정 딕셔너리 (None이면 ConfigLoader로 로드)
    """
    if config is None:
        config = ConfigLoader().load_config(validate=True)

    container: AppContainer = create_container(config)
    container.wire(modules=[health, intake_router, ticket_router])

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "AI Secretary 시작",
            environment=config["app"]["environment"],
            llm_enabled=config["llm"]["enabled"],
        )
        yield
        await cleanup_resources(container)
        container.unwire()
        logger.info("AI Secretary 종료")

    app = FastAPI(
        title="AI Secretary",
        description="아파트 관리사무소 민원 접수 및 티켓 관리 API",
        version=config["app"]["version"],
        lifespan=lifespan,
    )
    app.state.container = container

    # 배포 환경의 CORS 허용 도메인은 ALLOWED_ORIGINS(콤마 구분)로 확장
    allowed_origins = ["http://localhost:3000", "http://localhost:5173"]
    env_allowed_origins = os.getenv("ALLOWED_ORIGINS", "")
    if env_allowed_origins:
        allowed_origins.extend(o.strip() for o in env_allowed_origins.split(",") if o.strip())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(intake_router.router)
    app.include_router(ticket_router.router)

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        """루트 엔드포인트 - 스웨거 페이지로 리다이렉트"""
        return RedirectResponse(url="/docs")

    return app


if __name__ == "__main__":
    app_config = ConfigLoader().load_config(validate=True)
    uvicorn.run(
        create_app(app_config),
        host=app_config["server"]["host"],
        port=app_config["server"]["port"],
    )
