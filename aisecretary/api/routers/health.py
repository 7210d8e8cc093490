"""
Health check API endpoints
시스템 상태 확인 엔드포인트
"""

import os
import time

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...core.di_container import AppContainer
from ...lib.logger import now_kst
from ...modules.core.classification import LLMClassifier

router = APIRouter(tags=["Health"])

# 시작 시간 기록
start_time = time.time()


class HealthResponse(BaseModel):
    """Health 체크 응답 모델"""

    status: str
    timestamp: str
    uptime: float
    version: str = "1.0.0"
    environment: str
    llm_available: bool


def get_uptime() -> float:
    """업타임 반환 (초)"""
    return time.time() - start_time


@router.get("/health", response_model=HealthResponse)
@inject
async def health_check(
    llm_classifier: LLMClassifier = Depends(Provide[AppContainer.llm_classifier]),
    version: str = Depends(Provide[AppContainer.config.app.version]),
) -> HealthResponse:
    """기본 헬스 체크 (LLM 폴백은 선택 사항이므로 상태에 영향 없음)"""
    return HealthResponse(
        status="healthy",
        timestamp=now_kst().isoformat(),
        uptime=round(get_uptime(), 2),
        version=version,
        environment=os.getenv("ENVIRONMENT", "development"),
        llm_available=await llm_classifier.is_available(),
    )
