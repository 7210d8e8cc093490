"""
Structured logging for AI Secretary

structlog 기반 로깅. 모든 이벤트에 KST 타임스탬프와 서비스 컨텍스트가 붙고,
민원 원문/발신자 같은 원시 필드는 렌더링 전에 가려집니다.

환경 변수:
    LOG_LEVEL   기본 INFO (production은 WARNING)
    LOG_FORMAT  console | json
    LOG_DIR     지정 시 개발 환경에서 파일 로그 추가
"""

import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, cast

import structlog
from structlog.stdlib import LoggerFactory

KST = timezone(timedelta(hours=9))

SERVICE_NAME = "ai-secretary"

# 로그에 남으면 안 되는 원시 필드
RAW_FIELDS = frozenset({"content", "sender", "body", "transcript", "caller", "raw_text"})
REDACTED = "[REDACTED]"

_QUIET_LIBRARIES = ("httpx", "httpcore", "urllib3", "uvicorn.access")


def now_kst() -> datetime:
    """현재 KST 시각"""
    return datetime.now(KST)


def add_kst_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict["timestamp"] = now_kst().isoformat()
    return event_dict


def add_service_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("environment", os.getenv("ENVIRONMENT", "development"))
    event_dict["pid"] = os.getpid()
    return event_dict


def redact_raw_fields(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """원문 계열 키의 값을 REDACTED로 치환

    masked_content, masked_sender 처럼 이미 마스킹된 값은 그대로 둡니다.
    """
    for key in RAW_FIELDS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def build_processors(json_output: bool) -> list[Any]:
    """structlog 프로세서 체인 구성"""
    renderer: Any = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_kst_timestamp,
        add_service_context,
        redact_raw_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def _resolve_level(is_production: bool) -> int:
    default = "WARNING" if is_production else "INFO"
    name = os.getenv("LOG_LEVEL", default).upper()
    return getattr(logging, name, logging.INFO)


def configure_logging() -> None:
    """표준 logging 핸들러와 structlog를 환경 변수에 맞춰 설정"""
    is_production = os.getenv("ENVIRONMENT", "development") == "production"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_dir = os.getenv("LOG_DIR")
    if log_dir and not is_production:
        path = Path(log_dir)
        path.mkdir(exist_ok=True, parents=True)
        handlers.append(logging.FileHandler(path / "aisecretary.log", encoding="utf-8"))

    logging.basicConfig(level=_resolve_level(is_production), format="%(message)s", handlers=handlers)
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(os.getenv("LOG_FORMAT", "console").lower() == "json"),
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


configure_logging()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """모듈 로거 반환 (보통 get_logger(__name__))"""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name or SERVICE_NAME))
