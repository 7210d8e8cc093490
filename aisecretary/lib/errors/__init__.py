"""에러 처리 라이브러리.

AI 비서 시스템의 에러 코드, 메시지, 예외 클래스를 제공합니다.

주요 컴포넌트:
- ErrorCode: 에러 코드 Enum
- 예외 클래스: AISecretaryException 및 도메인별 예외 클래스
- 포맷팅 함수: 에러 메시지 및 응답 생성 함수
- 양언어 지원: 한국어(기본) 및 영어 메시지

사용 예시:
    >>> from aisecretary.lib.errors import ErrorCode, NotFoundError
    >>>
    >>> raise NotFoundError(ErrorCode.MESSAGE_001, message_id="msg_123")
"""

from .codes import ErrorCode
from .exceptions import (
    AISecretaryException,
    ConfigError,
    GeneralError,
    IntakeError,
    LLMError,
    NotFoundError,
    TicketError,
    get_exception_class,
    raise_for,
    wrap_exception,
)
from .formatter import (
    format_error_response,
    get_all_error_codes,
    get_default_language,
    get_error_codes_by_domain,
    get_error_message,
    get_error_solutions,
    language_from_header,
    normalize_language,
)

__all__ = [
    "ErrorCode",
    "AISecretaryException",
    "IntakeError",
    "NotFoundError",
    "TicketError",
    "LLMError",
    "ConfigError",
    "GeneralError",
    "get_exception_class",
    "raise_for",
    "wrap_exception",
    "get_error_message",
    "get_error_solutions",
    "format_error_response",
    "get_default_language",
    "language_from_header",
    "normalize_language",
    "get_all_error_codes",
    "get_error_codes_by_domain",
]
