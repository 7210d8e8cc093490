"""커스텀 예외 클래스 모듈.

AI 비서 시스템의 모든 커스텀 예외 클래스를 정의합니다.
각 예외는 에러 코드와 컨텍스트 정보를 포함하며,
양언어 에러 응답을 생성할 수 있습니다.
"""

from typing import Any

from .codes import ErrorCode
from .formatter import format_error_response


class AISecretaryException(Exception):
    """AI 비서 시스템 기본 예외 클래스.

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        error_code: 에러 코드 (예: "TICKET-001")
        context: 에러 컨텍스트 정보 (메시지 포맷팅에 사용)
        status_code: API 계층에서 사용할 HTTP 상태 코드
    """

    status_code: int = 500

    def __init__(self, error_code: str | ErrorCode, **context: Any) -> None:
        self.error_code = error_code.value if isinstance(error_code, ErrorCode) else error_code
        self.context = context

        # Exception의 메시지는 한국어 기본값으로 설정
        message = format_error_response(
            self.error_code, lang="ko", include_solutions=False, **context
        )["message"]
        super().__init__(message)

    def to_dict(self, lang: str = "ko", include_solutions: bool = True) -> dict[str, Any]:
        """에러 응답 딕셔너리로 변환.

        Example:
            >>> exc = NotFoundError(ErrorCode.TICKET_001, ticket_id="ticket_1")
            >>> exc.to_dict(lang="en")["error_code"]
            "TICKET-001"
        """
        return format_error_response(
            self.error_code,
            lang=lang,
            include_solutions=include_solutions,
            **self.context,
        )


# 도메인별 예외 클래스


class IntakeError(AISecretaryException):
    """접수 요청 검증 예외 (필수 필드 누락, 잘못된 상태 전이 등)."""

    status_code = 400


class NotFoundError(AISecretaryException):
    """존재하지 않는 메시지/티켓 참조."""

    status_code = 404


class TicketError(AISecretaryException):
    """티켓 상태 충돌 예외."""

    status_code = 409


class LLMError(AISecretaryException):
    """LLM 분류 백엔드 예외."""

    status_code = 503


class ConfigError(AISecretaryException):
    """설정 관련 예외."""

    pass


class GeneralError(AISecretaryException):
    """일반 예외."""

    pass


# 도메인 기본값과 다른 예외를 쓰는 코드
_CODE_OVERRIDES: dict[str, type[AISecretaryException]] = {
    "MESSAGE-001": NotFoundError,
    "TICKET-001": NotFoundError,
    "TICKET-003": IntakeError,
    "TICKET-004": GeneralError,
    "TICKET-005": IntakeError,
}


def get_exception_class(error_code: str | ErrorCode) -> type[AISecretaryException]:
    """에러 코드에 해당하는 예외 클래스 반환.

    Example:
        >>> get_exception_class("MESSAGE-001").__name__
        'NotFoundError'
    """
    code_str = error_code.value if isinstance(error_code, ErrorCode) else error_code
    if code_str in _CODE_OVERRIDES:
        return _CODE_OVERRIDES[code_str]

    domain = code_str.split("-")[0]

    domain_map: dict[str, type[AISecretaryException]] = {
        "INTAKE": IntakeError,
        "MESSAGE": IntakeError,
        "TICKET": TicketError,
        "LLM": LLMError,
        "CONFIG": ConfigError,
        "GENERAL": GeneralError,
    }

    return domain_map.get(domain, AISecretaryException)


def raise_for(error_code: ErrorCode, **context: Any) -> None:
    """에러 코드에 맞는 예외를 생성해 발생시킴."""
    raise get_exception_class(error_code)(error_code, **context)


def wrap_exception(
    error: Exception,
    default_code: str | ErrorCode = ErrorCode.GENERAL_001,
    **context: Any,
) -> AISecretaryException:
    """기존 예외를 AISecretaryException으로 래핑.

    Example:
        >>> try:
        ...     raise ValueError("Invalid input")
        ... except Exception as e:
        ...     raise wrap_exception(e, "TICKET-004", reason=str(e))
    """
    if isinstance(error, AISecretaryException):
        return error

    code_str = default_code.value if isinstance(default_code, ErrorCode) else default_code

    context["original_error_type"] = type(error).__name__
    context["original_error_message"] = str(error)

    exc_class = get_exception_class(code_str)

    return exc_class(code_str, **context)
