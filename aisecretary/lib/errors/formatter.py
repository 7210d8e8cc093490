"""에러 메시지 포맷팅 유틸리티.

메시지 카탈로그(messages.py)에서 언어별 템플릿과 해결 방법을 꺼내
API 응답 형태로 조립합니다. 지원 언어는 ko(기본), en 입니다.
"""

import os
from typing import Any

from .messages import ERROR_MESSAGES, get_message_template, get_solutions_list

SUPPORTED_LANGUAGES = ("ko", "en")
FALLBACK_LANGUAGE = "ko"


class _KeepMissing(dict[str, Any]):
    """format_map에서 빠진 키를 {key} 그대로 남김"""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def normalize_language(lang: str | None) -> str:
    """'en-US', 'EN' 같은 값을 지원 언어 코드로 정규화"""
    if not lang:
        return get_default_language()
    primary = lang.strip().lower().replace("_", "-").split("-")[0]
    return primary if primary in SUPPORTED_LANGUAGES else FALLBACK_LANGUAGE


def get_default_language() -> str:
    """ERROR_LANGUAGE 환경 변수, 없거나 미지원이면 ko"""
    lang = os.getenv("ERROR_LANGUAGE", FALLBACK_LANGUAGE).strip().lower()
    return lang if lang in SUPPORTED_LANGUAGES else FALLBACK_LANGUAGE


def language_from_header(accept_language: str | None) -> str:
    """Accept-Language 헤더에서 가중치가 가장 높은 지원 언어 선택.

    Example:
        >>> language_from_header("en-US,en;q=0.9,ko;q=0.8")
        'en'
        >>> language_from_header("ja,ko;q=0.5")
        'ko'
    """
    if not accept_language:
        return get_default_language()

    best_lang, best_q = None, -1.0
    for part in accept_language.split(","):
        tag, _, params = part.strip().partition(";")
        primary = tag.strip().lower().split("-")[0]
        if primary not in SUPPORTED_LANGUAGES:
            continue
        q = 1.0
        if params.strip().startswith("q="):
            try:
                q = float(params.strip()[2:])
            except ValueError:
                q = 0.0
        if q > best_q:
            best_lang, best_q = primary, q

    return best_lang or get_default_language()


def get_error_message(error_code: str, lang: str | None = None, **kwargs: Any) -> str:
    """템플릿에 context를 채운 에러 메시지.

    템플릿이 요구하는 키가 빠지면 해당 자리는 {key} 로 남습니다.

    Example:
        >>> get_error_message("TICKET-001", lang="ko", ticket_id="ticket_1")
        '티켓을 찾을 수 없습니다: ticket_1'
    """
    template = get_message_template(error_code, normalize_language(lang))
    if not kwargs:
        return template
    return template.format_map(_KeepMissing(kwargs))


def get_error_solutions(error_code: str, lang: str | None = None) -> list[str]:
    return get_solutions_list(error_code, normalize_language(lang))


def format_error_response(
    error_code: str,
    lang: str | None = None,
    include_solutions: bool = True,
    **context: Any,
) -> dict[str, Any]:
    """에러 응답 본문 생성.

    Example:
        >>> format_error_response("MESSAGE-001", lang="en", message_id="msg_1")
        {'error_code': 'MESSAGE-001', 'message': 'Intake message not found: msg_1', 'solutions': [...]}
    """
    lang = normalize_language(lang)
    response: dict[str, Any] = {
        "error_code": error_code,
        "message": get_error_message(error_code, lang, **context),
    }
    if include_solutions:
        response["solutions"] = get_error_solutions(error_code, lang)
    return response


def get_all_error_codes() -> list[str]:
    return sorted(ERROR_MESSAGES)


def get_error_codes_by_domain(domain: str) -> list[str]:
    """도메인 접두사로 코드 조회 (예: "TICKET" → TICKET-001 ~ TICKET-005)"""
    prefix = f"{domain.upper()}-"
    return [code for code in get_all_error_codes() if code.startswith(prefix)]
