"""에러 메시지 및 해결 방법 저장소.

모든 에러 메시지를 한국어와 영어로 저장하며,
각 에러에 대한 해결 방법도 제공합니다.
"""


# 에러 메시지 저장소: {error_code: {"ko": "한국어 메시지", "en": "English message"}}
ERROR_MESSAGES: dict[str, dict[str, str]] = {
    # INTAKE (접수 요청 검증)
    "INTAKE-001": {
        "ko": "필수 필드가 누락되었습니다: {fields}",
        "en": "Missing required fields: {fields}",
    },
    "INTAKE-002": {
        "ko": "지원하지 않는 접수 채널입니다: {channel}",
        "en": "Unsupported intake channel: {channel}",
    },
    "INTAKE-003": {
        "ko": "접수 내용이 너무 깁니다: {length}자 (최대 {max_length}자)",
        "en": "Content is too long: {length} characters (max {max_length})",
    },
    # MESSAGE (접수 메시지)
    "MESSAGE-001": {
        "ko": "접수 메시지를 찾을 수 없습니다: {message_id}",
        "en": "Intake message not found: {message_id}",
    },
    "MESSAGE-002": {
        "ko": "메시지 상태를 되돌릴 수 없습니다: {current} → {requested}",
        "en": "Message status cannot move backwards: {current} -> {requested}",
    },
    "MESSAGE-003": {
        "ko": "알 수 없는 메시지 상태입니다: {status}",
        "en": "Unknown message status: {status}",
    },
    # TICKET (티켓)
    "TICKET-001": {
        "ko": "티켓을 찾을 수 없습니다: {ticket_id}",
        "en": "Ticket not found: {ticket_id}",
    },
    "TICKET-002": {
        "ko": "종료된 티켓은 변경할 수 없습니다: {ticket_id} ({status})",
        "en": "Ticket is closed and cannot be modified: {ticket_id} ({status})",
    },
    "TICKET-003": {
        "ko": "등록되지 않은 담당자입니다: {assignee_id}",
        "en": "Unknown assignee: {assignee_id}",
    },
    "TICKET-004": {
        "ko": "티켓 생성 실패: {reason}",
        "en": "Failed to create ticket: {reason}",
    },
    "TICKET-005": {
        "ko": "변경할 수 없는 필드입니다: {fields}",
        "en": "Fields cannot be updated: {fields}",
    },
    # LLM (분류 백엔드)
    "LLM-001": {
        "ko": "LLM 분류 서비스가 비활성화되어 있습니다",
        "en": "LLM classification service is disabled",
    },
    "LLM-002": {
        "ko": "LLM API 오류: {reason}",
        "en": "LLM API error: {reason}",
    },
    # CONFIG (설정)
    "CONFIG-001": {
        "ko": "설정 파일을 찾을 수 없습니다: {config_path}",
        "en": "Configuration file not found: {config_path}",
    },
    "CONFIG-002": {
        "ko": "설정 검증 실패: {validation_errors}",
        "en": "Configuration validation failed: {validation_errors}",
    },
    "CONFIG-003": {
        "ko": "설정 로드 중 오류가 발생했습니다: {original_error}",
        "en": "Error while loading configuration: {original_error}",
    },
    # GENERAL (일반)
    "GENERAL-001": {
        "ko": "알 수 없는 오류가 발생했습니다",
        "en": "An unknown error occurred",
    },
}


# 해결 방법 저장소: {error_code: {"ko": [...], "en": [...]}}
ERROR_SOLUTIONS: dict[str, dict[str, list[str]]] = {
    "INTAKE-001": {
        "ko": ["채널, 내용, 발신자 필드를 모두 포함하세요"],
        "en": ["Include channel, content and sender fields"],
    },
    "INTAKE-002": {
        "ko": ["sms, email, web, call, chat, kakaotalk 중 하나를 사용하세요"],
        "en": ["Use one of sms, email, web, call, chat, kakaotalk"],
    },
    "INTAKE-003": {
        "ko": ["내용을 나누어 여러 건으로 접수하세요"],
        "en": ["Split the content into several messages"],
    },
    "MESSAGE-001": {
        "ko": ["메시지 ID를 확인하세요", "메시지 목록 API로 존재 여부를 조회하세요"],
        "en": ["Check the message id", "List messages to verify it exists"],
    },
    "MESSAGE-002": {
        "ko": ["메시지 상태는 pending → classified → assigned → processed 순으로만 변경됩니다"],
        "en": ["Message status only moves pending -> classified -> assigned -> processed"],
    },
    "MESSAGE-003": {
        "ko": ["pending, classified, assigned, processed 중 하나를 사용하세요"],
        "en": ["Use one of pending, classified, assigned, processed"],
    },
    "TICKET-001": {
        "ko": ["티켓 ID를 확인하세요"],
        "en": ["Check the ticket id"],
    },
    "TICKET-002": {
        "ko": ["해결(resolved) 또는 종료(closed)된 티켓은 새 티켓으로 다시 접수하세요"],
        "en": ["Open a new ticket instead of modifying a resolved or closed one"],
    },
    "TICKET-003": {
        "ko": ["직원 목록 API로 담당자 ID를 확인하세요"],
        "en": ["Check the assignee id with the staff list API"],
    },
    "TICKET-004": {
        "ko": ["로그에서 원인을 확인하세요"],
        "en": ["Check the logs for the cause"],
    },
    "TICKET-005": {
        "ko": ["title, description, category 필드만 변경할 수 있습니다"],
        "en": ["Only title, description and category can be updated"],
    },
    "LLM-001": {
        "ko": ["설정에서 llm.enabled를 true로 변경하세요"],
        "en": ["Set llm.enabled to true in the configuration"],
    },
    "LLM-002": {
        "ko": ["LLM 서버가 실행 중인지 확인하세요", "llm.base_url 설정을 확인하세요"],
        "en": ["Verify the LLM server is running", "Check the llm.base_url setting"],
    },
    "CONFIG-001": {
        "ko": ["aisecretary/config/base.yaml 파일이 존재하는지 확인하세요"],
        "en": ["Verify aisecretary/config/base.yaml exists"],
    },
    "CONFIG-002": {
        "ko": ["YAML 설정 값을 스키마와 비교하세요"],
        "en": ["Compare YAML values against the configuration schema"],
    },
    "CONFIG-003": {
        "ko": ["YAML 문법 오류가 없는지 확인하세요"],
        "en": ["Check the YAML files for syntax errors"],
    },
    "GENERAL-001": {
        "ko": ["로그에서 상세 오류를 확인하세요"],
        "en": ["Check the logs for details"],
    },
}


def get_message_template(error_code: str, lang: str = "ko") -> str:
    """에러 메시지 템플릿 가져오기.

    Args:
        error_code: 에러 코드 (예: "TICKET-001")
        lang: 언어 코드 ("ko" 또는 "en")

    Returns:
        에러 메시지 템플릿 문자열

    Raises:
        KeyError: 에러 코드가 존재하지 않는 경우
        ValueError: 지원하지 않는 언어 코드인 경우
    """
    if error_code not in ERROR_MESSAGES:
        raise KeyError(f"Unknown error code: {error_code}")

    if lang not in ("ko", "en"):
        raise ValueError(f"Unsupported language: {lang}")

    return ERROR_MESSAGES[error_code][lang]


def get_solutions_list(error_code: str, lang: str = "ko") -> list[str]:
    """에러 해결 방법 목록 가져오기.

    Raises:
        KeyError: 에러 코드가 존재하지 않는 경우
        ValueError: 지원하지 않는 언어 코드인 경우
    """
    if error_code not in ERROR_SOLUTIONS:
        raise KeyError(f"Unknown error code: {error_code}")

    if lang not in ("ko", "en"):
        raise ValueError(f"Unsupported language: {lang}")

    return ERROR_SOLUTIONS[error_code][lang]
