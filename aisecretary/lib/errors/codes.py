"""에러 코드 정의 모듈.

AI 비서 시스템의 에러 코드를 Enum으로 정의합니다.
도메인별로 그룹화되어 있어 에러 분류 및 추적이 용이합니다.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """AI 비서 시스템 에러 코드 Enum.

    형식: {DOMAIN}-{NUMBER}
    - INTAKE: 접수 요청 검증
    - MESSAGE: 접수 메시지 조회/상태 변경
    - TICKET: 티켓 조회/변경
    - LLM: LLM 분류 백엔드
    - CONFIG: 설정 관리
    - GENERAL: 일반 오류
    """

    # INTAKE (접수 요청 검증)
    INTAKE_001 = "INTAKE-001"  # 필수 필드 누락
    INTAKE_002 = "INTAKE-002"  # 지원하지 않는 채널
    INTAKE_003 = "INTAKE-003"  # 내용 길이 초과

    # MESSAGE (접수 메시지)
    MESSAGE_001 = "MESSAGE-001"  # 메시지 없음
    MESSAGE_002 = "MESSAGE-002"  # 역방향 상태 전이
    MESSAGE_003 = "MESSAGE-003"  # 알 수 없는 상태 값

    # TICKET (티켓)
    TICKET_001 = "TICKET-001"  # 티켓 없음
    TICKET_002 = "TICKET-002"  # 종료된 티켓 변경 시도
    TICKET_003 = "TICKET-003"  # 알 수 없는 담당자
    TICKET_004 = "TICKET-004"  # 티켓 생성 실패
    TICKET_005 = "TICKET-005"  # 변경할 수 없는 필드

    # LLM (분류 백엔드)
    LLM_001 = "LLM-001"  # LLM 비활성화
    LLM_002 = "LLM-002"  # LLM API 오류

    # CONFIG (설정)
    CONFIG_001 = "CONFIG-001"  # 설정 파일 없음
    CONFIG_002 = "CONFIG-002"  # 설정 검증 실패
    CONFIG_003 = "CONFIG-003"  # 설정 로드 중 예외

    # GENERAL (일반)
    GENERAL_001 = "GENERAL-001"  # 알 수 없는 오류
