"""
도메인 Enum 정의

채널, 상태, 우선순위, 분류 카테고리를 닫힌 집합으로 표현합니다.
"""

from enum import Enum


class IntakeChannel(str, Enum):
    """접수 채널"""

    SMS = "sms"
    EMAIL = "email"
    WEB = "web"
    CALL = "call"
    CHAT = "chat"
    KAKAOTALK = "kakaotalk"


class IntakeStatus(str, Enum):
    """접수 메시지 상태 (전진 전이만 허용)"""

    PENDING = "pending"
    CLASSIFIED = "classified"
    ASSIGNED = "assigned"
    PROCESSED = "processed"

    @property
    def rank(self) -> int:
        return _INTAKE_STATUS_ORDER.index(self)

    def can_transition_to(self, target: "IntakeStatus") -> bool:
        """같은 상태 또는 이후 상태로만 이동 가능"""
        return target.rank >= self.rank


_INTAKE_STATUS_ORDER = [
    IntakeStatus.PENDING,
    IntakeStatus.CLASSIFIED,
    IntakeStatus.ASSIGNED,
    IntakeStatus.PROCESSED,
]


class Priority(str, Enum):
    """우선순위"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TicketStatus(str, Enum):
    """티켓 상태"""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    PENDING = "pending"
    RESOLVED = "resolved"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        return self in (TicketStatus.RESOLVED, TicketStatus.CLOSED)


class MessageClassification(str, Enum):
    """민원 분류 카테고리"""

    # 공용 공간 및 시설
    COMMON_FACILITY = "common_facility"  # 복도·주차장·엘리베이터 등 공용시설 고장/파손
    ACCESS_CONTROL = "access_control"  # 공동현관 비밀번호, 출입 통제
    SECURITY = "security"  # 보안
    LANDSCAPING = "landscaping"  # 조경, 놀이터, 쓰레기장 청결
    LIGHTING = "lighting"  # 공용 전기·조명

    # 생활 불편 및 위생
    NOISE = "noise"  # 층간소음, 기계실 소음
    HYGIENE = "hygiene"  # 악취, 곰팡이, 해충
    SMOKING = "smoking"  # 간접흡연

    # 주차
    PARKING = "parking"  # 불법 주차, 방문차량, 전기차 충전

    # 분쟁 및 관리사무소
    RESIDENT_DISPUTE = "resident_dispute"  # 입주민 간 다툼
    STAFF_SERVICE = "staff_service"  # 경비·미화 직원 서비스

    # 세대 및 행정
    UNIT_REPAIR = "unit_repair"  # 세대 내 하자·보수
    BILLING = "billing"  # 관리비 부과 내역
    ADMINISTRATION = "administration"  # 회계, 인사, 증개축 행정
    STATUS_INQUIRY = "status_inquiry"  # 처리 상태 문의

    # 기타
    DELIVERY = "delivery"  # 택배/우편물
    SAFETY = "safety"  # 비상벨, CCTV 점검
    EMERGENCY = "emergency"  # 정전, 단수, 화재 등 긴급 상황
    SCHEDULE = "schedule"  # 소독, 도색 등 정기 일정

    # 기본 분류
    INQUIRY = "inquiry"  # 일반 문의
    COMPLAINT = "complaint"  # 일반 민원
    MAINTENANCE = "maintenance"  # 일반 시설 관리
