"""
티켓 관리 모듈

- SLAEngine: 응답/해결 기한 계산, 위반 집계
- AssignmentEngine: 담당자 자동 배정, 직원별 업무량
- TicketNumberGenerator: TK{yymmdd}{순번} 번호 생성
- TicketService: 티켓 생성/조회/변경
"""

from .assignment import DEFAULT_STAFF, AssignmentEngine, StaffWorkload
from .numbering import TicketNumberGenerator
from .service import TicketCreate, TicketService
from .sla import DEFAULT_SLA_RULES, SLADashboard, SLAEngine, SLARule

__all__ = [
    "AssignmentEngine",
    "StaffWorkload",
    "DEFAULT_STAFF",
    "TicketNumberGenerator",
    "TicketCreate",
    "TicketService",
    "SLAEngine",
    "SLARule",
    "SLADashboard",
    "DEFAULT_SLA_RULES",
]
