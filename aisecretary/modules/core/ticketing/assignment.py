"""
AssignmentEngine - 티켓 담당자 자동 배정

- 카테고리가 전문 분야에 있거나 inquiry를 담당하는 활성 직원이 후보
- 후보가 없으면 기본 담당자(관리소장)에게 배정
- 후보 중 무작위 선택 (random.Random 주입으로 테스트 재현 가능)
"""

import random
from collections.abc import Iterable
from dataclasses import dataclass, field

from ....lib.logger import get_logger
from ....models import MessageClassification, Priority, StaffMember, Ticket

logger = get_logger(__name__)

DEFAULT_FALLBACK_STAFF_ID = "staff_001"

DEFAULT_STAFF: tuple[StaffMember, ...] = (
    StaffMember(
        id="staff_001",
        name="김관리",
        role="관리소장",
        department="관리사무소",
        specialties=["inquiry", "administration", "billing", "complaint"],
    ),
    StaffMember(
        id="staff_002",
        name="박경비",
        role="경비원",
        department="보안팀",
        specialties=["security", "access_control", "parking", "emergency"],
    ),
    StaffMember(
        id="staff_003",
        name="이미화",
        role="미화원",
        department="청소팀",
        specialties=["hygiene", "landscaping"],
    ),
)


@dataclass
class StaffWorkload:
    """직원별 업무량"""

    staff_id: str
    name: str
    total: int = 0
    active: int = 0
    resolved: int = 0
    by_priority: dict[str, int] = field(
        default_factory=lambda: {p.value: 0 for p in Priority}
    )


class AssignmentEngine:
    """담당자 자동 배정 엔진"""

    def __init__(
        self,
        staff: Iterable[StaffMember] = DEFAULT_STAFF,
        fallback_staff_id: str = DEFAULT_FALLBACK_STAFF_ID,
        rng: random.Random | None = None,
    ):
        self._staff: dict[str, StaffMember] = {s.id: s for s in staff}
        self.fallback_staff_id = fallback_staff_id
        self.rng = rng or random.Random()

        if fallback_staff_id not in self._staff:
            logger.warning("기본 담당자가 직원 명부에 없음", fallback_staff_id=fallback_staff_id)

    @property
    def staff(self) -> list[StaffMember]:
        return list(self._staff.values())

    def get_staff(self, staff_id: str) -> StaffMember | None:
        return self._staff.get(staff_id)

    def is_known(self, staff_id: str) -> bool:
        return staff_id in self._staff

    def candidates(self, category: MessageClassification | str) -> list[StaffMember]:
        value = MessageClassification(category).value
        return [
            s
            for s in self._staff.values()
            if s.active
            and (value in s.specialties or MessageClassification.INQUIRY.value in s.specialties)
        ]

    def select_assignee(self, category: MessageClassification | str) -> str:
        """
        카테고리에 맞는 담당자 ID 선택

        Returns:
            담당자 ID (후보가 없으면 fallback_staff_id)
        """
        candidates = self.candidates(category)
        if not candidates:
            logger.info(
                "배정 후보 없음, 기본 담당자 배정",
                category=MessageClassification(category).value,
                fallback=self.fallback_staff_id,
            )
            return self.fallback_staff_id

        selected = self.rng.choice(candidates)
        logger.debug(
            "담당자 자동 배정",
            category=MessageClassification(category).value,
            candidates=len(candidates),
            assignee_id=selected.id,
        )
        return selected.id

    def workload(self, tickets: Iterable[Ticket]) -> list[StaffWorkload]:
        """직원별 티켓 현황 (직원 명부 순서)"""
        loads = {s.id: StaffWorkload(staff_id=s.id, name=s.name) for s in self._staff.values()}

        for ticket in tickets:
            load = loads.get(ticket.assignee_id or "")
            if load is None:
                continue
            load.total += 1
            load.by_priority[ticket.priority.value] += 1
            if ticket.status.is_terminal:
                load.resolved += 1
            else:
                load.active += 1

        return list(loads.values())
