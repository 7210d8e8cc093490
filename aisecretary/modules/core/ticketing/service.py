"""
TicketService - 티켓 생성/조회/변경

- 생성 시 번호, SLA 기한(응답/해결), 담당자(지정 또는 자동 배정) 결정
- 같은 티켓에 대한 변경은 티켓 ID 단위 락으로 직렬화
- resolved/closed 티켓은 어떤 변경도 거부 (TicketError)
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from ....core.interfaces import ITicketStore
from ....lib.errors import ErrorCode, IntakeError, NotFoundError, TicketError
from ....lib.keyed_lock import KeyedLock
from ....lib.logger import get_logger, now_kst
from ....models import MessageClassification, Priority, Ticket, TicketStatus
from .assignment import AssignmentEngine
from .numbering import TicketNumberGenerator
from .sla import SLAEngine

logger = get_logger(__name__)

# 우선순위는 접수 메시지에서 복사되므로 수정 대상이 아님
UPDATABLE_FIELDS = frozenset({"title", "description", "category"})


class TicketCreate(BaseModel):
    """티켓 생성 입력"""

    title: str
    description: str
    category: MessageClassification
    priority: Priority
    reporter_id: str
    intake_message_id: str
    assignee_id: str | None = None


class TicketService:
    """
    티켓 서비스

    사용 예시:
        service = TicketService(store, sla_engine, assignment_engine)
        ticket = await service.create_ticket(TicketCreate(...))
        await service.update_status(ticket.id, TicketStatus.RESOLVED)
    """

    def __init__(
        self,
        store: ITicketStore,
        sla_engine: SLAEngine,
        assignment_engine: AssignmentEngine,
        number_generator: TicketNumberGenerator | None = None,
        ticket_locks: KeyedLock | None = None,
    ):
        self.store = store
        self.sla_engine = sla_engine
        self.assignment_engine = assignment_engine
        self.number_generator = number_generator or TicketNumberGenerator()
        self.ticket_locks = ticket_locks or KeyedLock()

    # ========================================
    # 생성 / 조회
    # ========================================

    async def create_ticket(self, data: TicketCreate, now: datetime | None = None) -> Ticket:
        """
        티켓 생성

        Raises:
            IntakeError: 지정한 담당자가 직원 명부에 없을 때
            TicketError: 같은 접수 메시지의 티켓이 이미 있을 때
        """
        created_at = now or now_kst()

        if data.assignee_id is not None:
            self._require_known_assignee(data.assignee_id)
            assignee_id = data.assignee_id
        else:
            assignee_id = self.assignment_engine.select_assignee(data.category)

        ticket = Ticket(
            number=await self.number_generator.next_number(),
            title=data.title,
            description=data.description,
            category=data.category,
            priority=data.priority,
            status=TicketStatus.OPEN,
            assignee_id=assignee_id,
            reporter_id=data.reporter_id,
            sla_deadline=self.sla_engine.resolution_deadline(
                data.priority, data.category, now=created_at
            ),
            response_deadline=self.sla_engine.response_deadline(
                data.priority, data.category, now=created_at
            ),
            intake_message_id=data.intake_message_id,
            created_at=created_at,
            updated_at=created_at,
        )
        await self.store.save_ticket(ticket)

        logger.info(
            "티켓 생성",
            ticket_id=ticket.id,
            number=ticket.number,
            category=ticket.category.value,
            priority=ticket.priority.value,
            assignee_id=assignee_id,
            intake_message_id=ticket.intake_message_id,
        )
        return ticket

    async def get_ticket(self, ticket_id: str) -> Ticket:
        ticket = await self.store.get_ticket(ticket_id)
        if ticket is None:
            raise NotFoundError(ErrorCode.TICKET_001, ticket_id=ticket_id)
        return ticket

    async def get_ticket_by_message_id(self, intake_message_id: str) -> Ticket | None:
        return await self.store.get_ticket_by_intake_message_id(intake_message_id)

    async def list_tickets(
        self,
        limit: int = 50,
        status: TicketStatus | None = None,
        assignee_id: str | None = None,
    ) -> list[Ticket]:
        """최신순 티켓 목록 (상태/담당자 필터)"""
        tickets = await self.store.list_tickets(limit=None)
        if status is not None:
            tickets = [t for t in tickets if t.status == status]
        if assignee_id is not None:
            tickets = [t for t in tickets if t.assignee_id == assignee_id]
        return tickets[:limit]

    async def all_tickets(self) -> list[Ticket]:
        return await self.store.list_tickets(limit=None)

    # ========================================
    # 변경
    # ========================================

    async def update_ticket(self, ticket_id: str, fields: dict[str, Any]) -> Ticket:
        """
        제목/설명/카테고리 변경

        SLA 기한은 생성 시점에 확정되며 수정으로 바뀌지 않습니다.
        """
        invalid = set(fields) - UPDATABLE_FIELDS
        if invalid:
            raise IntakeError(ErrorCode.TICKET_005, fields=", ".join(sorted(invalid)))

        async with self.ticket_locks.acquire(ticket_id):
            ticket = await self._get_mutable(ticket_id)

            for name, value in fields.items():
                setattr(ticket, name, value)

            ticket.touch()
            await self.store.save_ticket(ticket)

        logger.info("티켓 수정", ticket_id=ticket_id, fields=sorted(fields))
        return ticket

    async def assign_ticket(self, ticket_id: str, assignee_id: str) -> Ticket:
        """담당자 지정 (open 티켓은 in_progress로 전환)"""
        self._require_known_assignee(assignee_id)

        async with self.ticket_locks.acquire(ticket_id):
            ticket = await self._get_mutable(ticket_id)
            ticket.assignee_id = assignee_id
            if ticket.status == TicketStatus.OPEN:
                ticket.status = TicketStatus.IN_PROGRESS
            ticket.touch()
            await self.store.save_ticket(ticket)

        logger.info("티켓 배정", ticket_id=ticket_id, assignee_id=assignee_id)
        return ticket

    async def reassign_ticket(self, ticket_id: str, assignee_id: str) -> Ticket:
        """담당자 변경 (상태 유지)"""
        self._require_known_assignee(assignee_id)

        async with self.ticket_locks.acquire(ticket_id):
            ticket = await self._get_mutable(ticket_id)
            previous = ticket.assignee_id
            ticket.assignee_id = assignee_id
            ticket.touch()
            await self.store.save_ticket(ticket)

        logger.info(
            "티켓 재배정",
            ticket_id=ticket_id,
            previous_assignee_id=previous,
            assignee_id=assignee_id,
        )
        return ticket

    async def update_status(self, ticket_id: str, status: TicketStatus) -> Ticket:
        """상태 변경 (resolved/closed 전환 시 resolved_at 기록)"""
        async with self.ticket_locks.acquire(ticket_id):
            ticket = await self._get_mutable(ticket_id)
            ticket.status = status
            if status.is_terminal:
                ticket.resolved_at = now_kst()
            ticket.touch()
            await self.store.save_ticket(ticket)

        logger.info("티켓 상태 변경", ticket_id=ticket_id, status=status.value)
        return ticket

    # ========================================
    # Helpers
    # ========================================

    async def _get_mutable(self, ticket_id: str) -> Ticket:
        ticket = await self.get_ticket(ticket_id)
        if ticket.status.is_terminal:
            raise TicketError(ErrorCode.TICKET_002, ticket_id=ticket_id, status=ticket.status.value)
        return ticket

    def _require_known_assignee(self, assignee_id: str) -> None:
        if not self.assignment_engine.is_known(assignee_id):
            raise IntakeError(ErrorCode.TICKET_003, assignee_id=assignee_id)
