"""
TicketService 단위 테스트

테스트 케이스:
1. 생성: 번호, SLA 기한, 자동/지정 배정
2. 조회: 단건, 메시지 기준, 필터 목록
3. 변경: 필드 수정, 배정/재배정, 상태 전환
4. 종료 티켓 변경 거부, 메시지당 티켓 1건
"""

import random
from datetime import datetime, timedelta

import pytest

from aisecretary.lib.errors import ErrorCode, IntakeError, NotFoundError, TicketError
from aisecretary.lib.logger import KST
from aisecretary.models import MessageClassification, Priority, TicketStatus
from aisecretary.modules.core.ticketing import (
    AssignmentEngine,
    SLAEngine,
    TicketCreate,
    TicketNumberGenerator,
    TicketService,
)

CREATED_AT = datetime(2025, 10, 19, 9, 0, tzinfo=KST)


@pytest.fixture
def service(store) -> TicketService:
    return TicketService(
        store=store,
        sla_engine=SLAEngine(),
        assignment_engine=AssignmentEngine(rng=random.Random(0)),
        number_generator=TicketNumberGenerator(clock=lambda: CREATED_AT),
    )


def _create(
    message_id: str = "msg_1",
    category: MessageClassification = MessageClassification.MAINTENANCE,
    priority: Priority = Priority.HIGH,
    assignee_id: str | None = None,
) -> TicketCreate:
    return TicketCreate(
        title="[SMS] 101동 1502호 엘리베이터가 고장났어요",
        description="**접수 정보**",
        category=category,
        priority=priority,
        reporter_id="010-****-5678",
        intake_message_id=message_id,
        assignee_id=assignee_id,
    )


# ========================================
# 생성
# ========================================


class TestCreateTicket:
    @pytest.mark.asyncio
    async def test_create_sets_number_and_deadlines(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create(), now=CREATED_AT)

        assert ticket.number == "TK2510190001"
        assert ticket.status == TicketStatus.OPEN
        # (high, maintenance) 오버라이드: 응답 6시간, 해결 24시간
        assert ticket.response_deadline == CREATED_AT + timedelta(hours=6)
        assert ticket.sla_deadline == CREATED_AT + timedelta(hours=24)
        assert ticket.created_at == CREATED_AT

    @pytest.mark.asyncio
    async def test_auto_assignment(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create(category=MessageClassification.PARKING))

        # 기본 직원 명부: 주차는 박경비, inquiry 담당인 김관리도 후보
        assert ticket.assignee_id in {"staff_001", "staff_002"}

    @pytest.mark.asyncio
    async def test_explicit_assignee(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create(assignee_id="staff_003"))

        assert ticket.assignee_id == "staff_003"

    @pytest.mark.asyncio
    async def test_unknown_assignee_rejected(self, service: TicketService) -> None:
        with pytest.raises(IntakeError) as exc_info:
            await service.create_ticket(_create(assignee_id="staff_999"))

        assert exc_info.value.error_code == ErrorCode.TICKET_003.value

    @pytest.mark.asyncio
    async def test_one_ticket_per_message(self, service: TicketService) -> None:
        await service.create_ticket(_create(message_id="msg_dup"))

        with pytest.raises(TicketError):
            await service.create_ticket(_create(message_id="msg_dup"))

    @pytest.mark.asyncio
    async def test_numbers_increase(self, service: TicketService) -> None:
        first = await service.create_ticket(_create(message_id="msg_a"))
        second = await service.create_ticket(_create(message_id="msg_b"))

        assert (first.number, second.number) == ("TK2510190001", "TK2510190002")


# ========================================
# 조회
# ========================================


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_ticket(self, service: TicketService) -> None:
        created = await service.create_ticket(_create())

        assert (await service.get_ticket(created.id)).id == created.id
        assert (await service.get_ticket_by_message_id("msg_1")).id == created.id
        assert await service.get_ticket_by_message_id("msg_none") is None

    @pytest.mark.asyncio
    async def test_get_missing_ticket(self, service: TicketService) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_ticket("ticket_missing")

        assert exc_info.value.error_code == ErrorCode.TICKET_001.value

    @pytest.mark.asyncio
    async def test_list_filters(self, service: TicketService) -> None:
        t1 = await service.create_ticket(
            _create(message_id="msg_a", assignee_id="staff_001"), now=CREATED_AT
        )
        t2 = await service.create_ticket(
            _create(message_id="msg_b", assignee_id="staff_002"),
            now=CREATED_AT + timedelta(minutes=1),
        )
        await service.update_status(t1.id, TicketStatus.RESOLVED)

        newest_first = await service.list_tickets()
        assert [t.id for t in newest_first] == [t2.id, t1.id]

        resolved = await service.list_tickets(status=TicketStatus.RESOLVED)
        assert [t.id for t in resolved] == [t1.id]

        by_assignee = await service.list_tickets(assignee_id="staff_002")
        assert [t.id for t in by_assignee] == [t2.id]

        assert len(await service.list_tickets(limit=1)) == 1


# ========================================
# 변경
# ========================================


class TestUpdates:
    @pytest.mark.asyncio
    async def test_update_fields_keeps_sla(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create(), now=CREATED_AT)
        sla_deadline, response_deadline = ticket.sla_deadline, ticket.response_deadline

        updated = await service.update_ticket(
            ticket.id,
            {"category": MessageClassification.EMERGENCY, "title": "[SMS] 가스 누출"},
        )

        assert updated.title == "[SMS] 가스 누출"
        assert updated.category == MessageClassification.EMERGENCY
        # SLA 기한은 생성 시점 값 유지 (high, maintenance: 24시간)
        assert updated.sla_deadline == sla_deadline == CREATED_AT + timedelta(hours=24)
        assert updated.response_deadline == response_deadline

    @pytest.mark.asyncio
    async def test_priority_is_not_updatable(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create(), now=CREATED_AT)

        with pytest.raises(IntakeError) as exc_info:
            await service.update_ticket(ticket.id, {"priority": Priority.LOW})

        assert exc_info.value.error_code == ErrorCode.TICKET_005.value
        stored = await service.get_ticket(ticket.id)
        assert stored.priority == Priority.HIGH
        assert stored.sla_deadline == CREATED_AT + timedelta(hours=24)

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_fields(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create())

        with pytest.raises(IntakeError) as exc_info:
            await service.update_ticket(ticket.id, {"status": "closed", "number": "X"})

        assert exc_info.value.error_code == ErrorCode.TICKET_005.value

    @pytest.mark.asyncio
    async def test_assign_moves_open_to_in_progress(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create())

        assigned = await service.assign_ticket(ticket.id, "staff_002")

        assert assigned.assignee_id == "staff_002"
        assert assigned.status == TicketStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_reassign_keeps_status(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create())

        reassigned = await service.reassign_ticket(ticket.id, "staff_003")

        assert reassigned.assignee_id == "staff_003"
        assert reassigned.status == TicketStatus.OPEN

    @pytest.mark.asyncio
    async def test_assign_unknown_staff(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create())

        with pytest.raises(IntakeError):
            await service.assign_ticket(ticket.id, "staff_999")

    @pytest.mark.asyncio
    async def test_resolve_sets_resolved_at(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create())

        resolved = await service.update_status(ticket.id, TicketStatus.RESOLVED)

        assert resolved.status == TicketStatus.RESOLVED
        assert resolved.resolved_at is not None

    @pytest.mark.asyncio
    async def test_non_terminal_status_keeps_resolved_at_empty(self, service: TicketService) -> None:
        ticket = await service.create_ticket(_create())

        pending = await service.update_status(ticket.id, TicketStatus.PENDING)

        assert pending.resolved_at is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("terminal", [TicketStatus.RESOLVED, TicketStatus.CLOSED])
    async def test_terminal_ticket_is_immutable(
        self, service: TicketService, terminal: TicketStatus
    ) -> None:
        ticket = await service.create_ticket(_create())
        await service.update_status(ticket.id, terminal)

        with pytest.raises(TicketError) as exc_info:
            await service.update_status(ticket.id, TicketStatus.OPEN)
        assert exc_info.value.error_code == ErrorCode.TICKET_002.value
        assert exc_info.value.status_code == 409

        with pytest.raises(TicketError):
            await service.assign_ticket(ticket.id, "staff_002")
        with pytest.raises(TicketError):
            await service.update_ticket(ticket.id, {"title": "변경"})

    @pytest.mark.asyncio
    async def test_update_missing_ticket(self, service: TicketService) -> None:
        with pytest.raises(NotFoundError):
            await service.update_status("ticket_missing", TicketStatus.CLOSED)
