"""
접수 파이프라인 통합 테스트

test 설정(base.yaml + test.yaml)으로 만든 DI 컨테이너 전체를 사용합니다.
LLM은 비활성화 상태이므로 분류는 규칙 기반으로만 수행됩니다.

시나리오:
1. high 우선순위 SMS → 자동 분류 → 티켓 생성 → assigned
2. urgent 응급 메시지 → emergency SLA (2시간)
3. medium 메시지 → 티켓 없음 → classified 전환 시 티켓 생성
4. 동시에 classified 전환 → 티켓은 1건
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from aisecretary.lib.errors import ErrorCode, IntakeError
from aisecretary.lib.logger import KST
from aisecretary.models import (
    IntakeChannel,
    IntakeStatus,
    MessageClassification,
    Priority,
    TicketStatus,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def pipeline(container):
    return container.intake_pipeline()


# ========================================
# 시나리오
# ========================================


class TestIntakeScenarios:
    @pytest.mark.asyncio
    async def test_high_priority_sms_creates_ticket(self, pipeline, container) -> None:
        """시나리오 1: 엘리베이터 고장 SMS"""
        message = await pipeline.process_message(
            "sms", "101동 1502호 엘리베이터가 고장났어요", "010-1234-5678"
        )

        assert message.priority == Priority.HIGH
        assert message.masked_sender == "010-****-5678"
        assert message.apartment_unit is not None
        assert (message.apartment_unit.dong, message.apartment_unit.ho) == (101, 1502)
        assert message.apartment_unit.floor == 15
        assert message.classification == MessageClassification.MAINTENANCE
        assert message.classification_confidence == pytest.approx(0.36)
        assert message.status == IntakeStatus.ASSIGNED
        assert message.ticket_id is not None

        ticket = await container.ticket_service().get_ticket(message.ticket_id)
        assert ticket.intake_message_id == message.id
        assert ticket.category == MessageClassification.MAINTENANCE
        assert ticket.priority == Priority.HIGH
        assert ticket.status == TicketStatus.OPEN
        assert ticket.title == "[SMS] 101동 1502호 엘리베이터가 고장났어요"
        assert ticket.reporter_id == "010-****-5678"
        assert ticket.sla_deadline - ticket.created_at == timedelta(hours=24)
        assert container.assignment_engine().is_known(ticket.assignee_id)
        assert ticket.number.startswith("TK")

    @pytest.mark.asyncio
    async def test_urgent_emergency_deadline(self, pipeline, container) -> None:
        """시나리오 2: 가스 냄새 응급 신고"""
        message = await pipeline.process_message(
            "sms", "응급상황입니다 가스 냄새가 나요", "010-9876-5432"
        )

        assert message.priority == Priority.URGENT
        assert message.classification == MessageClassification.EMERGENCY

        ticket = await container.ticket_service().get_ticket_by_message_id(message.id)
        assert ticket is not None
        assert ticket.sla_deadline - ticket.created_at == timedelta(hours=2)
        assert ticket.response_deadline - ticket.created_at == timedelta(minutes=30)

    @pytest.mark.asyncio
    async def test_medium_message_ticket_on_classified(self, pipeline, container) -> None:
        """시나리오 3: 일반 문의는 classified 전환 시 티켓 생성"""
        message = await pipeline.process_message("sms", "관리비 문의드립니다", "010-1111-2222")

        assert message.priority == Priority.MEDIUM
        assert message.status == IntakeStatus.PENDING
        assert message.ticket_id is None
        assert await container.store().count_tickets() == 0

        updated = await pipeline.update_message_status(message.id, "classified")

        assert updated.status == IntakeStatus.ASSIGNED
        assert updated.ticket_id is not None
        ticket = await container.ticket_service().get_ticket(updated.ticket_id)
        # 분류 없이 전환되면 내용으로 카테고리 추정
        assert ticket.category == MessageClassification.BILLING
        assert ticket.sla_deadline - ticket.created_at == timedelta(hours=72)

    @pytest.mark.asyncio
    async def test_concurrent_classified_updates_create_one_ticket(
        self, pipeline, container
    ) -> None:
        """시나리오 4: 동시 상태 변경에도 메시지당 티켓 1건"""
        message = await pipeline.process_message("web", "관리비 문의드립니다", "resident@naver.com")

        first, second = await asyncio.gather(
            pipeline.update_message_status(message.id, IntakeStatus.CLASSIFIED),
            pipeline.update_message_status(message.id, IntakeStatus.CLASSIFIED),
        )

        assert await container.store().count_tickets() == 1
        assert first.ticket_id == second.ticket_id
        assert first.ticket_id is not None


# ========================================
# 검증 / 상태 전이
# ========================================


class TestIntakeValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "channel,content,sender,code",
        [
            ("sms", "", "010-1234-5678", ErrorCode.INTAKE_001),
            ("sms", "내용", "   ", ErrorCode.INTAKE_001),
            ("fax", "내용", "010-1234-5678", ErrorCode.INTAKE_002),
            ("sms", "가" * 5001, "010-1234-5678", ErrorCode.INTAKE_003),
        ],
    )
    async def test_invalid_input(self, pipeline, container, channel, content, sender, code) -> None:
        with pytest.raises(IntakeError) as exc_info:
            await pipeline.process_message(channel, content, sender)

        assert exc_info.value.error_code == code.value
        assert await container.store().count_messages() == 0

    @pytest.mark.asyncio
    async def test_backward_transition_rejected(self, pipeline) -> None:
        message = await pipeline.process_message(
            "call", "엘리베이터 안에 갇혔어요", "010-1234-5678"
        )
        assert message.status == IntakeStatus.ASSIGNED

        with pytest.raises(IntakeError) as exc_info:
            await pipeline.update_message_status(message.id, "pending")

        assert exc_info.value.error_code == ErrorCode.MESSAGE_002.value

    @pytest.mark.asyncio
    async def test_unknown_status(self, pipeline) -> None:
        message = await pipeline.process_message("sms", "관리비 문의드립니다", "010-1234-5678")

        with pytest.raises(IntakeError) as exc_info:
            await pipeline.update_message_status(message.id, "archived")

        assert exc_info.value.error_code == ErrorCode.MESSAGE_003.value

    @pytest.mark.asyncio
    async def test_missing_message_returns_none(self, pipeline) -> None:
        assert await pipeline.update_message_status("msg_missing", "processed") is None

    @pytest.mark.asyncio
    async def test_forward_to_processed(self, pipeline) -> None:
        message = await pipeline.process_message("sms", "관리비 문의드립니다", "010-1234-5678")

        updated = await pipeline.update_message_status(message.id, "processed")

        assert updated.status == IntakeStatus.PROCESSED


# ========================================
# 장애 격리 / 조회
# ========================================


class TestIntakeResilience:
    @pytest.mark.asyncio
    async def test_ticket_failure_does_not_fail_intake(self, pipeline, container) -> None:
        """자동 티켓 생성이 실패해도 접수는 성공"""
        integration = container.ticket_integration()
        integration.create_ticket_from_message = AsyncMock(side_effect=RuntimeError("store down"))

        message = await pipeline.process_message(
            "sms", "101동 1502호 엘리베이터가 고장났어요", "010-1234-5678"
        )

        assert message.status == IntakeStatus.CLASSIFIED
        assert message.ticket_id is None
        assert await container.store().count_messages() == 1

    @pytest.mark.asyncio
    async def test_raw_content_masked(self, pipeline) -> None:
        message = await pipeline.process_message(
            "email", "연락처는 010-5555-6666 입니다. 관리비 문의드립니다", "resident@naver.com"
        )

        assert "010-****-6666" in message.masked_content
        assert "5555" not in message.masked_content
        assert message.masked_sender == "re***@naver.com"
        # 원문은 저장되지만 공개 뷰에서 제외
        view = message.public_view()
        assert "content" not in view
        assert "sender" not in view

    @pytest.mark.asyncio
    async def test_stats_and_dashboards(self, pipeline) -> None:
        await pipeline.process_message("sms", "101동 1502호 엘리베이터가 고장났어요", "010-1234-5678")
        await pipeline.process_message("sms", "관리비 문의드립니다", "010-1111-2222")

        stats = await pipeline.get_stats()
        assert stats["total_messages"] == 2
        assert len(stats["recent_messages"]) == 2

        dashboard = await pipeline.get_sla_dashboard()
        assert dashboard.total_tickets == 1
        assert dashboard.violated_sla == 0
        assert dashboard.sla_performance == 100.0

        assert await pipeline.get_sla_violations() == []
        upcoming = await pipeline.get_upcoming_deadlines(hours_ahead=48)
        assert len(upcoming) == 1

        workload = await pipeline.get_workload_analytics()
        assert sum(w.total for w in workload) == 1

    @pytest.mark.asyncio
    async def test_manual_classify(self, pipeline) -> None:
        message = await pipeline.process_message("sms", "윗집 층간소음 때문에 힘들어요", "010-1234-5678")

        classified = await pipeline.classify_message(message.id, use_llm=False)

        assert classified.classification == MessageClassification.NOISE
        assert classified.ticket_id is not None

    @pytest.mark.asyncio
    async def test_explicit_timestamps_normalized_to_kst(self, pipeline) -> None:
        """timezone 없는 시각은 KST로, 다른 timezone은 KST로 변환"""
        default = await pipeline.process_message("sms", "관리비 문의드립니다", "010-1111-2222")
        naive = await pipeline.process_message(
            "sms", "관리비 문의드립니다", "010-1111-3333", timestamp=datetime(2026, 1, 1, 9, 0)
        )
        utc = await pipeline.process_message(
            "sms",
            "관리비 문의드립니다",
            "010-1111-4444",
            timestamp=datetime(2026, 1, 1, 0, 0, tzinfo=timezone.utc),
        )

        assert naive.created_at == datetime(2026, 1, 1, 9, 0, tzinfo=KST)
        assert naive.created_at.utcoffset() == timedelta(hours=9)
        assert utc.created_at.utcoffset() == timedelta(hours=9)
        assert utc.created_at.hour == 9

        messages = await pipeline.list_messages(limit=10)
        assert {m.id for m in messages} == {default.id, naive.id, utc.id}
        stats = await pipeline.get_stats()
        assert stats["total_messages"] == 3
