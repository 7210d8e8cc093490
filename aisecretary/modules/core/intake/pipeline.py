"""
IntakePipeline - 접수 파이프라인 오케스트레이터

처리 순서:
1. 입력 검증 (채널, 내용, 발신자, 길이)
2. 개인정보 마스킹 (내용, 발신자)
3. 동/호 추출 및 우선순위 판정 (마스킹 전 원문 기준)
4. pending 상태로 저장
5. MessageReceived 이벤트 발행 (저장 이후)
   - high/urgent: 자동 분류 → classified → 티켓 생성

이벤트 핸들러가 실패해도 접수 자체는 성공합니다.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from ....core.interfaces import IMessageStore
from ....lib.errors import ErrorCode, IntakeError
from ....lib.keyed_lock import KeyedLock
from ....lib.logger import KST, get_logger, now_kst
from ....models import IntakeChannel, IntakeMessage, IntakeStatus, Priority, Ticket
from ..classification import ClassificationService
from ..location import ApartmentParser
from ..privacy import PrivacyMasker
from ..ticketing import AssignmentEngine, SLADashboard, SLAEngine, StaffWorkload, TicketService
from ..triage import PriorityEngine
from .events import IntakeEventBus, MessageReceived
from .ticket_integration import TicketIntegration

logger = get_logger(__name__)


def _to_kst(timestamp: datetime) -> datetime:
    """timezone 없는 시각은 KST로 간주, 있으면 KST로 변환"""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=KST)
    return timestamp.astimezone(KST)


class IntakePipeline:
    """
    접수 오케스트레이터

    사용 예시:
        pipeline = container.intake_pipeline()
        message = await pipeline.process_message("sms", "101동 1502호 엘리베이터가 고장났어요", "010-1234-5678")
    """

    def __init__(
        self,
        store: IMessageStore,
        masker: PrivacyMasker,
        parser: ApartmentParser,
        priority_engine: PriorityEngine,
        classification_service: ClassificationService,
        ticket_service: TicketService,
        ticket_integration: TicketIntegration,
        sla_engine: SLAEngine,
        assignment_engine: AssignmentEngine,
        event_bus: IntakeEventBus | None = None,
        message_locks: KeyedLock | None = None,
        max_content_length: int = 5000,
        auto_ticket_priorities: Iterable[Priority | str] = (Priority.HIGH, Priority.URGENT),
        auto_classify_use_llm: bool = True,
        min_unit_confidence: float = 0.6,
        recent_limit: int = 10,
    ):
        self.store = store
        self.masker = masker
        self.parser = parser
        self.priority_engine = priority_engine
        self.classification_service = classification_service
        self.ticket_service = ticket_service
        self.ticket_integration = ticket_integration
        self.sla_engine = sla_engine
        self.assignment_engine = assignment_engine
        self.event_bus = event_bus or IntakeEventBus()
        self.message_locks = message_locks or KeyedLock()
        self.max_content_length = max_content_length
        self.auto_ticket_priorities = frozenset(Priority(p) for p in auto_ticket_priorities)
        self.auto_classify_use_llm = auto_classify_use_llm
        self.min_unit_confidence = min_unit_confidence
        self.recent_limit = recent_limit

        self.classification_service.set_on_classified(self.create_ticket_from_message)
        self.event_bus.subscribe(self._auto_ticket_handler)

        logger.info(
            "IntakePipeline 초기화",
            auto_ticket_priorities=sorted(p.value for p in self.auto_ticket_priorities),
            auto_classify_use_llm=auto_classify_use_llm,
        )

    # ========================================
    # 접수
    # ========================================

    async def process_message(
        self,
        channel: IntakeChannel | str,
        content: str,
        sender: str,
        timestamp: datetime | None = None,
    ) -> IntakeMessage:
        """
        메시지 접수

        Raises:
            IntakeError: 필수 필드 누락, 지원하지 않는 채널, 길이 초과
        """
        intake_channel = self._validate(channel, content, sender)

        masked_content = self.masker.mask(content)
        masked_sender = self.masker.mask_sender(sender)
        if not self.masker.validate_masking(content, masked_content) and self.masker.fail_closed:
            masked_content = self.masker.fail_closed_placeholder

        apartment_unit = self.parser.best_unit(content, min_confidence=self.min_unit_confidence)
        priority = self.priority_engine.determine_priority(intake_channel, content)

        created_at = _to_kst(timestamp) if timestamp is not None else now_kst()
        message = IntakeMessage(
            channel=intake_channel,
            content=content,
            masked_content=masked_content,
            sender=sender,
            masked_sender=masked_sender,
            priority=priority,
            status=IntakeStatus.PENDING,
            apartment_unit=apartment_unit,
            created_at=created_at,
            updated_at=created_at,
        )
        await self.store.save_message(message)

        logger.info(
            "메시지 접수 완료",
            message_id=message.id,
            channel=intake_channel.value,
            priority=priority.value,
            has_location=apartment_unit is not None,
        )

        await self.event_bus.publish(
            MessageReceived(message_id=message.id, channel=intake_channel, priority=priority)
        )

        return await self.store.get_message(message.id) or message

    async def _auto_ticket_handler(self, event: MessageReceived) -> None:
        """high/urgent 메시지 자동 분류 및 티켓 생성"""
        if event.priority not in self.auto_ticket_priorities:
            return

        await self.classification_service.classify_message(
            event.message_id, use_llm=self.auto_classify_use_llm
        )

    def _validate(self, channel: IntakeChannel | str, content: str, sender: str) -> IntakeChannel:
        missing = [
            name
            for name, value in (("channel", channel), ("content", content), ("sender", sender))
            if not value or not str(value).strip()
        ]
        if missing:
            raise IntakeError(ErrorCode.INTAKE_001, fields=", ".join(missing))

        try:
            intake_channel = IntakeChannel(channel)
        except ValueError as e:
            raise IntakeError(ErrorCode.INTAKE_002, channel=channel) from e

        if len(content) > self.max_content_length:
            raise IntakeError(
                ErrorCode.INTAKE_003, length=len(content), max_length=self.max_content_length
            )
        return intake_channel

    # ========================================
    # 상태 / 티켓
    # ========================================

    async def update_message_status(
        self, message_id: str, status: IntakeStatus | str
    ) -> IntakeMessage | None:
        """
        메시지 상태 변경 (전진 전이만 허용)

        classified로 바뀌면 티켓이 없을 때 티켓을 생성합니다.

        Returns:
            변경된 메시지 (없으면 None)

        Raises:
            IntakeError: 알 수 없는 상태 값이거나 이전 상태로 되돌리려 할 때
        """
        try:
            target = IntakeStatus(status)
        except ValueError as e:
            raise IntakeError(ErrorCode.MESSAGE_003, status=status) from e

        async with self.message_locks.acquire(message_id):
            message = await self.store.get_message(message_id)
            if message is None:
                return None

            if not message.status.can_transition_to(target):
                raise IntakeError(
                    ErrorCode.MESSAGE_002,
                    current=message.status.value,
                    requested=target.value,
                )

            if message.status != target:
                message.status = target
                message.touch()
                await self.store.save_message(message)

        logger.info("메시지 상태 변경", message_id=message_id, status=target.value)

        if target == IntakeStatus.CLASSIFIED:
            await self.create_ticket_from_message(message)
            return await self.store.get_message(message_id) or message

        return message

    async def create_ticket_from_message(self, message: IntakeMessage) -> Ticket | None:
        return await self.ticket_integration.create_ticket_from_message(message)

    async def classify_message(self, message_id: str, use_llm: bool = True) -> IntakeMessage:
        return await self.classification_service.classify_message(message_id, use_llm=use_llm)

    # ========================================
    # 조회
    # ========================================

    async def get_message(self, message_id: str) -> IntakeMessage | None:
        return await self.store.get_message(message_id)

    async def list_messages(self, limit: int = 50) -> list[IntakeMessage]:
        return await self.store.list_messages(limit=limit)

    async def get_stats(self) -> dict[str, Any]:
        """전체 메시지 수와 최근 메시지"""
        return {
            "total_messages": await self.store.count_messages(),
            "recent_messages": await self.store.list_messages(limit=self.recent_limit),
        }

    async def get_sla_dashboard(self) -> SLADashboard:
        return self.sla_engine.dashboard(await self.ticket_service.all_tickets())

    async def get_sla_violations(self) -> list[Ticket]:
        return self.sla_engine.violations(await self.ticket_service.all_tickets())

    async def get_upcoming_deadlines(self, hours_ahead: float = 24) -> list[Ticket]:
        return self.sla_engine.upcoming_deadlines(
            await self.ticket_service.all_tickets(), hours_ahead=hours_ahead
        )

    async def get_workload_analytics(self) -> list[StaffWorkload]:
        return self.assignment_engine.workload(await self.ticket_service.all_tickets())
