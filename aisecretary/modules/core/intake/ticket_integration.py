"""
접수 메시지 → 티켓 변환

티켓 생성 조건: 메시지가 classified 상태이거나 우선순위가 high/urgent.
같은 메시지에 대한 생성은 메시지 ID 단위 락 안에서 한 번만 일어납니다.
"""

import re
from collections.abc import Iterable

from ....core.interfaces import IMessageStore
from ....lib.keyed_lock import KeyedLock
from ....lib.logger import get_logger
from ....models import IntakeChannel, IntakeMessage, IntakeStatus, Priority, Ticket
from ..classification import RuleBasedClassifier
from ..ticketing import TicketCreate, TicketService

logger = get_logger(__name__)

CHANNEL_PREFIXES: dict[IntakeChannel, str] = {
    IntakeChannel.SMS: "[SMS]",
    IntakeChannel.EMAIL: "[이메일]",
    IntakeChannel.WEB: "[웹폼]",
    IntakeChannel.CALL: "[통화]",
    IntakeChannel.CHAT: "[채팅]",
    IntakeChannel.KAKAOTALK: "[카카오톡]",
}
DEFAULT_PREFIX = "[접수]"

CHANNEL_LABELS: dict[IntakeChannel, str] = {
    IntakeChannel.SMS: "SMS 접수",
    IntakeChannel.EMAIL: "이메일 접수",
    IntakeChannel.WEB: "웹폼 접수",
    IntakeChannel.CALL: "통화 접수",
    IntakeChannel.CHAT: "채팅 접수",
    IntakeChannel.KAKAOTALK: "카카오톡 접수",
}

TITLE_MAX_LENGTH = 50

_SENTENCE_END = re.compile(r"[.!?]")


def build_ticket_title(message: IntakeMessage) -> str:
    """채널 접두어 + 마스킹된 내용의 첫 문장 (50자 초과 시 47자 + ...)"""
    prefix = CHANNEL_PREFIXES.get(message.channel, DEFAULT_PREFIX)
    content = message.masked_content or message.content
    first_sentence = _SENTENCE_END.split(content, maxsplit=1)[0]
    if len(first_sentence) > TITLE_MAX_LENGTH:
        first_sentence = first_sentence[: TITLE_MAX_LENGTH - 3] + "..."
    return f"{prefix} {first_sentence}"


def build_ticket_description(message: IntakeMessage) -> str:
    channel_label = CHANNEL_LABELS.get(message.channel, message.channel.value)
    lines = [
        "**접수 정보**",
        f"- 채널: {channel_label}",
        f"- 발신자: {message.masked_sender}",
        f"- 우선순위: {message.priority.value}",
        f"- 접수시간: {message.created_at.strftime('%Y-%m-%d %H:%M:%S')}",
    ]
    if message.apartment_unit is not None:
        lines.append(f"- 위치: {message.apartment_unit.formatted}")
    lines += [
        "",
        "**내용**",
        message.masked_content or message.content,
        "",
        f"**원본 메시지 ID**: {message.id}",
    ]
    return "\n".join(lines)


class TicketIntegration:
    """접수 메시지 기반 티켓 생성기"""

    def __init__(
        self,
        store: IMessageStore,
        ticket_service: TicketService,
        rule_classifier: RuleBasedClassifier,
        message_locks: KeyedLock,
        auto_ticket_priorities: Iterable[Priority | str] = (Priority.HIGH, Priority.URGENT),
    ):
        self.store = store
        self.ticket_service = ticket_service
        self.rule_classifier = rule_classifier
        self.message_locks = message_locks
        self.auto_ticket_priorities = frozenset(Priority(p) for p in auto_ticket_priorities)

    def should_create_ticket(self, message: IntakeMessage) -> bool:
        return (
            message.status == IntakeStatus.CLASSIFIED
            or message.priority in self.auto_ticket_priorities
        )

    async def create_ticket_from_message(self, message: IntakeMessage) -> Ticket | None:
        """
        메시지에서 티켓 생성 (메시지당 1건)

        이미 티켓이 있으면 기존 티켓을 반환하고, 조건을 만족하지 않으면 None.
        """
        async with self.message_locks.acquire(message.id):
            current = await self.store.get_message(message.id) or message

            existing = await self.ticket_service.get_ticket_by_message_id(current.id)
            if existing is not None:
                logger.debug(
                    "이미 티켓이 존재함",
                    message_id=current.id,
                    ticket_id=existing.id,
                )
                return existing

            if not self.should_create_ticket(current):
                logger.info(
                    "티켓 생성 조건 미충족",
                    message_id=current.id,
                    status=current.status.value,
                    priority=current.priority.value,
                )
                return None

            category = current.classification or self.rule_classifier.infer_category(
                current.content
            )
            ticket = await self.ticket_service.create_ticket(
                TicketCreate(
                    title=build_ticket_title(current),
                    description=build_ticket_description(current),
                    category=category,
                    priority=current.priority,
                    reporter_id=current.masked_sender,
                    intake_message_id=current.id,
                )
            )

            current.ticket_id = ticket.id
            if ticket.assignee_id and current.status.can_transition_to(IntakeStatus.ASSIGNED):
                current.status = IntakeStatus.ASSIGNED
            current.touch()
            await self.store.save_message(current)

        logger.info(
            "접수 메시지로 티켓 생성",
            message_id=current.id,
            ticket_id=ticket.id,
            ticket_number=ticket.number,
        )
        return ticket
