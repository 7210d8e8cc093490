"""
InMemoryStore - 휘발성 메시지/티켓 저장소

개발·테스트용 저장소로 프로세스 종료 시 데이터가 사라집니다.
엔티티는 깊은 복사본으로 저장/반환하여 호출자 간 상태 공유를 막고,
티켓은 intake_message_id 인덱스로 메시지당 1건을 보장합니다.
"""

import asyncio

from ...core.interfaces import IMessageStore, ITicketStore
from ...lib.errors import ErrorCode, TicketError
from ...lib.logger import get_logger
from ...models import IntakeMessage, Ticket

logger = get_logger(__name__)


class InMemoryStore(IMessageStore, ITicketStore):
    """dict 기반 저장소"""

    def __init__(self) -> None:
        self._messages: dict[str, IntakeMessage] = {}
        self._tickets: dict[str, Ticket] = {}
        self._ticket_by_message: dict[str, str] = {}
        self._message_lock = asyncio.Lock()
        self._ticket_lock = asyncio.Lock()

    # ========================================
    # Messages
    # ========================================

    async def save_message(self, message: IntakeMessage) -> IntakeMessage:
        async with self._message_lock:
            self._messages[message.id] = message.model_copy(deep=True)
        return message

    async def get_message(self, message_id: str) -> IntakeMessage | None:
        message = self._messages.get(message_id)
        return message.model_copy(deep=True) if message else None

    async def list_messages(self, limit: int = 50) -> list[IntakeMessage]:
        messages = sorted(self._messages.values(), key=lambda m: m.created_at, reverse=True)
        return [m.model_copy(deep=True) for m in messages[:limit]]

    async def count_messages(self) -> int:
        return len(self._messages)

    # ========================================
    # Tickets
    # ========================================

    async def save_ticket(self, ticket: Ticket) -> Ticket:
        async with self._ticket_lock:
            existing_id = self._ticket_by_message.get(ticket.intake_message_id)
            if existing_id is not None and existing_id != ticket.id:
                # 메시지당 티켓 1건 (unique constraint)
                raise TicketError(
                    ErrorCode.TICKET_004,
                    reason=f"intake message {ticket.intake_message_id} already has ticket {existing_id}",
                )
            self._tickets[ticket.id] = ticket.model_copy(deep=True)
            self._ticket_by_message[ticket.intake_message_id] = ticket.id
        return ticket

    async def get_ticket(self, ticket_id: str) -> Ticket | None:
        ticket = self._tickets.get(ticket_id)
        return ticket.model_copy(deep=True) if ticket else None

    async def list_tickets(self, limit: int | None = 50) -> list[Ticket]:
        tickets = sorted(self._tickets.values(), key=lambda t: t.created_at, reverse=True)
        if limit is not None:
            tickets = tickets[:limit]
        return [t.model_copy(deep=True) for t in tickets]

    async def count_tickets(self) -> int:
        return len(self._tickets)

    async def get_ticket_by_intake_message_id(self, intake_message_id: str) -> Ticket | None:
        ticket_id = self._ticket_by_message.get(intake_message_id)
        if ticket_id is None:
            return None
        return await self.get_ticket(ticket_id)

    async def clear(self) -> None:
        """전체 데이터 삭제 (테스트용)"""
        async with self._message_lock, self._ticket_lock:
            self._messages.clear()
            self._tickets.clear()
            self._ticket_by_message.clear()
        logger.info("InMemoryStore 초기화 완료")
