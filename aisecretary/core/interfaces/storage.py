"""
Storage Interfaces

접수 메시지/티켓 저장소 추상화 인터페이스 정의.
비즈니스 로직은 이 인터페이스에만 의존하며 구체적인 저장소 구현(in-memory, RDB 등)과 분리됩니다.
"""

from abc import ABC, abstractmethod

from ...models import IntakeMessage, Ticket


class IMessageStore(ABC):
    """접수 메시지 저장소 인터페이스"""

    @abstractmethod
    async def save_message(self, message: IntakeMessage) -> IntakeMessage:
        """메시지 저장 또는 갱신 (Upsert)"""
        pass

    @abstractmethod
    async def get_message(self, message_id: str) -> IntakeMessage | None:
        """ID로 메시지 조회"""
        pass

    @abstractmethod
    async def list_messages(self, limit: int = 50) -> list[IntakeMessage]:
        """최신순 메시지 목록"""
        pass

    @abstractmethod
    async def count_messages(self) -> int:
        """전체 메시지 수"""
        pass


class ITicketStore(ABC):
    """티켓 저장소 인터페이스"""

    @abstractmethod
    async def save_ticket(self, ticket: Ticket) -> Ticket:
        """티켓 저장 또는 갱신 (Upsert)"""
        pass

    @abstractmethod
    async def get_ticket(self, ticket_id: str) -> Ticket | None:
        """ID로 티켓 조회"""
        pass

    @abstractmethod
    async def list_tickets(self, limit: int | None = 50) -> list[Ticket]:
        """최신순 티켓 목록 (limit=None이면 전체)"""
        pass

    @abstractmethod
    async def count_tickets(self) -> int:
        """전체 티켓 수"""
        pass

    @abstractmethod
    async def get_ticket_by_intake_message_id(self, intake_message_id: str) -> Ticket | None:
        """원본 메시지 ID로 티켓 조회"""
        pass
