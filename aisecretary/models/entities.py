"""
도메인 엔티티 (IntakeMessage, Ticket, StaffMember)

저장소는 엔티티 사본을 주고받으므로 호출자가 반환 객체를 수정해도
저장된 상태는 save() 전까지 변하지 않습니다.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..lib.logger import now_kst
from .enums import (
    IntakeChannel,
    IntakeStatus,
    MessageClassification,
    Priority,
    TicketStatus,
)


def generate_id(prefix: str) -> str:
    """접두사가 붙은 고유 ID 생성 (예: msg_3f2a...)"""
    return f"{prefix}_{uuid.uuid4().hex}"


class ApartmentUnitInfo(BaseModel):
    """메시지에 첨부되는 동/호 정보"""

    dong: int | None = None
    ho: int | None = None
    floor: int | None = None
    formatted: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    raw_matches: list[str] = Field(default_factory=list)


class IntakeMessage(BaseModel):
    """접수 메시지"""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: generate_id("msg"))
    channel: IntakeChannel
    content: str
    masked_content: str
    sender: str
    masked_sender: str
    classification: MessageClassification | None = None
    classification_confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    priority: Priority
    status: IntakeStatus = IntakeStatus.PENDING
    apartment_unit: ApartmentUnitInfo | None = None
    ticket_id: str | None = None
    created_at: datetime = Field(default_factory=now_kst)
    updated_at: datetime = Field(default_factory=now_kst)

    def touch(self) -> None:
        self.updated_at = now_kst()

    def public_view(self) -> dict:
        """원문(content, sender)을 제외한 직렬화 결과"""
        return self.model_dump(mode="json", exclude={"content", "sender"})


class Ticket(BaseModel):
    """접수 메시지에서 파생된 작업 티켓"""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: generate_id("ticket"))
    number: str
    title: str
    description: str
    category: MessageClassification
    priority: Priority
    status: TicketStatus = TicketStatus.OPEN
    assignee_id: str | None = None
    reporter_id: str
    sla_deadline: datetime
    response_deadline: datetime
    resolved_at: datetime | None = None
    intake_message_id: str
    created_at: datetime = Field(default_factory=now_kst)
    updated_at: datetime = Field(default_factory=now_kst)

    def touch(self) -> None:
        self.updated_at = now_kst()


class StaffMember(BaseModel):
    """관리사무소 직원"""

    id: str
    name: str
    role: str = ""
    department: str = ""
    specialties: list[str] = Field(default_factory=list)
    active: bool = True
