"""도메인 모델"""

from .entities import ApartmentUnitInfo, IntakeMessage, StaffMember, Ticket, generate_id
from .enums import (
    IntakeChannel,
    IntakeStatus,
    MessageClassification,
    Priority,
    TicketStatus,
)

__all__ = [
    "ApartmentUnitInfo",
    "IntakeMessage",
    "StaffMember",
    "Ticket",
    "generate_id",
    "IntakeChannel",
    "IntakeStatus",
    "MessageClassification",
    "Priority",
    "TicketStatus",
]
