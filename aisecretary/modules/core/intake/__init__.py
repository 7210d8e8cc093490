"""
접수 파이프라인 모듈

- IntakePipeline: 접수 → 마스킹 → 위치/우선순위 → 저장 → 이벤트
- IntakeEventBus / MessageReceived: 저장 이후 이벤트
- TicketIntegration: 접수 메시지 → 티켓 변환
"""

from .events import IntakeEventBus, MessageReceived
from .pipeline import IntakePipeline
from .ticket_integration import (
    TicketIntegration,
    build_ticket_description,
    build_ticket_title,
)

__all__ = [
    "IntakePipeline",
    "IntakeEventBus",
    "MessageReceived",
    "TicketIntegration",
    "build_ticket_title",
    "build_ticket_description",
]
