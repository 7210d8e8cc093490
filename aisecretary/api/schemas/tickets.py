"""
티켓 API 스키마
"""

from pydantic import BaseModel, Field

from ...models import TicketStatus


class TicketStatusUpdateRequest(BaseModel):
    """티켓 상태 변경 요청"""

    status: TicketStatus


class TicketAssignRequest(BaseModel):
    """담당자 지정/변경 요청"""

    assignee_id: str = Field(..., min_length=1, description="직원 ID", examples=["staff_001"])
