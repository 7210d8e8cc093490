from .intake import (
    ApiResponse,
    CallIntakeRequest,
    ChatIntakeRequest,
    EmailIntakeRequest,
    MessageStatusUpdateRequest,
    SMSIntakeRequest,
    WebIntakeRequest,
)
from .tickets import TicketAssignRequest, TicketStatusUpdateRequest

__all__ = [
    "ApiResponse",
    "SMSIntakeRequest",
    "EmailIntakeRequest",
    "WebIntakeRequest",
    "CallIntakeRequest",
    "ChatIntakeRequest",
    "MessageStatusUpdateRequest",
    "TicketStatusUpdateRequest",
    "TicketAssignRequest",
]
