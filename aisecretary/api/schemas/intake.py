"""
접수 API 스키마
채널별 접수 요청 및 메시지 응답 Pydantic 모델
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ApiResponse(BaseModel):
    """공통 응답 래퍼"""

    success: bool = True
    data: Any = None
    message: str | None = None


class SMSIntakeRequest(BaseModel):
    """SMS 접수 요청"""

    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(..., alias="from", description="발신 번호", examples=["010-1234-5678"])
    body: str = Field(..., description="문자 내용", examples=["101동 1502호 엘리베이터가 고장났어요"])


class EmailIntakeRequest(BaseModel):
    """이메일 접수 요청"""

    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(..., alias="from", description="발신 이메일")
    subject: str | None = Field(default=None, description="제목")
    body: str = Field(..., description="본문")

    @property
    def content(self) -> str:
        return f"{self.subject}\n\n{self.body}" if self.subject else self.body


class WebIntakeRequest(BaseModel):
    """웹폼 접수 요청"""

    name: str | None = Field(default=None, description="작성자 이름 (저장하지 않음)")
    email: str = Field(..., description="회신 이메일")
    message: str = Field(..., description="문의 내용")


class CallIntakeRequest(BaseModel):
    """통화 접수 요청 (녹취 텍스트)"""

    caller: str = Field(..., description="발신 번호")
    transcript: str = Field(..., description="통화 녹취 텍스트")
    duration: int | None = Field(default=None, ge=0, description="통화 시간 (초)")


class ChatIntakeRequest(BaseModel):
    """채팅/카카오톡 접수 요청"""

    sender: str = Field(..., description="발신자 식별자")
    message: str = Field(..., description="메시지 내용")
    channel: Literal["chat", "kakaotalk"] = "chat"


class MessageStatusUpdateRequest(BaseModel):
    """메시지 상태 변경 요청"""

    status: str = Field(..., description="pending, classified, assigned, processed 중 하나")
