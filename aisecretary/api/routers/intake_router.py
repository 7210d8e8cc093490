"""
Intake Router - 채널별 민원 접수 API

## Router Layer의 역할
- 채널별 요청 → (channel, content, sender) 변환
- 파이프라인 호출 및 응답 래핑
- 원문(content, sender)은 응답에 포함하지 않음
"""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query

from ...core.di_container import AppContainer
from ...lib.errors import ErrorCode, NotFoundError
from ...lib.logger import get_logger
from ...models import IntakeChannel, IntakeMessage
from ...modules.core.intake import IntakePipeline
from ..schemas import (
    ApiResponse,
    CallIntakeRequest,
    ChatIntakeRequest,
    EmailIntakeRequest,
    MessageStatusUpdateRequest,
    SMSIntakeRequest,
    WebIntakeRequest,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/api/intake", tags=["Intake"])


async def _accept(
    pipeline: IntakePipeline,
    channel: IntakeChannel,
    content: str,
    sender: str,
    label: str,
) -> ApiResponse:
    message = await pipeline.process_message(channel, content, sender)
    return ApiResponse(data=message.public_view(), message=f"{label} message processed successfully")


@router.post("/sms", status_code=201, response_model=ApiResponse)
@inject
async def receive_sms(
    request: SMSIntakeRequest,
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    """SMS 접수"""
    return await _accept(pipeline, IntakeChannel.SMS, request.body, request.sender, "SMS")


@router.post("/email", status_code=201, response_model=ApiResponse)
@inject
async def receive_email(
    request: EmailIntakeRequest,
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    """이메일 접수 (제목이 있으면 "제목\\n\\n본문")"""
    return await _accept(pipeline, IntakeChannel.EMAIL, request.content, request.sender, "Email")


@router.post("/web", status_code=201, response_model=ApiResponse)
@inject
async def receive_web(
    request: WebIntakeRequest,
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    """웹폼 접수 (발신자는 이메일)"""
    return await _accept(pipeline, IntakeChannel.WEB, request.message, request.email, "Web form")


@router.post("/call", status_code=201, response_model=ApiResponse)
@inject
async def receive_call(
    request: CallIntakeRequest,
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    """통화 녹취 접수"""
    return await _accept(pipeline, IntakeChannel.CALL, request.transcript, request.caller, "Call")


@router.post("/chat", status_code=201, response_model=ApiResponse)
@inject
async def receive_chat(
    request: ChatIntakeRequest,
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    """채팅/카카오톡 접수"""
    channel = IntakeChannel(request.channel)
    return await _accept(pipeline, channel, request.message, request.sender, "Chat")


# ========================================
# 메시지 조회 / 변경
# ========================================


@router.get("/messages", response_model=ApiResponse)
@inject
async def list_messages(
    limit: int = Query(default=50, ge=1, le=500),
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    messages = await pipeline.list_messages(limit=limit)
    return ApiResponse(data=[m.public_view() for m in messages])


@router.get("/messages/{message_id}", response_model=ApiResponse)
@inject
async def get_message(
    message_id: str,
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    message = await pipeline.get_message(message_id)
    return ApiResponse(data=_require(message, message_id).public_view())


@router.post("/messages/{message_id}/classify", response_model=ApiResponse)
@inject
async def classify_message(
    message_id: str,
    use_llm: bool = Query(default=True),
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    """메시지 분류 (classified 전환 및 티켓 생성 포함)"""
    message = await pipeline.classify_message(message_id, use_llm=use_llm)
    return ApiResponse(data=message.public_view(), message="Message classified successfully")


@router.patch("/messages/{message_id}/status", response_model=ApiResponse)
@inject
async def update_message_status(
    message_id: str,
    request: MessageStatusUpdateRequest,
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    message = await pipeline.update_message_status(message_id, request.status)
    return ApiResponse(
        data=_require(message, message_id).public_view(),
        message="Message status updated successfully",
    )


@router.get("/stats", response_model=ApiResponse)
@inject
async def get_stats(
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    stats = await pipeline.get_stats()
    return ApiResponse(
        data={
            "total_messages": stats["total_messages"],
            "recent_messages": [m.public_view() for m in stats["recent_messages"]],
        }
    )


def _require(message: IntakeMessage | None, message_id: str) -> IntakeMessage:
    if message is None:
        raise NotFoundError(ErrorCode.MESSAGE_001, message_id=message_id)
    return message
