"""
Ticket Router - 티켓/SLA/업무량 API

고정 경로(/sla, /workload, /staff, /by-message, /assignee)는
/{ticket_id} 보다 먼저 등록되어야 합니다.
"""

from dataclasses import asdict

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query

from ...core.di_container import AppContainer
from ...lib.logger import get_logger
from ...models import TicketStatus
from ...modules.core.intake import IntakePipeline
from ...modules.core.ticketing import AssignmentEngine, TicketService
from ..schemas import ApiResponse, TicketAssignRequest, TicketStatusUpdateRequest

logger = get_logger(__name__)
router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


@router.get("", response_model=ApiResponse)
@inject
async def list_tickets(
    limit: int = Query(default=50, ge=1, le=500),
    status: TicketStatus | None = Query(default=None),
    assignee_id: str | None = Query(default=None),
    ticket_service: TicketService = Depends(Provide[AppContainer.ticket_service]),
) -> ApiResponse:
    tickets = await ticket_service.list_tickets(limit=limit, status=status, assignee_id=assignee_id)
    return ApiResponse(data=[t.model_dump(mode="json") for t in tickets])


# ========================================
# SLA / 업무량 / 직원
# ========================================


@router.get("/sla/dashboard", response_model=ApiResponse)
@inject
async def get_sla_dashboard(
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    dashboard = await pipeline.get_sla_dashboard()
    return ApiResponse(data=asdict(dashboard))


@router.get("/sla/violations", response_model=ApiResponse)
@inject
async def get_sla_violations(
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    violations = await pipeline.get_sla_violations()
    return ApiResponse(data=[t.model_dump(mode="json") for t in violations])


@router.get("/sla/upcoming", response_model=ApiResponse)
@inject
async def get_upcoming_deadlines(
    hours_ahead: float = Query(default=24, gt=0),
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    tickets = await pipeline.get_upcoming_deadlines(hours_ahead=hours_ahead)
    return ApiResponse(data=[t.model_dump(mode="json") for t in tickets])


@router.get("/workload/analytics", response_model=ApiResponse)
@inject
async def get_workload_analytics(
    pipeline: IntakePipeline = Depends(Provide[AppContainer.intake_pipeline]),
) -> ApiResponse:
    workload = await pipeline.get_workload_analytics()
    return ApiResponse(data=[asdict(w) for w in workload])


@router.get("/staff", response_model=ApiResponse)
@inject
async def list_staff(
    assignment_engine: AssignmentEngine = Depends(Provide[AppContainer.assignment_engine]),
) -> ApiResponse:
    return ApiResponse(data=[s.model_dump() for s in assignment_engine.staff])


@router.get("/by-message/{message_id}", response_model=ApiResponse)
@inject
async def get_ticket_by_message(
    message_id: str,
    ticket_service: TicketService = Depends(Provide[AppContainer.ticket_service]),
) -> ApiResponse:
    """접수 메시지의 티켓 조회 (없으면 data=null)"""
    ticket = await ticket_service.get_ticket_by_message_id(message_id)
    return ApiResponse(data=ticket.model_dump(mode="json") if ticket else None)


@router.get("/assignee/{assignee_id}", response_model=ApiResponse)
@inject
async def list_tickets_by_assignee(
    assignee_id: str,
    limit: int = Query(default=50, ge=1, le=500),
    ticket_service: TicketService = Depends(Provide[AppContainer.ticket_service]),
) -> ApiResponse:
    tickets = await ticket_service.list_tickets(limit=limit, assignee_id=assignee_id)
    return ApiResponse(data=[t.model_dump(mode="json") for t in tickets])


# ========================================
# 단건 조회 / 변경
# ========================================


@router.get("/{ticket_id}", response_model=ApiResponse)
@inject
async def get_ticket(
    ticket_id: str,
    ticket_service: TicketService = Depends(Provide[AppContainer.ticket_service]),
) -> ApiResponse:
    ticket = await ticket_service.get_ticket(ticket_id)
    return ApiResponse(data=ticket.model_dump(mode="json"))


@router.patch("/{ticket_id}/status", response_model=ApiResponse)
@inject
async def update_ticket_status(
    ticket_id: str,
    request: TicketStatusUpdateRequest,
    ticket_service: TicketService = Depends(Provide[AppContainer.ticket_service]),
) -> ApiResponse:
    ticket = await ticket_service.update_status(ticket_id, request.status)
    return ApiResponse(data=ticket.model_dump(mode="json"), message="Ticket status updated")


@router.patch("/{ticket_id}/assign", response_model=ApiResponse)
@inject
async def assign_ticket(
    ticket_id: str,
    request: TicketAssignRequest,
    ticket_service: TicketService = Depends(Provide[AppContainer.ticket_service]),
) -> ApiResponse:
    ticket = await ticket_service.assign_ticket(ticket_id, request.assignee_id)
    return ApiResponse(data=ticket.model_dump(mode="json"), message="Ticket assigned")


@router.patch("/{ticket_id}/reassign", response_model=ApiResponse)
@inject
async def reassign_ticket(
    ticket_id: str,
    request: TicketAssignRequest,
    ticket_service: TicketService = Depends(Provide[AppContainer.ticket_service]),
) -> ApiResponse:
    ticket = await ticket_service.reassign_ticket(ticket_id, request.assignee_id)
    return ApiResponse(data=ticket.model_dump(mode="json"), message="Ticket reassigned")
