"""
SLAEngine - 티켓 응답/해결 기한 계산 및 위반 집계

규칙 조회 순서:
1. (우선순위, 카테고리) 정확히 일치
2. (우선순위, 카테고리 없음)
3. 기본값 (응답 24시간 / 해결 168시간)
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from ....lib.logger import get_logger, now_kst
from ....models import MessageClassification, Priority, Ticket

logger = get_logger(__name__)


@dataclass(frozen=True)
class SLARule:
    """SLA 규칙"""

    priority: Priority
    response_hours: float
    resolution_hours: float
    category: MessageClassification | None = None


DEFAULT_SLA_RULES: tuple[SLARule, ...] = (
    SLARule(Priority.URGENT, 1, 4),
    SLARule(Priority.HIGH, 4, 24),
    SLARule(Priority.MEDIUM, 8, 72),
    SLARule(Priority.LOW, 24, 168),
    SLARule(Priority.URGENT, 0.5, 2, MessageClassification.EMERGENCY),
    SLARule(Priority.HIGH, 0.5, 2, MessageClassification.EMERGENCY),
    SLARule(Priority.HIGH, 6, 24, MessageClassification.MAINTENANCE),
    SLARule(Priority.MEDIUM, 4, 48, MessageClassification.MAINTENANCE),
)


@dataclass
class SLADashboard:
    """SLA 현황"""

    total_tickets: int
    within_sla: int
    violated_sla: int
    average_resolution_hours: float
    sla_performance: float
    resolved_late: int = 0


class SLAEngine:
    """
    SLA 엔진

    사용 예시:
        engine = SLAEngine()
        deadline = engine.resolution_deadline(Priority.HIGH, MessageClassification.EMERGENCY)
    """

    def __init__(
        self,
        rules: Iterable[SLARule] = DEFAULT_SLA_RULES,
        default_response_hours: float = 24.0,
        default_resolution_hours: float = 168.0,
    ):
        self.rules = list(rules)
        self.default_rule_hours = (default_response_hours, default_resolution_hours)
        self._exact: dict[tuple[Priority, MessageClassification | None], SLARule] = {}
        for rule in self.rules:
            # 같은 키가 중복되면 먼저 선언된 규칙 사용
            self._exact.setdefault((rule.priority, rule.category), rule)

    def find_rule(
        self, priority: Priority, category: MessageClassification | None = None
    ) -> SLARule:
        if category is not None and (priority, category) in self._exact:
            return self._exact[(priority, category)]

        rule = self._exact.get((priority, None))
        if rule is None:
            logger.warning(
                "SLA 규칙 없음, 기본값 사용",
                priority=priority.value,
                category=category.value if category else None,
            )
            response_hours, resolution_hours = self.default_rule_hours
            return SLARule(priority, response_hours, resolution_hours)
        return rule

    def resolution_deadline(
        self,
        priority: Priority,
        category: MessageClassification | None = None,
        now: datetime | None = None,
    ) -> datetime:
        rule = self.find_rule(priority, category)
        return (now or now_kst()) + timedelta(hours=rule.resolution_hours)

    def response_deadline(
        self,
        priority: Priority,
        category: MessageClassification | None = None,
        now: datetime | None = None,
    ) -> datetime:
        rule = self.find_rule(priority, category)
        return (now or now_kst()) + timedelta(hours=rule.response_hours)

    def is_violated(self, ticket: Ticket, now: datetime | None = None) -> bool:
        """해결 기한이 지났고 아직 해결/종료되지 않은 티켓이면 True"""
        current = now or now_kst()
        violated = current > ticket.sla_deadline and not ticket.status.is_terminal
        if violated:
            logger.warning(
                "SLA 위반 감지",
                ticket_id=ticket.id,
                deadline=ticket.sla_deadline.isoformat(),
            )
        return violated

    def violations(self, tickets: Iterable[Ticket], now: datetime | None = None) -> list[Ticket]:
        current = now or now_kst()
        return [t for t in tickets if self.is_violated(t, current)]

    def upcoming_deadlines(
        self,
        tickets: Iterable[Ticket],
        hours_ahead: float = 24,
        now: datetime | None = None,
    ) -> list[Ticket]:
        """hours_ahead 시간 안에 해결 기한이 도래하는 미해결 티켓 (기한 순)"""
        current = now or now_kst()
        cutoff = current + timedelta(hours=hours_ahead)
        upcoming = [
            t
            for t in tickets
            if not t.status.is_terminal and current <= t.sla_deadline <= cutoff
        ]
        return sorted(upcoming, key=lambda t: t.sla_deadline)

    def dashboard(self, tickets: Iterable[Ticket], now: datetime | None = None) -> SLADashboard:
        """
        SLA 현황 집계

        위반 건수는 is_violated 기준 (기한 초과 + 미해결/미종료) 이며 violations()와 일치합니다.
        기한 이후에 해결된 티켓은 resolved_late로 따로 집계합니다.
        티켓이 없으면 성과율은 100입니다.
        """
        current = now or now_kst()
        ticket_list = list(tickets)
        total = len(ticket_list)

        violated = 0
        resolved_late = 0
        resolution_hours: list[float] = []
        for ticket in ticket_list:
            if self.is_violated(ticket, current):
                violated += 1
            if ticket.resolved_at is not None:
                resolution_hours.append(
                    (ticket.resolved_at - ticket.created_at).total_seconds() / 3600
                )
                if ticket.resolved_at > ticket.sla_deadline:
                    resolved_late += 1

        within = total - violated
        average = round(sum(resolution_hours) / len(resolution_hours), 2) if resolution_hours else 0.0
        performance = round(within / total * 100, 2) if total > 0 else 100.0

        return SLADashboard(
            total_tickets=total,
            within_sla=within,
            violated_sla=violated,
            average_resolution_hours=average,
            sla_performance=performance,
            resolved_late=resolved_late,
        )
