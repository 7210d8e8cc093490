"""
DI Container - AI 비서 의존성 주입 컨테이너

dependency-injector 라이브러리 기반

Provider 타입:
- Configuration: YAML 로딩 + 환경 변수 병합 결과
- Singleton: 공유 상태 (저장소, 락 레지스트리, 엔진, 서비스)
"""

import random
from typing import Any

from dependency_injector import containers, providers

from ..infrastructure.persistence import InMemoryStore
from ..lib.keyed_lock import KeyedLock
from ..lib.logger import get_logger
from ..models import MessageClassification, Priority, StaffMember
from ..modules.core.classification import (
    ClassificationService,
    LLMClassifier,
    NullLLMClassifier,
    OllamaClassifier,
    RuleBasedClassifier,
)
from ..modules.core.intake import IntakeEventBus, IntakePipeline, TicketIntegration
from ..modules.core.location import ApartmentParser
from ..modules.core.privacy import PrivacyMasker
from ..modules.core.ticketing import (
    AssignmentEngine,
    SLAEngine,
    SLARule,
    TicketNumberGenerator,
    TicketService,
)
from ..modules.core.triage import PriorityEngine

logger = get_logger(__name__)


# ========================================
# Helper Functions
# ========================================


def create_llm_classifier(llm_config: dict[str, Any]) -> LLMClassifier:
    """
    LLM 폴백 분류기 생성

    비활성화되어 있거나 provider가 none이면 NullLLMClassifier 반환
    """
    if not llm_config.get("enabled") or llm_config.get("provider") == "none":
        logger.info("LLM 폴백 비활성화")
        return NullLLMClassifier()

    return OllamaClassifier(
        base_url=llm_config["base_url"],
        model=llm_config["model"],
        model_family=llm_config["model_family"],
        availability_timeout=llm_config["availability_timeout"],
        request_timeout=llm_config["request_timeout"],
        availability_cache_ttl=llm_config["availability_cache_ttl"],
        temperature=llm_config["temperature"],
        top_p=llm_config["top_p"],
        num_predict=llm_config["num_predict"],
    )


def create_sla_engine(sla_config: dict[str, Any]) -> SLAEngine:
    rules = [
        SLARule(
            priority=Priority(rule["priority"]),
            category=MessageClassification(rule["category"]) if rule.get("category") else None,
            response_hours=rule["response_hours"],
            resolution_hours=rule["resolution_hours"],
        )
        for rule in sla_config.get("rules", [])
    ]
    return SLAEngine(
        rules=rules,
        default_response_hours=sla_config["default_response_hours"],
        default_resolution_hours=sla_config["default_resolution_hours"],
    )


def create_assignment_engine(
    staff_config: dict[str, Any], rng: random.Random | None = None
) -> AssignmentEngine:
    members = [StaffMember(**member) for member in staff_config.get("members", [])]
    return AssignmentEngine(
        staff=members,
        fallback_staff_id=staff_config["fallback_staff_id"],
        rng=rng,
    )


def create_privacy_masker(
    privacy_config: dict[str, Any],
    rule_classifier: RuleBasedClassifier,
    priority_engine: PriorityEngine,
) -> PrivacyMasker:
    """분류/우선순위 키워드를 보호 키워드로 넘겨 마스킹 후에도 분류가 가능하게 함"""
    return PrivacyMasker(
        whitelist=privacy_config.get("name_whitelist", []),
        protected_keywords=rule_classifier.all_keywords | priority_engine.keywords,
        address_placeholder=privacy_config["address_placeholder"],
        fail_closed=privacy_config["fail_closed"],
        fail_closed_placeholder=privacy_config["fail_closed_placeholder"],
    )


class AppContainer(containers.DeclarativeContainer):
    """
    애플리케이션 DI Container

    Provider 그룹:
    ┌─────────────────────────────────────────────────────────────┐
    │ 1. Infrastructure                                           │
    │    - store, message_locks, ticket_locks, event_bus          │
    ├─────────────────────────────────────────────────────────────┤
    │ 2. Core Engines                                             │
    │    - rule_classifier, llm_classifier, priority_engine       │
    │    - privacy_masker, apartment_parser                       │
    │    - sla_engine, assignment_engine, ticket_number_generator │
    ├─────────────────────────────────────────────────────────────┤
    │ 3. Application Services                                     │
    │    - classification_service, ticket_service                 │
    │    - ticket_integration, intake_pipeline                    │
    └─────────────────────────────────────────────────────────────┘
    """

    # ========================================
    # 1. Configuration Provider
    # ========================================
    config = providers.Configuration()

    # ========================================
    # 2. Infrastructure
    # ========================================
    store = providers.Singleton(InMemoryStore)

    # 메시지/티켓 ID 단위 락 (서비스 간 공유)
    message_locks = providers.Singleton(KeyedLock)
    ticket_locks = providers.Singleton(KeyedLock)

    event_bus = providers.Singleton(IntakeEventBus)

    # ========================================
    # 3. Core Engines
    # ========================================
    rule_classifier = providers.Singleton(
        RuleBasedClassifier,
        rules_path=config.classification.rules_file,
        default_confidence=config.classification.default_confidence,
    )

    llm_classifier = providers.Singleton(create_llm_classifier, llm_config=config.llm)

    priority_engine = providers.Singleton(
        PriorityEngine,
        urgent_keywords=config.priority.urgent_keywords,
        high_keywords=config.priority.high_keywords,
        high_channels=config.priority.high_channels,
    )

    privacy_masker = providers.Singleton(
        create_privacy_masker,
        privacy_config=config.privacy,
        rule_classifier=rule_classifier,
        priority_engine=priority_engine,
    )

    apartment_parser = providers.Singleton(ApartmentParser)

    sla_engine = providers.Singleton(create_sla_engine, sla_config=config.sla)

    assignment_engine = providers.Singleton(create_assignment_engine, staff_config=config.staff)

    ticket_number_generator = providers.Singleton(TicketNumberGenerator)

    # ========================================
    # 4. Application Services
    # ========================================
    classification_service = providers.Singleton(
        ClassificationService,
        rule_classifier=rule_classifier,
        llm_classifier=llm_classifier,
        store=store,
        message_locks=message_locks,
        llm_threshold=config.classification.llm_threshold,
    )

    ticket_service = providers.Singleton(
        TicketService,
        store=store,
        sla_engine=sla_engine,
        assignment_engine=assignment_engine,
        number_generator=ticket_number_generator,
        ticket_locks=ticket_locks,
    )

    ticket_integration = providers.Singleton(
        TicketIntegration,
        store=store,
        ticket_service=ticket_service,
        rule_classifier=rule_classifier,
        message_locks=message_locks,
        auto_ticket_priorities=config.intake.auto_ticket_priorities,
    )

    intake_pipeline = providers.Singleton(
        IntakePipeline,
        store=store,
        masker=privacy_masker,
        parser=apartment_parser,
        priority_engine=priority_engine,
        classification_service=classification_service,
        ticket_service=ticket_service,
        ticket_integration=ticket_integration,
        sla_engine=sla_engine,
        assignment_engine=assignment_engine,
        event_bus=event_bus,
        message_locks=message_locks,
        max_content_length=config.intake.max_content_length,
        auto_ticket_priorities=config.intake.auto_ticket_priorities,
        auto_classify_use_llm=config.intake.auto_classify_use_llm,
        min_unit_confidence=config.intake.min_unit_confidence,
        recent_limit=config.intake.recent_limit,
    )


def create_container(config: dict[str, Any]) -> AppContainer:
    """설정 딕셔너리로 컨테이너 생성"""
    container = AppContainer()
    container.config.from_dict(config)
    return container


async def cleanup_resources(container: AppContainer) -> None:
    """
    애플리케이션 종료 시 리소스 정리

    LLM 분류기의 HTTP 클라이언트를 닫습니다.
    """
    logger.info("애플리케이션 리소스 정리 시작")
    try:
        await container.llm_classifier().close()
    except Exception as e:
        logger.error("LLM 분류기 종료 실패", error=str(e), exc_info=True)
    logger.info("애플리케이션 리소스 정리 완료")
