"""
ClassificationService - 규칙 기반 + LLM 폴백 분류

1. 규칙 기반 분류 (항상 실행, 수 ms)
2. 신뢰도가 임계값 미만이고 LLM이 사용 가능하면 폴백 호출
3. LLM 결과는 신뢰도가 규칙 결과보다 "엄격히" 높을 때만 채택

LLM 오류는 여기서 흡수되며 규칙 결과가 유지됩니다.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from ....core.interfaces import IMessageStore
from ....lib.errors import ErrorCode, NotFoundError
from ....lib.keyed_lock import KeyedLock
from ....lib.logger import get_logger
from ....models import IntakeMessage, IntakeStatus
from .llm_classifier import LLMClassifier, NullLLMClassifier
from .rule_classifier import ClassificationResult, RuleBasedClassifier

logger = get_logger(__name__)

OnClassified = Callable[[IntakeMessage], Awaitable[Any]]


class ClassificationService:
    """
    분류 서비스

    사용 예시:
        service = ClassificationService(rule_classifier, llm_classifier, store=store)
        result = await service.classify("관리비 문의드립니다")
    """

    def __init__(
        self,
        rule_classifier: RuleBasedClassifier,
        llm_classifier: LLMClassifier | None = None,
        store: IMessageStore | None = None,
        message_locks: KeyedLock | None = None,
        llm_threshold: float = 0.7,
    ):
        self.rule_classifier = rule_classifier
        self.llm_classifier = llm_classifier or NullLLMClassifier()
        self.store = store
        self.message_locks = message_locks or KeyedLock()
        self.llm_threshold = llm_threshold
        self._on_classified: OnClassified | None = None

    def set_on_classified(self, callback: OnClassified | None) -> None:
        """분류 완료 후 호출할 콜백 등록 (락 해제 후 호출됨)"""
        self._on_classified = callback

    async def classify(self, text: str, use_llm: bool = True) -> ClassificationResult:
        """
        텍스트 분류

        Args:
            text: 마스킹된 텍스트
            use_llm: 신뢰도가 낮을 때 LLM 폴백 사용 여부

        Returns:
            ClassificationResult (confidence는 항상 0~1)
        """
        result = self.rule_classifier.classify(text)

        if not use_llm or result.confidence >= self.llm_threshold:
            return result

        try:
            if not await self.llm_classifier.is_available():
                return result

            llm_result = await self.llm_classifier.classify_message(text)
        except Exception as e:
            logger.warning(
                "LLM 분류 실패, 규칙 기반 결과 유지",
                error=str(e),
                rule_classification=result.classification.value,
            )
            return result

        if llm_result.confidence > result.confidence:
            logger.info(
                "LLM 분류 결과 채택",
                rule_confidence=result.confidence,
                llm_confidence=llm_result.confidence,
                classification=llm_result.classification.value,
            )
            return ClassificationResult(
                classification=llm_result.classification,
                confidence=max(0.0, min(llm_result.confidence, 1.0)),
                method="llm",
                reasoning=llm_result.reasoning,
            )

        return result

    async def classify_message(self, message_id: str, use_llm: bool = True) -> IntakeMessage:
        """
        저장된 메시지 분류

        마스킹된 내용을 분류해 저장하고 상태를 classified로 올립니다.
        (이미 이후 상태면 상태는 유지) 이후 등록된 콜백으로 티켓 생성을 요청합니다.

        Raises:
            NotFoundError: 메시지가 없을 때
        """
        if self.store is None:
            raise RuntimeError("message store is not configured")

        async with self.message_locks.acquire(message_id):
            message = await self.store.get_message(message_id)
            if message is None:
                raise NotFoundError(ErrorCode.MESSAGE_001, message_id=message_id)

            result = await self.classify(message.masked_content, use_llm=use_llm)

            message.classification = result.classification
            message.classification_confidence = result.confidence
            if message.status.can_transition_to(IntakeStatus.CLASSIFIED):
                message.status = IntakeStatus.CLASSIFIED
            message.touch()
            await self.store.save_message(message)

        logger.info(
            "메시지 분류 완료",
            message_id=message_id,
            classification=result.classification.value,
            confidence=result.confidence,
            method=result.method,
        )

        if self._on_classified is not None:
            await self._on_classified(message)
            refreshed = await self.store.get_message(message_id)
            if refreshed is not None:
                message = refreshed

        return message
