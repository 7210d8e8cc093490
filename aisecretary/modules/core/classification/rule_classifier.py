"""
RuleBasedClassifier - 키워드 규칙 기반 민원 분류

규칙 테이블(classification_rules.yaml)을 순서대로 평가합니다.

    score = (일치 키워드 수 / 규칙 키워드 수) × weight

가장 높은 점수의 규칙이 선택되며, 동점이면 먼저 나온 규칙이 유지됩니다.
일치하는 규칙이 없으면 inquiry / 0.3 을 반환합니다.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ....lib.logger import get_logger
from ....models import MessageClassification

logger = get_logger(__name__)

# 경로: aisecretary/modules/core/classification/ → aisecretary/config/
CONFIG_DIR = Path(__file__).parent.parent.parent.parent / "config"
DEFAULT_RULES_FILE = "rules/classification_rules.yaml"


@dataclass
class ClassificationRule:
    """분류 규칙"""

    name: str
    classification: MessageClassification
    keywords: list[str]
    weight: float = 1.0

    def score(self, text: str) -> tuple[float, list[str]]:
        matched = [k for k in self.keywords if k.lower() in text]
        if not matched:
            return 0.0, []
        return len(matched) / len(self.keywords) * self.weight, matched


@dataclass
class ClassificationResult:
    """
    분류 결과

    Attributes:
        classification: 분류 카테고리
        confidence: 신뢰도 (0.0 ~ 1.0)
        method: "rule_based" 또는 "llm"
        matched_keywords: 일치한 키워드 (규칙 기반일 때)
        reasoning: 분류 근거 (LLM일 때)
    """

    classification: MessageClassification
    confidence: float
    method: str = "rule_based"
    matched_keywords: list[str] = field(default_factory=list)
    reasoning: str | None = None


# 티켓 생성 시 분류가 없는 메시지의 카테고리 추정용 (먼저 일치한 항목 사용)
_CATEGORY_HINTS: tuple[tuple[tuple[str, ...], MessageClassification], ...] = (
    (("소음", "시끄"), MessageClassification.NOISE),
    (("주차", "차량"), MessageClassification.PARKING),
    (("고장", "수리", "엘리베이터"), MessageClassification.MAINTENANCE),
    (("관리비", "요금"), MessageClassification.BILLING),
    (("보안", "출입"), MessageClassification.SECURITY),
    (("응급", "긴급"), MessageClassification.EMERGENCY),
)


class RuleBasedClassifier:
    """
    규칙 기반 분류기

    사용 예시:
        classifier = RuleBasedClassifier()
        result = classifier.classify("엘리베이터가 고장났어요")
        # result.classification == MessageClassification.MAINTENANCE
    """

    def __init__(
        self,
        rules: list[ClassificationRule] | None = None,
        rules_path: Path | str | None = None,
        default_confidence: float = 0.3,
    ):
        """
        Args:
            rules: 규칙 목록 (주어지면 파일을 읽지 않음)
            rules_path: 규칙 YAML 경로 (상대 경로는 config 디렉토리 기준)
            default_confidence: 일치 규칙이 없을 때의 신뢰도
        """
        self.default_confidence = default_confidence
        self.rules = rules if rules is not None else self._load_rules(rules_path)
        logger.info("RuleBasedClassifier 초기화", rules=len(self.rules))

    @staticmethod
    def _load_rules(rules_path: Path | str | None) -> list[ClassificationRule]:
        path = Path(rules_path or DEFAULT_RULES_FILE)
        if not path.is_absolute():
            path = CONFIG_DIR / path

        with open(path, encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        return [
            ClassificationRule(
                name=item["name"],
                classification=MessageClassification(item["classification"]),
                keywords=[str(k) for k in item.get("keywords", [])],
                weight=float(item.get("weight", 1.0)),
            )
            for item in data.get("rules", [])
            if item.get("keywords")
        ]

    @property
    def all_keywords(self) -> set[str]:
        """모든 규칙의 키워드 (마스킹 보호 키워드로 사용)"""
        return {k for rule in self.rules for k in rule.keywords}

    def classify(self, text: str) -> ClassificationResult:
        """
        텍스트 분류

        Args:
            text: 분류할 텍스트 (마스킹된 내용)

        Returns:
            ClassificationResult
        """
        content = (text or "").lower()

        best: ClassificationRule | None = None
        best_score = 0.0
        best_keywords: list[str] = []

        for rule in self.rules:
            score, matched = rule.score(content)
            # 동점은 먼저 나온 규칙 유지
            if matched and (best is None or score > best_score):
                best, best_score, best_keywords = rule, score, matched

        if best is None:
            return ClassificationResult(
                classification=MessageClassification.INQUIRY,
                confidence=self.default_confidence,
            )

        return ClassificationResult(
            classification=best.classification,
            confidence=max(0.0, min(best_score, 1.0)),
            matched_keywords=best_keywords,
        )

    def infer_category(self, text: str) -> MessageClassification:
        """분류되지 않은 메시지의 티켓 카테고리 추정"""
        content = (text or "").lower()
        for keywords, category in _CATEGORY_HINTS:
            if any(k in content for k in keywords):
                return category
        return MessageClassification.INQUIRY
