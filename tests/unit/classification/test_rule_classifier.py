"""
RuleBasedClassifier 단위 테스트

테스트 케이스:
1. 기본 규칙 파일 로드 및 분류
2. 점수 계산 (일치 키워드 비율 × 가중치)
3. 동점 시 선언 순서 우선
4. 일치 규칙이 없을 때 inquiry / 0.3
5. 카테고리 추정 (infer_category)
"""

import pytest

from aisecretary.models import MessageClassification
from aisecretary.modules.core.classification import ClassificationRule, RuleBasedClassifier


@pytest.fixture(scope="module")
def classifier() -> RuleBasedClassifier:
    """기본 규칙 파일 (config/rules/classification_rules.yaml)"""
    return RuleBasedClassifier()


class TestDefaultRules:
    """기본 규칙 테이블 분류"""

    def test_elevator_breakdown_is_maintenance(self, classifier: RuleBasedClassifier) -> None:
        """고장 + 엘리베이터 → 2/5 × 0.9"""
        result = classifier.classify("101동 1502호 엘리베이터가 고장났어요")

        assert result.classification == MessageClassification.MAINTENANCE
        assert result.confidence == pytest.approx(0.36)
        assert result.method == "rule_based"
        assert set(result.matched_keywords) == {"고장", "엘리베이터"}

    def test_gas_emergency(self, classifier: RuleBasedClassifier) -> None:
        result = classifier.classify("응급상황입니다 가스 냄새가 나요")

        assert result.classification == MessageClassification.EMERGENCY

    def test_billing(self, classifier: RuleBasedClassifier) -> None:
        result = classifier.classify("관리비 문의드립니다")

        assert result.classification == MessageClassification.BILLING
        assert result.confidence == pytest.approx(0.25)

    def test_no_match_defaults_to_inquiry(self, classifier: RuleBasedClassifier) -> None:
        result = classifier.classify("안녕하세요")

        assert result.classification == MessageClassification.INQUIRY
        assert result.confidence == 0.3
        assert result.matched_keywords == []

    def test_empty_text(self, classifier: RuleBasedClassifier) -> None:
        result = classifier.classify("")

        assert result.classification == MessageClassification.INQUIRY

    def test_all_keywords(self, classifier: RuleBasedClassifier) -> None:
        keywords = classifier.all_keywords

        assert "관리비" in keywords
        assert "엘리베이터" in keywords


class TestCustomRules:
    """주입한 규칙으로 점수/동점 처리 검증"""

    def test_score_is_ratio_times_weight(self) -> None:
        rule = ClassificationRule(
            name="parking",
            classification=MessageClassification.PARKING,
            keywords=["주차", "차량", "주차장", "주차위반"],
            weight=1.0,
        )

        score, matched = rule.score("주차장에 차량이")

        # "주차"는 "주차장"의 부분 문자열이라 함께 일치
        assert matched == ["주차", "차량", "주차장"]
        assert score == pytest.approx(0.75)

    def test_tie_keeps_first_rule(self) -> None:
        classifier = RuleBasedClassifier(
            rules=[
                ClassificationRule("a", MessageClassification.NOISE, ["소리"]),
                ClassificationRule("b", MessageClassification.COMPLAINT, ["소리"]),
            ]
        )

        result = classifier.classify("큰 소리")

        assert result.classification == MessageClassification.NOISE

    def test_case_insensitive(self) -> None:
        classifier = RuleBasedClassifier(
            rules=[ClassificationRule("cctv", MessageClassification.SAFETY, ["CCTV"])]
        )

        result = classifier.classify("cctv 점검 요청")

        # 키워드와 본문 모두 소문자로 비교
        assert result.classification == MessageClassification.SAFETY
        assert result.confidence == 1.0

    def test_confidence_clamped(self) -> None:
        classifier = RuleBasedClassifier(
            rules=[ClassificationRule("x", MessageClassification.NOISE, ["소음"], weight=2.0)]
        )

        assert classifier.classify("소음").confidence == 1.0

    def test_custom_rules_file(self, tmp_path) -> None:
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text(
            "rules:\n"
            "  - name: delivery\n"
            "    classification: delivery\n"
            "    keywords: [택배]\n"
            "  - name: empty\n"
            "    classification: noise\n"
            "    keywords: []\n",
            encoding="utf-8",
        )

        classifier = RuleBasedClassifier(rules_path=rules_file)

        assert len(classifier.rules) == 1
        assert classifier.classify("택배 분실").classification == MessageClassification.DELIVERY


class TestInferCategory:
    """티켓 카테고리 추정"""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("윗집 소음이 심해요", MessageClassification.NOISE),
            ("주차 문제", MessageClassification.PARKING),
            ("엘리베이터 멈춤", MessageClassification.MAINTENANCE),
            ("관리비가 이상해요", MessageClassification.BILLING),
            ("출입 기록 확인", MessageClassification.SECURITY),
            ("긴급 상황", MessageClassification.EMERGENCY),
            ("안녕하세요", MessageClassification.INQUIRY),
        ],
    )
    def test_infer_category(
        self, classifier: RuleBasedClassifier, text: str, expected: MessageClassification
    ) -> None:
        assert classifier.infer_category(text) == expected
