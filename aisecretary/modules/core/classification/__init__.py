"""
민원 분류 모듈

- RuleBasedClassifier: 키워드 규칙 기반 분류 (classification_rules.yaml)
- LLMClassifier / OllamaClassifier / NullLLMClassifier: LLM 폴백
- ClassificationService: 규칙 기반 + LLM 폴백 조합
"""

from .llm_classifier import (
    LLMClassificationResult,
    LLMClassifier,
    NullLLMClassifier,
    OllamaClassifier,
)
from .rule_classifier import ClassificationResult, ClassificationRule, RuleBasedClassifier
from .service import ClassificationService

__all__ = [
    "ClassificationResult",
    "ClassificationRule",
    "RuleBasedClassifier",
    "LLMClassifier",
    "LLMClassificationResult",
    "OllamaClassifier",
    "NullLLMClassifier",
    "ClassificationService",
]
