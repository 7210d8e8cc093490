"""
LLM 폴백 분류기

규칙 기반 신뢰도가 낮을 때만 호출되는 보조 분류기입니다.

- LLMClassifier: 폴백 분류기 인터페이스
- OllamaClassifier: Ollama HTTP API 기반 구현 (httpx)
- NullLLMClassifier: 항상 사용 불가 (LLM 비활성화 시 기본값)

참고: https://github.com/ollama/ollama/blob/main/docs/api.md
"""

import json
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
from cachetools import TTLCache

from ....lib.errors import ErrorCode, LLMError
from ....lib.logger import get_logger
from ....models import MessageClassification

logger = get_logger(__name__)

# 모델이 한글 라벨로 답할 때의 매핑 (먼저 일치한 항목 사용)
KOREAN_LABELS: dict[str, MessageClassification] = {
    "소음": MessageClassification.NOISE,
    "주차": MessageClassification.PARKING,
    "시설관리": MessageClassification.MAINTENANCE,
    "수리": MessageClassification.MAINTENANCE,
    "관리비": MessageClassification.BILLING,
    "요금": MessageClassification.BILLING,
    "보안": MessageClassification.SECURITY,
    "출입": MessageClassification.SECURITY,
    "응급": MessageClassification.EMERGENCY,
    "긴급": MessageClassification.EMERGENCY,
    "위생": MessageClassification.HYGIENE,
    "흡연": MessageClassification.SMOKING,
    "택배": MessageClassification.DELIVERY,
    "민원": MessageClassification.COMPLAINT,
    "문의": MessageClassification.INQUIRY,
}

_DECODER = json.JSONDecoder()


def _first_json_object(content: str) -> dict[str, Any]:
    """응답 문자열에서 처음으로 디코딩되는 JSON 객체"""
    start = content.find("{")
    while start != -1:
        try:
            value, _ = _DECODER.raw_decode(content, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        start = content.find("{", start + 1)
    raise ValueError("no JSON object in response")


@dataclass
class LLMClassificationResult:
    """LLM 분류 결과"""

    classification: MessageClassification
    confidence: float
    reasoning: str = "LLM classification"


class LLMClassifier(ABC):
    """LLM 폴백 분류기 인터페이스"""

    @abstractmethod
    async def is_available(self) -> bool:
        """사용 가능 여부 (예외를 던지지 않음)"""
        pass

    @abstractmethod
    async def classify_message(self, text: str) -> LLMClassificationResult:
        """메시지 분류 (백엔드 오류 시 LLMError)"""
        pass

    async def close(self) -> None:
        """리소스 정리"""
        return None


class NullLLMClassifier(LLMClassifier):
    """LLM 비활성화 상태의 분류기"""

    async def is_available(self) -> bool:
        return False

    async def classify_message(self, text: str) -> LLMClassificationResult:
        raise LLMError(ErrorCode.LLM_001)


class OllamaClassifier(LLMClassifier):
    """
    Ollama 기반 분류기

    특징:
    - GET /api/tags 로 모델 존재 여부 확인 (짧은 TTL 캐시)
    - POST /api/generate 로 JSON 형식 분류 요청
    - 파싱 실패 시 inquiry / 0.5 로 대체
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "mistral:7b",
        model_family: str = "mistral",
        enabled: bool = True,
        availability_timeout: float = 5.0,
        request_timeout: float = 30.0,
        availability_cache_ttl: int = 30,
        temperature: float = 0.1,
        top_p: float = 0.9,
        num_predict: int = 500,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            base_url: Ollama 서버 주소
            model: 생성 요청에 사용할 모델
            model_family: /api/tags 응답에서 찾을 모델 이름
            enabled: 비활성화 시 항상 사용 불가
            availability_timeout: 가용성 확인 타임아웃 (초)
            request_timeout: 분류 요청 타임아웃 (초)
            availability_cache_ttl: 가용성 결과 캐시 시간 (초, 0이면 캐시 안 함)
            http_client: 외부에서 주입할 httpx 클라이언트 (테스트용)
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.model_family = model_family
        self.enabled = enabled
        self.availability_timeout = availability_timeout
        self.request_timeout = request_timeout
        self.options = {"temperature": temperature, "top_p": top_p, "num_predict": num_predict}

        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(request_timeout, connect=availability_timeout),
        )
        self._availability_cache: TTLCache | None = (
            TTLCache(maxsize=1, ttl=availability_cache_ttl) if availability_cache_ttl > 0 else None
        )

        logger.info(
            "OllamaClassifier 초기화",
            base_url=self.base_url,
            model=model,
            enabled=enabled,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        if self._availability_cache is not None:
            self._availability_cache.clear()
        logger.info("LLM 분류기 상태 변경", enabled=enabled)

    async def is_available(self) -> bool:
        if not self.enabled:
            return False

        if self._availability_cache is not None and "available" in self._availability_cache:
            return bool(self._availability_cache["available"])

        available = await self._probe()
        if self._availability_cache is not None:
            self._availability_cache["available"] = available
        return available

    async def _probe(self) -> bool:
        try:
            response = await self.http_client.get(
                f"{self.base_url}/api/tags", timeout=self.availability_timeout
            )
            if response.status_code != 200:
                return False
            models = response.json().get("models") or []
            return any(self.model_family in str(m.get("name", "")) for m in models)
        except Exception as e:
            logger.warning("LLM 서버 사용 불가", error=str(e))
            return False

    async def classify_message(self, text: str) -> LLMClassificationResult:
        if not self.enabled:
            raise LLMError(ErrorCode.LLM_001)

        try:
            response = await self.http_client.post(
                f"{self.base_url}/api/generate",
                json={
                    "model": self.model,
                    "prompt": self._build_prompt(text),
                    "stream": False,
                    "options": self.options,
                },
                timeout=self.request_timeout,
            )
            response.raise_for_status()
            content = response.json().get("response", "")
        except httpx.TimeoutException as e:
            raise LLMError(ErrorCode.LLM_002, reason=f"timeout after {self.request_timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(ErrorCode.LLM_002, reason=f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise LLMError(ErrorCode.LLM_002, reason=str(e)) from e

        return self.parse_response(content)

    @staticmethod
    def _build_prompt(text: str) -> str:
        return f"""아파트 관리사무소에 접수된 다음 메시지를 분류해주세요.

메시지: "{text}"

다음 카테고리 중 하나로 분류하고, 신뢰도(0-1)와 이유를 제공해주세요:

카테고리:
- NOISE: 소음 관련 (층간소음, 시끄러운 소리 등)
- PARKING: 주차 관련 (주차 위반, 주차장 문제 등)
- MAINTENANCE: 시설 수리/관리 (고장, 수리 요청 등)
- BILLING: 관리비/요금 관련
- SECURITY: 보안/출입 관련
- EMERGENCY: 응급상황 (화재, 가스누출 등)
- HYGIENE: 악취, 곰팡이, 해충
- SMOKING: 간접흡연
- DELIVERY: 택배/우편물
- COMPLAINT: 일반 민원
- INQUIRY: 일반 문의

응답 형식 (JSON):
{{
  "classification": "카테고리명",
  "confidence": 0.85,
  "reasoning": "분류 이유"
}}"""

    @classmethod
    def parse_response(cls, content: str) -> LLMClassificationResult:
        """모델 응답에서 첫 JSON 객체를 찾아 분류 결과로 변환"""
        try:
            data = _first_json_object(content or "")

            raw_confidence = data.get("confidence")
            confidence = 0.5 if raw_confidence is None else float(raw_confidence)
            if not math.isfinite(confidence):
                raise ValueError(f"non-finite confidence: {raw_confidence!r}")
            return LLMClassificationResult(
                classification=cls.map_classification(str(data.get("classification", ""))),
                confidence=max(0.0, min(1.0, confidence)),
                reasoning=str(data.get("reasoning") or "LLM classification"),
            )
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("LLM 응답 파싱 실패, 기본 분류 사용", error=str(e))
            return LLMClassificationResult(
                classification=MessageClassification.INQUIRY,
                confidence=0.5,
                reasoning="Failed to parse LLM response",
            )

    @staticmethod
    def map_classification(label: str) -> MessageClassification:
        """영문 라벨 또는 한글 라벨을 분류 카테고리로 매핑 (모르면 inquiry)"""
        normalized = label.strip().lower()
        try:
            return MessageClassification(normalized)
        except ValueError:
            pass

        for korean, classification in KOREAN_LABELS.items():
            if korean in label:
                return classification

        return MessageClassification.INQUIRY
