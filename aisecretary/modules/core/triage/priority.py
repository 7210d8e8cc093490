"""
PriorityEngine - 접수 메시지 우선순위 결정

1. 긴급 키워드 포함 → urgent (채널과 무관, 최우선)
2. 전화 채널 또는 높음 키워드 포함 → high
3. 그 외 → medium

자동 판정은 low를 반환하지 않습니다.
"""

from collections.abc import Iterable

from ....lib.logger import get_logger
from ....models import IntakeChannel, Priority

logger = get_logger(__name__)

DEFAULT_URGENT_KEYWORDS = ("응급", "긴급", "위험", "화재", "가스", "누수")
DEFAULT_HIGH_KEYWORDS = ("소음", "민원", "고장", "문제")


class PriorityEngine:
    """키워드/채널 기반 우선순위 엔진"""

    def __init__(
        self,
        urgent_keywords: Iterable[str] = DEFAULT_URGENT_KEYWORDS,
        high_keywords: Iterable[str] = DEFAULT_HIGH_KEYWORDS,
        high_channels: Iterable[str | IntakeChannel] = (IntakeChannel.CALL,),
    ):
        self.urgent_keywords = tuple(urgent_keywords)
        self.high_keywords = tuple(high_keywords)
        self.high_channels = frozenset(IntakeChannel(c) for c in high_channels)

    @property
    def keywords(self) -> set[str]:
        """우선순위 판정에 쓰이는 모든 키워드"""
        return set(self.urgent_keywords) | set(self.high_keywords)

    def determine_priority(self, channel: IntakeChannel | str, content: str) -> Priority:
        text = (content or "").lower()

        if any(k in text for k in self.urgent_keywords):
            return Priority.URGENT

        if IntakeChannel(channel) in self.high_channels or any(k in text for k in self.high_keywords):
            return Priority.HIGH

        return Priority.MEDIUM
