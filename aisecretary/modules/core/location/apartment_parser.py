"""
ApartmentParser - 아파트 동/호 추출 모듈

민원 텍스트에서 동/호/층 정보를 추출합니다.

지원 패턴 (신뢰도 순서가 아닌 적용 순서):
1. "101동 1502호"          → 0.95
2. "101-1502"              → 0.8
3. "15층 02호"             → 0.85
4. "우리집 1502 ..."        → 0.6 (문맥 단서 + 3~4자리 숫자)

후보는 (동, 호, 층) 기준으로 중복 제거 후 신뢰도 내림차순으로 정렬됩니다.
"""

import re
from dataclasses import dataclass, field

from ....lib.logger import get_logger
from ....models import ApartmentUnitInfo
from ..privacy.patterns import PHONE_PATTERN

logger = get_logger(__name__)

DONG_HO_PATTERN = re.compile(r"(\d{1,3})동\s*(\d{1,4})호")
# 날짜(2024-10-19) 일부가 잡히지 않도록 앞뒤 숫자/하이픈 배제
DASH_PATTERN = re.compile(r"(?<![\d-])(\d{1,3})-(\d{1,4})(?![\d-])")
FLOOR_HO_PATTERN = re.compile(r"(\d{1,2})층\s*(\d{1,4})호")
CONTEXT_PATTERN = re.compile(r"(?:우리집|저희집|우리|저희|여기|이곳).*?(\d{3,4})")

# 전각 숫자 → 반각 숫자
_FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")

NO_LOCATION = "위치 정보 없음"


@dataclass
class ApartmentUnit:
    """동/호 후보"""

    raw_text: str
    confidence: float
    dong: int | None = None
    ho: int | None = None
    floor: int | None = None

    @property
    def key(self) -> tuple[int | None, int | None, int | None]:
        return (self.dong, self.ho, self.floor)


@dataclass
class ParsedLocation:
    """파싱 결과"""

    units: list[ApartmentUnit] = field(default_factory=list)
    raw_matches: list[str] = field(default_factory=list)

    @property
    def has_location(self) -> bool:
        return len(self.units) > 0


def _floor_from_ho(ho: int) -> int | None:
    floor = ho // 100
    return floor if floor > 0 else None


class ApartmentParser:
    """
    동/호 파서

    사용 예시:
        parser = ApartmentParser()
        parsed = parser.parse("101동 1502호 엘리베이터 고장")
        parser.unit_summary(parsed)  # "101동 1502호"
    """

    def parse(self, text: str) -> ParsedLocation:
        """
        텍스트에서 동/호 후보 추출

        Args:
            text: 원본 텍스트 (마스킹 전)

        Returns:
            ParsedLocation (실패 시 빈 결과)
        """
        if not text or not isinstance(text, str):
            return ParsedLocation()

        try:
            normalized = self._normalize(text)

            units: list[ApartmentUnit] = []
            raw_matches: list[str] = []
            for matcher in (
                self._match_dong_ho,
                self._match_dash,
                self._match_floor_ho,
                self._match_context,
            ):
                found, raws = matcher(normalized)
                units.extend(found)
                raw_matches.extend(raws)

            # sorted()는 안정 정렬이므로 동일 신뢰도는 적용 순서 유지
            unique = self._deduplicate(units)
            ranked = sorted(unique, key=lambda u: u.confidence, reverse=True)

            logger.debug("동/호 파싱 완료", text_length=len(text), units_found=len(ranked))

            return ParsedLocation(units=ranked, raw_matches=list(dict.fromkeys(raw_matches)))
        except Exception as e:
            logger.error("동/호 파싱 실패", error=str(e), exc_info=True)
            return ParsedLocation()

    def best_unit(self, text: str, min_confidence: float = 0.6) -> ApartmentUnitInfo | None:
        """
        메시지에 첨부할 최우선 후보 반환

        신뢰도 순으로 후보를 보며 min_confidence 이상이고 validate_unit을
        통과하는 첫 후보를 반환합니다.
        """
        parsed = self.parse(text)
        if not parsed.has_location:
            return None

        best = next(
            (
                unit
                for unit in parsed.units
                if unit.confidence >= min_confidence and self.validate_unit(unit)
            ),
            None,
        )
        if best is None:
            return None

        return ApartmentUnitInfo(
            dong=best.dong,
            ho=best.ho,
            floor=best.floor,
            formatted=self.format_unit(best),
            confidence=best.confidence,
            raw_matches=parsed.raw_matches,
        )

    def validate_unit(self, unit: ApartmentUnit) -> bool:
        """
        한국 아파트 동/호 범위 검증

        - 동: 1~999, 호: 1~9999, 층: 1~99
        - 호와 층이 모두 있으면 호 // 100 이 0보다 클 때 층과 같아야 함
        """
        if unit.dong is not None and not 1 <= unit.dong <= 999:
            return False
        if unit.ho is not None and not 1 <= unit.ho <= 9999:
            return False
        if unit.floor is not None and not 1 <= unit.floor <= 99:
            return False

        if unit.ho is not None and unit.floor is not None:
            expected_floor = unit.ho // 100
            if expected_floor > 0 and expected_floor != unit.floor:
                return False

        return True

    def format_unit(self, unit: ApartmentUnit) -> str:
        """표시용 문자열 ("101동 1502호", "15층", 또는 원문)"""
        parts: list[str] = []
        if unit.dong:
            parts.append(f"{unit.dong}동")
        if unit.ho:
            parts.append(f"{unit.ho}호")
        elif unit.floor:
            parts.append(f"{unit.floor}층")
        return " ".join(parts) or unit.raw_text

    def unit_summary(self, parsed: ParsedLocation) -> str:
        if not parsed.has_location:
            return NO_LOCATION
        return self.format_unit(parsed.units[0])

    # ========================================
    # Matchers
    # ========================================

    def _match_dong_ho(self, text: str) -> tuple[list[ApartmentUnit], list[str]]:
        units, raws = [], []
        for m in DONG_HO_PATTERN.finditer(text):
            ho = int(m.group(2))
            units.append(
                ApartmentUnit(
                    raw_text=m.group(0),
                    confidence=0.95,
                    dong=int(m.group(1)),
                    ho=ho,
                    floor=_floor_from_ho(ho),
                )
            )
            raws.append(m.group(0))
        return units, raws

    def _match_dash(self, text: str) -> tuple[list[ApartmentUnit], list[str]]:
        units, raws = [], []
        # 전화번호 형태는 미리 제거 (010-1234-5678 → 동/호 오인 방지)
        without_phones = PHONE_PATTERN.sub(" ", text)
        for m in DASH_PATTERN.finditer(without_phones):
            dong, ho = int(m.group(1)), int(m.group(2))
            if not (1 <= dong <= 999 and 1 <= ho <= 9999):
                continue
            units.append(
                ApartmentUnit(
                    raw_text=m.group(0),
                    confidence=0.8,
                    dong=dong,
                    ho=ho,
                    floor=_floor_from_ho(ho),
                )
            )
            raws.append(m.group(0))
        return units, raws

    def _match_floor_ho(self, text: str) -> tuple[list[ApartmentUnit], list[str]]:
        units, raws = [], []
        for m in FLOOR_HO_PATTERN.finditer(text):
            units.append(
                ApartmentUnit(
                    raw_text=m.group(0),
                    confidence=0.85,
                    floor=int(m.group(1)),
                    ho=int(m.group(2)),
                )
            )
            raws.append(m.group(0))
        return units, raws

    def _match_context(self, text: str) -> tuple[list[ApartmentUnit], list[str]]:
        units, raws = [], []
        for m in CONTEXT_PATTERN.finditer(text):
            number = int(m.group(1))
            if not 100 <= number <= 9999:
                continue
            units.append(
                ApartmentUnit(
                    raw_text=m.group(0),
                    confidence=0.6,
                    ho=number,
                    floor=_floor_from_ho(number),
                )
            )
            raws.append(m.group(1))
        return units, raws

    # ========================================
    # Helpers
    # ========================================

    @staticmethod
    def _normalize(text: str) -> str:
        return re.sub(r"\s+", " ", text.translate(_FULLWIDTH_DIGITS)).strip()

    @staticmethod
    def _deduplicate(units: list[ApartmentUnit]) -> list[ApartmentUnit]:
        seen: set[tuple[int | None, int | None, int | None]] = set()
        unique: list[ApartmentUnit] = []
        for unit in units:
            if unit.key in seen:
                continue
            seen.add(unit.key)
            unique.append(unit)
        return unique
