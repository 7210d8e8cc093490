"""
ApartmentParser 단위 테스트

동/호 패턴별 추출, 신뢰도 정렬, 중복 제거, 범위 검증을 확인합니다.
"""

import pytest

from aisecretary.modules.core.location import NO_LOCATION, ApartmentParser, ApartmentUnit


@pytest.fixture
def parser() -> ApartmentParser:
    return ApartmentParser()


class TestParse:
    """parse() 테스트"""

    def test_dong_ho_pattern(self, parser: ApartmentParser) -> None:
        parsed = parser.parse("101동 1502호 엘리베이터가 고장났어요")

        assert parsed.has_location
        best = parsed.units[0]
        assert (best.dong, best.ho, best.floor) == (101, 1502, 15)
        assert best.confidence == 0.95
        assert "101동 1502호" in parsed.raw_matches

    def test_dash_pattern(self, parser: ApartmentParser) -> None:
        parsed = parser.parse("101-1502 누수 신고합니다")

        best = parsed.units[0]
        assert (best.dong, best.ho, best.floor) == (101, 1502, 15)
        assert best.confidence == 0.8

    def test_floor_ho_pattern(self, parser: ApartmentParser) -> None:
        parsed = parser.parse("15층 02호 앞 복도")

        best = parsed.units[0]
        assert best.floor == 15
        assert best.ho == 2
        assert best.confidence == 0.85

    def test_context_pattern(self, parser: ApartmentParser) -> None:
        """문맥 단서 + 3~4자리 숫자는 호수로 추정"""
        parsed = parser.parse("우리집 1502 천장에서 물이 새요")

        best = parsed.units[0]
        assert best.dong is None
        assert best.ho == 1502
        assert best.floor == 15
        assert best.confidence == 0.6
        assert parsed.raw_matches == ["1502"]

    def test_phone_number_not_parsed_as_unit(self, parser: ApartmentParser) -> None:
        parsed = parser.parse("연락처 010-1234-5678 입니다")

        assert not parsed.has_location

    def test_date_not_parsed_as_unit(self, parser: ApartmentParser) -> None:
        parsed = parser.parse("2024-10-19 소음 민원")

        assert not parsed.has_location

    def test_fullwidth_digits_normalized(self, parser: ApartmentParser) -> None:
        parsed = parser.parse("１０１동 １５０２호")

        assert parsed.units[0].dong == 101
        assert parsed.units[0].ho == 1502

    def test_duplicates_removed(self, parser: ApartmentParser) -> None:
        """같은 (동, 호, 층)은 신뢰도 높은 후보 하나만 유지"""
        parsed = parser.parse("101동 1502호 (101-1502)")

        assert len(parsed.units) == 1
        assert parsed.units[0].confidence == 0.95
        assert parsed.raw_matches == ["101동 1502호", "101-1502"]

    def test_sorted_by_confidence(self, parser: ApartmentParser) -> None:
        parsed = parser.parse("우리집 1502, 101동 1502호")

        confidences = [u.confidence for u in parsed.units]
        assert confidences == sorted(confidences, reverse=True)
        assert parsed.units[0].dong == 101

    @pytest.mark.parametrize("text", ["", None, "엘리베이터가 멈췄어요"])
    def test_no_location(self, parser: ApartmentParser, text) -> None:
        parsed = parser.parse(text)

        assert not parsed.has_location
        assert parser.unit_summary(parsed) == NO_LOCATION


class TestBestUnit:
    """best_unit() 테스트"""

    def test_returns_unit_info(self, parser: ApartmentParser) -> None:
        unit = parser.best_unit("101동 1502호 엘리베이터가 고장났어요")

        assert unit is not None
        assert unit.formatted == "101동 1502호"
        assert unit.floor == 15

    def test_below_min_confidence(self, parser: ApartmentParser) -> None:
        assert parser.best_unit("우리집 1502 물이 새요", min_confidence=0.7) is None
        assert parser.best_unit("우리집 1502 물이 새요") is not None

    def test_no_candidate(self, parser: ApartmentParser) -> None:
        assert parser.best_unit("관리비 문의드립니다") is None

    def test_skips_invalid_top_candidate(self, parser: ApartmentParser) -> None:
        """최상위 후보가 범위 검증에 실패하면 다음 유효 후보 사용"""
        text = "3층 1502호 아니고 101-1502 입니다"
        ranked = parser.parse(text).units
        assert not parser.validate_unit(ranked[0])

        unit = parser.best_unit(text)

        assert unit is not None
        assert (unit.dong, unit.ho, unit.floor) == (101, 1502, 15)
        assert unit.formatted == "101동 1502호"


class TestValidateUnit:
    """validate_unit() / format_unit() 테스트"""

    @pytest.mark.parametrize(
        "unit,expected",
        [
            (ApartmentUnit(raw_text="", confidence=0.9, dong=101, ho=1502, floor=15), True),
            (ApartmentUnit(raw_text="", confidence=0.9, dong=1000, ho=1502), False),
            (ApartmentUnit(raw_text="", confidence=0.9, dong=101, ho=10000), False),
            (ApartmentUnit(raw_text="", confidence=0.9, ho=1502, floor=14), False),
            (ApartmentUnit(raw_text="", confidence=0.9, ho=2, floor=15), True),
            (ApartmentUnit(raw_text="", confidence=0.9, floor=100), False),
        ],
    )
    def test_validate_unit(self, parser: ApartmentParser, unit: ApartmentUnit, expected: bool) -> None:
        assert parser.validate_unit(unit) is expected

    def test_format_unit(self, parser: ApartmentParser) -> None:
        assert parser.format_unit(ApartmentUnit(raw_text="x", confidence=0.9, dong=101, ho=1502)) == "101동 1502호"
        assert parser.format_unit(ApartmentUnit(raw_text="x", confidence=0.9, floor=15)) == "15층"
        assert parser.format_unit(ApartmentUnit(raw_text="원문", confidence=0.9)) == "원문"
