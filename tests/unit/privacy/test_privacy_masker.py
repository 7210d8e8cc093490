"""
PrivacyMasker 단위 테스트

테스트 케이스:
1. 전화번호/이메일/주소/이름 마스킹
2. 화이트리스트 및 보호 키워드 예외
3. 발신자 식별자 마스킹
4. 마스킹 결과 검증 / 개인정보 포함 여부
5. 실패 시 fail-open / fail-closed 동작
"""

from unittest.mock import patch

import pytest

from aisecretary.modules.core.privacy import MaskingResult, PrivacyMasker


class TestPrivacyMasker:
    """PrivacyMasker 테스트 클래스"""

    @pytest.fixture
    def masker(self) -> PrivacyMasker:
        return PrivacyMasker(
            whitelist=["입주민", "문의"],
            protected_keywords=["관리비", "소음"],
        )

    # ========================================
    # 전화번호
    # ========================================

    def test_mask_phone_with_dashes(self, masker: PrivacyMasker) -> None:
        """010-1234-5678 → 010-****-5678"""
        masked = masker.mask("연락처 010-1234-5678 입니다")

        assert "010-****-5678" in masked
        assert "1234" not in masked

    def test_mask_phone_without_dashes(self, masker: PrivacyMasker) -> None:
        """구분자 없는 번호도 하이픈 형식으로 마스킹"""
        masked = masker.mask("01012345678")

        assert masked == "010-****-5678"

    def test_mask_phone_three_digit_middle(self, masker: PrivacyMasker) -> None:
        """가운데 3자리 번호도 마스킹 문자는 4개"""
        masked = masker.mask("031-123-4567")

        assert masked == "031-****-4567"

    # ========================================
    # 이메일 / 주소
    # ========================================

    def test_mask_email_keeps_domain(self, masker: PrivacyMasker) -> None:
        masked = masker.mask("resident@naver.com")

        assert masked == "re***@naver.com"

    def test_mask_address(self, masker: PrivacyMasker) -> None:
        """광역시도 + 구 + 도로명 + 번지 → [주소]"""
        masked = masker.mask("서울시 강남구 테헤란로 123")

        assert masked == "[주소]"

    def test_custom_address_placeholder(self) -> None:
        masker = PrivacyMasker(address_placeholder="<ADDR>")

        assert masker.mask("부산 해운대구 우동 1234") == "<ADDR>"

    # ========================================
    # 이름
    # ========================================

    def test_mask_three_letter_name(self, masker: PrivacyMasker) -> None:
        """홍길동님 → 홍*동님 (호칭은 유지)"""
        masked = masker.mask("홍길동님 안녕하세요")

        assert masked == "홍*동님 안녕하세요"

    def test_mask_two_letter_name(self, masker: PrivacyMasker) -> None:
        assert masker.mask("김철 씨") == "김* 씨"

    def test_mask_four_letter_name(self, masker: PrivacyMasker) -> None:
        assert masker.mask("남궁민수 씨") == "남**수 씨"

    def test_whitelisted_word_not_masked(self, masker: PrivacyMasker) -> None:
        """화이트리스트 단어는 이름 패턴에 걸려도 유지"""
        assert masker.mask("입주민 문의") == "입주민 문의"

    def test_protected_keyword_not_masked(self, masker: PrivacyMasker) -> None:
        """분류 키워드를 포함한 단어는 이름으로 보지 않음"""
        masked = masker.mask("관리비 소음이 문의")

        assert masked == "관리비 소음이 문의"

    def test_update_whitelist(self, masker: PrivacyMasker) -> None:
        assert masker.mask("경비실 연락") != "경비실 연락"

        masker.update_whitelist(["경비실", "연락"])

        assert masker.mask("경비실 연락") == "경비실 연락"
        assert "경비실" in masker.whitelist

    def test_empty_text_returned_as_is(self, masker: PrivacyMasker) -> None:
        assert masker.mask("") == ""

    @pytest.mark.parametrize(
        "text",
        [
            "홍길동님 010-1234-5678 resident@naver.com",
            "김철 씨 관리비 문의",
            "남궁민수 씨 서울시 강남구 테헤란로 123",
        ],
    )
    def test_mask_is_idempotent(self, masker: PrivacyMasker, text: str) -> None:
        """이미 마스킹된 텍스트를 다시 마스킹해도 결과가 같음"""
        once = masker.mask(text)

        assert masker.mask(once) == once

    def test_masked_sender_is_stable(self, masker: PrivacyMasker) -> None:
        once = masker.mask_sender("홍길동 <hong@naver.com>")

        assert masker.mask_sender(once) == once
        assert masker.mask(once) == once

    def test_custom_mask_char_is_idempotent(self) -> None:
        masker = PrivacyMasker(mask_char="○")
        once = masker.mask("홍길동님 안녕하세요")

        assert once == "홍○동님 안녕하세요"
        assert masker.mask(once) == once

    # ========================================
    # 상세 결과
    # ========================================

    def test_mask_detailed_counts(self, masker: PrivacyMasker) -> None:
        result = masker.mask_detailed("홍길동님 010-1234-5678 resident@naver.com")

        assert isinstance(result, MaskingResult)
        assert result.phone_count == 1
        assert result.email_count == 1
        assert result.name_count == 1
        assert result.address_count == 0
        assert result.total_masked == 3
        assert "010-****-5678" in result.masked
        assert "re***@naver.com" in result.masked

    def test_mask_detailed_no_pii(self, masker: PrivacyMasker) -> None:
        result = masker.mask_detailed("")

        assert result.total_masked == 0
        assert result.masked == ""

    # ========================================
    # 발신자
    # ========================================

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("010-1234-5678", "010-****-5678"),
            ("resident@naver.com", "re***@naver.com"),
            ("홍길동", "홍*동"),
            ("user_123", "user_123"),
            # 여러 유형이 섞인 발신자는 모두 마스킹
            ("홍길동 hong@naver.com", "홍*동 ho***@naver.com"),
            ("홍길동 <hong@naver.com>", "홍*동 <ho***@naver.com>"),
            ("010-1234-5678 김철수", "010-****-5678 김*수"),
        ],
    )
    def test_mask_sender(self, masker: PrivacyMasker, identifier: str, expected: str) -> None:
        assert masker.mask_sender(identifier) == expected

    # ========================================
    # 검증
    # ========================================

    def test_validate_masking_detects_residual_phone(self, masker: PrivacyMasker) -> None:
        original = "010-1234-5678"

        assert masker.validate_masking(original, original) is False
        assert masker.validate_masking(original, masker.mask(original)) is True

    def test_contains_pii(self, masker: PrivacyMasker) -> None:
        assert masker.contains_pii("resident@naver.com") is True
        assert masker.contains_pii("홍길동님") is True
        assert masker.contains_pii("관리비 문의") is False
        assert masker.contains_pii("") is False

    # ========================================
    # 실패 처리
    # ========================================

    def test_fail_open_returns_original(self, masker: PrivacyMasker) -> None:
        """기본 모드: 마스킹 중 예외가 나면 원문 반환"""
        with patch.object(masker, "_mask_phones", side_effect=RuntimeError("boom")):
            result = masker.mask("010-1234-5678")

        assert result == "010-1234-5678"

    def test_fail_closed_returns_placeholder(self) -> None:
        masker = PrivacyMasker(fail_closed=True, fail_closed_placeholder="[차단]")

        with patch.object(masker, "_mask_phones", side_effect=RuntimeError("boom")):
            assert masker.mask("010-1234-5678") == "[차단]"
            assert masker.mask_sender("010-1234-5678") == "[차단]"
