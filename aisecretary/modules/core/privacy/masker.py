"""
개인정보 마스킹 모듈 (PrivacyMasker)

접수 메시지와 발신자 식별자에서 개인정보를 마스킹:
- 전화번호: 010-1234-5678 → 010-****-5678 (앞 3자리, 뒤 4자리만 노출)
- 이메일: resident@naver.com → re***@naver.com (도메인 유지)
- 한글 이름: 홍길동 → 홍*동, 김철 → 김*, 남궁민수 → 남**수
- 주소: 서울시 강남구 테헤란로 123 → [주소]

비마스킹 대상:
- 화이트리스트 단어 및 도메인 키워드를 포함하는 단어 (관리비, 소음이 등)

적용 순서는 주소 → 전화번호 → 이메일 → 이름입니다.
주소를 먼저 치환해야 구/동 이름이 한글 이름으로 오인되지 않습니다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ....lib.logger import get_logger
from .patterns import ADDRESS_PATTERN, EMAIL_PATTERN, KOREAN_NAME_PATTERN, PHONE_PATTERN

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = get_logger(__name__)


@dataclass
class MaskingResult:
    """마스킹 결과"""

    original: str
    masked: str
    phone_count: int = 0
    email_count: int = 0
    name_count: int = 0
    address_count: int = 0

    @property
    def total_masked(self) -> int:
        return self.phone_count + self.email_count + self.name_count + self.address_count


class PrivacyMasker:
    """
    개인정보 마스킹 엔진

    마스킹 중 예외가 나면 기본적으로 원문을 반환합니다(fail-open).
    fail_closed=True면 원문 대신 대체 문구를 반환합니다.
    """

    PHONE_MASK = "****"
    EMAIL_MASK = "***"

    def __init__(
        self,
        whitelist: Iterable[str] | None = None,
        protected_keywords: Iterable[str] | None = None,
        address_placeholder: str = "[주소]",
        fail_closed: bool = False,
        fail_closed_placeholder: str = "[마스킹 실패]",
        mask_char: str = "*",
    ):
        """
        Args:
            whitelist: 마스킹하지 않을 단어 목록
            protected_keywords: 이 키워드를 포함하는 단어는 이름으로 보지 않음
                (분류/우선순위 키워드가 마스킹으로 훼손되지 않도록)
            address_placeholder: 주소 대체 문구
            fail_closed: 마스킹 실패 시 원문 대신 대체 문구 반환 여부
            fail_closed_placeholder: fail_closed 모드의 대체 문구
            mask_char: 이름 마스킹 문자
        """
        self._whitelist: frozenset[str] = frozenset(whitelist or [])
        self._protected_keywords: tuple[str, ...] = tuple(
            sorted({k for k in (protected_keywords or []) if k})
        )
        self.address_placeholder = address_placeholder
        self.fail_closed = fail_closed
        self.fail_closed_placeholder = fail_closed_placeholder
        self.mask_char = mask_char

        logger.info(
            "PrivacyMasker 초기화",
            whitelist_size=len(self._whitelist),
            protected_keywords=len(self._protected_keywords),
            fail_closed=fail_closed,
        )

    @property
    def whitelist(self) -> frozenset[str]:
        """화이트리스트 반환 (읽기 전용)"""
        return self._whitelist

    def update_whitelist(self, words: Iterable[str]) -> None:
        """화이트리스트에 단어 추가"""
        added = frozenset(words)
        self._whitelist = self._whitelist | added
        logger.info("화이트리스트 업데이트", added=len(added), total=len(self._whitelist))

    # ========================================
    # Public API
    # ========================================

    def mask(self, text: str) -> str:
        """
        텍스트에서 개인정보 마스킹

        Args:
            text: 원본 텍스트

        Returns:
            마스킹된 텍스트 (실패 시 원문 또는 대체 문구)
        """
        if not text or text == self.fail_closed_placeholder:
            return text

        try:
            result = self._mask_addresses(text)
            result = self._mask_phones(result)
            result = self._mask_emails(result)
            return self._mask_names(result)
        except Exception as e:
            return self._on_failure(text, e, target="content")

    def mask_detailed(self, text: str) -> MaskingResult:
        """텍스트 마스킹 (유형별 개수 포함)"""
        if not text:
            return MaskingResult(original=text, masked=text)

        address_count = len(ADDRESS_PATTERN.findall(text))
        without_address = ADDRESS_PATTERN.sub(self.address_placeholder, text)
        phone_count = len(PHONE_PATTERN.findall(without_address))
        email_count = len(EMAIL_PATTERN.findall(without_address))
        name_count = sum(
            1
            for m in KOREAN_NAME_PATTERN.finditer(EMAIL_PATTERN.sub("", without_address))
            if self._is_maskable_name(m.group(1))
        )
        masked = self.mask(text)

        if address_count or phone_count or email_count or name_count:
            logger.info(
                "개인정보 마스킹 완료",
                phone=phone_count,
                email=email_count,
                name=name_count,
                address=address_count,
            )

        return MaskingResult(
            original=text,
            masked=masked,
            phone_count=phone_count,
            email_count=email_count,
            name_count=name_count,
            address_count=address_count,
        )

    def mask_sender(self, identifier: str) -> str:
        """
        발신자 식별자 마스킹

        한글 이름만 있으면 이름 마스킹, 그 외에는 전화번호 → 이메일 → 이름 순으로
        모두 적용합니다 ("홍길동 <hong@naver.com>" → "홍*동 <ho***@naver.com>").
        """
        if not identifier:
            return identifier

        try:
            stripped = identifier.strip()
            if re.fullmatch(r"[가-힣]{2,4}", stripped):
                return self._mask_name(stripped)
            result = self._mask_phones(identifier)
            result = self._mask_emails(result)
            return self._mask_names(result)
        except Exception as e:
            return self._on_failure(identifier, e, target="sender")

    def validate_masking(self, original: str, masked: str) -> bool:
        """
        마스킹 결과 검증

        마스킹된 텍스트에 전화번호/이메일/주소 패턴이 남아 있으면 False
        """
        for name, pattern in (
            ("phone", PHONE_PATTERN),
            ("email", EMAIL_PATTERN),
            ("address", ADDRESS_PATTERN),
        ):
            if pattern.search(masked):
                logger.warning(
                    "마스킹 결과에 개인정보 잔존",
                    pii_type=name,
                    original_length=len(original),
                )
                return False
        return True

    def contains_pii(self, text: str) -> bool:
        """텍스트에 마스킹 대상 개인정보가 포함되어 있는지 확인"""
        if not text:
            return False

        if PHONE_PATTERN.search(text) or EMAIL_PATTERN.search(text) or ADDRESS_PATTERN.search(text):
            return True

        return any(
            self._is_maskable_name(m.group(1)) for m in KOREAN_NAME_PATTERN.finditer(text)
        )

    # ========================================
    # Masking rules
    # ========================================

    def _mask_phones(self, text: str) -> str:
        """010-1234-5678 → 010-****-5678 (가운데 자리수와 무관하게 4개 고정)"""

        def replace(match: re.Match[str]) -> str:
            return f"{match.group(1)}-{self.PHONE_MASK}-{match.group(3)}"

        return PHONE_PATTERN.sub(replace, text)

    def _mask_emails(self, text: str) -> str:
        """resident@naver.com → re***@naver.com"""

        def replace(match: re.Match[str]) -> str:
            local, domain = match.group().split("@", 1)
            return f"{local[:2]}{self.EMAIL_MASK}@{domain}"

        return EMAIL_PATTERN.sub(replace, text)

    def _mask_addresses(self, text: str) -> str:
        return ADDRESS_PATTERN.sub(self.address_placeholder, text)

    def _mask_names(self, text: str) -> str:
        """
        이름 마스킹 (화이트리스트/보호 키워드 예외 적용)

        홍길동 → 홍*동
        관리비 → 관리비 (보호 키워드)
        """

        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            start = match.start(1)
            # 이미 마스킹된 이름의 일부 ("홍*동"의 "동")
            if start > 0 and match.string[start - 1] == self.mask_char:
                return name
            if not self._is_maskable_name(name):
                return name
            return self._mask_name(name)

        return KOREAN_NAME_PATTERN.sub(replace, text)

    def _mask_name(self, name: str) -> str:
        if len(name) == 2:
            return name[0] + self.mask_char
        if len(name) == 3:
            return name[0] + self.mask_char + name[2]
        return name[0] + self.mask_char * 2 + name[-1]

    def _is_maskable_name(self, word: str) -> bool:
        if word in self._whitelist:
            return False
        return not any(keyword in word for keyword in self._protected_keywords)

    def _on_failure(self, text: str, error: Exception, target: str) -> str:
        logger.error(
            "개인정보 마스킹 실패",
            target=target,
            fail_closed=self.fail_closed,
            error=str(error),
            exc_info=True,
        )
        if self.fail_closed:
            return self.fail_closed_placeholder
        return text
