"""
개인정보 보호 모듈

주요 컴포넌트:
- PrivacyMasker: 마스킹 엔진 (전화번호, 이메일, 한글 이름, 주소)
- MaskingResult: 유형별 마스킹 개수

사용 예시:
    >>> from aisecretary.modules.core.privacy import PrivacyMasker
    >>> masker = PrivacyMasker()
    >>> masker.mask("연락처: 010-1234-5678")
    '연락처: 010-****-5678'
"""

from .masker import MaskingResult, PrivacyMasker
from .patterns import ADDRESS_PATTERN, EMAIL_PATTERN, KOREAN_NAME_PATTERN, PHONE_PATTERN

__all__ = [
    "PrivacyMasker",
    "MaskingResult",
    "PHONE_PATTERN",
    "EMAIL_PATTERN",
    "KOREAN_NAME_PATTERN",
    "ADDRESS_PATTERN",
]
