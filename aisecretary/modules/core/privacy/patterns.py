"""
개인정보 탐지 정규식

마스킹 엔진과 동/호 파서가 같은 패턴을 공유합니다.
"""

import re

# 전화번호: 3자리 - 3~4자리 - 4자리 (구분자는 하이픈/공백/점 또는 없음)
# 010-1234-5678, 01012345678, 031 123 4567
PHONE_PATTERN = re.compile(r"(?<!\d)(\d{3})[-.\s]?(\d{3,4})[-.\s]?(\d{4})(?!\d)")

# 이메일
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# 한글 이름: 앞에 한글이나 마스킹 문자(*)가 없는 2~4글자, 뒤에 공백/님/씨/문장부호/끝
# 최소 일치(lazy)로 "김철수님"의 "님"을 이름에 포함하지 않음
KOREAN_NAME_PATTERN = re.compile(r"(?<![가-힣*])([가-힣]{2,4}?)(?=님|씨|\s|[.,!?]|$)")

# 주소: 광역시도 + 시/군/구 (1개 이상) + 동/면/읍/로/길 + 번지
ADDRESS_PATTERN = re.compile(
    r"(?:서울|부산|대구|인천|광주|대전|울산|세종|경기|강원|충북|충남|전북|전남|경북|경남|제주)"
    r"(?:특별시|광역시|특별자치시|특별자치도|시|도)?"
    r"(?:\s*[가-힣]+(?:시|군|구))+"
    r"\s*[가-힣0-9]+(?:동|면|읍|로|길)"
    r"\s*\d+(?:-\d+)?"
)
