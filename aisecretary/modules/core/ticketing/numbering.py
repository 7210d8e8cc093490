"""
티켓 번호 생성기

형식: TK{yymmdd}{seq:04d} (예: TK2510190001)
날짜별 단조 증가 카운터로 같은 날 번호가 중복되지 않습니다.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime

from ....lib.logger import now_kst


class TicketNumberGenerator:
    """일자별 순번 기반 티켓 번호 생성기"""

    PREFIX = "TK"

    def __init__(self, clock: Callable[[], datetime] = now_kst):
        self._clock = clock
        self._day: str | None = None
        self._sequence = 0
        self._lock = asyncio.Lock()

    async def next_number(self) -> str:
        async with self._lock:
            day = self._clock().strftime("%y%m%d")
            if day != self._day:
                self._day = day
                self._sequence = 0
            # 9999건 초과 시 5자리 순번
            self._sequence += 1
            return f"{self.PREFIX}{day}{self._sequence:04d}"
