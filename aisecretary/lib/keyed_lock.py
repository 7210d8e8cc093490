"""
KeyedLock - ID별 asyncio.Lock 레지스트리

같은 ID에 대한 변경 작업(상태 변경, 배정, 티켓 생성)을 직렬화하고
서로 다른 ID는 병렬로 처리합니다. 사용 중인 락이 없으면 항목을 제거해
레지스트리가 무한히 커지지 않도록 합니다.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLock:
    """키 단위 비동기 락"""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def acquire(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
