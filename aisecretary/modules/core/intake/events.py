"""
접수 이벤트 버스

메시지가 저장된 뒤(post-commit) 발행되는 이벤트를 구독 핸들러에 전달합니다.
핸들러 예외는 로그로 남기고 발행자에게 전파하지 않습니다.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ....lib.logger import get_logger
from ....models import IntakeChannel, Priority

logger = get_logger(__name__)


@dataclass(frozen=True)
class MessageReceived:
    """메시지 저장 완료 이벤트"""

    message_id: str
    channel: IntakeChannel
    priority: Priority


EventHandler = Callable[[MessageReceived], Awaitable[None]]


class IntakeEventBus:
    """비동기 이벤트 버스"""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    async def publish(self, event: MessageReceived) -> None:
        """모든 핸들러 실행 (병렬, 예외 격리)

        일반 예외는 로그만 남기고, 취소(CancelledError) 같은 BaseException은 다시 발생시킵니다.
        """
        handlers = list(self._handlers)
        if not handlers:
            return

        results = await asyncio.gather(
            *(handler(event) for handler in handlers), return_exceptions=True
        )
        interrupted: BaseException | None = None
        for handler, result in zip(handlers, results):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                interrupted = interrupted or result
            elif isinstance(result, Exception):
                logger.error(
                    "접수 이벤트 핸들러 실패",
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    message_id=event.message_id,
                    error=str(result),
                    exc_info=result,
                )

        if interrupted is not None:
            raise interrupted
