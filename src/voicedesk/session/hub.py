"""SessionHub -- 会话事件广播器

每个订阅者持有一个 asyncio.Queue，支持 subscribe/unsubscribe/publish。
UI 组件通过订阅来重绘，publish 为同步调用，可在状态 setter 中直接使用。
"""

import asyncio
from typing import Any

from pydantic import BaseModel, Field

from voicedesk.core.config import HUB_QUEUE_MAXSIZE
from voicedesk.core.models import SessionEventType


class SessionEvent(BaseModel):
    """会话事件"""

    type: SessionEventType
    payload: dict[str, Any] = Field(default_factory=dict)


class SessionHub:
    """会话事件广播器 -- 基于 asyncio.Queue 的发布/订阅模式"""

    def __init__(self, queue_maxsize: int = HUB_QUEUE_MAXSIZE) -> None:
        self._subscribers: set[asyncio.Queue] = set()
        self._queue_maxsize = queue_maxsize

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        """订阅会话事件

        Returns:
            asyncio.Queue 实例，新事件会被推送到此队列
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        """取消订阅"""
        self._subscribers.discard(queue)

    def publish(self, event_type: SessionEventType, **payload: Any) -> None:
        """向所有订阅者广播事件，已满的队列被移除"""
        event = SessionEvent(type=event_type, payload=payload)
        dead_queues = []
        for queue in self._subscribers:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                dead_queues.append(queue)

        for q in dead_queues:
            self._subscribers.discard(q)
