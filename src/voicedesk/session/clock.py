"""时钟抽象与通话计时器

所有计时器都通过 Clock 读时间、睡眠，测试时注入可手动推进的时钟。
"""

import asyncio
import time
from collections.abc import Callable
from typing import Protocol

import structlog

from voicedesk.core.config import TICK_INTERVAL_S

log = structlog.get_logger()


class Clock(Protocol):
    """时间源：now() 返回绝对时间戳（秒），sleep() 异步等待"""

    def now(self) -> float: ...

    async def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """墙钟时间 + asyncio.sleep"""

    def now(self) -> float:
        return time.time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class CallClock:
    """通话计时器 -- 通话中每秒调用一次 on_tick

    任务句柄被保留，stop() 时显式取消，避免回调落到已结束的通话上。
    """

    def __init__(self, clock: Clock, on_tick: Callable[[], None]) -> None:
        self._clock = clock
        self._on_tick = on_tick
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """启动计时（已在运行时忽略）"""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="voicedesk-call-clock")

    def stop(self) -> None:
        """停止计时（未运行时为 no-op）"""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await self._clock.sleep(TICK_INTERVAL_S)
            self._on_tick()


def format_duration(seconds: int) -> str:
    """秒数格式化为 MM:SS"""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"
