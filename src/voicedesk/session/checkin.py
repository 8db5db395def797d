"""CheckInScheduler -- 一次性 check-in 提醒

状态机: UNARMED -> ARMED -> UNARMED（不重复）
重复调度采用替换语义：后一次请求覆盖前一次。
ARMED 期间至少每秒刷新一次倒计时；到点后回到 UNARMED 并恰好触发一次 on_fire。
"""

import asyncio
import math
from collections.abc import Callable

import structlog

from voicedesk.core.config import TICK_INTERVAL_S
from voicedesk.core.models import CheckIn, CheckInState

from .clock import Clock

log = structlog.get_logger()


class CheckInScheduler:
    """Check-in 调度器"""

    def __init__(
        self,
        clock: Clock,
        on_fire: Callable[[], None],
        on_change: Callable[[CheckIn], None] | None = None,
    ) -> None:
        """
        Args:
            clock: 时间源
            on_fire: 到点回调
            on_change: 状态或倒计时变化回调（供 UI 刷新）
        """
        self._clock = clock
        self._on_fire = on_fire
        self._on_change = on_change
        self._state = CheckInState.UNARMED
        self._fire_at: float | None = None
        self._countdown = 0
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> CheckInState:
        return self._state

    @property
    def armed(self) -> bool:
        return self._state == CheckInState.ARMED

    @property
    def fire_at(self) -> float | None:
        return self._fire_at

    @property
    def countdown_seconds(self) -> int:
        return self._countdown

    def snapshot(self) -> CheckIn:
        return CheckIn(
            fire_at=self._fire_at,
            state=self._state,
            countdown_seconds=self._countdown,
        )

    def schedule(self, delay_ms: float) -> None:
        """在 delay_ms 毫秒后触发 check-in，已 ARMED 时替换原定时"""
        if self._task is not None:
            self._task.cancel()
            log.info("check_in_replaced", previous_fire_at=self._fire_at)

        now = self._clock.now()
        self._fire_at = now + delay_ms / 1000
        self._state = CheckInState.ARMED
        self._countdown = max(0, math.ceil(self._fire_at - now))
        self._task = asyncio.create_task(self._run(), name="voicedesk-check-in")
        log.info("check_in_armed", delay_ms=delay_ms, fire_at=self._fire_at)
        self._notify()

    def cancel(self) -> None:
        """取消未触发的 check-in（UNARMED 时为 no-op）"""
        if self._state == CheckInState.UNARMED:
            return
        if self._task is not None:
            self._task.cancel()
        self._reset()
        log.info("check_in_cancelled")
        self._notify()

    async def _run(self) -> None:
        while True:
            remaining = self._fire_at - self._clock.now()
            if remaining <= 0:
                break
            self._countdown = math.ceil(remaining)
            self._notify()
            await self._clock.sleep(min(TICK_INTERVAL_S, remaining))

        self._reset()
        log.info("check_in_fired")
        self._notify()
        self._on_fire()

    def _reset(self) -> None:
        self._task = None
        self._fire_at = None
        self._countdown = 0
        self._state = CheckInState.UNARMED

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())
