"""CheckInScheduler 单元测试

测试内容：
1. schedule() 设置 fire_at = now + delay，进入 ARMED
2. ARMED 期间倒计时逐秒刷新
3. 到点恰好触发一次并回到 UNARMED
4. 替换语义与取消
"""

import pytest
from voicedesk.core.models import CheckInState
from voicedesk.session.checkin import CheckInScheduler


@pytest.fixture
def fired() -> list[int]:
    return []


@pytest.fixture
def changes() -> list:
    return []


@pytest.fixture
def scheduler(clock, fired, changes) -> CheckInScheduler:
    return CheckInScheduler(
        clock,
        on_fire=lambda: fired.append(1),
        on_change=changes.append,
    )


class TestCheckInSchedule:
    """调度与触发"""

    async def test_schedule_arms(self, scheduler, clock):
        start = clock.now()
        scheduler.schedule(300000)

        assert scheduler.state == CheckInState.ARMED
        assert scheduler.fire_at == start + 300
        assert scheduler.countdown_seconds == 300
        scheduler.cancel()

    async def test_countdown_refreshes_every_second(self, scheduler, clock):
        scheduler.schedule(5000)
        await clock.advance(1)
        assert scheduler.countdown_seconds == 4
        await clock.advance(2)
        assert scheduler.countdown_seconds == 2
        scheduler.cancel()

    async def test_countdown_rounds_up(self, scheduler, clock):
        scheduler.schedule(2500)
        assert scheduler.countdown_seconds == 3
        await clock.advance(1)
        assert scheduler.countdown_seconds == 2
        scheduler.cancel()

    async def test_fires_exactly_once(self, scheduler, clock, fired):
        scheduler.schedule(300000)

        await clock.advance(299)
        assert fired == []
        assert scheduler.armed is True

        await clock.advance(1)
        assert fired == [1]
        assert scheduler.state == CheckInState.UNARMED
        assert scheduler.fire_at is None

        await clock.advance(600)
        assert fired == [1]

    async def test_change_notifications(self, scheduler, clock, changes):
        scheduler.schedule(2000)
        await clock.advance(2)

        assert changes[0].state == CheckInState.ARMED
        assert changes[-1].state == CheckInState.UNARMED


class TestCheckInReplaceAndCancel:
    """替换语义与取消"""

    async def test_second_schedule_replaces_first(self, scheduler, clock, fired):
        scheduler.schedule(10000)
        await clock.advance(5)
        scheduler.schedule(20000)

        # 原定时刻（第 10 秒）不再触发
        await clock.advance(10)
        assert fired == []

        await clock.advance(10)
        assert fired == [1]

    async def test_cancel_prevents_fire(self, scheduler, clock, fired):
        scheduler.schedule(3000)
        await clock.advance(1)
        scheduler.cancel()

        assert scheduler.state == CheckInState.UNARMED
        assert scheduler.countdown_seconds == 0
        await clock.advance(5)
        assert fired == []

    async def test_cancel_when_unarmed_is_noop(self, scheduler, changes):
        scheduler.cancel()
        assert scheduler.state == CheckInState.UNARMED
        assert changes == []
