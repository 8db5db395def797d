"""全局 pytest 配置 -- 可手动推进的时钟 + 宿主能力替身 + 控制器 fixture"""

import asyncio
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from voicedesk.provider.auth import StaticTokenProvider
from voicedesk.provider.confirm import ConfirmResult
from voicedesk.provider.exceptions import RemoteError
from voicedesk.provider.exchange import AIReply
from voicedesk.session.capabilities import Capabilities
from voicedesk.session.controller import ConversationController


async def settle(rounds: int = 20) -> None:
    """让出事件循环若干轮，使已就绪的回调全部执行"""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ManualClock:
    """手动推进的时钟：sleep() 挂起直到 advance() 越过唤醒时刻"""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self._now = start
        self._waiters: list[tuple[float, asyncio.Future]] = []

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        self._waiters.append((self._now + seconds, future))
        await future

    async def advance(self, seconds: float, step: float = 1.0) -> None:
        """按 step 逐步推进时间，每步唤醒到期的 sleep"""
        remaining = seconds
        while remaining > 0:
            # 先让已创建的计时任务登记 sleep，再推进时间
            await settle()
            delta = min(step, remaining)
            self._now += delta
            remaining -= delta
            await self._wake_due()

    async def _wake_due(self) -> None:
        due = [w for w in self._waiters if w[0] <= self._now]
        self._waiters = [w for w in self._waiters if w[0] > self._now]
        for _, future in due:
            if not future.done():
                future.set_result(None)
        await settle()


class FakeRecognizer:
    """语音识别器替身"""

    def __init__(self) -> None:
        self.config = None
        self.started = False
        self.stopped = False
        self._on_result = None
        self._on_error = None

    def start(self, config, on_result, on_error) -> None:
        self.config = config
        self.started = True
        self._on_result = on_result
        self._on_error = on_error

    def stop(self) -> None:
        self.stopped = True

    def emit(self, text: str) -> None:
        self._on_result(text)

    def fail(self, code: str) -> None:
        self._on_error(code)


class RecognizerFactoryStub:
    """每次调用返回新的 FakeRecognizer，并记录所有实例"""

    def __init__(self) -> None:
        self.instances: list[FakeRecognizer] = []

    def __call__(self) -> FakeRecognizer:
        recognizer = FakeRecognizer()
        self.instances.append(recognizer)
        return recognizer

    @property
    def latest(self) -> FakeRecognizer:
        return self.instances[-1]


class RecordingSink:
    """音频输出替身：记录播放内容与并发播放数"""

    def __init__(self, fail_on: set[bytes] | None = None) -> None:
        self.played: list[bytes] = []
        self.started: list[bytes] = []
        self.active = 0
        self.max_active = 0
        self._fail_on = fail_on or set()

    async def play(self, audio: bytes) -> None:
        self.started.append(audio)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            if audio in self._fail_on:
                raise RuntimeError("audio device error")
            self.played.append(audio)
        finally:
            self.active -= 1


class FakeSynthesizer:
    """TTS 替身：音频内容即 UTF-8 文本"""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.requested: list[str] = []
        self._fail_on = fail_on or set()

    async def synthesize(self, text: str) -> bytes:
        self.requested.append(text)
        await asyncio.sleep(0)
        if text in self._fail_on:
            raise RemoteError(endpoint="/api/tts", status_code=500)
        return text.encode()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def recognizers() -> RecognizerFactoryStub:
    return RecognizerFactoryStub()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def exchange_client() -> AsyncMock:
    """Mock AIExchangeClient，默认返回纯文本回复"""
    client = AsyncMock()
    client.send = AsyncMock(return_value=AIReply(freeform_answer="Sure thing."))
    return client


@pytest.fixture
def confirm_client() -> AsyncMock:
    """Mock TaskConfirmClient，默认写入成功"""
    client = AsyncMock()
    client.confirm = AsyncMock(return_value=ConfirmResult(tasks_inserted=2))
    return client


@pytest.fixture
def tokens() -> StaticTokenProvider:
    return StaticTokenProvider("test-token")


@pytest_asyncio.fixture
async def controller(
    clock, recognizers, sink, synthesizer, exchange_client, confirm_client, tokens
) -> AsyncGenerator[ConversationController, None]:
    """装配了全部替身的会话控制器"""
    ctrl = ConversationController(
        capabilities=Capabilities(speech_recognition=recognizers, audio_output=sink),
        exchange_client=exchange_client,
        synthesizer=synthesizer,
        confirm_client=confirm_client,
        tokens=tokens,
        clock=clock,
    )
    yield ctrl
    await ctrl.close()
