"""ConversationController -- 会话控制器

串联通话生命周期、语音采集、AI 对话、TTS 播放队列、check-in 与任务审批：

    语音 / 文本输入 -> 追加 user 消息 -> AI 对话请求
    -> 追加 assistant 消息、合并任务查询结果与提议、按需调度 check-in
    -> assistant 消息进入播放队列

所有异步操作的失败都在发起处捕获，转换为 assistant 消息，不向上传播。
AI 回复按请求发起顺序依次应用（对话请求串行执行）。
"""

import asyncio
import contextlib
from collections.abc import Coroutine
from typing import Any

import httpx
import structlog

from voicedesk.core import phrases
from voicedesk.core.config import MESSAGE_PREVIEW_LENGTH
from voicedesk.core.models import CheckIn, MessageRole, SessionEventType
from voicedesk.provider.auth import StaticTokenProvider, TokenProvider
from voicedesk.provider.backend import create_http_client
from voicedesk.provider.config import SessionConfig
from voicedesk.provider.confirm import TaskConfirmClient
from voicedesk.provider.exceptions import (
    RemoteError,
    SpeechCaptureError,
    SpeechRecognitionTransientError,
    UnauthenticatedError,
    UnsupportedCapabilityError,
)
from voicedesk.provider.exchange import AIExchangeClient, AIReply
from voicedesk.provider.tts import SpeechSynthesizer

from .capabilities import Capabilities
from .checkin import CheckInScheduler
from .clock import CallClock, Clock, SystemClock
from .hub import SessionHub
from .playback import PlaybackQueue
from .proposals import ProposalGate
from .speech import SpeechCaptureAdapter
from .state import SessionState

log = structlog.get_logger()


class ConversationController:
    """会话控制器 -- 所有协作者通过构造参数注入"""

    def __init__(
        self,
        capabilities: Capabilities,
        exchange_client: AIExchangeClient,
        synthesizer: SpeechSynthesizer | None,
        confirm_client: TaskConfirmClient,
        tokens: TokenProvider,
        clock: Clock | None = None,
        hub: SessionHub | None = None,
        language: str = "en-US",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            capabilities: 已协商的宿主能力
            exchange_client: AI 对话客户端
            synthesizer: TTS 客户端
            confirm_client: 任务确认客户端
            tokens: bearer token 来源
            clock: 时间源，默认墙钟
            hub: 会话事件广播器
            language: 语音识别语言
            http_client: 由控制器负责关闭的共享 HTTP 客户端
        """
        self._capabilities = capabilities
        self._exchange_client = exchange_client
        self._tokens = tokens
        self._clock = clock or SystemClock()
        self._hub = hub
        self._http_client = http_client

        self.playback = PlaybackQueue(synthesizer, capabilities.audio_output)
        self.state = SessionState(playback=self.playback, hub=hub)
        self.capture = SpeechCaptureAdapter(
            capabilities.speech_recognition,
            on_transcript=self._on_transcript,
            on_error=self._on_capture_error,
            language=language,
        )
        self.check_in = CheckInScheduler(
            self._clock,
            on_fire=self._on_check_in,
            on_change=self._on_check_in_change,
        )
        self.gate = ProposalGate(self.state, confirm_client, tokens)
        self._call_clock = CallClock(self._clock, on_tick=self.state.tick_duration)

        self._exchange_lock = asyncio.Lock()
        self._background: set[asyncio.Task] = set()
        self._unsupported_notified = False

    # ============================================================
    # 通话生命周期
    # ============================================================

    def start_call(self) -> None:
        """开始通话：启动计时并问候（已在通话中时忽略）"""
        if self.state.active:
            log.debug("start_call_ignored_already_active")
            return
        self.state.set_active(True)
        self.state.reset_duration()
        self._call_clock.start()
        log.info("call_started")
        self._say(phrases.GREETING)

    def end_call(self) -> None:
        """结束通话：停止识别、计时与 check-in（未在通话中时忽略）"""
        if not self.state.active:
            log.debug("end_call_ignored_not_active")
            return
        duration = self.state.duration_seconds
        self._teardown_call()
        log.info("call_ended", duration_seconds=duration)
        self._say(phrases.CALL_ENDED)

    def _teardown_call(self) -> None:
        self.state.set_active(False)
        self.state.set_listening(False)
        self.capture.stop()
        self._call_clock.stop()
        self.state.reset_duration()
        self.check_in.cancel()

    # ============================================================
    # 语音采集
    # ============================================================

    def toggle_listening(self) -> None:
        """切换麦克风（仅通话中可用）"""
        if not self.state.active:
            log.debug("toggle_listening_ignored_not_on_call")
            return
        if self.capture.listening:
            self.stop_listening()
        else:
            self.start_listening()

    def start_listening(self) -> None:
        if not self.state.active:
            log.debug("start_listening_ignored_not_on_call")
            return
        try:
            self.capture.start()
        except UnsupportedCapabilityError:
            # 只提示一次，之后以纯文本模式继续
            if not self._unsupported_notified:
                self._unsupported_notified = True
                self._say(phrases.SPEECH_UNSUPPORTED)
            log.info("speech_recognition_unsupported")
            return
        except SpeechCaptureError as e:
            log.warning("start_listening_failed", error=str(e))
            self._say(phrases.SPEECH_START_FAILED)
            return
        self.state.set_listening(True)

    def stop_listening(self) -> None:
        self.capture.stop()
        self.state.set_listening(False)

    def _on_transcript(self, text: str) -> None:
        self.state.add_message(text, MessageRole.USER)
        self._spawn(self._exchange(text))

    def _on_capture_error(self, error: SpeechCaptureError) -> None:
        if isinstance(error, SpeechRecognitionTransientError):
            self._say(phrases.NO_SPEECH)

    # ============================================================
    # 文本输入与 AI 对话
    # ============================================================

    async def submit_text(self, text: str) -> None:
        """提交文本输入（空白输入忽略，内容原样记录）"""
        if not text.strip():
            return
        self.state.add_message(text, MessageRole.USER)
        await self._exchange(text)

    async def _exchange(self, text: str) -> None:
        async with self._exchange_lock:
            try:
                token = await self._tokens.get_token()
                reply = await self._exchange_client.send(text, token)
            except UnauthenticatedError:
                log.warning("ai_exchange_unauthenticated")
                self._say(phrases.SIGN_IN_REQUIRED)
                return
            except RemoteError as e:
                log.warning(
                    "ai_exchange_failed",
                    text_preview=text[:MESSAGE_PREVIEW_LENGTH],
                    error=str(e),
                )
                self._say(phrases.AI_FALLBACK)
                return
            self._apply_reply(reply)

    def _apply_reply(self, reply: AIReply) -> None:
        # 顺序固定：回答 -> 任务列表 -> 任务提议 -> check-in
        self._say(reply.freeform_answer)

        if reply.tasks_fetched is not None:
            if reply.tasks_fetched:
                self._say(phrases.format_task_list([t.title for t in reply.tasks_fetched]))
            else:
                self._say(phrases.NO_TASKS)

        if reply.proposed_tasks:
            self.state.set_proposed_tasks(reply.proposed_tasks)
            self._say(phrases.PROPOSALS_READY)

        if reply.check_in_delay is not None and reply.check_in_delay > 0:
            self.check_in.schedule(reply.check_in_delay)

    # ============================================================
    # Check-in
    # ============================================================

    def _on_check_in(self) -> None:
        self._say(phrases.CHECK_IN)

    def _on_check_in_change(self, check_in: CheckIn) -> None:
        if self._hub is not None:
            self._hub.publish(
                SessionEventType.CHECK_IN_CHANGED,
                **check_in.model_dump(mode="json"),
            )

    # ============================================================
    # 任务提议
    # ============================================================

    async def approve_proposals(self) -> bool:
        return await self.gate.approve()

    def discard_proposals(self) -> None:
        self.gate.discard()

    # ============================================================
    # 资源管理
    # ============================================================

    async def wait_idle(self) -> None:
        """等待后台对话请求与播放队列全部完成"""
        while self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        await self.playback.wait_idle()

    async def close(self) -> None:
        """结束会话：拆除通话、取消后台任务、关闭播放队列与 HTTP 客户端"""
        if self.state.active:
            self._teardown_call()
        # 文本输入也能调度 check-in，未在通话中时同样要取消
        self.check_in.cancel()
        self._call_clock.stop()
        for task in list(self._background):
            task.cancel()
        for task in list(self._background):
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self.playback.close()
        if self._http_client is not None:
            await self._http_client.aclose()
        log.info("session_closed", message_count=len(self.state.messages))

    def _say(self, content: str, audio: bytes | None = None) -> None:
        self.state.add_message(content, MessageRole.ASSISTANT, audio=audio)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)


def build_controller(
    config: SessionConfig,
    capabilities: Capabilities,
    tokens: TokenProvider | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Clock | None = None,
    hub: SessionHub | None = None,
) -> ConversationController:
    """按配置装配控制器

    Args:
        config: 会话配置
        capabilities: 已协商的宿主能力
        tokens: token 来源，None 时使用配置中的静态 token
        transport: 可选 httpx transport（测试注入）
        clock: 时间源
        hub: 会话事件广播器
    """
    http_client = create_http_client(config, transport=transport)
    if tokens is None:
        tokens = StaticTokenProvider(config.api_token.get_secret_value())

    return ConversationController(
        capabilities=capabilities,
        exchange_client=AIExchangeClient(http_client),
        synthesizer=SpeechSynthesizer(http_client),
        confirm_client=TaskConfirmClient(http_client),
        tokens=tokens,
        clock=clock,
        hub=hub,
        language=config.recognition_language,
        http_client=http_client,
    )
