"""SessionState -- 会话唯一数据源

持有通话标志、识别标志、通话时长、对话记录、待审批任务批次。
所有字段只能通过本类的 setter 修改；每次修改都会在 SessionHub 上广播，
供 UI 组件重绘。

并发约定：单一 asyncio 事件循环，所有修改同步完成，无需加锁。
"""

from collections.abc import Iterable
from typing import Protocol

import structlog

from voicedesk.core.config import MESSAGE_PREVIEW_LENGTH
from voicedesk.core.models import (
    CallSession,
    Message,
    MessageRole,
    ProposedTask,
    SessionEventType,
)

from .hub import SessionHub

log = structlog.get_logger()


class UtteranceSink(Protocol):
    """assistant 消息的朗读出口（PlaybackQueue 实现此接口）"""

    def enqueue(self, text: str, audio: bytes | None = None) -> None: ...


class SessionState:
    """会话状态"""

    def __init__(
        self,
        playback: UtteranceSink | None = None,
        hub: SessionHub | None = None,
    ) -> None:
        """
        Args:
            playback: assistant 消息追加后送入的播放队列，None 表示不朗读
            hub: 事件广播器，None 表示不广播
        """
        self._playback = playback
        self._hub = hub
        self._messages: list[Message] = []
        self._proposed_tasks: list[ProposedTask] = []
        # 每次替换批次递增
        self._proposals_revision = 0
        self._active = False
        self._listening = False
        self._duration_seconds = 0

    # ============================================================
    # 只读视图
    # ============================================================

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def proposed_tasks(self) -> tuple[ProposedTask, ...]:
        return tuple(self._proposed_tasks)

    @property
    def proposals_revision(self) -> int:
        return self._proposals_revision

    @property
    def active(self) -> bool:
        return self._active

    @property
    def listening(self) -> bool:
        return self._listening

    @property
    def duration_seconds(self) -> int:
        return self._duration_seconds

    def call_session(self) -> CallSession:
        """当前通话状态快照"""
        return CallSession(
            active=self._active,
            listening=self._listening,
            duration_seconds=self._duration_seconds,
        )

    # ============================================================
    # 对话记录
    # ============================================================

    def add_message(
        self,
        content: str,
        role: MessageRole,
        audio: bytes | None = None,
    ) -> Message:
        """追加一条消息；assistant 消息同时送入播放队列

        Args:
            content: 消息文本，原样保存
            role: 消息角色
            audio: 后端已提供的合成音频（仅 assistant 消息有意义）

        Returns:
            新创建的 Message
        """
        message = Message(role=role, content=content)
        self._messages.append(message)
        log.debug(
            "message_added",
            message_id=message.id,
            role=role.value,
            content_preview=content[:MESSAGE_PREVIEW_LENGTH],
        )
        self._publish(SessionEventType.MESSAGE_ADDED, message=message.model_dump(mode="json"))

        if role == MessageRole.ASSISTANT and self._playback is not None:
            self._playback.enqueue(content, audio=audio)
        return message

    # ============================================================
    # 待审批任务
    # ============================================================

    def set_proposed_tasks(self, tasks: Iterable[ProposedTask]) -> None:
        """整体替换待审批批次（覆盖，不合并）"""
        self._proposed_tasks = list(tasks)
        self._proposals_revision += 1
        self._publish(SessionEventType.PROPOSALS_CHANGED, count=len(self._proposed_tasks))

    # ============================================================
    # 通话状态 setter（仅供通话生命周期与计时器使用）
    # ============================================================

    def set_active(self, active: bool) -> None:
        if self._active == active:
            return
        self._active = active
        self._publish(SessionEventType.CALL_STATE_CHANGED, active=active)

    def set_listening(self, listening: bool) -> None:
        if self._listening == listening:
            return
        self._listening = listening
        self._publish(SessionEventType.LISTENING_CHANGED, listening=listening)

    def tick_duration(self) -> None:
        """通话时长加一秒（仅在通话中生效）"""
        if not self._active:
            return
        self._duration_seconds += 1
        self._publish(SessionEventType.DURATION_TICK, duration_seconds=self._duration_seconds)

    def reset_duration(self) -> None:
        self._duration_seconds = 0
        self._publish(SessionEventType.DURATION_TICK, duration_seconds=0)

    def _publish(self, event_type: SessionEventType, **payload) -> None:
        if self._hub is not None:
            self._hub.publish(event_type, **payload)
