"""VoiceDesk Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .call import CallSession, CheckIn, Utterance
from .enums import (
    VALID_CAPTURE_TRANSITIONS,
    CaptureState,
    CheckInState,
    MessageRole,
    Priority,
    SessionEventType,
    validate_capture_transition,
)
from .message import Message
from .task import ProposedTask, TaskRecord

__all__ = [
    # 枚举
    "MessageRole",
    "Priority",
    "CaptureState",
    "CheckInState",
    "SessionEventType",
    # 状态机
    "VALID_CAPTURE_TRANSITIONS",
    "validate_capture_transition",
    # Message
    "Message",
    # Task
    "ProposedTask",
    "TaskRecord",
    # Call
    "CallSession",
    "CheckIn",
    "Utterance",
]
