"""枚举定义

包含消息角色、任务优先级、语音采集状态机、check-in 状态机、会话事件类型，
以及语音采集的合法流转映射。
"""

from enum import StrEnum


class MessageRole(StrEnum):
    """消息角色"""

    USER = "user"
    ASSISTANT = "assistant"


class Priority(StrEnum):
    """任务优先级"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CaptureState(StrEnum):
    """语音采集状态机：IDLE <-> LISTENING"""

    IDLE = "IDLE"
    LISTENING = "LISTENING"


# 语音采集合法流转（各方向仅一条边）
VALID_CAPTURE_TRANSITIONS: dict[CaptureState, set[CaptureState]] = {
    CaptureState.IDLE: {CaptureState.LISTENING},
    CaptureState.LISTENING: {CaptureState.IDLE},
}


class CheckInState(StrEnum):
    """Check-in 状态机：UNARMED -> ARMED -> UNARMED（一次性）"""

    UNARMED = "UNARMED"
    ARMED = "ARMED"


class SessionEventType(StrEnum):
    """SessionHub 广播的事件类型"""

    MESSAGE_ADDED = "MESSAGE_ADDED"
    CALL_STATE_CHANGED = "CALL_STATE_CHANGED"
    LISTENING_CHANGED = "LISTENING_CHANGED"
    DURATION_TICK = "DURATION_TICK"
    PROPOSALS_CHANGED = "PROPOSALS_CHANGED"
    CHECK_IN_CHANGED = "CHECK_IN_CHANGED"


def validate_capture_transition(from_state: CaptureState, to_state: CaptureState) -> bool:
    """验证语音采集状态流转是否合法

    Args:
        from_state: 当前状态
        to_state: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    return to_state in VALID_CAPTURE_TRANSITIONS.get(from_state, set())
