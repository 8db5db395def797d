"""通话 / check-in / 播放队列元素的快照模型"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import CheckInState


class CallSession(BaseModel):
    """通话状态快照

    listening 仅在 active 为 True 时有意义；
    duration_seconds 仅在通话中逐秒递增，通话结束时归零。
    """

    active: bool = Field(default=False, description="是否在通话中")
    listening: bool = Field(default=False, description="麦克风是否在识别")
    duration_seconds: int = Field(default=0, ge=0, description="通话时长（秒）")


class CheckIn(BaseModel):
    """Check-in 快照 -- 同一时刻至多一个"""

    fire_at: float | None = Field(default=None, description="触发时刻（时钟秒）")
    state: CheckInState = Field(default=CheckInState.UNARMED, description="状态")
    countdown_seconds: int = Field(default=0, ge=0, description="剩余秒数（向上取整）")

    @property
    def armed(self) -> bool:
        return self.state == CheckInState.ARMED


class Utterance(BaseModel):
    """播放队列中的一条待朗读文本

    audio 非空表示后端已直接提供合成音频，播放时跳过合成请求。
    """

    model_config = ConfigDict(frozen=True)

    text: str
    audio: bytes | None = None
