"""AudioSink -- 音频输出能力接口"""

from typing import Protocol


class AudioSink(Protocol):
    """播放一段已编码音频，播放结束（或失败抛异常）后返回"""

    async def play(self, audio: bytes) -> None: ...
