"""SpeechSynthesizer -- TTS 接口封装

POST /api/tts，返回二进制音频（后端为 MP3）。
"""

import httpx
import structlog

from .backend import post_json
from .exceptions import RemoteError

log = structlog.get_logger()

TTS_PATH = "/api/tts"


class SpeechSynthesizer:
    """文本转语音客户端"""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def synthesize(self, text: str) -> bytes:
        """请求合成音频

        Raises:
            RemoteError: 网络错误、非 2xx 响应或空音频
        """
        response = await post_json(self._http, TTS_PATH, {"text": text})
        audio = response.content
        if not audio:
            raise RemoteError(endpoint=TTS_PATH, detail="未返回音频内容")
        log.debug("tts_synthesized", bytes=len(audio), text_length=len(text))
        return audio
