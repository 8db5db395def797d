"""宿主能力协商

会话启动时一次性解析语音识别与音频输出能力，之后只看 present/absent 标志，
不再在运行期反复探测。
"""

from dataclasses import dataclass

import structlog

from .audio import AudioSink
from .speech import RecognizerFactory

log = structlog.get_logger()


@dataclass(frozen=True)
class Capabilities:
    """已协商的宿主能力"""

    speech_recognition: RecognizerFactory | None = None
    audio_output: AudioSink | None = None

    @property
    def has_speech_recognition(self) -> bool:
        return self.speech_recognition is not None

    @property
    def has_audio_output(self) -> bool:
        return self.audio_output is not None


def detect_audio_output() -> AudioSink | None:
    """探测本机音频输出（sounddevice + soundfile），不可用时返回 None"""
    try:
        from .sounddevice_sink import SoundDeviceSink
    except (ImportError, OSError) as e:
        # 未安装 audio extra 或缺少 PortAudio 系统库
        log.info("audio_output_unavailable", error=str(e))
        return None

    if not SoundDeviceSink.available():
        return None
    return SoundDeviceSink()


def negotiate_capabilities(
    recognizer_factory: RecognizerFactory | None = None,
    audio_output: AudioSink | None = None,
    detect_audio: bool = True,
) -> Capabilities:
    """解析宿主能力

    Args:
        recognizer_factory: 宿主提供的语音识别器工厂
        audio_output: 显式指定的音频输出，None 时按 detect_audio 决定是否探测
        detect_audio: 是否探测本机音频输出

    Returns:
        Capabilities
    """
    if audio_output is None and detect_audio:
        audio_output = detect_audio_output()

    capabilities = Capabilities(
        speech_recognition=recognizer_factory,
        audio_output=audio_output,
    )
    log.info(
        "capabilities_negotiated",
        speech_recognition=capabilities.has_speech_recognition,
        audio_output=capabilities.has_audio_output,
    )
    return capabilities
