"""SoundDeviceSink -- 本机扬声器输出

soundfile 解码（MP3 需要 libsndfile >= 1.1），sounddevice 播放。
需要安装 audio extra 以及系统 PortAudio。
"""

import asyncio
import io

import sounddevice as sd
import soundfile as sf
import structlog

log = structlog.get_logger()


class SoundDeviceSink:
    """默认输出设备播放器"""

    @staticmethod
    def available() -> bool:
        """是否存在可用的输出设备"""
        try:
            sd.query_devices(kind="output")
        except (sd.PortAudioError, ValueError) as e:
            log.info("audio_output_device_missing", error=str(e))
            return False
        return True

    async def play(self, audio: bytes) -> None:
        """解码并阻塞播放到结束（在线程中执行，不阻塞事件循环）"""
        try:
            await asyncio.to_thread(self._play_blocking, audio)
        except asyncio.CancelledError:
            sd.stop()
            raise

    @staticmethod
    def _play_blocking(audio: bytes) -> None:
        with io.BytesIO(audio) as buffer:
            data, samplerate = sf.read(buffer, dtype="float32")
        sd.play(data, samplerate)
        sd.wait()
