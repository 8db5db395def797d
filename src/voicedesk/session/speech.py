"""SpeechCaptureAdapter -- 连续语音识别适配器

状态机: IDLE -> LISTENING -> IDLE
每次 start() 创建新的识别器实例；stop() 后旧实例的回调一律丢弃。
识别器回调必须在事件循环线程上触发（线程型识别器用 loop.call_soon_threadsafe 转发）。
"""

from collections.abc import Callable
from typing import Protocol

import structlog
from pydantic import BaseModel, Field

from voicedesk.core.models import CaptureState, validate_capture_transition
from voicedesk.provider.exceptions import (
    SpeechCaptureError,
    SpeechRecognitionTransientError,
    UnsupportedCapabilityError,
)

log = structlog.get_logger()

NO_SPEECH_CODE = "no-speech"


class RecognitionConfig(BaseModel):
    """识别参数：连续识别、只要最终结果"""

    continuous: bool = Field(default=True)
    interim_results: bool = Field(default=False)
    language: str = Field(default="en-US")


class SpeechRecognizer(Protocol):
    """宿主提供的语音识别器"""

    def start(
        self,
        config: RecognitionConfig,
        on_result: Callable[[str], None],
        on_error: Callable[[str], None],
    ) -> None: ...

    def stop(self) -> None: ...


RecognizerFactory = Callable[[], SpeechRecognizer]


class SpeechCaptureAdapter:
    """语音采集适配器"""

    def __init__(
        self,
        factory: RecognizerFactory | None,
        on_transcript: Callable[[str], None],
        on_error: Callable[[SpeechCaptureError], None],
        language: str = "en-US",
    ) -> None:
        """
        Args:
            factory: 识别器工厂，None 表示宿主不支持语音识别
            on_transcript: 最终识别结果回调
            on_error: 识别错误回调
            language: 识别语言
        """
        self._factory = factory
        self._on_transcript = on_transcript
        self._on_error = on_error
        self._config = RecognitionConfig(language=language)
        self._state = CaptureState.IDLE
        self._recognizer: SpeechRecognizer | None = None
        # 每次 start/stop 递增，用于识别过期实例的回调
        self._generation = 0

    @property
    def supported(self) -> bool:
        return self._factory is not None

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def listening(self) -> bool:
        return self._state == CaptureState.LISTENING

    def start(self) -> None:
        """开始识别

        Raises:
            UnsupportedCapabilityError: 宿主不支持语音识别，状态保持 IDLE
            SpeechCaptureError: 识别器启动失败，状态保持 IDLE
        """
        if self._factory is None:
            raise UnsupportedCapabilityError("speech_recognition")
        if self._state == CaptureState.LISTENING:
            return

        recognizer = self._factory()
        self._generation += 1
        generation = self._generation
        self._recognizer = recognizer
        self._transition(CaptureState.LISTENING)

        try:
            recognizer.start(
                self._config,
                on_result=lambda text: self._deliver_result(generation, text),
                on_error=lambda code: self._deliver_error(generation, code),
            )
        except Exception as e:
            self._generation += 1
            self._recognizer = None
            self._transition(CaptureState.IDLE)
            log.error("speech_capture_start_failed", error=str(e))
            raise SpeechCaptureError("start-failed") from e

        log.info("speech_capture_started", language=self._config.language)

    def stop(self) -> None:
        """停止识别并丢弃识别器实例（IDLE 时为 no-op）"""
        if self._state == CaptureState.IDLE:
            return

        recognizer = self._recognizer
        self._generation += 1
        self._recognizer = None
        self._transition(CaptureState.IDLE)

        if recognizer is not None:
            try:
                recognizer.stop()
            except Exception as e:
                log.warning("speech_capture_stop_failed", error=str(e))

        log.info("speech_capture_stopped")

    def _transition(self, to_state: CaptureState) -> None:
        if not validate_capture_transition(self._state, to_state):
            raise ValueError(f"非法语音采集状态流转: {self._state} -> {to_state}")
        self._state = to_state

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self._state == CaptureState.LISTENING

    def _deliver_result(self, generation: int, text: str) -> None:
        if not self._is_current(generation):
            log.debug("stale_transcript_dropped", generation=generation)
            return
        self._on_transcript(text)

    def _deliver_error(self, generation: int, code: str) -> None:
        if not self._is_current(generation):
            log.debug("stale_recognition_error_dropped", generation=generation, code=code)
            return
        if code == NO_SPEECH_CODE:
            error: SpeechCaptureError = SpeechRecognitionTransientError(code)
        else:
            error = SpeechCaptureError(code)
        log.warning("speech_capture_error", code=code, transient=code == NO_SPEECH_CODE)
        self._on_error(error)
