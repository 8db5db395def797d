"""VoiceDesk Session -- 会话控制器

会话状态、语音采集、TTS 播放队列、check-in 调度、任务审批与能力协商的公开导出。
"""

from .audio import AudioSink
from .capabilities import Capabilities, detect_audio_output, negotiate_capabilities
from .checkin import CheckInScheduler
from .clock import CallClock, Clock, SystemClock, format_duration
from .controller import ConversationController, build_controller
from .hub import SessionEvent, SessionHub
from .playback import PlaybackQueue
from .proposals import ProposalGate
from .speech import (
    RecognitionConfig,
    RecognizerFactory,
    SpeechCaptureAdapter,
    SpeechRecognizer,
)
from .state import SessionState

__all__ = [
    "ConversationController",
    "build_controller",
    # 组件
    "SessionState",
    "SessionHub",
    "SessionEvent",
    "SpeechCaptureAdapter",
    "SpeechRecognizer",
    "RecognizerFactory",
    "RecognitionConfig",
    "PlaybackQueue",
    "CheckInScheduler",
    "ProposalGate",
    "CallClock",
    # 能力
    "AudioSink",
    "Capabilities",
    "negotiate_capabilities",
    "detect_audio_output",
    # 时钟
    "Clock",
    "SystemClock",
    "format_duration",
]
