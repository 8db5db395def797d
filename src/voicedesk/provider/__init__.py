"""VoiceDesk Provider -- 后端接口客户端

AI 对话、TTS 合成、任务确认三个接口的公开导出。
"""

from .auth import StaticTokenProvider, TokenProvider
from .backend import create_http_client, post_json
from .config import SessionConfig, load_session_config
from .confirm import ConfirmResult, TaskConfirmClient
from .exceptions import (
    RemoteError,
    SpeechCaptureError,
    SpeechRecognitionTransientError,
    UnauthenticatedError,
    UnsupportedCapabilityError,
    VoiceDeskError,
)
from .exchange import AIExchangeClient, AIReply
from .tts import SpeechSynthesizer

__all__ = [
    # 客户端
    "AIExchangeClient",
    "AIReply",
    "SpeechSynthesizer",
    "TaskConfirmClient",
    "ConfirmResult",
    "create_http_client",
    "post_json",
    # 认证
    "TokenProvider",
    "StaticTokenProvider",
    # 配置
    "SessionConfig",
    "load_session_config",
    # 异常
    "VoiceDeskError",
    "UnsupportedCapabilityError",
    "UnauthenticatedError",
    "RemoteError",
    "SpeechCaptureError",
    "SpeechRecognitionTransientError",
]
