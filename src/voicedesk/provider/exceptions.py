"""VoiceDesk 异常体系

会话内所有失败都在发起异步操作的边界处被捕获，转换为 assistant 消息。
"""


class VoiceDeskError(Exception):
    """VoiceDesk 基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 会话是否可以在此错误后继续
        """
        super().__init__(message)
        self.recoverable = recoverable


class UnsupportedCapabilityError(VoiceDeskError):
    """宿主环境缺少某项能力（语音识别 / 音频输出）

    会话继续以纯文本模式运行，不做恢复尝试。
    """

    def __init__(self, capability: str) -> None:
        super().__init__(f"宿主环境不支持: {capability}", recoverable=True)
        self.capability = capability


class UnauthenticatedError(VoiceDeskError):
    """缺少或过期的 bearer token

    硬性前置条件失败，不自动重新认证、不重试。
    """

    def __init__(self, message: str = "没有可用的认证 token") -> None:
        super().__init__(message, recoverable=False)


class RemoteError(VoiceDeskError):
    """后端调用失败（网络错误、非 2xx 响应、响应体格式错误）

    不重试、不退避。
    """

    def __init__(
        self,
        endpoint: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
        detail: str = "",
    ) -> None:
        """
        Args:
            endpoint: 请求路径
            status_code: HTTP 状态码（网络错误时为 None）
            original_error: 原始异常
            detail: 补充说明（如响应体校验失败原因）
        """
        reason = detail or (str(original_error) if original_error else "")
        if status_code is not None:
            reason = f"HTTP {status_code}" + (f" {reason}" if reason else "")
        super().__init__(f"后端调用失败: {endpoint} -- {reason}", recoverable=True)
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error


class SpeechCaptureError(VoiceDeskError):
    """语音识别器上报的错误"""

    def __init__(self, code: str) -> None:
        super().__init__(f"语音识别错误: {code}", recoverable=True)
        self.code = code


class SpeechRecognitionTransientError(SpeechCaptureError):
    """未检测到语音（no-speech）-- 非致命，识别保持进行"""

    def __init__(self, code: str = "no-speech") -> None:
        super().__init__(code)
