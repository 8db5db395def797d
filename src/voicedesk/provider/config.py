"""SessionConfig -- 会话配置加载

从环境变量加载后端地址、token、超时与识别语言，不硬编码部署信息。
"""

import os

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()


class SessionConfig(BaseModel):
    """会话配置 -- 从环境变量加载

    环境变量:
        VOICEDESK_API_BASE_URL: 后端地址（默认 http://localhost:5001）
        VOICEDESK_API_TOKEN: 静态 bearer token（CLI 使用）
        VOICEDESK_HTTP_TIMEOUT_S: 请求超时（秒，默认 30）
        VOICEDESK_RECOGNITION_LANG: 语音识别语言（默认 en-US）
    """

    api_base_url: str = Field(
        default="http://localhost:5001",
        description="后端基础 URL",
    )
    api_token: SecretStr = Field(
        default=SecretStr(""),
        description="静态 bearer token，空字符串表示未登录",
    )
    timeout_s: int = Field(
        default=30,
        ge=1,
        description="HTTP 请求超时（秒）",
    )
    recognition_language: str = Field(
        default="en-US",
        description="语音识别语言",
    )


def load_session_config() -> SessionConfig:
    """从环境变量加载会话配置

    Returns:
        SessionConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("VOICEDESK_API_BASE_URL"):
        kwargs["api_base_url"] = val

    if val := os.environ.get("VOICEDESK_API_TOKEN"):
        kwargs["api_token"] = SecretStr(val)

    if val := os.environ.get("VOICEDESK_HTTP_TIMEOUT_S"):
        try:
            kwargs["timeout_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="VOICEDESK_HTTP_TIMEOUT_S",
                value=val,
                fallback=30,
            )

    if val := os.environ.get("VOICEDESK_RECOGNITION_LANG"):
        kwargs["recognition_language"] = val

    return SessionConfig(**kwargs)
