"""配置常量模块 -- 可通过环境变量覆盖

包含计时器间隔、echo gateway 监听地址、消息预览截断长度等常量。
"""

import os

# 通话计时 / check-in 倒计时刷新间隔（秒）
TICK_INTERVAL_S: float = 1.0

# 日志中消息预览截断长度
MESSAGE_PREVIEW_LENGTH: int = 80

# 会话客户端与 echo gateway 之间传递 request_id 的请求头
REQUEST_ID_HEADER: str = "X-Request-ID"

# SessionHub 订阅队列容量
HUB_QUEUE_MAXSIZE: int = int(os.environ.get("VOICEDESK_HUB_QUEUE_MAXSIZE", "100"))


def get_gateway_host() -> str:
    """获取 echo gateway 监听地址"""
    return os.environ.get("VOICEDESK_GATEWAY_HOST", "127.0.0.1")


def get_gateway_port() -> int:
    """获取 echo gateway 监听端口（与前端默认 API 地址 5001 对齐）"""
    return int(os.environ.get("VOICEDESK_GATEWAY_PORT", "5001"))
