"""TokenProvider -- bearer token 来源

token 由外部身份服务签发，本包只负责透传。
"""

from typing import Protocol


class TokenProvider(Protocol):
    """异步获取当前会话 token，未登录时返回 None"""

    async def get_token(self) -> str | None: ...


class StaticTokenProvider:
    """固定 token（来自配置或测试）"""

    def __init__(self, token: str | None) -> None:
        self._token = token or None

    async def get_token(self) -> str | None:
        return self._token
