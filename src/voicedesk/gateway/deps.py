"""依赖注入模块 -- 通过 FastAPI Depends 注入 echo 任务存储与 bearer token

存储实例通过 app.state 管理，在 lifespan 中初始化。
"""

from fastapi import Request

from .services.echo import EchoTaskStore


def get_task_store(request: Request) -> EchoTaskStore:
    """从 app.state 获取 EchoTaskStore 实例"""
    return request.app.state.task_store


def get_bearer_token(request: Request) -> str | None:
    """解析 Authorization: Bearer <token>，缺失或为空时返回 None"""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
