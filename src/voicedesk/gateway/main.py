"""FastAPI 应用主文件 -- echo gateway

app 创建 + lifespan 管理：内存任务存储初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from voicedesk import __version__
from voicedesk.logging_config import setup_logging

from .middleware.logging_mw import LoggingMiddleware
from .routes import ai_response, confirm, tts
from .services.echo import EchoTaskStore

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化内存任务存储"""
    app.state.task_store = EchoTaskStore()
    log.info("echo_gateway_started")
    yield
    log.info("echo_gateway_stopped")


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="VoiceDesk Echo Gateway",
        version=__version__,
        description="VoiceDesk 会话控制器的本地 echo 后端",
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)

    setup_logging()

    app.include_router(ai_response.router, tags=["ai"])
    app.include_router(tts.router, tags=["tts"])
    app.include_router(confirm.router, tags=["tasks"])

    return app
