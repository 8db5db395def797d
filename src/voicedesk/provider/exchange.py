"""AIExchangeClient -- AI 对话接口封装

POST /api/ai-response，携带 bearer token。
响应体解析为 AIReply，格式错误视为 RemoteError。
"""

import json
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from voicedesk.core.config import MESSAGE_PREVIEW_LENGTH
from voicedesk.core.models import ProposedTask, TaskRecord

from .backend import post_json
from .exceptions import RemoteError, UnauthenticatedError

log = structlog.get_logger()

AI_RESPONSE_PATH = "/api/ai-response"


class AIReply(BaseModel):
    """AI 回复 -- 自由文本 + 可选的任务查询结果 / 任务提议 / check-in 延迟"""

    freeform_answer: str = Field(description="自由文本回复")
    tasks_fetched: list[TaskRecord] | None = Field(
        default=None,
        description="查询到的任务，None 表示本次未查询",
    )
    proposed_tasks: list[ProposedTask] | None = Field(
        default=None,
        description="待审批的任务提议",
    )
    check_in_delay: float | None = Field(
        default=None,
        allow_inf_nan=False,
        description="check-in 延迟（毫秒），Infinity / NaN 视为格式错误",
    )

    @field_validator("check_in_delay", mode="before")
    @classmethod
    def _numeric_only(cls, value: Any) -> Any:
        # 仅接受数值，其它类型视为未提供
        if isinstance(value, bool) or not isinstance(value, int | float):
            return None
        return value


class AIExchangeClient:
    """AI 对话客户端"""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        """
        Args:
            http_client: 共享的 httpx.AsyncClient（base_url 指向后端）
        """
        self._http = http_client

    async def send(self, text: str, auth_token: str | None) -> AIReply:
        """发送用户文本，返回结构化 AI 回复

        Args:
            text: 语音识别结果或文本输入
            auth_token: bearer token

        Returns:
            AIReply

        Raises:
            UnauthenticatedError: 没有 token（不会发起网络请求）
            RemoteError: 网络错误、非 2xx 响应或响应体格式错误
        """
        if not auth_token:
            raise UnauthenticatedError()

        log.debug(
            "ai_exchange_start",
            text_preview=text[:MESSAGE_PREVIEW_LENGTH],
            text_length=len(text),
        )
        response = await post_json(
            self._http,
            AI_RESPONSE_PATH,
            {"message": text},
            token=auth_token,
        )

        try:
            reply = AIReply.model_validate(response.json())
        except (json.JSONDecodeError, ValidationError) as e:
            log.error("ai_reply_malformed", error=str(e))
            raise RemoteError(
                endpoint=AI_RESPONSE_PATH,
                original_error=e,
                detail="响应体格式错误",
            ) from e

        log.info(
            "ai_exchange_completed",
            tasks_fetched=None if reply.tasks_fetched is None else len(reply.tasks_fetched),
            proposed_tasks=len(reply.proposed_tasks or []),
            check_in_delay=reply.check_in_delay,
        )
        return reply
