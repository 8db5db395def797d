"""AI 对话路由

POST /api/ai-response: 接收用户消息，返回 echo 回复。
- 200: freeform_answer + 可选 tasks_fetched / proposed_tasks / check_in_delay
- 401: 缺少 bearer token
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_bearer_token, get_task_store
from ..services.echo import ECHO_OWNER_ID, EchoTaskStore, build_echo_reply
from .errors import unauthenticated_response

router = APIRouter()


class AIRequest(BaseModel):
    """AI 对话请求体"""

    message: str = Field(description="用户消息")


@router.post("/api/ai-response")
async def ai_response(
    body: AIRequest,
    token: str | None = Depends(get_bearer_token),
    task_store: EchoTaskStore = Depends(get_task_store),
):
    """返回 echo AI 回复"""
    if token is None:
        return unauthenticated_response()
    return build_echo_reply(body.message, task_store, ECHO_OWNER_ID)
