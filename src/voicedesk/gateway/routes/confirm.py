"""任务确认路由

POST /api/confirm-tasks: 整批写入用户批准的任务。
- 200: {success, tasks_inserted}
- 401: 缺少 bearer token
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from voicedesk.core.models import ProposedTask

from ..deps import get_bearer_token, get_task_store
from ..services.echo import ECHO_OWNER_ID, EchoTaskStore
from .errors import unauthenticated_response

router = APIRouter()


class ConfirmRequest(BaseModel):
    """任务确认请求体"""

    tasksToConfirm: list[ProposedTask] = Field(description="待写入任务")


class ConfirmTasksResponse(BaseModel):
    """任务确认响应"""

    success: bool
    tasks_inserted: int
    tts_audio: str | None = None


@router.post("/api/confirm-tasks", response_model=ConfirmTasksResponse)
async def confirm_tasks(
    body: ConfirmRequest,
    token: str | None = Depends(get_bearer_token),
    task_store: EchoTaskStore = Depends(get_task_store),
):
    """写入任务"""
    if token is None:
        return unauthenticated_response()
    inserted = task_store.insert(ECHO_OWNER_ID, body.tasksToConfirm)
    return ConfirmTasksResponse(success=True, tasks_inserted=inserted)
