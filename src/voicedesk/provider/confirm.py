"""TaskConfirmClient -- 任务提议确认接口封装

POST /api/confirm-tasks，整批提交，携带 bearer token。
响应中的 tts_audio 为 base64 编码的确认语音。
"""

import base64
import binascii
import json

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from voicedesk.core.models import ProposedTask

from .backend import post_json
from .exceptions import RemoteError, UnauthenticatedError

log = structlog.get_logger()

CONFIRM_TASKS_PATH = "/api/confirm-tasks"


class ConfirmResponse(BaseModel):
    """/api/confirm-tasks 响应体"""

    success: bool = Field(description="是否写入成功")
    tasks_inserted: int = Field(default=0, ge=0, description="写入条数")
    tts_audio: str | None = Field(default=None, description="base64 编码的确认语音")


class ConfirmResult(BaseModel):
    """确认结果 -- tts_audio 已解码"""

    tasks_inserted: int = 0
    tts_audio: bytes | None = None


class TaskConfirmClient:
    """任务确认客户端"""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def confirm(
        self, tasks: list[ProposedTask], auth_token: str | None
    ) -> ConfirmResult:
        """一次请求提交整批任务

        Raises:
            UnauthenticatedError: 没有 token（不会发起网络请求）
            RemoteError: 网络错误、非 2xx 响应、响应体格式错误或 success=false
        """
        if not auth_token:
            raise UnauthenticatedError()

        response = await post_json(
            self._http,
            CONFIRM_TASKS_PATH,
            {"tasksToConfirm": [task.to_wire() for task in tasks]},
            token=auth_token,
        )

        try:
            body = ConfirmResponse.model_validate(response.json())
            audio = base64.b64decode(body.tts_audio, validate=True) if body.tts_audio else None
        except (json.JSONDecodeError, ValidationError, binascii.Error) as e:
            log.error("confirm_response_malformed", error=str(e))
            raise RemoteError(
                endpoint=CONFIRM_TASKS_PATH,
                original_error=e,
                detail="响应体格式错误",
            ) from e

        if not body.success:
            raise RemoteError(endpoint=CONFIRM_TASKS_PATH, detail="success=false")

        log.info(
            "tasks_confirmed",
            tasks_submitted=len(tasks),
            tasks_inserted=body.tasks_inserted,
            has_tts_audio=audio is not None,
        )
        return ConfirmResult(tasks_inserted=body.tasks_inserted, tts_audio=audio)
