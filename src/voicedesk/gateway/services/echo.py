"""Echo 后端逻辑 -- 不接入真实 LLM / TTS / 数据库

- AI 回复为 "Echo: {message}"，附带少量关键字规则：
  "check in after 5 minutes" -> check_in_delay
  "my tasks"                 -> tasks_fetched（来自内存存储）
  "add task: <title>"        -> 一条 proposed_task
- TTS 返回一段静音 WAV
- 已确认任务保存在进程内存中
"""

import io
import re
import wave
from functools import lru_cache

import structlog

from voicedesk.core.models import ProposedTask, TaskRecord

log = structlog.get_logger()

# echo 模式下所有任务归属同一用户
ECHO_OWNER_ID = "owner"

_CHECK_IN_PATTERN = re.compile(
    r"check\s*in(?:\s+with\s+me)?\s+(?:after|in)\s+(\d+)\s*(second|sec|minute|min|hour)s?",
    re.IGNORECASE,
)
_ADD_TASK_PATTERN = re.compile(r"add task:\s*(.+)", re.IGNORECASE)
_UNIT_MS = {
    "second": 1_000,
    "sec": 1_000,
    "minute": 60_000,
    "min": 60_000,
    "hour": 3_600_000,
}

SILENCE_SAMPLE_RATE = 16000
SILENCE_SECONDS = 0.2


class EchoTaskStore:
    """内存任务存储"""

    def __init__(self) -> None:
        self._tasks: dict[str, list[TaskRecord]] = {}
        self._next_id = 1

    def insert(self, owner: str, tasks: list[ProposedTask]) -> int:
        records = self._tasks.setdefault(owner, [])
        for task in tasks:
            records.append(
                TaskRecord(
                    id=self._next_id,
                    title=task.title,
                    due_date=task.due_date,
                    due_time=task.due_time,
                    priority=task.priority,
                    user_id=owner,
                )
            )
            self._next_id += 1
        return len(tasks)

    def list_tasks(self, owner: str) -> list[TaskRecord]:
        return list(self._tasks.get(owner, []))


def parse_check_in_delay(message: str) -> int | None:
    """从文本中解析 check-in 延迟（毫秒）"""
    match = _CHECK_IN_PATTERN.search(message)
    if match is None:
        return None
    amount = int(match.group(1))
    unit = match.group(2).lower()
    return amount * _UNIT_MS[unit]


def build_echo_reply(message: str, store: EchoTaskStore, owner: str) -> dict:
    """构建 /api/ai-response 响应体"""
    reply: dict = {"freeform_answer": f"Echo: {message}"}

    if "my tasks" in message.lower():
        reply["tasks_fetched"] = [t.to_wire() for t in store.list_tasks(owner)]

    if match := _ADD_TASK_PATTERN.search(message):
        proposed = ProposedTask(title=match.group(1).strip(), user_id=owner)
        reply["proposed_tasks"] = [proposed.to_wire()]

    if (delay := parse_check_in_delay(message)) is not None:
        reply["check_in_delay"] = delay

    log.debug("echo_reply_built", keys=sorted(reply))
    return reply


@lru_cache(maxsize=1)
def silent_wav() -> bytes:
    """生成一段静音 WAV（16kHz / 16bit / 单声道）"""
    frame_count = int(SILENCE_SAMPLE_RATE * SILENCE_SECONDS)
    with io.BytesIO() as buffer:
        with wave.open(buffer, "wb") as wav:
            wav.setnchannels(1)
            wav.setsampwidth(2)
            wav.setframerate(SILENCE_SAMPLE_RATE)
            wav.writeframes(b"\x00\x00" * frame_count)
        return buffer.getvalue()
