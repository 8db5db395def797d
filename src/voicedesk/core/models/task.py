"""Task Domain Models -- ProposedTask / TaskRecord

ProposedTask 由 AI 回复批量创建，等待用户审批后才会持久化。
TaskRecord 为后端已持久化的任务（tasks_fetched 返回）。
线上字段名 user_id 对应模型字段 owner。
"""

from datetime import date, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import Priority


class _TaskFields(BaseModel):
    """任务公共字段"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(description="任务标题")
    due_date: date | None = Field(default=None, description="截止日期")
    due_time: time | None = Field(default=None, description="截止时间")
    priority: Priority = Field(default=Priority.MEDIUM, description="优先级")
    owner: str = Field(default="", alias="user_id", description="所属用户 ID")

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> Any:
        # 大小写不敏感，未知取值降级为 medium
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in Priority._value2member_map_:
                return lowered
            return Priority.MEDIUM
        if value is None:
            return Priority.MEDIUM
        return value

    @field_validator("due_date", "due_time", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_wire(self) -> dict[str, Any]:
        """序列化为后端 JSON 格式（owner -> user_id）"""
        return self.model_dump(mode="json", by_alias=True)


class ProposedTask(_TaskFields):
    """AI 提议的任务 -- 审批前 completed 恒为 False"""

    completed: bool = Field(default=False, description="是否完成，提议阶段恒为 False")

    @field_validator("completed", mode="before")
    @classmethod
    def _never_completed(cls, value: Any) -> bool:
        return False


class TaskRecord(_TaskFields):
    """已持久化的任务"""

    id: str | int | None = Field(default=None, description="后端任务 ID")
    completed: bool = Field(default=False, description="是否完成")
