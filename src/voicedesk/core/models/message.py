"""Message Domain Model

对话记录的单条消息。append-only，创建后不可修改。
id 使用 ULID 格式，时间有序。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

from .enums import MessageRole


class Message(BaseModel):
    """对话消息 -- 不可变，按创建顺序追加

    content 原样保存，不做 strip 或其他变换。
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(ULID()), description="唯一标识，ULID 格式")
    role: MessageRole = Field(description="消息角色")
    content: str = Field(description="消息文本")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="创建时间（UTC）",
    )
