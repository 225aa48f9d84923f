"""
基础数据库模型
提供所有表模型共用的创建时间戳
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    """当前 UTC 时间（timezone-aware）"""
    return datetime.now(timezone.utc)


class CreatedAtModel(SQLModel):
    """创建时间基类

    users 与 messages 都是只追加的记录，创建后不再修改，因此只有 created_at
    """
    created_at: Optional[datetime] = Field(
        default_factory=utcnow,
        nullable=False,
        index=True
    )
