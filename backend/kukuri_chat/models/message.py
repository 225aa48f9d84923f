"""
私信模型 - messages 表
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field

from .base import CreatedAtModel


class MessageType(str, Enum):
    """消息类型枚举"""
    TEXT = "text"
    IMAGE = "image"


class Message(CreatedAtModel, table=True):
    """
    私信表
    type 为 text 时只有 content，type 为 image 时只有 image_url
    """
    __tablename__ = "messages"

    id: Optional[int] = Field(default=None, primary_key=True)

    # 会话查询按 (sender_id, receiver_id) 双向过滤
    sender_id: int = Field(foreign_key="users.id", index=True, nullable=False)
    receiver_id: int = Field(foreign_key="users.id", index=True, nullable=False)

    content: Optional[str] = Field(default=None)

    # 图片的相对资源路径，如 /uploads/messages/message-image-xxx.jpg
    image_url: Optional[str] = Field(default=None)

    type: MessageType = Field(default=MessageType.TEXT, nullable=False)


class MessageRead(SQLModel):
    """
    带收发双方信息的消息记录

    sender_* / receiver_* 字段在读取时通过 JOIN users 得到，不做冗余存储
    """
    id: int
    sender_id: int
    receiver_id: int
    content: Optional[str] = None
    image_url: Optional[str] = None
    type: MessageType
    created_at: datetime
    sender_username: str
    sender_display_name: str
    receiver_username: str
    receiver_display_name: str
