"""
数据库模型模块
导出所有表模型和枚举类型
"""

from .user import User
from .message import Message, MessageType, MessageRead

from .base import CreatedAtModel, utcnow

__all__ = [
    "User",
    "Message", "MessageType", "MessageRead",
    "CreatedAtModel", "utcnow"
]
