"""
私信 Repository
提供 messages 表的插入和会话查询，读取时 JOIN users 补全收发双方信息
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import aliased
from sqlmodel import Session, select, col, and_, or_

from kukuri_chat.models.message import Message, MessageRead, MessageType
from kukuri_chat.models.user import User


class MessageRepository:
    """
    私信数据访问对象
    封装所有与 messages 表相关的数据库操作
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def _enriched_select(self):
        """构造 messages JOIN users(sender) JOIN users(receiver) 查询"""
        sender = aliased(User)
        receiver = aliased(User)
        return (
            select(
                Message,
                sender.username,
                sender.display_name,
                receiver.username,
                receiver.display_name,
            )
            .join(sender, col(Message.sender_id) == sender.id)
            .join(receiver, col(Message.receiver_id) == receiver.id)
        )

    @staticmethod
    def _as_utc(value: datetime) -> datetime:
        # SQLite 读回的是 naive datetime，存储时一律为 UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def _to_read(cls, row) -> MessageRead:
        message, sender_username, sender_display_name, receiver_username, receiver_display_name = row
        return MessageRead(
            id=message.id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            content=message.content,
            image_url=message.image_url,
            type=message.type,
            created_at=cls._as_utc(message.created_at),
            sender_username=sender_username,
            sender_display_name=sender_display_name,
            receiver_username=receiver_username,
            receiver_display_name=receiver_display_name,
        )

    def get_read_by_id(self, message_id: int) -> Optional[MessageRead]:
        """
        根据 ID 获取带收发双方信息的消息

        Args:
            message_id: 消息 ID

        Returns:
            MessageRead 对象，不存在则返回 None
        """
        statement = self._enriched_select().where(Message.id == message_id)
        row = self.session.exec(statement).first()
        return self._to_read(row) if row else None

    def create(
        self,
        sender_id: int,
        receiver_id: int,
        message_type: MessageType,
        content: Optional[str] = None,
        image_url: Optional[str] = None
    ) -> MessageRead:
        """
        插入消息并返回补全后的记录

        插入与回读在同一个事务中完成：回读失败时整体回滚，
        不会出现“已写入但客户端收到 500”的情况

        Args:
            sender_id: 发送者 ID
            receiver_id: 接收者 ID
            message_type: 消息类型
            content: 文本内容（text 类型）
            image_url: 图片相对路径（image 类型）

        Returns:
            刚插入的 MessageRead
        """
        message = Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            type=message_type,
            content=content,
            image_url=image_url
        )
        try:
            self.session.add(message)
            self.session.flush()
            result = self.get_read_by_id(message.id)
            if result is None:
                raise LookupError(f"message {message.id} not readable after insert")
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result

    def get_conversation(self, user_a: int, user_b: int) -> List[MessageRead]:
        """
        获取两个用户之间的全部消息（双向）

        排序：created_at 倒序（最新在前），相同时间按 id 倒序

        Args:
            user_a: 用户 A 的 ID
            user_b: 用户 B 的 ID

        Returns:
            MessageRead 列表
        """
        statement = (
            self._enriched_select()
            .where(
                or_(
                    and_(Message.sender_id == user_a, Message.receiver_id == user_b),
                    and_(Message.sender_id == user_b, Message.receiver_id == user_a),
                )
            )
            .order_by(col(Message.created_at).desc(), col(Message.id).desc())
        )
        return [self._to_read(row) for row in self.session.exec(statement).all()]
