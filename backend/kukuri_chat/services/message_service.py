"""
私信服务层

封装私信业务逻辑：
1. 发送：根据提供的载荷（文本或图片）确定消息类型，校验收发双方
2. 会话：返回两个用户之间的双向消息，最新的在前
"""

import logging
from typing import List, Optional

from kukuri_chat.errors import ValidationError
from kukuri_chat.models.message import MessageRead, MessageType
from kukuri_chat.repositories.message_repository import MessageRepository
from kukuri_chat.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class MessageService:
    """
    私信服务类

    使用示例：
        service = MessageService(MessageRepository(session), UserRepository(session))
        sent = service.send(sender_id=1, receiver_id=2, content="你好")
        history = service.conversation(1, 2)
    """

    def __init__(self, message_repository: MessageRepository, user_repository: UserRepository):
        self.messages = message_repository
        self.users = user_repository

    def send(
        self,
        sender_id: Optional[int],
        receiver_id: Optional[int],
        content: Optional[str] = None,
        image_url: Optional[str] = None
    ) -> MessageRead:
        """
        发送一条消息

        content 与 image_url 必须且只能提供一个：
        - content -> type = text
        - image_url -> type = image

        Args:
            sender_id: 发送者 ID（来自 Token）
            receiver_id: 接收者 ID
            content: 文本内容
            image_url: 已保存图片的相对路径

        Returns:
            刚插入的 MessageRead（含收发双方用户名和显示名）

        Raises:
            ValidationError: 收发双方或内容缺失、同时给出两种内容、发送者或接收者不存在
        """
        if not sender_id or not receiver_id:
            raise ValidationError("请指定消息接收者")
        if content and image_url:
            raise ValidationError("一条消息只能包含文本或图片之一")
        if not content and not image_url:
            raise ValidationError("消息内容不能为空")

        # Token 合法但对应用户已不存在时也按客户端错误处理
        if self.users.get_by_id(sender_id) is None:
            raise ValidationError("发送者不存在")
        if self.users.get_by_id(receiver_id) is None:
            raise ValidationError("接收者不存在")

        message_type = MessageType.TEXT if content else MessageType.IMAGE
        message = self.messages.create(
            sender_id=sender_id,
            receiver_id=receiver_id,
            message_type=message_type,
            content=content if message_type == MessageType.TEXT else None,
            image_url=image_url if message_type == MessageType.IMAGE else None
        )
        logger.info(
            "[MessageService] Message %s sent: %s -> %s (%s)",
            message.id, sender_id, receiver_id, message_type.value
        )
        return message

    def conversation(self, user_a: int, user_b: int) -> List[MessageRead]:
        """
        获取两个用户之间的会话

        Returns:
            MessageRead 列表，按 created_at 倒序（最新在前）
        """
        return self.messages.get_conversation(user_a, user_b)
