"""
用户管理 Repository
提供 users 表的查询与插入操作
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, col

from kukuri_chat.errors import DuplicateUsername
from kukuri_chat.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """
    用户数据访问对象
    封装所有与 users 表相关的数据库操作
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def get_by_username(self, username: str) -> Optional[User]:
        """
        根据用户名获取用户（精确匹配）

        Args:
            username: 用户名

        Returns:
            User 对象，不存在则返回 None
        """
        statement = select(User).where(User.username == username)
        return self.session.exec(statement).first()

    def get_by_id(self, user_id: int) -> Optional[User]:
        """
        根据 ID 获取用户

        Args:
            user_id: 用户 ID

        Returns:
            User 对象，不存在则返回 None
        """
        return self.session.get(User, user_id)

    def list_except(self, user_id: int) -> List[User]:
        """
        获取除指定用户之外的所有用户（按 ID 升序）

        Args:
            user_id: 需要排除的用户 ID（通常是当前登录用户）

        Returns:
            User 对象列表
        """
        statement = select(User).where(User.id != user_id).order_by(col(User.id))
        return list(self.session.exec(statement).all())

    def create(
        self,
        username: str,
        display_name: str,
        password_hash: str,
        bio: str = "",
        profile_picture: Optional[str] = None
    ) -> User:
        """
        创建新用户

        用户名唯一性由数据库唯一约束保证，而不是先查询再插入

        Args:
            username: 用户名（必须唯一）
            display_name: 显示名
            password_hash: 已计算好的密码哈希
            bio: 个人简介（可选）
            profile_picture: 头像相对路径（可选）

        Returns:
            创建的 User 对象

        Raises:
            DuplicateUsername: 用户名已存在
        """
        user = User(
            username=username,
            display_name=display_name,
            bio=bio or "",
            profile_picture=profile_picture,
            password_hash=password_hash
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            # 只有确认是用户名冲突才转换，其他约束错误照常抛出
            if self.get_by_username(username) is not None:
                logger.info("[UserRepository] Username '%s' already taken", username)
                raise DuplicateUsername("用户名已被使用")
            raise
        self.session.refresh(user)
        return user
