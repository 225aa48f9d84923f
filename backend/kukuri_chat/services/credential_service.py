"""
凭据服务

封装注册与登录的凭据逻辑：
1. 注册：bcrypt 加盐哈希（成本因子默认 10），原始密码从不落库
2. 登录：用户不存在与密码错误返回同一个 AuthFailure，避免泄露用户名是否存在
"""

import logging
from typing import Optional

import bcrypt

from kukuri_chat.errors import AuthFailure, ValidationError
from kukuri_chat.models.user import User
from kukuri_chat.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

# bcrypt 只使用密码的前 72 个字节
BCRYPT_MAX_PASSWORD_BYTES = 72

INVALID_CREDENTIALS_MESSAGE = "用户名或密码不正确"


class CredentialService:
    """
    凭据服务类

    使用示例：
        service = CredentialService(UserRepository(session), bcrypt_rounds=10)
        user = service.create("alice", "Alice", "secret")
        same = service.verify("alice", "secret")
    """

    def __init__(self, user_repository: UserRepository, bcrypt_rounds: int = 10):
        """
        Args:
            user_repository: 用户 Repository
            bcrypt_rounds: bcrypt 成本因子
        """
        self.users = user_repository
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def check_password(password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # 超长密码或损坏的哈希
            return False

    def find_by_username(self, username: str) -> Optional[User]:
        return self.users.get_by_username(username)

    def create(
        self,
        username: str,
        display_name: str,
        password: str,
        bio: Optional[str] = None,
        profile_picture: Optional[str] = None
    ) -> User:
        """
        注册新用户

        Args:
            username: 用户名
            display_name: 显示名
            password: 原始密码
            bio: 个人简介（可选，默认空字符串）
            profile_picture: 头像相对路径（可选）

        Returns:
            新建的 User

        Raises:
            ValidationError: 必填字段缺失或密码过长
            DuplicateUsername: 用户名已存在
        """
        if not username or not display_name or not password:
            raise ValidationError("请填写完整的注册信息")
        if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError(f"密码长度不能超过 {BCRYPT_MAX_PASSWORD_BYTES} 字节")

        password_hash = self.hash_password(password)
        user = self.users.create(
            username=username,
            display_name=display_name,
            password_hash=password_hash,
            bio=bio or "",
            profile_picture=profile_picture
        )
        logger.info("[CredentialService] Registered user '%s' (ID: %s)", user.username, user.id)
        return user

    def verify(self, username: Optional[str], password: Optional[str]) -> User:
        """
        校验用户名与密码

        Returns:
            匹配的 User

        Raises:
            AuthFailure: 用户不存在或密码错误（同一条消息）
        """
        if not username or not password:
            raise AuthFailure(INVALID_CREDENTIALS_MESSAGE)

        user = self.users.get_by_username(username)
        if user is None:
            logger.info("[CredentialService] Login failed: unknown username")
            raise AuthFailure(INVALID_CREDENTIALS_MESSAGE)

        if not self.check_password(password, user.password_hash):
            logger.info("[CredentialService] Login failed: wrong password for user %s", user.id)
            raise AuthFailure(INVALID_CREDENTIALS_MESSAGE)

        return user
