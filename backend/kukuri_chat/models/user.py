"""
用户模型 - users 表
"""

from typing import Optional, Dict, Any

from sqlmodel import Field

from .base import CreatedAtModel


class User(CreatedAtModel, table=True):
    """
    用户表
    password_hash 只在凭据层内部使用，永远不出现在 API 响应中
    """
    __tablename__ = "users"

    # 主键，自增
    id: Optional[int] = Field(default=None, primary_key=True)

    # 唯一约束由数据库保证，重复插入会抛出 IntegrityError
    username: str = Field(unique=True, index=True, nullable=False)

    display_name: str = Field(nullable=False)

    bio: str = Field(default="", nullable=False)

    # 头像的相对资源路径，如 /uploads/profile_picture-xxx.png
    profile_picture: Optional[str] = Field(default=None)

    password_hash: str = Field(nullable=False)

    def to_public(self) -> Dict[str, Any]:
        """对外暴露的用户字段（不含密码哈希）"""
        return {
            "id": self.id,
            "username": self.username,
            "displayName": self.display_name,
            "bio": self.bio,
            "profilePicture": self.profile_picture,
        }
