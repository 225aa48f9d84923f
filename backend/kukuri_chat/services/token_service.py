"""
会话 Token 签发与校验（HS256 JWT）
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from kukuri_chat.errors import InvalidToken

logger = logging.getLogger(__name__)

ALG = "HS256"


class TokenService:
    """签发携带 userId 声明的 JWT，并校验签名与有效期"""

    def __init__(
        self,
        secret: str,
        expires_hours: int = 24,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        self.secret = secret
        self.expires = timedelta(hours=expires_hours)
        self.clock = clock

    def issue(self, user_id: int) -> str:
        """
        签发 Token

        Args:
            user_id: 用户 ID

        Returns:
            JWT 字符串，有效期从签发时刻起算
        """
        issued_at = self.clock()
        claims = {
            "userId": user_id,
            "iat": issued_at,
            "exp": issued_at + self.expires,
        }
        return jwt.encode(claims, self.secret, algorithm=ALG)

    def verify(self, token: str) -> int:
        """
        校验 Token 并返回其中的用户 ID

        Raises:
            InvalidToken: 签名不匹配、格式错误、已过期或缺少 userId
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[ALG],
                options={"require": ["exp", "userId"]},
            )
        except jwt.PyJWTError as e:
            logger.info("[TokenService] Token rejected: %s", e.__class__.__name__)
            raise InvalidToken("Token 无效")

        user_id = claims["userId"]
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            logger.info("[TokenService] Token rejected: non-integer userId")
            raise InvalidToken("Token 无效")
        return user_id
