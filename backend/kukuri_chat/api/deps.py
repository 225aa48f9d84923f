"""
FastAPI 依赖项

所有共享对象（配置、数据库引擎、Token 服务、上传存储）在 create_app() 中创建并挂到
app.state 上，这里按请求取出，每个请求使用独立的数据库会话。
"""

import logging
from typing import Generator, Optional

from fastapi import Depends, Header, Request
from sqlmodel import Session

from kukuri_chat.errors import MissingToken, InvalidToken
from kukuri_chat.repositories.message_repository import MessageRepository
from kukuri_chat.repositories.user_repository import UserRepository
from kukuri_chat.services.credential_service import CredentialService
from kukuri_chat.services.message_service import MessageService
from kukuri_chat.services.token_service import TokenService
from kukuri_chat.services.upload_storage import UploadStorage

logger = logging.getLogger(__name__)


def get_db_session(request: Request) -> Generator[Session, None, None]:
    with Session(request.app.state.engine) as session:
        yield session


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_upload_storage(request: Request) -> UploadStorage:
    return request.app.state.uploads


def get_credential_service(
    request: Request,
    session: Session = Depends(get_db_session)
) -> CredentialService:
    return CredentialService(
        UserRepository(session),
        bcrypt_rounds=request.app.state.settings.bcrypt_rounds
    )


def get_user_repository(session: Session = Depends(get_db_session)) -> UserRepository:
    return UserRepository(session)


def get_message_service(session: Session = Depends(get_db_session)) -> MessageService:
    return MessageService(MessageRepository(session), UserRepository(session))


def get_current_user_id(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service)
) -> int:
    """
    校验 'Authorization: Bearer <token>' 并返回用户 ID

    Raises:
        MissingToken: 未携带 Token（401）
        InvalidToken: Token 无效或已过期（403）
    """
    token = None
    if authorization:
        parts = authorization.split(" ", 1)
        if len(parts) == 2 and parts[0].lower() == "bearer":
            token = parts[1].strip()

    if not token:
        logger.info("[auth] No token provided")
        raise MissingToken("请先登录")

    user_id = tokens.verify(token)
    if user_id <= 0:
        raise InvalidToken("Token 无效")
    return user_id
