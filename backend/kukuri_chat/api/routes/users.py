"""
用户列表接口
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from kukuri_chat.api.deps import get_current_user_id, get_user_repository
from kukuri_chat.errors import StoreError
from kukuri_chat.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


@router.get("/users")
def list_users(
    current_user_id: int = Depends(get_current_user_id),
    users: UserRepository = Depends(get_user_repository),
):
    """除当前用户以外的所有用户"""
    try:
        others = users.list_except(current_user_id)
    except SQLAlchemyError:
        logger.exception("[users] Store error")
        raise StoreError("获取用户列表时发生错误")
    return [user.to_public() for user in others]
