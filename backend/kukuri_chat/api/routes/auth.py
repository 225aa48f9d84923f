"""
注册与登录接口（无需 Token）
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from kukuri_chat.api.deps import get_credential_service, get_token_service, get_upload_storage
from kukuri_chat.errors import KukuriError, StoreError
from kukuri_chat.services.credential_service import CredentialService
from kukuri_chat.services.token_service import TokenService
from kukuri_chat.services.upload_storage import UploadStorage, PROFILE_PICTURE

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    username: Optional[str] = Form(None),
    displayName: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    profile_picture: Optional[UploadFile] = File(None),
    credentials: CredentialService = Depends(get_credential_service),
    tokens: TokenService = Depends(get_token_service),
    uploads: UploadStorage = Depends(get_upload_storage),
):
    logger.info("[register] Register request for username '%s'", username)

    picture_url = None
    if profile_picture is not None and profile_picture.filename:
        picture_url = uploads.save(profile_picture.file, profile_picture.filename, PROFILE_PICTURE)

    try:
        user = credentials.create(
            username=username,
            display_name=displayName,
            password=password,
            bio=bio,
            profile_picture=picture_url
        )
    except KukuriError:
        uploads.discard(picture_url)
        raise
    except SQLAlchemyError as e:
        uploads.discard(picture_url)
        logger.exception("[register] Store error")
        raise StoreError("注册时发生错误", details=str(e))

    return {
        "message": "注册成功",
        "token": tokens.issue(user.id),
        "user": user.to_public(),
    }


@router.post("/login")
def login(
    body: Optional[LoginRequest] = None,
    credentials: CredentialService = Depends(get_credential_service),
    tokens: TokenService = Depends(get_token_service),
):
    # 没有请求体与缺少字段一样按凭据错误处理
    if body is None:
        body = LoginRequest()
    logger.info("[login] Login attempt for '%s'", body.username)
    try:
        user = credentials.verify(body.username, body.password)
    except SQLAlchemyError:
        logger.exception("[login] Store error")
        raise StoreError("登录时发生错误")

    logger.info("[login] Login successful for user %s", user.id)
    return {
        "message": "登录成功",
        "token": tokens.issue(user.id),
        "user": user.to_public(),
    }
