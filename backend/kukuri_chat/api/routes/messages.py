"""
私信接口

- GET  /messages/{user_id}：当前用户与 user_id 之间的会话，最新在前
- POST /messages：发送文本消息（JSON）
- POST /messages/image：发送图片消息（multipart）
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from kukuri_chat.api.deps import get_current_user_id, get_message_service, get_upload_storage
from kukuri_chat.errors import KukuriError, StoreError, ValidationError
from kukuri_chat.services.message_service import MessageService
from kukuri_chat.services.upload_storage import UploadStorage, MESSAGE_IMAGE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages", tags=["Messages"])


class SendMessageRequest(BaseModel):
    receiverId: Optional[int] = None
    content: Optional[str] = None


@router.get("/{user_id}")
def get_conversation(
    user_id: int,
    current_user_id: int = Depends(get_current_user_id),
    messages: MessageService = Depends(get_message_service),
):
    logger.info("[messages] Conversation between %s and %s", current_user_id, user_id)
    try:
        history = messages.conversation(current_user_id, user_id)
    except SQLAlchemyError:
        logger.exception("[messages] Store error")
        raise StoreError("获取消息时发生错误")
    return [m.model_dump(mode="json") for m in history]


@router.post("", status_code=status.HTTP_201_CREATED)
def send_text_message(
    body: SendMessageRequest,
    current_user_id: int = Depends(get_current_user_id),
    messages: MessageService = Depends(get_message_service),
):
    if not body.content or not body.receiverId:
        raise ValidationError("请指定接收者和消息内容")

    try:
        message = messages.send(current_user_id, body.receiverId, content=body.content)
    except SQLAlchemyError:
        logger.exception("[messages] Store error")
        raise StoreError("发送消息时发生错误")
    return message.model_dump(mode="json")


@router.post("/image", status_code=status.HTTP_201_CREATED)
def send_image_message(
    receiverId: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user_id: int = Depends(get_current_user_id),
    messages: MessageService = Depends(get_message_service),
    uploads: UploadStorage = Depends(get_upload_storage),
):
    if image is None or not image.filename or not receiverId:
        raise ValidationError("请指定接收者和图片")

    image_url = uploads.save(image.file, image.filename, MESSAGE_IMAGE)
    try:
        message = messages.send(current_user_id, receiverId, image_url=image_url)
    except KukuriError:
        uploads.discard(image_url)
        raise
    except SQLAlchemyError:
        uploads.discard(image_url)
        logger.exception("[messages] Store error")
        raise StoreError("发送图片时发生错误")
    return message.model_dump(mode="json")
