"""
服务层模块
提供业务逻辑的抽象层，封装凭据、Token、私信与上传流程
"""

from .credential_service import CredentialService
from .token_service import TokenService
from .message_service import MessageService
from .upload_storage import UploadStorage

__all__ = [
    "CredentialService",
    "TokenService",
    "MessageService",
    "UploadStorage"
]
