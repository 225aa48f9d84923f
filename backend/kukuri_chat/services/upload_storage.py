"""
本地上传文件存储

头像保存在 <upload_dir>/ 下，消息图片保存在 <upload_dir>/messages/ 下，
数据库中只记录以 /uploads 开头的相对资源路径。
"""

import logging
import os
import random
import time
from typing import BinaryIO, Optional, Tuple

from kukuri_chat.errors import ValidationError

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"

PROFILE_PICTURE = "profile_picture"
MESSAGE_IMAGE = "message-image"

CHUNK_SIZE = 1024 * 1024


class UploadStorage:
    """
    上传文件存储

    max_upload_bytes 为 None 时不限制文件大小
    """

    def __init__(self, upload_dir: str, max_upload_bytes: Optional[int] = None):
        self.upload_dir = upload_dir
        self.max_upload_bytes = max_upload_bytes

    def ensure_dirs(self) -> None:
        os.makedirs(os.path.join(self.upload_dir, "messages"), exist_ok=True)

    def _target(self, kind: str) -> Tuple[str, str]:
        if kind == PROFILE_PICTURE:
            return self.upload_dir, URL_PREFIX
        if kind == MESSAGE_IMAGE:
            return os.path.join(self.upload_dir, "messages"), f"{URL_PREFIX}/messages"
        raise ValueError(f"unknown upload kind: {kind}")

    @staticmethod
    def make_filename(kind: str, original_filename: Optional[str]) -> str:
        """生成 <kind>-<毫秒时间戳>-<随机数><扩展名> 形式的文件名"""
        ext = os.path.splitext(os.path.basename(original_filename or ""))[1]
        unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}"
        return f"{kind}-{unique_suffix}{ext}"

    def save(self, fileobj: BinaryIO, original_filename: Optional[str], kind: str) -> str:
        """
        将上传内容写入磁盘

        Args:
            fileobj: 可读的二进制文件对象
            original_filename: 客户端提供的文件名（只取扩展名）
            kind: PROFILE_PICTURE 或 MESSAGE_IMAGE

        Returns:
            相对资源路径，如 /uploads/messages/message-image-1700000000000-42.png

        Raises:
            ValidationError: 配置了大小上限且文件超出
            FileExistsError: 生成的文件名与已有文件冲突
        """
        directory, url_base = self._target(kind)
        os.makedirs(directory, exist_ok=True)
        filename = self.make_filename(kind, original_filename)
        path = os.path.join(directory, filename)

        written = 0
        # 文件名冲突时直接报错，不覆盖已有文件
        with open(path, "xb") as out:
            while True:
                chunk = fileobj.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if self.max_upload_bytes is not None and written > self.max_upload_bytes:
                    break
                out.write(chunk)

        if self.max_upload_bytes is not None and written > self.max_upload_bytes:
            os.remove(path)
            raise ValidationError(f"文件大小不能超过 {self.max_upload_bytes} 字节")

        logger.info("[UploadStorage] Saved %s (%d bytes)", path, written)
        return f"{url_base}/{filename}"

    def path_for(self, url: str) -> str:
        """相对资源路径 -> 磁盘路径"""
        relative = url[len(URL_PREFIX):].lstrip("/")
        return os.path.join(self.upload_dir, *relative.split("/"))

    def discard(self, url: Optional[str]) -> None:
        """删除请求失败后遗留的上传文件"""
        if not url:
            return
        try:
            os.remove(self.path_for(url))
            logger.info("[UploadStorage] Removed orphan upload %s", url)
        except FileNotFoundError:
            pass
