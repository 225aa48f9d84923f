"""
UploadStorage 单元测试
"""

import io
import os
import re
from unittest.mock import patch

import pytest

from kukuri_chat.errors import ValidationError
from kukuri_chat.services.upload_storage import UploadStorage, PROFILE_PICTURE, MESSAGE_IMAGE


class TestUploadStorage:
    """测试上传存储"""

    def test_save_profile_picture(self, upload_storage):
        """测试头像保存在上传根目录"""
        url = upload_storage.save(io.BytesIO(b"png-bytes"), "me.png", PROFILE_PICTURE)

        assert re.fullmatch(r"/uploads/profile_picture-\d+-\d+\.png", url)
        with open(upload_storage.path_for(url), "rb") as f:
            assert f.read() == b"png-bytes"

    def test_save_message_image(self, upload_storage):
        """测试消息图片保存在 messages 子目录"""
        url = upload_storage.save(io.BytesIO(b"jpg"), "photo.JPG", MESSAGE_IMAGE)

        assert re.fullmatch(r"/uploads/messages/message-image-\d+-\d+\.JPG", url)
        path = upload_storage.path_for(url)
        assert os.path.dirname(path) == os.path.join(upload_storage.upload_dir, "messages")
        assert os.path.exists(path)

    def test_filename_ignores_client_directories(self):
        """测试只保留客户端文件名的扩展名"""
        name = UploadStorage.make_filename(MESSAGE_IMAGE, "../../etc/passwd.gif")

        assert "/" not in name
        assert name.endswith(".gif")

    def test_unbounded_by_default(self, upload_storage):
        """测试默认不限制文件大小"""
        payload = b"x" * (3 * 1024 * 1024)

        url = upload_storage.save(io.BytesIO(payload), "big.bin", MESSAGE_IMAGE)

        assert os.path.getsize(upload_storage.path_for(url)) == len(payload)

    def test_max_upload_bytes(self, test_settings):
        """测试配置大小上限后拒绝超限文件并清理"""
        storage = UploadStorage(test_settings.upload_dir, max_upload_bytes=4)
        storage.ensure_dirs()

        with pytest.raises(ValidationError):
            storage.save(io.BytesIO(b"12345"), "a.png", MESSAGE_IMAGE)

        assert os.listdir(os.path.join(test_settings.upload_dir, "messages")) == []

    def test_max_upload_bytes_allows_exact_size(self, test_settings):
        """测试恰好等于上限的文件"""
        storage = UploadStorage(test_settings.upload_dir, max_upload_bytes=4)

        url = storage.save(io.BytesIO(b"1234"), "a.png", MESSAGE_IMAGE)

        assert os.path.getsize(storage.path_for(url)) == 4

    def test_discard(self, upload_storage):
        """测试删除遗留文件"""
        url = upload_storage.save(io.BytesIO(b"x"), "a.png", PROFILE_PICTURE)

        upload_storage.discard(url)
        upload_storage.discard(url)  # 重复删除不报错
        upload_storage.discard(None)

        assert not os.path.exists(upload_storage.path_for(url))

    def test_unknown_kind(self, upload_storage):
        with pytest.raises(ValueError):
            upload_storage.save(io.BytesIO(b"x"), "a.png", "avatar")

    def test_name_collision_does_not_overwrite(self, upload_storage):
        """测试文件名冲突时报错且保留原文件"""
        with patch.object(UploadStorage, "make_filename", return_value="message-image-1-1.png"):
            url = upload_storage.save(io.BytesIO(b"original"), "a.png", MESSAGE_IMAGE)
            with pytest.raises(FileExistsError):
                upload_storage.save(io.BytesIO(b"intruder"), "b.png", MESSAGE_IMAGE)

        with open(upload_storage.path_for(url), "rb") as f:
            assert f.read() == b"original"
