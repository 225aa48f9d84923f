"""
配置加载单元测试
"""

import os

import pytest

from kukuri_chat.core.config import INSECURE_JWT_SECRET, load_settings
from kukuri_chat.errors import ConfigError


class TestLoadSettings:
    """测试 load_settings"""

    def test_defaults(self, tmp_path, monkeypatch):
        """测试默认值"""
        monkeypatch.chdir(tmp_path)
        settings = load_settings({})

        assert settings.port == 3000
        assert settings.jwt_secret == INSECURE_JWT_SECRET
        assert settings.uses_insecure_secret is True
        assert settings.jwt_expires_hours == 24
        assert settings.bcrypt_rounds == 10
        assert settings.max_upload_bytes is None
        assert settings.cors_origins == ["*"]
        assert settings.database_path == str(tmp_path.resolve() / "kukuri_chat.db")
        assert settings.message_upload_dir == os.path.join(str(tmp_path.resolve() / "uploads"), "messages")

    def test_overrides(self, tmp_path):
        """测试环境变量覆盖"""
        settings = load_settings({
            "PORT": "8080",
            "JWT_SECRET": "s3cret",
            "DATABASE_PATH": str(tmp_path / "x.db"),
            "MAX_UPLOAD_BYTES": "1024",
            "CORS_ORIGINS": "http://a.test, http://b.test",
            "LOG_LEVEL": "debug",
        })

        assert settings.port == 8080
        assert settings.jwt_secret == "s3cret"
        assert settings.uses_insecure_secret is False
        assert settings.database_url == f"sqlite:///{tmp_path / 'x.db'}"
        assert settings.max_upload_bytes == 1024
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.log_level == "DEBUG"

    def test_memory_database(self):
        """测试内存数据库路径不做解析"""
        settings = load_settings({"DATABASE_PATH": ":memory:"})

        assert settings.database_path == ":memory:"
        assert settings.database_url == "sqlite://"

    def test_production_requires_secret(self):
        """测试生产环境必须设置 JWT_SECRET"""
        with pytest.raises(ConfigError):
            load_settings({"APP_ENV": "production"})

        assert load_settings({"APP_ENV": "production", "JWT_SECRET": "x"}).environment == "production"

    @pytest.mark.parametrize("env", [
        {"PORT": "abc"},
        {"MAX_UPLOAD_BYTES": "0"},
        {"BCRYPT_ROUNDS": "3"},
    ])
    def test_invalid_values(self, env):
        """测试非法取值"""
        with pytest.raises(ConfigError):
            load_settings(env)

    def test_relative_paths_follow_working_directory(self, tmp_path, monkeypatch):
        """测试相对路径按当前工作目录解析，而不是安装目录"""
        first = tmp_path.resolve() / "first"
        second = tmp_path.resolve() / "second"
        first.mkdir()
        second.mkdir()

        monkeypatch.chdir(first)
        settings_first = load_settings({})
        monkeypatch.chdir(second)
        settings_second = load_settings({"DATABASE_PATH": "data/chat.db", "UPLOAD_DIR": "media"})

        assert settings_first.database_path == str(first / "kukuri_chat.db")
        assert settings_first.upload_dir == str(first / "uploads")
        assert settings_second.database_path == str(second / "data" / "chat.db")
        assert settings_second.upload_dir == str(second / "media")
        assert "site-packages" not in settings_first.database_path
