"""
应用配置模块

从系统环境变量（以及当前工作目录向上查找到的 .env，如果存在）构建 Settings 对象。
相对路径（DATABASE_PATH、UPLOAD_DIR）从当前工作目录解析。
Settings 在启动时创建一次，然后显式传入 create_app()，各组件在构造时拿到自己需要的配置，
不在模块级别读取全局状态。
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from kukuri_chat.errors import ConfigError

# 仅用于本地开发的签名密钥，生产环境必须通过 JWT_SECRET 覆盖
INSECURE_JWT_SECRET = "your-secret-key"


def _resolve_path(raw: str) -> str:
    """相对路径从当前工作目录解析"""
    if raw == ":memory:" or os.path.isabs(raw):
        return raw
    return str(Path.cwd() / raw)


def _get_int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"环境变量 {key} 必须是整数，当前值: {raw!r}")


@dataclass
class Settings:
    """
    运行时配置

    Attributes:
        port: HTTP 监听端口
        host: HTTP 监听地址
        environment: 运行环境（development / production）
        jwt_secret: JWT 签名密钥
        jwt_expires_hours: Token 有效期（小时）
        database_path: SQLite 数据库文件路径（绝对路径）
        upload_dir: 上传文件根目录（绝对路径）
        max_upload_bytes: 单个上传文件大小上限，None 表示不限制
        bcrypt_rounds: bcrypt 计算成本因子
        cors_origins: 允许的跨域来源
        log_level: 日志级别
    """
    port: int = 3000
    host: str = "0.0.0.0"
    environment: str = "development"
    jwt_secret: str = INSECURE_JWT_SECRET
    jwt_expires_hours: int = 24
    database_path: str = field(default_factory=lambda: _resolve_path("kukuri_chat.db"))
    upload_dir: str = field(default_factory=lambda: _resolve_path("uploads"))
    max_upload_bytes: Optional[int] = None
    bcrypt_rounds: int = 10
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        if self.database_path == ":memory:":
            return "sqlite://"
        return f"sqlite:///{self.database_path}"

    @property
    def uses_insecure_secret(self) -> bool:
        return self.jwt_secret == INSECURE_JWT_SECRET

    @property
    def message_upload_dir(self) -> str:
        return os.path.join(self.upload_dir, "messages")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    从环境变量构建 Settings

    Args:
        env: 环境变量映射（可选，默认读取 os.environ 并先加载 .env）

    Returns:
        Settings 对象

    Raises:
        ConfigError: 环境变量取值非法，或生产环境缺少 JWT_SECRET
    """
    if env is None:
        load_dotenv(find_dotenv(usecwd=True))
        env = os.environ

    environment = env.get("APP_ENV", "development").strip().lower()
    jwt_secret = env.get("JWT_SECRET") or INSECURE_JWT_SECRET
    if environment == "production" and jwt_secret == INSECURE_JWT_SECRET:
        raise ConfigError("生产环境必须设置 JWT_SECRET")

    bcrypt_rounds = _get_int(env, "BCRYPT_ROUNDS", 10)
    if not 4 <= bcrypt_rounds <= 31:
        raise ConfigError(f"BCRYPT_ROUNDS 必须在 4 到 31 之间，当前值: {bcrypt_rounds}")

    max_upload_bytes = _get_int(env, "MAX_UPLOAD_BYTES", None)
    if max_upload_bytes is not None and max_upload_bytes <= 0:
        raise ConfigError("MAX_UPLOAD_BYTES 必须是正整数")

    origins_env = env.get("CORS_ORIGINS", "*")
    if origins_env.strip() == "*":
        cors_origins = ["*"]
    else:
        cors_origins = [o.strip() for o in origins_env.split(",") if o.strip()]

    return Settings(
        port=_get_int(env, "PORT", 3000),
        host=env.get("HOST", "0.0.0.0"),
        environment=environment,
        jwt_secret=jwt_secret,
        jwt_expires_hours=_get_int(env, "JWT_EXPIRES_HOURS", 24),
        database_path=_resolve_path(env.get("DATABASE_PATH", "kukuri_chat.db")),
        upload_dir=_resolve_path(env.get("UPLOAD_DIR", "uploads")),
        max_upload_bytes=max_upload_bytes,
        bcrypt_rounds=bcrypt_rounds,
        cors_origins=cors_origins,
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )
