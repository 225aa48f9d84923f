"""
数据库初始化
负责创建引擎和表结构
"""

import logging

from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from kukuri_chat.core.config import Settings

# 注册表模型到 SQLModel.metadata
from kukuri_chat.models.user import User  # noqa: F401
from kukuri_chat.models.message import Message  # noqa: F401

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite 默认不检查外键
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(settings: Settings):
    """
    根据配置创建数据库引擎

    内存数据库使用 StaticPool，保证所有线程共享同一个连接

    Args:
        settings: 应用配置

    Returns:
        SQLAlchemy Engine
    """
    kwargs = {
        "echo": False,  # 设置为 True 可查看 SQL 语句
        "connect_args": {"check_same_thread": False},  # SQLite 特有配置
    }
    if settings.database_path == ":memory:":
        kwargs["poolclass"] = StaticPool

    engine = create_engine(settings.database_url, **kwargs)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_tables(engine) -> None:
    """
    创建所有数据库表
    已存在的表不会被修改
    """
    SQLModel.metadata.create_all(engine)
    logger.info("[init_db] Database tables ready at %s", engine.url)


def init_db(settings: Settings):
    """
    完整的数据库初始化流程
    1. 创建数据库引擎
    2. 创建所有表结构

    Returns:
        已就绪的 Engine
    """
    engine = get_engine(settings)
    create_tables(engine)
    return engine
