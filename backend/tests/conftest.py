"""
Pytest 测试配置
提供测试数据库、Repository/Service 实例和 FastAPI TestClient 等测试基础设施
"""

import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

# 添加 backend 目录到 sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from kukuri_chat.core.config import Settings
from kukuri_chat.db.init_db import get_engine, create_tables
from kukuri_chat.main import create_app
from kukuri_chat.models import User
from kukuri_chat.repositories.message_repository import MessageRepository
from kukuri_chat.repositories.user_repository import UserRepository
from kukuri_chat.services.credential_service import CredentialService
from kukuri_chat.services.message_service import MessageService
from kukuri_chat.services.token_service import TokenService
from kukuri_chat.services.upload_storage import UploadStorage

# 测试中使用最低成本因子，加快 bcrypt
TEST_BCRYPT_ROUNDS = 4
TEST_JWT_SECRET = "test-secret"


# ==================== 配置 Fixtures ====================

@pytest.fixture(scope="function")
def test_settings(tmp_path) -> Settings:
    """
    测试配置：内存数据库 + 临时上传目录
    """
    return Settings(
        jwt_secret=TEST_JWT_SECRET,
        database_path=":memory:",
        upload_dir=str(tmp_path / "uploads"),
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        log_level="DEBUG",
    )


# ==================== 数据库 Fixtures ====================

@pytest.fixture(scope="function")
def test_db_engine(test_settings):
    """
    创建测试用的内存数据库引擎
    每个测试函数都会获得一个全新的数据库
    """
    engine = get_engine(test_settings)
    create_tables(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """
    创建测试用的数据库会话
    """
    with Session(test_db_engine) as session:
        yield session


# ==================== Repository / Service Fixtures ====================

@pytest.fixture(scope="function")
def user_repository(test_db_session: Session) -> UserRepository:
    return UserRepository(test_db_session)


@pytest.fixture(scope="function")
def message_repository(test_db_session: Session) -> MessageRepository:
    return MessageRepository(test_db_session)


@pytest.fixture(scope="function")
def credential_service(user_repository) -> CredentialService:
    return CredentialService(user_repository, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture(scope="function")
def message_service(message_repository, user_repository) -> MessageService:
    return MessageService(message_repository, user_repository)


@pytest.fixture(scope="function")
def token_service() -> TokenService:
    return TokenService(TEST_JWT_SECRET)


@pytest.fixture(scope="function")
def upload_storage(test_settings) -> UploadStorage:
    storage = UploadStorage(test_settings.upload_dir)
    storage.ensure_dirs()
    return storage


# ==================== 测试数据 Fixtures ====================

def _make_user(session: Session, username: str, display_name: str) -> User:
    user = User(
        username=username,
        display_name=display_name,
        bio="",
        password_hash="not-a-real-hash"
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(scope="function")
def alice(test_db_session: Session) -> User:
    return _make_user(test_db_session, "alice", "Alice")


@pytest.fixture(scope="function")
def bob(test_db_session: Session) -> User:
    return _make_user(test_db_session, "bob", "Bob")


@pytest.fixture(scope="function")
def carol(test_db_session: Session) -> User:
    return _make_user(test_db_session, "carol", "Carol")


# ==================== API Fixtures ====================

@pytest.fixture(scope="function")
def app(test_settings):
    """
    使用测试配置创建的 FastAPI 应用
    """
    application = create_app(test_settings)
    yield application
    application.state.engine.dispose()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def register_user(client):
    """
    通过 /register 注册用户，返回 (token, user_dict)
    """
    def _register(username: str, display_name: str = None, password: str = "secret123"):
        response = client.post("/register", data={
            "username": username,
            "displayName": display_name or username.title(),
            "password": password,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["user"]

    return _register


# ==================== Pytest 配置 ====================

def pytest_configure(config):
    """
    Pytest 初始化配置
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
