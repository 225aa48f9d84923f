"""
应用入口

create_app(settings) 组装 FastAPI 应用：数据库引擎、Token 服务和上传存储都在这里
根据显式传入的配置创建一次，之后只读。
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from kukuri_chat.api.routes import auth, messages, status, users
from kukuri_chat.core.config import Settings, load_settings
from kukuri_chat.core.logging import configure_logging
from kukuri_chat.db.init_db import init_db
from kukuri_chat.errors import KukuriError
from kukuri_chat.services.token_service import TokenService
from kukuri_chat.services.upload_storage import UploadStorage, URL_PREFIX

logger = logging.getLogger(__name__)


async def _handle_kukuri_error(request: Request, exc: KukuriError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "请求参数不正确", "details": details})


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[app] Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "发生错误", "message": str(exc)})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        settings: 应用配置（可选，默认从环境变量加载）

    Returns:
        FastAPI 实例
    """
    if settings is None:
        settings = load_settings()

    configure_logging(settings.log_level)
    if settings.uses_insecure_secret:
        logger.warning("[app] JWT_SECRET is not set; using the insecure development fallback")

    uploads = UploadStorage(settings.upload_dir, settings.max_upload_bytes)
    uploads.ensure_dirs()

    app = FastAPI(title="Kukuri Chat API")
    app.state.settings = settings
    app.state.engine = init_db(settings)
    app.state.token_service = TokenService(settings.jwt_secret, settings.jwt_expires_hours)
    app.state.uploads = uploads

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(KukuriError, _handle_kukuri_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)

    app.include_router(status.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(messages.router)

    # /uploads/<头像> 与 /uploads/messages/<图片>
    app.mount(URL_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")

    logger.info(
        "[app] Ready: db=%s uploads=%s max_upload_bytes=%s",
        settings.database_path, settings.upload_dir, settings.max_upload_bytes
    )
    return app


def run() -> None:
    """命令行入口：按 HOST/PORT 启动 uvicorn"""
    settings = load_settings()
    app = create_app(settings)
    logger.info("[app] Server running on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
