"""
业务异常定义

所有可预期的失败都以 KukuriError 子类抛出，由 API 层统一渲染为
{"error": message}（可选 "details"）的 JSON 响应。
"""

from typing import Any, Optional


class KukuriError(Exception):
    """业务异常基类"""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(KukuriError):
    """输入缺失或格式错误"""
    status_code = 400


class DuplicateUsername(KukuriError):
    """用户名已被占用"""
    status_code = 400


class AuthFailure(KukuriError):
    """用户名或密码错误（两种情况使用同一条消息）"""
    status_code = 401


class MissingToken(KukuriError):
    """请求未携带 Token"""
    status_code = 401


class InvalidToken(KukuriError):
    """Token 签名不匹配、格式错误或已过期"""
    status_code = 403


class StoreError(KukuriError):
    """持久化层失败"""
    status_code = 500


class ConfigError(Exception):
    """启动配置错误"""
