from . import auth, messages, status, users

__all__ = ["auth", "messages", "status", "users"]
