"""
核心模块
提供配置加载和日志初始化
"""

from .config import Settings, load_settings
from .logging import configure_logging

__all__ = [
    "Settings",
    "load_settings",
    "configure_logging"
]
