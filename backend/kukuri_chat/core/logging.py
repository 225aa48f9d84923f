"""日志初始化"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler = logging.StreamHandler(sys.stderr)
_handler.setFormatter(logging.Formatter(LOG_FORMAT))


def configure_logging(level: str = "INFO") -> None:
    """
    为 kukuri_chat 包安装一个输出到 stderr 的 handler

    重复调用不会叠加 handler

    Args:
        level: 日志级别名称，如 "INFO"、"DEBUG"
    """
    logger = logging.getLogger("kukuri_chat")
    logger.setLevel(level)

    if _handler not in logger.handlers:
        logger.addHandler(_handler)
