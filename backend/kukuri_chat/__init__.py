"""
kukuri-chat 后端
用户注册/登录 + 一对一私信（文本与图片）
"""

__version__ = "0.1.0"
