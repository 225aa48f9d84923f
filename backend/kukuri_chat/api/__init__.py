"""
HTTP 接口层
"""
