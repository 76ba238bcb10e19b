"""
Web 异常模块

服务层抛出的 HTTP 异常，由应用的异常处理器转换为 JSON 响应
"""

from typing import Any, Dict, Optional


class HTTPException(Exception):
    """HTTP 异常基类"""

    def __init__(
        self,
        status_code: int,
        message: str = "HTTP Error",
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class BadRequestError(HTTPException):
    """400 错误请求异常"""

    def __init__(self, message: str = "Bad Request", details: Optional[Dict[str, Any]] = None):
        super().__init__(400, message, details)


class NotFoundError(HTTPException):
    """404 未找到异常"""

    def __init__(self, message: str = "Not Found", details: Optional[Dict[str, Any]] = None):
        super().__init__(404, message, details)

