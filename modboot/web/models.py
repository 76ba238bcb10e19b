"""
Web 数据模型

提供请求 DTO 基类和统一的响应模型
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class RequestDto(BaseModel):
    """
    请求 DTO 基类

    - 未声明的字段直接拒绝（extra="forbid"），即白名单校验
    - pydantic 宽松模式负责类型转换，如 "12" -> 12.0
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class ErrorResponse(BaseModel):
    """错误响应模型"""

    success: bool = Field(default=False, description="是否成功")
    code: int = Field(description="HTTP 状态码")
    message: str = Field(description="错误消息")
    data: Optional[Dict[str, Any]] = Field(default=None, description="错误详情")


def error_response(code: int, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """创建错误响应内容"""
    return ErrorResponse(code=code, message=message, data=data).model_dump(exclude_none=True)
