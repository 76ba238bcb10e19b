"""
ModBoot 异常模块

提供框架及依赖注入容器相关的异常类
"""

from typing import Any, Dict, List, Optional


class ModBootException(Exception):
    """ModBoot 框架异常基类"""

    def __init__(
        self,
        message: str = "ModBoot 框架错误",
        code: str = "MODBOOT_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ModBootException):
    """
    配置错误异常

    模块图存在静态缺陷时抛出：导入的模块未注册、导出有歧义、
    同一模块内重复注册提供者等。应用不应在此状态下启动。
    """

    def __init__(
        self,
        message: str = "配置错误",
        config_key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.config_key = config_key
        super().__init__(message, "CONFIGURATION_ERROR", details)


class UnresolvedDependencyError(ModBootException):
    """依赖无法解析异常：请求的令牌在当前模块作用域内不可见"""

    def __init__(
        self,
        token: str,
        module: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.token = token
        self.module = module
        super().__init__(
            message or f"无法解析依赖 '{token}'：在模块 '{module}' 的作用域内未找到可见的提供者",
            "UNRESOLVED_DEPENDENCY",
            details
        )


class CircularResolutionError(ModBootException):
    """循环依赖异常：未通过惰性引用打破的真实循环"""

    def __init__(
        self,
        path: List[str],
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.path = list(path)
        super().__init__(
            message or f"检测到循环依赖: {' -> '.join(self.path)}。请使用 forward_ref 打破循环",
            "CIRCULAR_RESOLUTION",
            details
        )


class InitializationError(ModBootException):
    """初始化错误异常"""

    def __init__(
        self,
        message: str = "初始化失败",
        component: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.component = component
        super().__init__(message, "INITIALIZATION_ERROR", details)


class DuplicateEntryError(ModBootException):
    """唯一字段冲突异常"""

    def __init__(
        self,
        table: str,
        field: str,
        value: Any,
        details: Optional[Dict[str, Any]] = None
    ):
        self.table = table
        self.field = field
        self.value = value
        super().__init__(
            f"表 '{table}' 中字段 '{field}' 的值重复: {value!r}",
            "DUPLICATE_ENTRY",
            details
        )
