"""
ModBoot - 模块化依赖注入 Web 框架

- core/di/: 依赖注入容器（模块图、作用域单例、forward_ref）
- core/: 配置、日志、应用与服务器
- data/: 实体、仓储与数据库模块
- web/: 控制器路由挂载、请求 DTO、HTTP 异常
- utils/: 工具函数
"""

from .core.di import (
    Container,
    ControllerDescriptor,
    InjectionToken,
    ModuleDescriptor,
    Provider,
    forward_ref,
    unwrap,
)
from .exceptions import (
    CircularResolutionError,
    ConfigurationError,
    DuplicateEntryError,
    InitializationError,
    ModBootException,
    UnresolvedDependencyError,
)

__version__ = "0.1.0"

__all__ = [
    "Container",
    "ControllerDescriptor",
    "InjectionToken",
    "ModuleDescriptor",
    "Provider",
    "forward_ref",
    "unwrap",
    "ModBootException",
    "ConfigurationError",
    "UnresolvedDependencyError",
    "CircularResolutionError",
    "InitializationError",
    "DuplicateEntryError",
]
