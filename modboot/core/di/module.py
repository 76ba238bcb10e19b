"""
模块与控制器描述

模块是提供者、控制器的命名分组，通过 imports / exports 显式声明边界
"""

from typing import Any, Dict, Iterable, List, Optional

from ...exceptions import ConfigurationError
from .lazy import LazyRef
from .providers import Provider, token_name


class ControllerDescriptor:
    """
    控制器描述

    与提供者一样持有构造策略，另外携带路由绑定（由 @controller / @get 等装饰器声明）。
    容器只负责构造和缓存控制器实例，不关心 HTTP 方法和路径。
    """

    def __init__(self, controller_class: type, deps: Optional[Iterable[Any]] = None):
        if not isinstance(controller_class, type):
            raise ConfigurationError(f"控制器必须是类，实际为: {controller_class!r}")
        self.controller_class = controller_class
        self.name = controller_class.__name__
        self.provider = Provider(self, factory=controller_class, deps=deps)

    @property
    def deps(self) -> List[Any]:
        return self.provider.deps

    @property
    def base_path(self) -> str:
        config = getattr(self.controller_class, '__modboot_controller__', None) or {}
        return config.get('base_path', '')

    @property
    def route_kwargs(self) -> dict:
        config = getattr(self.controller_class, '__modboot_controller__', None) or {}
        return config.get('kwargs', {})

    def __repr__(self) -> str:
        return f"ControllerDescriptor({self.name})"


def _normalize_provider(entry: Any) -> Provider:
    if isinstance(entry, Provider):
        return entry
    if isinstance(entry, type):
        return Provider(entry)
    raise ConfigurationError(f"无效的提供者声明: {entry!r}，请使用 Provider(...) 或类")


def _normalize_controller(entry: Any) -> ControllerDescriptor:
    if isinstance(entry, ControllerDescriptor):
        return entry
    return ControllerDescriptor(entry)


class ModuleDescriptor:
    """
    模块描述

    Args:
        name: 模块名称，同时作为模块在容器中的稳定标识
        providers: 提供者列表（Provider 或无依赖的类）
        imports: 依赖的模块，直接引用或 forward_ref 惰性引用
        exports: 对导入方可见的令牌；也可以是本模块导入的模块（整体再导出）
        controllers: 控制器列表（ControllerDescriptor 或无依赖的类）
        is_global: 为 True 时导出对所有模块可见
    """

    def __init__(
        self,
        name: str,
        providers: Optional[Iterable[Any]] = None,
        imports: Optional[Iterable[Any]] = None,
        exports: Optional[Iterable[Any]] = None,
        controllers: Optional[Iterable[Any]] = None,
        is_global: bool = False
    ):
        if not name or not isinstance(name, str):
            raise ConfigurationError(f"模块名称必须是非空字符串，实际为: {name!r}")

        self.name = name
        self.is_global = is_global
        self.providers: Dict[Any, Provider] = {}
        for entry in providers or []:
            self.add_provider(_normalize_provider(entry))

        self.imports: List[Any] = []
        for entry in imports or []:
            if not isinstance(entry, (ModuleDescriptor, LazyRef)):
                raise ConfigurationError(
                    f"模块 '{name}' 的导入项必须是 ModuleDescriptor 或 forward_ref，实际为: {entry!r}"
                )
            self.imports.append(entry)

        self.exports: List[Any] = list(exports or [])
        self.controllers: List[ControllerDescriptor] = [
            _normalize_controller(entry) for entry in controllers or []
        ]

    def add_provider(self, provider: Provider) -> None:
        """
        添加提供者

        Raises:
            ConfigurationError: 同一模块内令牌重复注册
        """
        if provider.token in self.providers:
            raise ConfigurationError(
                f"模块 '{self.name}' 中重复注册提供者 '{provider.name}'",
                details={'module': self.name, 'token': provider.name}
            )
        self.providers[provider.token] = provider

    def provider_for(self, token: Any) -> Optional[Provider]:
        """返回本模块自身注册的提供者"""
        return self.providers.get(token)

    def __repr__(self) -> str:
        return (
            f"ModuleDescriptor({self.name}, providers={[token_name(t) for t in self.providers]}, "
            f"exports={[token_name(e) for e in self.exports]})"
        )
