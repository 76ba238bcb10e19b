"""
提供者注册记录

定义提供者令牌、构造策略以及条目生命周期状态
"""

from typing import Any, Callable, Iterable, List, Optional

from dependency_injector import providers

from ...exceptions import ConfigurationError
from .lazy import LazyRef

_MISSING = object()


class InjectionToken:
    """
    符号令牌

    用于没有对应类的可注入能力，例如配置对象或数据源。按对象身份区分。
    """

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"InjectionToken({self.name!r})"


def token_name(token: Any) -> str:
    """返回令牌的可读名称，用于日志和错误信息"""
    if isinstance(token, str):
        return token
    if isinstance(token, type):
        return token.__name__
    name = getattr(token, 'name', None)
    if isinstance(name, str):
        return name
    return repr(token)


class ProviderState:
    """单例缓存条目的生命周期状态"""

    UNREGISTERED = 'unregistered'
    REGISTERED = 'registered'
    UNDER_CONSTRUCTION = 'under_construction'
    CONSTRUCTED = 'constructed'
    FAILED = 'failed'


class Provider:
    """
    提供者注册记录

    将令牌与构造策略关联：工厂函数加有序依赖令牌，或者一个直接值。
    依赖列表中的元素可以是令牌，也可以是 forward_ref 包装的惰性令牌。

    Example:
        Provider(UsersService, deps=[repository_token(User), forward_ref(lambda: ReviewsService)])
        Provider.value_of(SETTINGS, settings)
        Provider.factory_of(DATA_SOURCE, make_data_source, inject=[SETTINGS])
    """

    def __init__(
        self,
        token: Any,
        factory: Optional[Callable[..., Any]] = None,
        deps: Optional[Iterable[Any]] = None,
        value: Any = _MISSING
    ):
        if token is None or isinstance(token, LazyRef):
            raise ConfigurationError(f"无效的提供者令牌: {token!r}")

        if factory is not None and value is not _MISSING:
            raise ConfigurationError(f"提供者 '{token_name(token)}' 不能同时指定 factory 和 value")

        if factory is None and value is _MISSING:
            if not isinstance(token, type):
                raise ConfigurationError(
                    f"提供者 '{token_name(token)}' 缺少构造策略：非类令牌必须提供 factory 或 value"
                )
            factory = token

        if factory is not None and not callable(factory):
            raise ConfigurationError(f"提供者 '{token_name(token)}' 的 factory 不可调用")

        self.token = token
        self.factory = factory
        self.value = value
        self.deps: List[Any] = list(deps or [])

        if self.is_value and self.deps:
            raise ConfigurationError(f"值提供者 '{token_name(token)}' 不能声明依赖")

    @classmethod
    def value_of(cls, token: Any, value: Any) -> 'Provider':
        """创建直接值提供者"""
        return cls(token, value=value)

    @classmethod
    def factory_of(cls, token: Any, factory: Callable[..., Any], inject: Optional[Iterable[Any]] = None) -> 'Provider':
        """创建工厂提供者，inject 为按顺序传给工厂的依赖令牌"""
        return cls(token, factory=factory, deps=inject)

    @property
    def is_value(self) -> bool:
        return self.value is not _MISSING

    @property
    def name(self) -> str:
        return token_name(self.token)

    def create_provider(self, dependencies: Optional[List[Any]] = None) -> providers.Provider:
        """
        创建 dependency_injector Provider

        Args:
            dependencies: 按声明顺序传给工厂的参数提供者

        Returns:
            值提供者返回 providers.Object，否则返回 providers.Singleton
        """
        if self.is_value:
            return providers.Object(self.value)
        return providers.Singleton(self.factory, *(dependencies or []))

    def __repr__(self) -> str:
        kind = 'value' if self.is_value else 'factory'
        return f"Provider({self.name}, {kind}, deps={[token_name(d) for d in self.deps]})"
