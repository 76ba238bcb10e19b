"""
惰性引用与前向句柄

- LazyRef / forward_ref: 延迟求值的模块或令牌引用，用于声明互相导入的模块
- ForwardHandle: 惰性依赖注入时的占位代理，首次访问成员时才解析真实实例
"""

from typing import Any, Callable, Optional

from ...exceptions import ConfigurationError


class LazyRef:
    """
    惰性引用

    包装一个无参可调用对象，只有在解析过程真正走到它时才求值。
    构建模块图时不会对其求值，因此可以安全地表达循环导入。

    Example:
        UsersModule = ModuleDescriptor(
            "UsersModule",
            imports=[forward_ref(lambda: ReviewsModule)],
        )
    """

    __slots__ = ('_factory', 'name')

    def __init__(self, factory: Callable[[], Any], name: Optional[str] = None):
        if not callable(factory):
            raise ConfigurationError(f"forward_ref 需要一个可调用对象，实际为: {factory!r}")
        self._factory = factory
        self.name = name or getattr(factory, '__name__', 'forward_ref')

    def evaluate(self) -> Any:
        """求值并返回被引用的模块或令牌"""
        return self._factory()

    def __repr__(self) -> str:
        return f"forward_ref({self.name})"


def forward_ref(factory: Callable[[], Any], name: Optional[str] = None) -> LazyRef:
    """创建惰性引用"""
    return LazyRef(factory, name)


class ForwardHandle:
    """
    前向句柄

    以惰性引用声明的依赖在构造时注入的是本句柄而不是真实实例。
    第一次访问句柄成员时通过 resolver 解析目标（此时目标通常已在单例缓存中），
    之后所有访问都转发给目标实例。

    双下划线名称不会触发解析，以免被框架的内省探测（如 __IS_PROVIDER__）提前求值。

    只转发属性读写、调用、== 和 hash。真值判断、len()、迭代和 isinstance()
    作用在句柄本身而不是目标上：句柄总为真，isinstance(handle, Target) 为 False。
    需要这些操作时先用 unwrap() 取出目标。
    """

    __slots__ = ('_resolver', '_label', '_target', '_resolved')

    def __init__(self, resolver: Callable[[], Any], label: str):
        object.__setattr__(self, '_resolver', resolver)
        object.__setattr__(self, '_label', label)
        object.__setattr__(self, '_target', None)
        object.__setattr__(self, '_resolved', False)

    def __getattr__(self, name: str) -> Any:
        if name.startswith('__') and name.endswith('__'):
            raise AttributeError(name)
        return getattr(resolve_handle(self), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(resolve_handle(self), name, value)

    def __call__(self, *args, **kwargs) -> Any:
        return resolve_handle(self)(*args, **kwargs)

    def __eq__(self, other: Any) -> bool:
        return resolve_handle(self) == unwrap(other)

    def __hash__(self) -> int:
        return hash(resolve_handle(self))

    def __repr__(self) -> str:
        if self._resolved:
            return f"<ForwardHandle {self._label} -> {self._target!r}>"
        return f"<ForwardHandle {self._label} (未解析)>"


def is_resolved(handle: ForwardHandle) -> bool:
    """句柄是否已解析"""
    return handle._resolved


def resolve_handle(handle: ForwardHandle) -> Any:
    """解析句柄目标，结果会被缓存在句柄上"""
    if not handle._resolved:
        target = handle._resolver()
        object.__setattr__(handle, '_target', target)
        object.__setattr__(handle, '_resolved', True)
    return handle._target


def unwrap(value: Any) -> Any:
    """若为前向句柄则返回其真实目标，否则原样返回"""
    while isinstance(value, ForwardHandle):
        value = resolve_handle(value)
    return value
