"""
依赖注入容器

管理模块图、dependency_injector 提供者以及 (模块, 令牌) 单例缓存的生命周期
"""

import threading
from functools import partial
from typing import Any, Dict, Iterator, List, Optional, Tuple

from dependency_injector import providers
from loguru import logger as loguru_logger

from ...exceptions import (
    CircularResolutionError,
    ConfigurationError,
    InitializationError,
    ModBootException,
)
from .lazy import ForwardHandle, LazyRef, resolve_handle
from .module import ControllerDescriptor, ModuleDescriptor
from .providers import Provider, ProviderState, token_name
from .registry import Key, ModuleRegistry, format_key

logger = loguru_logger.bind(name=__name__)


class Container:
    """
    依赖注入容器

    每个 (拥有模块, 令牌) 在容器生命周期内最多构造一次。容器是显式传递的对象，
    测试中可以为每个用例创建新的容器。

    Example:
        container = Container()
        container.register_module_tree(AppModule)
        container.bootstrap()
        users = container.resolve(UsersModule, UsersService)
    """

    def __init__(self):
        """初始化依赖注入容器"""
        self.registry = ModuleRegistry()
        self._bindings: Dict[Key, providers.Provider] = {}
        self._instances: Dict[Key, Any] = {}
        self._states: Dict[Key, str] = {}
        self._errors: Dict[Key, ModBootException] = {}
        self._lock = threading.RLock()
        self._stack: List[Key] = []
        self._pending: List[ForwardHandle] = []
        self._draining = False
        self._bootstrapped = False

    # ------------------------------------------------------------------
    # 注册
    # ------------------------------------------------------------------

    def register_module(self, descriptor: ModuleDescriptor) -> None:
        """
        注册模块及其提供者、控制器

        Raises:
            ConfigurationError: 容器已引导、名称冲突或直接导入的模块未注册
        """
        with self._lock:
            self._ensure_mutable()
            if not self.registry.register(descriptor):
                return

            for provider in descriptor.providers.values():
                self._bind(descriptor.name, provider)
            for controller in descriptor.controllers:
                self._bind(descriptor.name, controller.provider)

            logger.debug(
                f"已注册模块: {descriptor.name} "
                f"(提供者: {[token_name(t) for t in descriptor.providers]}, "
                f"导入: {len(descriptor.imports)}, 全局: {descriptor.is_global})"
            )

    def register_module_tree(self, root: ModuleDescriptor) -> None:
        """
        后序注册根模块及其所有直接导入

        惰性导入不会被展开，其目标需要通过某条直接导入路径可达或单独注册。
        """
        visited = set()

        def visit(descriptor: ModuleDescriptor) -> None:
            if id(descriptor) in visited:
                return
            visited.add(id(descriptor))
            for entry in descriptor.imports:
                if not isinstance(entry, LazyRef):
                    visit(entry)
            self.register_module(descriptor)

        visit(root)

    def register_provider(self, module: Any, provider: Provider) -> None:
        """
        向已注册的模块添加提供者

        Raises:
            ConfigurationError: 同一模块内令牌重复注册
        """
        with self._lock:
            self._ensure_mutable()
            module_name = self.registry.add_provider(module, provider)
            self._bind(module_name, provider)
            logger.debug(f"已注册提供者: {format_key((module_name, provider.token))}")

    def _ensure_mutable(self) -> None:
        if self._bootstrapped:
            raise ConfigurationError("容器已完成引导，模块图不可再修改")

    def _bind(self, module_name: str, provider: Provider) -> None:
        key = (module_name, provider.token)
        dependencies = [
            providers.Callable(self._inject, module_name, dep) for dep in provider.deps
        ]
        self._bindings[key] = provider.create_provider(dependencies)
        self._states[key] = ProviderState.REGISTERED

    # ------------------------------------------------------------------
    # 解析
    # ------------------------------------------------------------------

    def resolve(self, module: Any, token: Any) -> Any:
        """
        返回模块作用域内可见的令牌单例

        Args:
            module: 请求方模块（描述或名称）
            token: 提供者令牌，可以是 forward_ref

        Raises:
            UnresolvedDependencyError: 令牌在该作用域不可见
            ConfigurationError: 导出歧义或模块未注册
            CircularResolutionError: 非惰性循环依赖
        """
        with self._lock:
            owner, provider = self.registry.locate(module, token)
            return self._get_or_create((owner, provider.token))

    def instantiate(self, module: Any, provider: Provider) -> Any:
        """
        构造模块自身注册的提供者，已构造时返回缓存实例

        Raises:
            ConfigurationError: 提供者不属于该模块
        """
        with self._lock:
            descriptor = self.registry.get(module)
            if descriptor.provider_for(provider.token) is not provider:
                raise ConfigurationError(
                    f"提供者 '{provider.name}' 未注册在模块 '{descriptor.name}' 中"
                )
            return self._get_or_create((descriptor.name, provider.token))

    def get_controller(self, module: Any, controller: Any) -> Any:
        """返回控制器实例，首次请求时构造"""
        with self._lock:
            descriptor = self.registry.get(module)
            for candidate in descriptor.controllers:
                if candidate is controller or candidate.controller_class is controller:
                    return self._get_or_create((descriptor.name, candidate))
            raise ConfigurationError(
                f"模块 '{descriptor.name}' 未声明控制器 '{token_name(controller)}'"
            )

    def controllers(self) -> Iterator[Tuple[str, ControllerDescriptor]]:
        """按注册顺序遍历 (模块名称, 控制器描述)"""
        for descriptor in list(self.registry.modules.values()):
            for controller in descriptor.controllers:
                yield descriptor.name, controller

    def _inject(self, module_name: str, dep: Any) -> Any:
        """构造期间为单个依赖参数取值"""
        if isinstance(dep, LazyRef):
            handle = ForwardHandle(
                partial(self._resolve_forward, module_name, dep),
                f"{module_name}.{dep.name}"
            )
            self._pending.append(handle)
            return handle
        return self.resolve(module_name, dep)

    def _resolve_forward(self, module_name: str, ref: LazyRef) -> Any:
        return self.resolve(module_name, ref.evaluate())

    def _get_or_create(self, key: Key) -> Any:
        state = self._states.get(key, ProviderState.UNREGISTERED)

        if state == ProviderState.CONSTRUCTED:
            return self._instances[key]
        if state == ProviderState.FAILED:
            raise self._errors[key]
        if state == ProviderState.UNREGISTERED:
            raise ConfigurationError(f"提供者 '{format_key(key)}' 未绑定到容器")
        if state == ProviderState.UNDER_CONSTRUCTION:
            # 持锁期间只有当前线程在构造，重入即为真实循环
            start = self._stack.index(key) if key in self._stack else len(self._stack)
            error = CircularResolutionError([format_key(k) for k in self._stack[start:] + [key]])
            self._mark_failed(key, error)
            raise error

        self._states[key] = ProviderState.UNDER_CONSTRUCTION
        self._stack.append(key)
        try:
            instance = self._bindings[key]()
        except ModBootException as e:
            self._mark_failed(key, e)
            raise
        except Exception as e:
            error = InitializationError(
                f"提供者 '{format_key(key)}' 构造失败: {e}",
                component=format_key(key)
            )
            self._mark_failed(key, error)
            raise error from e
        finally:
            self._stack.pop()
            if not self._stack and self._states[key] == ProviderState.FAILED:
                self._pending.clear()

        self._instances[key] = instance
        self._states[key] = ProviderState.CONSTRUCTED
        logger.debug(f"已构造实例: {format_key(key)}")

        if not self._stack:
            self._drain_pending()
        return instance

    def _mark_failed(self, key: Key, error: ModBootException) -> None:
        self._states[key] = ProviderState.FAILED
        self._errors.setdefault(key, error)

    def _drain_pending(self) -> None:
        """最外层构造完成后解析延迟的前向句柄"""
        if self._draining:
            return
        self._draining = True
        try:
            while self._pending:
                resolve_handle(self._pending.pop(0))
        except Exception:
            self._pending.clear()
            raise
        finally:
            self._draining = False

    # ------------------------------------------------------------------
    # 引导与销毁
    # ------------------------------------------------------------------

    def bootstrap(self) -> None:
        """
        引导容器（预演解析）

        先校验导出并静态检查非惰性循环，再按依赖顺序构造全部提供者和控制器，最后冻结模块图。

        Raises:
            CircularResolutionError: 存在未用 forward_ref 打破的循环
            UnresolvedDependencyError / ConfigurationError: 模块图缺陷
        """
        with self._lock:
            if self._bootstrapped:
                return

            self.registry.check_exports()
            cycles = self.registry.detect_circular_dependencies()
            if cycles:
                cycle = cycles[0]
                logger.error(f"依赖注入容器引导失败，存在循环依赖: {' -> '.join(map(format_key, cycle))}")
                raise CircularResolutionError([format_key(key) for key in cycle])

            for key in self.registry.get_initialization_order():
                self._get_or_create(key)
            self._drain_pending()

            self._bootstrapped = True
            logger.info(
                f"依赖注入容器引导完成: {len(self.registry.modules)} 个模块, "
                f"{len(self._instances)} 个实例"
            )

    @property
    def is_bootstrapped(self) -> bool:
        return self._bootstrapped

    def state_of(self, module: Any, token: Any) -> str:
        """返回 (模块, 令牌) 条目的生命周期状态"""
        name = module.name if isinstance(module, ModuleDescriptor) else module
        return self._states.get((name, token), ProviderState.UNREGISTERED)

    def close(self) -> None:
        """销毁所有实例并解除冻结，模块图保持不变"""
        with self._lock:
            for binding in self._bindings.values():
                if isinstance(binding, providers.BaseSingleton):
                    binding.reset()
            for key in self._bindings:
                self._states[key] = ProviderState.REGISTERED
            self._instances.clear()
            self._errors.clear()
            self._pending.clear()
            self._bootstrapped = False
            logger.debug("依赖注入容器已关闭")

    def describe(self) -> Dict[str, Any]:
        """返回模块图的可读描述"""

        def label(entry: Any) -> str:
            if isinstance(entry, LazyRef):
                target = entry.evaluate()
                return f"forward_ref({token_name(target)})"
            return token_name(entry)

        result = {}
        for name, descriptor in self.registry.modules.items():
            result[name] = {
                'global': descriptor.is_global,
                'imports': [label(entry) for entry in descriptor.imports],
                'exports': [label(entry) for entry in descriptor.exports],
                'providers': [
                    {
                        'token': provider.name,
                        'deps': [label(dep) for dep in provider.deps],
                        'state': self.state_of(name, token),
                    }
                    for token, provider in descriptor.providers.items()
                ],
                'controllers': [
                    {
                        'name': controller.name,
                        'base_path': controller.base_path,
                        'deps': [label(dep) for dep in controller.deps],
                        'state': self.state_of(name, controller),
                    }
                    for controller in descriptor.controllers
                ],
            }
        return result
