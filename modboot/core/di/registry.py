"""
模块注册表

以模块名称为稳定标识保存模块描述（模块图），负责：
- 导入 / 导出可见性查找（不构造实例）
- 构建提供者依赖图、检测非惰性循环、计算初始化顺序
"""

from collections import defaultdict, deque
from typing import Any, Dict, List, Optional, Set, Tuple

from loguru import logger as loguru_logger

from ...exceptions import ConfigurationError, UnresolvedDependencyError
from .lazy import LazyRef
from .module import ModuleDescriptor
from .providers import Provider, token_name

logger = loguru_logger.bind(name=__name__)

# (模块名称, 令牌)
Key = Tuple[str, Any]


def format_key(key: Key) -> str:
    """格式化缓存键"""
    module_name, token = key
    return f"{module_name}.{token_name(token)}"


class ModuleRegistry:
    """模块注册表"""

    def __init__(self):
        """初始化模块注册表"""
        self.modules: Dict[str, ModuleDescriptor] = {}  # module_name -> descriptor
        self.global_modules: List[str] = []
        self.dependencies: Dict[Key, Set[Key]] = {}  # key -> set of eager dependency keys
        self.dependents: Dict[Key, Set[Key]] = {}  # key -> set of dependent keys
        self._dependency_graph: Optional[Dict[Key, Set[Key]]] = None

    def register(self, descriptor: ModuleDescriptor) -> bool:
        """
        注册模块

        直接导入的模块必须已经注册；惰性导入在注册时不求值。

        Args:
            descriptor: 模块描述

        Returns:
            是否为新注册（同一描述重复注册时返回 False）

        Raises:
            ConfigurationError: 名称冲突或直接导入的模块未注册
        """
        if not isinstance(descriptor, ModuleDescriptor):
            raise ConfigurationError(f"只能注册 ModuleDescriptor，实际为: {descriptor!r}")

        existing = self.modules.get(descriptor.name)
        if existing is descriptor:
            return False
        if existing is not None:
            raise ConfigurationError(
                f"模块名称冲突: '{descriptor.name}' 已被另一个模块描述占用",
                details={'module': descriptor.name}
            )

        for entry in descriptor.imports:
            if isinstance(entry, LazyRef):
                continue
            if self.modules.get(entry.name) is not entry:
                raise ConfigurationError(
                    f"模块 '{descriptor.name}' 直接导入的模块 '{entry.name}' 尚未注册；"
                    f"循环导入请使用 forward_ref",
                    details={'module': descriptor.name, 'import': entry.name}
                )

        self.modules[descriptor.name] = descriptor
        if descriptor.is_global:
            self.global_modules.append(descriptor.name)
        self._dependency_graph = None
        return True

    def add_provider(self, module: Any, provider: Provider) -> str:
        """向已注册模块添加提供者，返回模块名称"""
        descriptor = self.get(module)
        descriptor.add_provider(provider)
        self._dependency_graph = None
        return descriptor.name

    def get(self, module: Any) -> ModuleDescriptor:
        """
        按名称、描述或惰性引用查找已注册的模块

        Raises:
            ConfigurationError: 模块未注册
        """
        if isinstance(module, LazyRef):
            module = module.evaluate()
        name = module.name if isinstance(module, ModuleDescriptor) else module
        descriptor = self.modules.get(name)
        if descriptor is None or (isinstance(module, ModuleDescriptor) and descriptor is not module):
            raise ConfigurationError(f"模块 '{name}' 未注册", details={'module': name})
        return descriptor

    def has_module(self, module: Any) -> bool:
        name = module.name if isinstance(module, ModuleDescriptor) else module
        return name in self.modules

    def imports_of(self, descriptor: ModuleDescriptor) -> List[ModuleDescriptor]:
        """返回模块的导入列表，惰性引用在此时求值"""
        return [self.get(entry) for entry in descriptor.imports]

    def exports_token(self, descriptor: ModuleDescriptor, token: Any, _visiting: Optional[Set[str]] = None) -> bool:
        """模块是否导出了令牌（包括整体再导出的模块）"""
        visiting = (_visiting or set()) | {descriptor.name}
        for entry in descriptor.exports:
            target = entry.evaluate() if isinstance(entry, LazyRef) else entry
            if isinstance(target, ModuleDescriptor):
                if target.name in visiting:
                    continue
                if not any(m is self.get(target) for m in self.imports_of(descriptor)):
                    raise ConfigurationError(
                        f"模块 '{descriptor.name}' 再导出了未导入的模块 '{target.name}'",
                        details={'module': descriptor.name, 'export': target.name}
                    )
                if self.exports_token(self.get(target), token, visiting):
                    return True
            elif target == token:
                return True
        return False

    def check_exports(self) -> None:
        """
        校验模块图中的导出

        令牌导出必须由模块自身提供或在其作用域内可见，模块再导出必须是该模块的导入。

        Raises:
            ConfigurationError: 导出了不可见的令牌或未导入的模块
        """
        for descriptor in list(self.modules.values()):
            for entry in descriptor.exports:
                target = entry.evaluate() if isinstance(entry, LazyRef) else entry
                if isinstance(target, ModuleDescriptor):
                    if not any(m is self.get(target) for m in self.imports_of(descriptor)):
                        raise ConfigurationError(
                            f"模块 '{descriptor.name}' 再导出了未导入的模块 '{target.name}'",
                            details={'module': descriptor.name, 'export': target.name}
                        )
                    continue
                try:
                    self.locate(descriptor, target)
                except UnresolvedDependencyError as e:
                    raise self._invalid_export(descriptor, target) from e

    @staticmethod
    def _invalid_export(descriptor: ModuleDescriptor, token: Any) -> ConfigurationError:
        return ConfigurationError(
            f"模块 '{descriptor.name}' 导出了既未提供也未导入的令牌 '{token_name(token)}'",
            details={'module': descriptor.name, 'export': token_name(token)}
        )

    def locate(self, module: Any, token: Any, _visiting: Optional[Set[str]] = None) -> Tuple[str, Provider]:
        """
        查找令牌在模块作用域内可见的提供者（不构造实例）

        查找顺序：自身注册 → 导入模块的导出 → 全局模块的导出。
        多个来源导出同一令牌且指向不同的注册时视为歧义。

        Returns:
            (拥有该注册的模块名称, 提供者)

        Raises:
            ConfigurationError: 导出存在歧义
            UnresolvedDependencyError: 令牌不可见
        """
        descriptor = self.get(module)
        if isinstance(token, LazyRef):
            token = token.evaluate()

        provider = descriptor.provider_for(token)
        if provider is not None:
            return descriptor.name, provider

        visiting = (_visiting or set()) | {descriptor.name}

        found = self._search(descriptor, token, self.imports_of(descriptor), visiting)
        if found is None:
            global_modules = [self.modules[name] for name in self.global_modules if name not in visiting]
            found = self._search(descriptor, token, global_modules, visiting)
        if found is None:
            raise UnresolvedDependencyError(token_name(token), descriptor.name)
        return found

    def _search(
        self,
        descriptor: ModuleDescriptor,
        token: Any,
        candidates: List[ModuleDescriptor],
        visiting: Set[str]
    ) -> Optional[Tuple[str, Provider]]:
        matches: Dict[Key, Tuple[str, Provider]] = {}
        sources: Dict[Key, List[str]] = defaultdict(list)

        for candidate in candidates:
            if candidate.name in visiting:
                continue
            if not self.exports_token(candidate, token):
                continue
            try:
                owner, provider = self.locate(candidate, token, visiting)
            except UnresolvedDependencyError as e:
                raise self._invalid_export(candidate, token) from e
            key = (owner, provider.token)
            matches.setdefault(key, (owner, provider))
            sources[key].append(candidate.name)

        if len(matches) > 1:
            exporters = [name for names in sources.values() for name in names]
            raise ConfigurationError(
                f"令牌 '{token_name(token)}' 存在歧义：模块 {', '.join(exporters)} 都导出了它"
                f"（请求模块 '{descriptor.name}'）",
                details={'module': descriptor.name, 'token': token_name(token), 'exporters': exporters}
            )
        if matches:
            return next(iter(matches.values()))
        return None

    def _edges(self, module_name: str, provider: Provider) -> Set[Key]:
        """非惰性依赖构成图的边；惰性依赖只校验可见性"""
        edges = set()
        for dep in provider.deps:
            if isinstance(dep, LazyRef):
                self.locate(module_name, dep.evaluate())
                continue
            owner, dep_provider = self.locate(module_name, dep)
            edges.add((owner, dep_provider.token))
        return edges

    def build_dependency_graph(self) -> Dict[Key, Set[Key]]:
        """
        构建依赖关系图

        节点为 (模块名称, 令牌)，控制器以其描述作为令牌参与。

        Returns:
            依赖关系图字典

        Raises:
            UnresolvedDependencyError: 声明的依赖不可见
            ConfigurationError: 导出歧义或模块未注册
        """
        if self._dependency_graph is not None:
            return self._dependency_graph

        self.dependencies = {}
        self.dependents = {}

        for descriptor in self.modules.values():
            entries = list(descriptor.providers.values())
            entries.extend(controller.provider for controller in descriptor.controllers)
            for provider in entries:
                key = (descriptor.name, provider.token)
                self.dependencies[key] = self._edges(descriptor.name, provider)
                self.dependents.setdefault(key, set())

        for key, deps in self.dependencies.items():
            for dep in deps:
                self.dependents.setdefault(dep, set()).add(key)

        self._dependency_graph = self.dependencies
        logger.debug(f"依赖图构建完成: {len(self._dependency_graph)} 个节点")
        return self._dependency_graph

    def detect_circular_dependencies(self) -> List[List[Key]]:
        """
        检测非惰性循环依赖

        Returns:
            循环依赖列表，每个元素是一个循环依赖链
        """
        graph = self.build_dependency_graph()
        cycles = []
        visited = set()
        rec_stack = set()
        path = []

        def dfs(node: Key) -> None:
            if node in rec_stack:
                # 找到循环
                cycle_start = path.index(node)
                cycles.append(path[cycle_start:] + [node])
                return

            if node in visited:
                return

            visited.add(node)
            rec_stack.add(node)
            path.append(node)

            for neighbor in graph.get(node, set()):
                dfs(neighbor)

            rec_stack.remove(node)
            path.pop()

        for node in graph:
            if node not in visited:
                dfs(node)

        return cycles

    def get_initialization_order(self) -> List[Key]:
        """
        获取初始化顺序（拓扑排序），依赖在前

        调用前应先确认 detect_circular_dependencies() 为空。
        """
        graph = self.build_dependency_graph()
        in_degree = {node: len(deps) for node, deps in graph.items()}

        queue = deque([node for node, degree in in_degree.items() if degree == 0])
        result = []

        while queue:
            node = queue.popleft()
            result.append(node)

            for dependent in self.dependents.get(node, set()):
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        return result

    def get_dependencies(self, key: Key) -> Set[Key]:
        """获取节点的非惰性依赖"""
        return self.build_dependency_graph().get(key, set())

    def get_dependents(self, key: Key) -> Set[Key]:
        """获取依赖此节点的节点"""
        self.build_dependency_graph()
        return self.dependents.get(key, set())

    def clear(self) -> None:
        """清空注册表"""
        self.modules.clear()
        self.global_modules.clear()
        self.dependencies.clear()
        self.dependents.clear()
        self._dependency_graph = None
