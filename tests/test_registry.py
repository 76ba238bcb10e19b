"""模块注册表：注册校验、依赖图与初始化顺序"""

import pytest

from modboot import ConfigurationError, ModuleDescriptor, Provider, forward_ref
from modboot.core.di import ModuleRegistry


class Repo:
    pass


class Service:
    def __init__(self, repo):
        self.repo = repo


class Controller:
    def __init__(self, service):
        self.service = service


def test_direct_import_must_be_registered_first():
    registry = ModuleRegistry()
    a = ModuleDescriptor("A")
    b = ModuleDescriptor("B", imports=[a])

    with pytest.raises(ConfigurationError) as exc_info:
        registry.register(b)

    assert exc_info.value.details == {'module': 'B', 'import': 'A'}


def test_lazy_import_is_not_evaluated_at_registration():
    registry = ModuleRegistry()
    evaluated = []

    def target():
        evaluated.append(True)
        return ModuleDescriptor("Later")

    registry.register(ModuleDescriptor("A", imports=[forward_ref(target)]))

    assert evaluated == []


def test_registering_same_descriptor_twice_is_idempotent():
    registry = ModuleRegistry()
    a = ModuleDescriptor("A")

    assert registry.register(a) is True
    assert registry.register(a) is False


def test_import_entries_must_be_modules():
    with pytest.raises(ConfigurationError):
        ModuleDescriptor("A", imports=["B"])


def test_locate_reports_owner():
    registry = ModuleRegistry()
    a = ModuleDescriptor("A", providers=[Repo], exports=[Repo])
    b = ModuleDescriptor("B", imports=[a])
    registry.register(a)
    registry.register(b)

    owner, provider = registry.locate(b, Repo)

    assert owner == "A"
    assert provider.token is Repo


def test_initialization_order_puts_dependencies_first():
    registry = ModuleRegistry()
    data = ModuleDescriptor("Data", providers=[Repo], exports=[Repo])
    feature = ModuleDescriptor(
        "Feature",
        imports=[data],
        providers=[Provider(Service, deps=[Repo])],
        controllers=[],
    )
    registry.register(data)
    registry.register(feature)

    order = registry.get_initialization_order()

    assert order.index(("Data", Repo)) < order.index(("Feature", Service))
    assert registry.get_dependencies(("Feature", Service)) == {("Data", Repo)}
    assert registry.get_dependents(("Data", Repo)) == {("Feature", Service)}


def test_controllers_are_graph_nodes():
    from modboot import ControllerDescriptor

    registry = ModuleRegistry()
    controller = ControllerDescriptor(Controller, deps=[Service])
    module = ModuleDescriptor(
        "Feature",
        providers=[Repo, Provider(Service, deps=[Repo])],
        controllers=[controller],
    )
    registry.register(module)

    order = registry.get_initialization_order()

    assert order[-1] == ("Feature", controller)


def test_lazy_deps_are_not_graph_edges():
    registry = ModuleRegistry()
    module = ModuleDescriptor(
        "A",
        providers=[
            Provider(Service, deps=[forward_ref(lambda: Controller)]),
            Provider(Controller, deps=[Service]),
        ],
    )
    registry.register(module)

    assert registry.detect_circular_dependencies() == []
    assert registry.get_dependencies(("A", Service)) == set()


def test_global_modules_are_tracked():
    registry = ModuleRegistry()
    registry.register(ModuleDescriptor("Config", is_global=True))
    registry.register(ModuleDescriptor("Feature"))

    assert registry.global_modules == ["Config"]


def test_clear_empties_registry():
    registry = ModuleRegistry()
    registry.register(ModuleDescriptor("A"))

    registry.clear()

    assert not registry.has_module("A")
