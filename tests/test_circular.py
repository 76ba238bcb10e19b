"""
循环依赖

- forward_ref 打破的循环可以解析，前向句柄与真实实例保持同一性
- 未打破的循环在引导时静态报错，在惰性解析时运行期报错
"""

import pytest

from modboot import (
    CircularResolutionError,
    ConfigurationError,
    ModuleDescriptor,
    Provider,
    forward_ref,
    unwrap,
)
from modboot.core.di import ForwardHandle, ProviderState
from modboot.core.di.lazy import is_resolved


class P1:
    def __init__(self, p2):
        self.p2 = p2

    def ping(self):
        return "p1"


class P2:
    def __init__(self, p1):
        self.p1 = p1

    def ping(self):
        return "p2"


class Eager:
    def __init__(self, other):
        # 构造期间访问前向句柄
        self.value = other.ping()


def lazy_cycle_module():
    return ModuleDescriptor(
        "Cycle",
        providers=[
            Provider(P1, deps=[forward_ref(lambda: P2, "P2")]),
            Provider(P2, deps=[P1]),
        ],
    )


def test_lazy_cycle_in_one_module(container):
    module = lazy_cycle_module()
    container.register_module(module)

    p1 = container.resolve(module, P1)
    p2 = container.resolve(module, P2)

    assert isinstance(p1.p2, ForwardHandle)
    assert is_resolved(p1.p2)
    assert unwrap(p1.p2) is p2
    assert unwrap(p1.p2.p1) is p1
    assert p1.p2.p1 == p1
    assert p1.p2 == p2
    assert p1.p2.ping() == "p2"


def test_lazy_cycle_resolved_from_the_other_end(container):
    module = lazy_cycle_module()
    container.register_module(module)

    p2 = container.resolve(module, P2)

    assert unwrap(p2.p1.p2) is p2
    assert container.state_of(module, P1) == ProviderState.CONSTRUCTED


def test_lazy_cycle_survives_bootstrap(container):
    module = lazy_cycle_module()
    container.register_module(module)

    container.bootstrap()

    p1 = container.resolve(module, P1)
    assert unwrap(p1.p2.p1) is p1


def test_lazy_cycle_across_modules(container):
    a = ModuleDescriptor(
        "A",
        imports=[forward_ref(lambda: b, "B")],
        providers=[Provider(P1, deps=[forward_ref(lambda: P2, "P2")])],
        exports=[P1],
    )
    b = ModuleDescriptor(
        "B",
        imports=[forward_ref(lambda: a, "A")],
        providers=[Provider(P2, deps=[forward_ref(lambda: P1, "P1")])],
        exports=[P2],
    )
    container.register_module(a)
    container.register_module(b)
    container.bootstrap()

    p1 = container.resolve(a, P1)
    p2 = container.resolve(b, P2)

    assert unwrap(p1.p2) is p2
    assert unwrap(p2.p1) is p1
    assert unwrap(p1.p2.p1) is p1
    assert p1.p2.p1 == p1


def eager_cycle_modules():
    a = ModuleDescriptor(
        "A",
        imports=[forward_ref(lambda: b, "B")],
        providers=[Provider(P1, deps=[P2])],
        exports=[P1],
    )
    b = ModuleDescriptor(
        "B",
        imports=[a],
        providers=[Provider(P2, deps=[P1])],
        exports=[P2],
    )
    return a, b


def test_eager_cycle_fails_at_bootstrap(container):
    a, b = eager_cycle_modules()
    container.register_module(a)
    container.register_module(b)

    with pytest.raises(CircularResolutionError) as exc_info:
        container.bootstrap()

    assert "A.P1" in exc_info.value.path
    assert "B.P2" in exc_info.value.path
    assert exc_info.value.path[0] == exc_info.value.path[-1]
    # 静态检查，工厂尚未执行
    assert container.state_of(a, P1) == ProviderState.REGISTERED
    assert not container.is_bootstrapped


def test_eager_cycle_fails_at_runtime(container):
    a, b = eager_cycle_modules()
    container.register_module(a)
    container.register_module(b)

    with pytest.raises(CircularResolutionError) as exc_info:
        container.resolve(a, P1)

    assert exc_info.value.path == ["A.P1", "B.P2", "A.P1"]
    assert container.state_of(a, P1) == ProviderState.FAILED
    assert container.state_of(b, P2) == ProviderState.FAILED
    with pytest.raises(CircularResolutionError):
        container.resolve(b, P2)


def test_self_dependency_is_a_cycle(container):
    module = ModuleDescriptor("A", providers=[Provider(P1, deps=[P1])])
    container.register_module(module)

    with pytest.raises(CircularResolutionError) as exc_info:
        container.bootstrap()

    assert exc_info.value.path == ["A.P1", "A.P1"]


def test_handle_used_during_construction_is_a_cycle(container):
    module = ModuleDescriptor(
        "A",
        providers=[
            Provider(Eager, deps=[forward_ref(lambda: P2, "P2")]),
            Provider(P2, deps=[Eager]),
        ],
    )
    container.register_module(module)

    with pytest.raises(CircularResolutionError):
        container.resolve(module, Eager)

    assert container.state_of(module, Eager) == ProviderState.FAILED


def test_forward_ref_to_unregistered_module(container):
    a = ModuleDescriptor(
        "A",
        imports=[forward_ref(lambda: ModuleDescriptor("Ghost"), "Ghost")],
        providers=[Provider(P1, deps=[forward_ref(lambda: P2, "P2")])],
    )
    container.register_module(a)

    with pytest.raises(ConfigurationError):
        container.bootstrap()


def test_users_and_reviews_services_reference_each_other(container):
    from app.app_module import AppModule
    from app.reviews import ReviewsModule, ReviewsService
    from app.users import UsersModule, UsersService

    container.register_module_tree(AppModule)
    container.bootstrap()

    users = container.resolve(UsersModule, UsersService)
    reviews = container.resolve(ReviewsModule, ReviewsService)

    assert unwrap(users.reviews_service) is reviews
    assert unwrap(reviews.users_service) is users
    assert unwrap(users.reviews_service.users_service) is users
    assert users.reviews_service.users_service == users
