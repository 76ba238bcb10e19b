"""命令行测试用的非惰性循环模块图"""

from modboot import ModuleDescriptor, Provider, forward_ref


class Left:
    def __init__(self, right):
        self.right = right


class Right:
    def __init__(self, left):
        self.left = left


LeftModule = ModuleDescriptor(
    "LeftModule",
    imports=[forward_ref(lambda: RightModule, "RightModule")],
    providers=[Provider(Left, deps=[Right])],
    exports=[Left],
)

RightModule = ModuleDescriptor(
    "RightModule",
    imports=[LeftModule],
    providers=[Provider(Right, deps=[Left])],
    exports=[Right],
)

Root = ModuleDescriptor("Root", imports=[LeftModule, RightModule])
