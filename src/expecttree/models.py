from attrs import field, frozen

from expecttree.core.types import TestBuilder


def _to_tuple(path) -> tuple[str, ...]:
    return tuple(path)


@frozen
class TestModuleInfo:
    """Descriptor of one discovered test module.

    `path` runs leaf-to-root: the first segment is the module's own name and
    the last one is the name of the discovery root.
    """

    __test__ = False

    name: str
    path: tuple[str, ...] = field(converter=_to_tuple)
    callback: TestBuilder

    @property
    def display_path(self) -> str:
        return "/".join(reversed(self.path))
