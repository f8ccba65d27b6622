"""Type index backed by walking importable packages."""

from __future__ import annotations

import inspect
import pkgutil
from types import ModuleType
from typing import Iterator, Set

from ..errors import TypeResolutionError
from ..loader import TypeLoader, qualified_name
from ..logging import get_logger
from .base import TypeIndex


class ModuleIndex(TypeIndex):
    """Imports a namespace package and every submodule below it."""

    def __init__(self, loader: TypeLoader) -> None:
        self.loader = loader
        self.logger = get_logger("index.modules")

    def enumerate(self, namespace: str) -> Iterator[type]:
        try:
            root = self.loader.import_module(namespace)
        except TypeResolutionError as exc:
            self.logger.warning("Skipping namespace %s: %s", namespace, exc)
            return
        for module in self._walk(root):
            yield from self._classes_in(module)

    def _walk(self, module: ModuleType) -> Iterator[ModuleType]:
        yield module
        search_path = getattr(module, "__path__", None)
        if search_path is None:
            return
        children = sorted(info.name for info in pkgutil.iter_modules(search_path))
        for child in children:
            name = f"{module.__name__}.{child}"
            try:
                submodule = self.loader.import_module(name)
            except TypeResolutionError as exc:
                self.logger.warning("Skipping module %s: %s", name, exc)
                continue
            yield from self._walk(submodule)

    def _classes_in(self, module: ModuleType) -> Iterator[type]:
        seen: Set[str] = set()
        for _, member in inspect.getmembers(module, inspect.isclass):
            if member.__module__ != module.__name__:
                continue
            yield from self._class_tree(member, seen)

    def _class_tree(self, cls: type, seen: Set[str]) -> Iterator[type]:
        """Yield ``cls`` and the classes defined in its body, depth first."""
        fqn = qualified_name(cls)
        if fqn in seen:
            return
        seen.add(fqn)
        try:
            handle = self.loader.resolve(fqn)
        except TypeResolutionError as exc:
            self.logger.warning("Skipping type %s: %s", fqn, exc)
            return
        yield handle
        for name, attr in sorted(vars(handle).items()):
            if (
                inspect.isclass(attr)
                and attr.__module__ == handle.__module__
                and attr.__qualname__ == f"{handle.__qualname__}.{name}"
            ):
                yield from self._class_tree(attr, seen)
