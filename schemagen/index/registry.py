"""Type index backed by an explicit list of class names."""

from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from ..errors import TypeResolutionError
from ..loader import TypeLoader
from ..logging import get_logger
from .base import TypeIndex


class RegistryIndex(TypeIndex):
    """Enumerates registered fully-qualified names that fall under a namespace."""

    def __init__(self, loader: TypeLoader, names: Iterable[str]) -> None:
        self.loader = loader
        self.names: Tuple[str, ...] = tuple(sorted(set(names)))
        self.logger = get_logger("index.registry")

    def enumerate(self, namespace: str) -> Iterator[type]:
        prefix = f"{namespace}."
        for name in self.names:
            if not name.startswith(prefix):
                continue
            try:
                yield self.loader.resolve(name)
            except TypeResolutionError as exc:
                self.logger.warning("Skipping registered type %s: %s", name, exc)
