"""Base classes for type index plugins."""

from abc import ABC, abstractmethod
from typing import Iterable


class TypeIndex(ABC):
    """Contract for indexes that enumerate classes under a namespace root."""

    @abstractmethod
    def enumerate(self, namespace: str) -> Iterable[type]:
        """Yield classes defined under ``namespace``."""

    def is_subtype(self, candidate: type, base: type) -> bool:
        """Return True when ``candidate`` is a proper (transitive) subclass of ``base``."""
        if candidate is base:
            return False
        try:
            return issubclass(candidate, base)
        except TypeError:
            return False
