"""Discovery of subtypes of a base class under namespace roots."""

from __future__ import annotations

import inspect
from typing import Dict, List, Sequence

from .index import TypeIndex
from .loader import qualified_name
from .logging import get_logger
from .models import DiscoveredType


class TypeScanner:
    """Enumerates namespace roots through a type index and filters by base class.

    The base class itself is excluded by default, matching the usual
    "subtypes of" query; ``include_base`` opts into emitting it as well.
    Abstract classes are skipped unless ``include_abstract`` is set.
    """

    def __init__(
        self,
        index: TypeIndex,
        *,
        include_base: bool = False,
        include_abstract: bool = False,
    ) -> None:
        self.index = index
        self.include_base = include_base
        self.include_abstract = include_abstract
        self.logger = get_logger("scanner")

    def scan(self, namespaces: Sequence[str], base: type) -> List[DiscoveredType]:
        """Return discovered subtypes ordered by fully-qualified name."""
        found: Dict[str, DiscoveredType] = {}
        for namespace in namespaces:
            self.logger.debug("Scanning namespace %s", namespace)
            for candidate in self.index.enumerate(namespace):
                if not self._accepts(candidate, base):
                    continue
                fqn = qualified_name(candidate)
                found.setdefault(fqn, DiscoveredType(fqn=fqn, handle=candidate, base=base))
        self.logger.debug("Discovered %d subtype(s) of %s", len(found), qualified_name(base))
        return [found[fqn] for fqn in sorted(found)]

    def _accepts(self, candidate: type, base: type) -> bool:
        if candidate is base:
            return self.include_base
        if not self.index.is_subtype(candidate, base):
            return False
        if inspect.isabstract(candidate) and not self.include_abstract:
            self.logger.debug("Skipping abstract type %s", qualified_name(candidate))
            return False
        return True


__all__ = ["TypeScanner"]
