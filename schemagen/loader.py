"""Type loading through an explicit, extendable module search path.

A :class:`ResolutionContext` is a value describing the interpreter search path
(``sys.path``). A :class:`TypeLoader` layers resolved classpath entries in front
of a parent context and resolves fully-qualified class names to class objects.

Loading the same module through two different search paths yields two distinct
class objects that fail ``issubclass`` checks against each other. The loader
therefore memoizes every resolved name: once a name maps to a class, every later
request for it (scanner, base-type lookup, nested member inspection) returns that
exact object for the rest of the run.
"""

from __future__ import annotations

import importlib
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import ModuleType
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .errors import TypeResolutionError
from .logging import get_logger
from .models import ClasspathEntry


@dataclass(frozen=True)
class ResolutionContext:
    """An explicit module search path, optionally layered over a parent."""

    search_path: Tuple[str, ...]
    parent: Optional["ResolutionContext"] = field(default=None, compare=False, repr=False)

    @classmethod
    def current(cls) -> "ResolutionContext":
        """Snapshot the interpreter's ambient search path."""
        return cls(search_path=tuple(sys.path))

    def extend(self, entries: Sequence[ClasspathEntry]) -> "ResolutionContext":
        """Return a child context with ``entries`` placed in front of this one."""
        added = [str(entry.path) for entry in entries]
        seen = set(added)
        inherited = [item for item in self.search_path if item not in seen]
        return ResolutionContext(search_path=tuple(added + inherited), parent=self)

    @property
    def added_locations(self) -> Tuple[str, ...]:
        if self.parent is None:
            return ()
        inherited = set(self.parent.search_path)
        return tuple(item for item in self.search_path if item not in inherited)

    @contextmanager
    def install(self) -> Iterator["ResolutionContext"]:
        """Make this context ambient until the block exits.

        On every exit path the prior ``sys.path`` is restored in place and the
        modules imported from the added locations are dropped from
        ``sys.modules``, so a later context sees none of this one's classes.
        """
        prior = list(sys.path)
        known = set(sys.modules)
        sys.path[:] = list(self.search_path)
        importlib.invalidate_caches()
        try:
            yield self
        finally:
            sys.path[:] = prior
            added = self.added_locations
            for location in added:
                if location not in prior:
                    sys.path_importer_cache.pop(location, None)
            for name in _modules_loaded_from(added, known):
                del sys.modules[name]
            importlib.invalidate_caches()


class TypeLoader:
    """Resolves class names through an extended context, one handle per name."""

    def __init__(
        self,
        entries: Sequence[ClasspathEntry] = (),
        parent: ResolutionContext | None = None,
    ) -> None:
        self.entries: Tuple[ClasspathEntry, ...] = tuple(entries)
        self.parent = parent or ResolutionContext.current()
        self.context = self.parent.extend(self.entries)
        self.logger = get_logger("loader")
        self._types: Dict[str, type] = {}
        self._lock = threading.Lock()

    @contextmanager
    def activate(self) -> Iterator["TypeLoader"]:
        """Install the extended context for the duration of the block."""
        with self.context.install():
            yield self

    def resolve(self, fqn: str) -> type:
        """Return the class named ``fqn``; repeated calls return the same object."""
        with self._lock:
            cached = self._types.get(fqn)
        if cached is not None:
            self.logger.debug("Type already resolved: %s", fqn)
            return cached

        handle = self._load(fqn)
        with self._lock:
            # Concurrent first loads of one name all converge on the first stored handle.
            stored = self._types.setdefault(fqn, handle)
        if stored is not handle:
            self.logger.debug("Discarded concurrent load of %s", fqn)
        return stored

    def import_module(self, name: str) -> ModuleType:
        """Import a module through the extended context."""
        _check_name(name)
        try:
            return importlib.import_module(name)
        except Exception as exc:
            raise TypeResolutionError(name, f"{exc.__class__.__name__}: {exc}") from exc

    def cached_names(self) -> List[str]:
        with self._lock:
            return sorted(self._types)

    def _load(self, fqn: str) -> type:
        self.logger.debug("Loading type: %s", fqn)
        parts = _check_name(fqn)

        module: ModuleType | None = None
        attr_path: List[str] = []
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError as exc:
                # Only a missing prefix means "try a shorter one"; a missing
                # dependency inside an existing module is a real failure.
                if exc.name is not None and not _is_prefix(exc.name, module_name):
                    raise TypeResolutionError(fqn, f"{exc.__class__.__name__}: {exc}") from exc
                continue
            except Exception as exc:
                raise TypeResolutionError(fqn, f"{exc.__class__.__name__}: {exc}") from exc
            attr_path = parts[split:]
            break
        if module is None:
            raise TypeResolutionError(fqn, "no importable module found")

        target: object = module
        for attr in attr_path:
            try:
                target = getattr(target, attr)
            except AttributeError as exc:
                raise TypeResolutionError(
                    fqn, f"'{attr}' not found in {module.__name__}"
                ) from exc
        if not isinstance(target, type):
            raise TypeResolutionError(fqn, f"not a class ({type(target).__name__})")
        return target


def qualified_name(cls: type) -> str:
    """Return the fully-qualified name of a class."""
    return f"{cls.__module__}.{cls.__qualname__}"


def _modules_loaded_from(locations: Sequence[str], known: Set[str]) -> List[str]:
    """Names of modules imported since ``known`` whose files live under ``locations``."""
    if not locations:
        return []
    roots = tuple(location.rstrip(os.sep) + os.sep for location in locations)
    names: List[str] = []
    for name, module in list(sys.modules.items()):
        if name in known:
            continue
        spec = getattr(module, "__spec__", None)
        origins = [getattr(spec, "origin", None), getattr(module, "__file__", None)]
        origins.extend(getattr(spec, "submodule_search_locations", None) or ())
        if any(isinstance(origin, str) and origin.startswith(roots) for origin in origins):
            names.append(name)
    return names


def _is_prefix(prefix: str, name: str) -> bool:
    return name == prefix or name.startswith(f"{prefix}.")


def _check_name(name: str) -> List[str]:
    parts = name.split(".") if isinstance(name, str) else []
    if not parts or not all(part.isidentifier() for part in parts):
        raise TypeResolutionError(str(name), "not a dotted name")
    return parts


__all__ = ["ResolutionContext", "TypeLoader", "qualified_name"]
