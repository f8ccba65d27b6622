"""Type index implementations used by the scanner."""

from __future__ import annotations

from .base import TypeIndex
from .modules import ModuleIndex
from .registry import RegistryIndex

__all__ = ["ModuleIndex", "RegistryIndex", "TypeIndex"]
