"""Error taxonomy shared across schemagen components."""

from __future__ import annotations


class SchemaGenError(RuntimeError):
    """Base class for all errors raised by schemagen."""


class ConfigurationError(SchemaGenError):
    """Raised when required run configuration is missing or invalid."""


class ClasspathError(SchemaGenError):
    """Raised for a single malformed classpath entry."""


class TypeResolutionError(SchemaGenError):
    """Raised when a fully-qualified type name cannot be resolved."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Cannot resolve '{name}': {reason}")
        self.name = name
        self.reason = reason


class GenerationError(SchemaGenError):
    """Raised when a type cannot be converted into a schema document."""

    def __init__(self, fqn: str, reason: str) -> None:
        super().__init__(f"Cannot generate schema for '{fqn}': {reason}")
        self.fqn = fqn
        self.reason = reason


class OutputError(SchemaGenError, OSError):
    """Raised when the output directory or a schema file cannot be written."""


__all__ = [
    "ClasspathError",
    "ConfigurationError",
    "GenerationError",
    "OutputError",
    "SchemaGenError",
    "TypeResolutionError",
]
