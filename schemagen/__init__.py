"""Generate JSON schema files for the subclasses of a base type."""

from __future__ import annotations

from .classpath import ClasspathResolver
from .config import GeneratorConfig, load_config
from .errors import (
    ClasspathError,
    ConfigurationError,
    GenerationError,
    OutputError,
    SchemaGenError,
    TypeResolutionError,
)
from .generator import SchemaGenerator
from .loader import ResolutionContext, TypeLoader
from .models import RunReport, RunState, SchemaDocument
from .orchestrator import Orchestrator
from .type_scanner import TypeScanner
from .writer import OutputWriter

__version__ = "1.0.0"

__all__ = [
    "ClasspathError",
    "ClasspathResolver",
    "ConfigurationError",
    "GenerationError",
    "GeneratorConfig",
    "Orchestrator",
    "OutputError",
    "OutputWriter",
    "ResolutionContext",
    "RunReport",
    "RunState",
    "SchemaDocument",
    "SchemaGenError",
    "SchemaGenerator",
    "TypeLoader",
    "TypeResolutionError",
    "TypeScanner",
    "load_config",
]
