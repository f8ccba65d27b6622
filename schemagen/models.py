"""Core data models shared across schemagen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class ClasspathEntry:
    """A single importable location: a directory or a zip archive."""

    path: Path
    kind: str = "directory"

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class DiscoveredType:
    """A class found under a namespace root that is a subtype of the base."""

    fqn: str
    handle: type
    base: type


@dataclass(frozen=True)
class PropertySchema:
    """Structural description of one member's value type."""

    schema_type: str
    required: bool = False
    items: Optional["PropertySchema"] = None
    properties: Optional[Mapping[str, "PropertySchema"]] = None
    additional_properties: Optional["PropertySchema"] = None
    enum: Optional[Tuple[Any, ...]] = None
    format: Optional[str] = None

    def __post_init__(self) -> None:
        if self.properties is not None and not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.schema_type}
        if self.required:
            data["required"] = True
        if self.format is not None:
            data["format"] = self.format
        if self.enum is not None:
            data["enum"] = list(self.enum)
        if self.items is not None:
            data["items"] = self.items.to_dict()
        if self.properties is not None:
            data["properties"] = {name: prop.to_dict() for name, prop in self.properties.items()}
        if self.additional_properties is not None:
            data["additionalProperties"] = self.additional_properties.to_dict()
        return data


@dataclass(frozen=True)
class SchemaDocument:
    """Schema for one discovered type; immutable once generated."""

    title: Optional[str]
    properties: Mapping[str, PropertySchema] = field(default_factory=dict)
    schema_type: str = field(default="object", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.title is not None:
            data["title"] = self.title
        data["type"] = self.schema_type
        data["properties"] = {name: prop.to_dict() for name, prop in self.properties.items()}
        return data


@dataclass(frozen=True)
class OutputFile:
    """A schema file written for one discovered type."""

    path: Path
    content: bytes


@dataclass
class TypeOutcome:
    """Tagged per-type result: either an output file or a failure reason."""

    fqn: str
    output: Optional[OutputFile] = None
    error: Optional[str] = None
    stage: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.output is not None


class RunState(Enum):
    """Lifecycle states of a generation run."""

    UNVALIDATED = "unvalidated"
    VALIDATED = "validated"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class RunReport:
    """Aggregated result of a generation run."""

    state: RunState = RunState.UNVALIDATED
    message: Optional[str] = None
    outcomes: List[TypeOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.SUCCEEDED

    @property
    def written(self) -> List[OutputFile]:
        return [outcome.output for outcome in self.outcomes if outcome.ok and outcome.output]

    @property
    def failures(self) -> List[TypeOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def fail(self, message: str) -> "RunReport":
        self.state = RunState.FAILED
        self.message = message
        return self


__all__ = [
    "ClasspathEntry",
    "DiscoveredType",
    "OutputFile",
    "PropertySchema",
    "RunReport",
    "RunState",
    "SchemaDocument",
    "TypeOutcome",
]
