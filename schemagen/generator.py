"""Conversion of a discovered class into a structural schema document."""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import decimal
import enum
import fractions
import types
import typing
import uuid
from pathlib import PurePath
from typing import Any, Dict, List, Sequence, Tuple

from pydantic import BaseModel

from .errors import GenerationError, TypeResolutionError
from .loader import TypeLoader, qualified_name
from .logging import get_logger
from .models import DiscoveredType, PropertySchema, SchemaDocument

# Checked in order; datetime must precede date.
_STRING_FORMATS: Tuple[Tuple[type, str], ...] = (
    (datetime.datetime, "date-time"),
    (datetime.date, "date"),
    (datetime.time, "time"),
    (uuid.UUID, "uuid"),
)

_STRING_TYPES = (str, bytes, bytearray, PurePath, datetime.timedelta)
_NUMBER_TYPES = (float, decimal.Decimal, fractions.Fraction)
_NONE_TYPE = type(None)


class _MappingError(Exception):
    """Internal signal that a member's value type has no schema mapping."""


class SchemaGenerator:
    """Builds a :class:`SchemaDocument` from a class's declared members.

    Members are pydantic model fields (named by alias), dataclass fields, or
    annotated public class attributes, followed by public properties that carry
    a return annotation. Nested classes are described inline. No member is
    marked required.
    """

    def __init__(self, loader: TypeLoader) -> None:
        self.loader = loader
        self.logger = get_logger("generator")

    def generate(self, discovered: DiscoveredType) -> SchemaDocument:
        handle = discovered.handle
        try:
            properties = self._properties(handle, (handle,), "")
        except _MappingError as exc:
            raise GenerationError(discovered.fqn, str(exc)) from exc
        except (TypeError, ValueError, AttributeError, RecursionError) as exc:
            raise GenerationError(discovered.fqn, f"{exc.__class__.__name__}: {exc}") from exc
        self.logger.debug("Mapped %d member(s) of %s", len(properties), discovered.fqn)
        return SchemaDocument(title=handle.__qualname__, properties=properties)

    def _properties(
        self, cls: type, stack: Tuple[type, ...], prefix: str
    ) -> Dict[str, PropertySchema]:
        properties: Dict[str, PropertySchema] = {}
        for name, annotation in _members(cls):
            path = f"{prefix}{name}"
            properties[name] = self._describe(annotation, stack, path)
        return properties

    def _describe(self, annotation: Any, stack: Tuple[type, ...], path: str) -> PropertySchema:
        if annotation is None or annotation is _NONE_TYPE:
            return PropertySchema("null")
        if annotation is Any or annotation is object or annotation is typing.Final:
            return PropertySchema("object")
        if isinstance(annotation, typing.TypeVar):
            return self._describe_type_var(annotation, stack, path)

        supertype = getattr(annotation, "__supertype__", None)
        if supertype is not None:
            return self._describe(supertype, stack, path)

        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)
        if origin is typing.Annotated or origin is typing.Final:
            return self._describe(args[0], stack, path)
        if origin is typing.Literal:
            return PropertySchema(_literal_type(args, path), enum=tuple(args))
        if origin is typing.Union or origin is types.UnionType:
            return self._describe_union(args, stack, path)
        if origin is not None:
            return self._describe_generic(origin, args, stack, path)

        if not isinstance(annotation, type):
            raise _MappingError(f"member '{path}': unsupported annotation {annotation!r}")
        return self._describe_class(annotation, stack, path)

    def _describe_type_var(
        self, var: typing.TypeVar, stack: Tuple[type, ...], path: str
    ) -> PropertySchema:
        # Members inherited from a generic base keep the unsubstituted variable.
        if var.__constraints__:
            return self._describe_union(var.__constraints__, stack, path)
        bound = var.__bound__
        if bound is None or isinstance(bound, typing.ForwardRef):
            return PropertySchema("object")
        return self._describe(bound, stack, path)

    def _describe_union(
        self, args: Sequence[Any], stack: Tuple[type, ...], path: str
    ) -> PropertySchema:
        arms = [arg for arg in args if arg is not _NONE_TYPE]
        if not arms:
            return PropertySchema("null")
        schemas = [self._describe(arm, stack, path) for arm in arms]
        first = schemas[0]
        if all(schema == first for schema in schemas[1:]):
            return first
        kinds = {schema.schema_type for schema in schemas}
        if kinds <= {"integer", "number"}:
            return PropertySchema("number")
        raise _MappingError(
            f"member '{path}': union of {', '.join(sorted(kinds))} has no single type"
        )

    def _describe_generic(
        self, origin: Any, args: Sequence[Any], stack: Tuple[type, ...], path: str
    ) -> PropertySchema:
        if not isinstance(origin, type):
            raise _MappingError(f"member '{path}': unsupported generic {origin!r}")
        if issubclass(origin, collections.abc.Mapping):
            values = None
            if len(args) == 2:
                values = self._describe(args[1], stack, f"{path}[]")
            return PropertySchema("object", additional_properties=values)
        if _is_array(origin):
            return PropertySchema("array", items=self._item_schema(origin, args, stack, path))
        # Parameterised user generics are described by their origin class.
        return self._describe_class(origin, stack, path)

    def _item_schema(
        self, origin: type, args: Sequence[Any], stack: Tuple[type, ...], path: str
    ) -> PropertySchema | None:
        if not args:
            return None
        if issubclass(origin, tuple):
            if len(args) == 2 and args[1] is Ellipsis:
                return self._describe(args[0], stack, f"{path}[]")
            items = [self._describe(arg, stack, f"{path}[]") for arg in args]
            if all(item == items[0] for item in items[1:]):
                return items[0]
            return None
        return self._describe(args[0], stack, f"{path}[]")

    def _describe_class(self, cls: type, stack: Tuple[type, ...], path: str) -> PropertySchema:
        if cls is _NONE_TYPE:
            return PropertySchema("null")
        if issubclass(cls, enum.Enum):
            values = tuple(member.value for member in cls)
            try:
                return PropertySchema(_literal_type(values, path), enum=values)
            except _MappingError:
                return PropertySchema("string", enum=tuple(member.name for member in cls))
        if issubclass(cls, bool):
            return PropertySchema("boolean")
        if issubclass(cls, int):
            return PropertySchema("integer")
        if issubclass(cls, _NUMBER_TYPES):
            return PropertySchema("number")
        for string_type, fmt in _STRING_FORMATS:
            if issubclass(cls, string_type):
                return PropertySchema("string", format=fmt)
        if issubclass(cls, _STRING_TYPES):
            return PropertySchema("string")
        if issubclass(cls, collections.abc.Mapping):
            return PropertySchema("object")
        if _is_array(cls):
            return PropertySchema("array")

        if cls in stack:
            return PropertySchema("object")
        handle = self._resolve_nested(cls, path)
        nested = self._properties(handle, stack + (handle,), f"{path}.")
        return PropertySchema("object", properties=nested)

    def _resolve_nested(self, cls: type, path: str) -> type:
        if "<locals>" in cls.__qualname__:
            return cls
        fqn = qualified_name(cls)
        try:
            handle = self.loader.resolve(fqn)
        except TypeResolutionError as exc:
            raise _MappingError(f"member '{path}': {exc}") from exc
        if handle is not cls:
            raise _MappingError(
                f"member '{path}': {fqn} was loaded twice with different identities"
            )
        return handle


def _members(cls: type) -> List[Tuple[str, Any]]:
    try:
        if issubclass(cls, BaseModel):
            return [
                (field.alias or name, field.annotation)
                for name, field in cls.model_fields.items()
            ]
        hints = typing.get_type_hints(cls)
        if dataclasses.is_dataclass(cls):
            members = [
                (field.name, hints.get(field.name, field.type))
                for field in dataclasses.fields(cls)
                if not field.name.startswith("_")
            ]
        else:
            members = [
                (name, hint)
                for name, hint in hints.items()
                if not name.startswith("_") and not _is_class_var(hint)
            ]
        known = {name for name, _ in members}
        for name, prop in _properties_of(cls).items():
            if name in known:
                continue
            returns = typing.get_type_hints(prop.fget).get("return") if prop.fget else None
            if returns is not None:
                members.append((name, returns))
        return members
    except _MappingError:
        raise
    except Exception as exc:
        raise _MappingError(
            f"cannot introspect members of {qualified_name(cls)}: {exc.__class__.__name__}: {exc}"
        ) from exc


def _properties_of(cls: type) -> Dict[str, property]:
    found: Dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, attr in vars(klass).items():
            if name.startswith("_"):
                continue
            if isinstance(attr, property):
                found[name] = attr
            else:
                found.pop(name, None)
    return found


def _is_class_var(hint: Any) -> bool:
    return hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar


def _is_array(cls: type) -> bool:
    if issubclass(cls, (str, bytes, bytearray, collections.abc.Mapping)):
        return False
    if cls in (collections.abc.Iterable, collections.abc.Collection):
        return True
    return issubclass(cls, (collections.abc.Sequence, collections.abc.Set, collections.abc.Iterator))


def _literal_type(values: Sequence[Any], path: str) -> str:
    if not values:
        raise _MappingError(f"member '{path}': empty literal")
    if all(isinstance(value, bool) for value in values):
        return "boolean"
    if all(isinstance(value, int) and not isinstance(value, bool) for value in values):
        return "integer"
    if all(
        isinstance(value, (int, float)) and not isinstance(value, bool) for value in values
    ):
        return "number"
    if all(isinstance(value, str) for value in values):
        return "string"
    if all(value is None for value in values):
        return "null"
    raise _MappingError(f"member '{path}': literal values of mixed types")


__all__ = ["SchemaGenerator"]
