"""Configuration loading for schemagen (.schemagen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigurationError

CONFIG_FILENAME = ".schemagen.yml"


@dataclass(frozen=True)
class GeneratorConfig:
    """Run configuration; immutable for the duration of a run.

    ``namespaces`` is ``None`` when never supplied (a configuration error) and
    an empty list when explicitly empty (nothing to do).
    """

    root: Path
    namespaces: Optional[List[str]] = None
    base_type: Optional[str] = None
    output_directory: Optional[str] = None
    classpath: List[str] = field(default_factory=list)
    workers: int = 1
    include_base: bool = False
    include_abstract: bool = False

    def resolved_output_directory(self) -> Path:
        if not self.output_directory:
            raise ConfigurationError("Need an output directory")
        path = Path(self.output_directory).expanduser()
        return path if path.is_absolute() else self.root / path


def load_config(config_path: Path) -> GeneratorConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GeneratorConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file.name} must contain a mapping at the root")

    namespaces = None
    if "namespaces" in data:
        namespaces = _as_namespaces(data["namespaces"], config_file.name)

    workers = _as_int(data.get("workers"))
    return GeneratorConfig(
        root=root,
        namespaces=namespaces,
        base_type=_as_str(data.get("base_type")),
        output_directory=_as_str(data.get("output_directory")),
        classpath=_as_str_list(data.get("classpath")),
        workers=workers if workers is not None else 1,
        include_base=_as_bool(data.get("include_base")) or False,
        include_abstract=_as_bool(data.get("include_abstract")) or False,
    )


def apply_overrides(config: GeneratorConfig, **overrides: Any) -> GeneratorConfig:
    """Return ``config`` with every non-``None`` override applied."""
    values = {key: value for key, value in overrides.items() if value is not None}
    if "namespaces" in values:
        values["namespaces"] = list(values["namespaces"])
    if "classpath" in values:
        values["classpath"] = list(config.classpath) + list(values["classpath"])
    return replace(config, **values)


def validate_config(config: GeneratorConfig) -> None:
    """Raise :class:`ConfigurationError` when required settings are missing."""
    if config.namespaces is None:
        raise ConfigurationError("Need a namespace to scan")
    for namespace in config.namespaces:
        if not _is_dotted_name(namespace):
            raise ConfigurationError(f"Invalid namespace: {namespace!r}")
    if not config.base_type:
        raise ConfigurationError("Need a base type name")
    if not _is_dotted_name(config.base_type) or "." not in config.base_type:
        raise ConfigurationError(f"Base type must be fully qualified: {config.base_type!r}")
    if not config.output_directory:
        raise ConfigurationError("Need an output directory")
    if config.workers < 1:
        raise ConfigurationError(f"workers must be at least 1, got {config.workers}")


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _is_dotted_name(value: str) -> bool:
    return bool(value) and all(part.isidentifier() for part in value.split("."))


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_namespaces(value: Any, source: str) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigurationError(
        f"{source}: namespaces must be a name or a list of names, got {value!r}"
    )


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "GeneratorConfig",
    "apply_overrides",
    "load_config",
    "validate_config",
]
