"""Tests for schemagen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from schemagen.config import (
    GeneratorConfig,
    apply_overrides,
    load_config,
    validate_config,
)
from schemagen.errors import ConfigurationError


def _valid(tmp_path: Path, **values: object) -> GeneratorConfig:
    settings: dict[str, object] = {
        "root": tmp_path,
        "namespaces": ["com.acme.model"],
        "base_type": "com.acme.model.Event",
        "output_directory": "schemas",
    }
    settings.update(values)
    return GeneratorConfig(**settings)  # type: ignore[arg-type]


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, GeneratorConfig)
    assert config.root == tmp_path.resolve()
    assert config.namespaces is None
    assert config.base_type is None
    assert config.output_directory is None
    assert config.classpath == []
    assert config.workers == 1
    assert config.include_base is False
    assert config.include_abstract is False


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".schemagen.yml").write_text(
        """
base_type: com.acme.model.Event
namespaces:
  - com.acme.model
  - com.acme.audit
output_directory: build/schemas
classpath: [src, lib/models.zip]
workers: 4
include_base: "yes"
include_abstract: true
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.base_type == "com.acme.model.Event"
    assert config.namespaces == ["com.acme.model", "com.acme.audit"]
    assert config.output_directory == "build/schemas"
    assert config.classpath == ["src", "lib/models.zip"]
    assert config.workers == 4
    assert config.include_base is True
    assert config.include_abstract is True
    assert config.resolved_output_directory() == tmp_path.resolve() / "build" / "schemas"


def test_load_config_keeps_explicitly_empty_namespaces(tmp_path: Path) -> None:
    (tmp_path / ".schemagen.yml").write_text("namespaces: []\n", encoding="utf-8")

    assert load_config(tmp_path).namespaces == []


def test_load_config_accepts_single_namespace_string(tmp_path: Path) -> None:
    (tmp_path / ".schemagen.yml").write_text("namespaces: com.acme.model\n", encoding="utf-8")

    assert load_config(tmp_path).namespaces == ["com.acme.model"]


@pytest.mark.parametrize("value", ["~", "5", "{model: com.acme}", "[com.acme.model, 7]"])
def test_load_config_rejects_malformed_namespaces(tmp_path: Path, value: str) -> None:
    (tmp_path / ".schemagen.yml").write_text(f"namespaces: {value}\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="namespaces must be"):
        load_config(tmp_path)


def test_load_config_accepts_explicit_file_path(tmp_path: Path) -> None:
    config_file = tmp_path / "schemas.yml"
    config_file.write_text("base_type: pkg.Base\n", encoding="utf-8")

    assert load_config(config_file).base_type == "pkg.Base"


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".schemagen.yml").write_text("namespaces: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".schemagen.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="mapping"):
        load_config(tmp_path)


def test_apply_overrides_ignores_unset_values_and_appends_classpath(tmp_path: Path) -> None:
    config = _valid(tmp_path, classpath=["src"])

    updated = apply_overrides(
        config,
        namespaces=("com.acme.audit",),
        base_type=None,
        classpath=["/opt/lib"],
        workers=3,
    )

    assert updated.namespaces == ["com.acme.audit"]
    assert updated.base_type == "com.acme.model.Event"
    assert updated.classpath == ["src", "/opt/lib"]
    assert updated.workers == 3
    assert config.workers == 1


def test_validate_config_accepts_empty_namespaces(tmp_path: Path) -> None:
    validate_config(_valid(tmp_path, namespaces=[]))


@pytest.mark.parametrize(
    ("values", "message"),
    [
        ({"namespaces": None}, "namespace"),
        ({"namespaces": ["com..acme"]}, "Invalid namespace"),
        ({"base_type": None}, "base type"),
        ({"base_type": "Event"}, "fully qualified"),
        ({"output_directory": None}, "output directory"),
        ({"workers": 0}, "workers"),
    ],
)
def test_validate_config_rejects_missing_settings(
    tmp_path: Path, values: dict[str, object], message: str
) -> None:
    with pytest.raises(ConfigurationError, match=message):
        validate_config(_valid(tmp_path, **values))
