from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.package_builder import PackageBuilder


@pytest.fixture
def package_builder(tmp_path: Path) -> Iterator[PackageBuilder]:
    """Provide a classpath directory whose packages are unloaded after the test."""
    builder = PackageBuilder(tmp_path)
    yield builder
    builder.cleanup()


@pytest.fixture(autouse=True)
def _reset_schemagen_logger() -> Iterator[None]:
    """Undo CLI logging configuration so caplog keeps seeing schemagen records."""
    yield
    logger = logging.getLogger("schemagen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
