"""Persistence of schema documents into the output directory."""

from __future__ import annotations

import json
from pathlib import Path

from .errors import OutputError
from .logging import get_logger
from .models import OutputFile, SchemaDocument

_SUFFIX = "-schema.json"


class OutputWriter:
    """Writes one ``<fqn>-schema.json`` file per generated document."""

    def __init__(self, output_directory: Path) -> None:
        self.output_directory = Path(output_directory)
        self.logger = get_logger("writer")
        self._prepared = False

    def prepare(self) -> Path:
        """Create the output directory (recursively) if it does not exist yet."""
        if self._prepared:
            return self.output_directory
        if not self.output_directory.is_dir():
            try:
                self.output_directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise OutputError(
                    f"Cannot create output directory {self.output_directory}: {exc}"
                ) from exc
            self.logger.debug("Created output directory: %s", self.output_directory.resolve())
        self._prepared = True
        return self.output_directory

    def path_for(self, fqn: str) -> Path:
        return self.output_directory / f"{fqn}{_SUFFIX}"

    def write(self, fqn: str, document: SchemaDocument) -> OutputFile:
        """Serialize ``document`` and overwrite any previous file for ``fqn``."""
        target = self.path_for(fqn)
        text = json.dumps(document.to_dict(), indent=2, ensure_ascii=False, default=str)
        content = (text + "\n").encode("utf-8")
        try:
            target.write_bytes(content)
        except OSError as exc:
            raise OutputError(f"Cannot write {target}: {exc}") from exc
        self.logger.info("Written: %s", target.name)
        return OutputFile(path=target, content=content)


__all__ = ["OutputWriter"]
