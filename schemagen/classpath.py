"""Resolution of raw classpath locations into importable entries."""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Iterable, List, Set, Tuple

from .errors import ClasspathError
from .logging import get_logger
from .models import ClasspathEntry


class ClasspathResolver:
    """Turns build-supplied locations into an ordered set of loadable entries."""

    def __init__(self) -> None:
        self.logger = get_logger("classpath")

    def resolve(
        self, raw_entries: Iterable[str | Path], *, root: Path | None = None
    ) -> Tuple[ClasspathEntry, ...]:
        """Return valid entries in input order; malformed ones are skipped."""
        entries: List[ClasspathEntry] = []
        seen: Set[Path] = set()
        for raw in raw_entries:
            try:
                entry = self._to_entry(raw, root)
            except ClasspathError as exc:
                self.logger.warning("Ignored classpath entry %r: %s", str(raw), exc)
                continue
            if entry.path in seen:
                continue
            seen.add(entry.path)
            entries.append(entry)
            self.logger.debug("Element: %s", entry.path)
        return tuple(entries)

    @staticmethod
    def _to_entry(raw: str | Path, root: Path | None) -> ClasspathEntry:
        text = str(raw)
        if not text.strip():
            raise ClasspathError("empty location")
        if "\x00" in text:
            raise ClasspathError("location contains a NUL byte")

        path = Path(text.strip()).expanduser()
        if not path.is_absolute():
            path = (root or Path.cwd()) / path
        try:
            path = path.resolve()
            is_dir = path.is_dir()
            exists = is_dir or path.exists()
            is_archive = exists and path.is_file() and zipfile.is_zipfile(path)
        except (OSError, RuntimeError) as exc:
            raise ClasspathError(f"{exc.__class__.__name__}: {exc}") from exc

        if is_dir:
            return ClasspathEntry(path=path, kind="directory")
        if not exists:
            raise ClasspathError("location does not exist")
        if is_archive:
            return ClasspathEntry(path=path, kind="archive")
        raise ClasspathError("not a directory or zip archive")


__all__ = ["ClasspathResolver"]
