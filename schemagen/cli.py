"""CLI entrypoints for schemagen commands."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import apply_overrides, load_config
from .errors import ConfigurationError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemagen",
        description="Generate JSON schema files for every subclass of a base type.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Only print warnings and errors to the console.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level log output to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Scan namespaces and write one schema file per discovered type.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "--config",
        default=".",
        help="Path to .schemagen.yml or its directory (defaults to current directory).",
    )
    generate_parser.add_argument(
        "-n",
        "--namespace",
        dest="namespaces",
        action="append",
        default=None,
        help="Namespace root to scan; repeat for several.",
    )
    generate_parser.add_argument(
        "-b",
        "--base-type",
        default=None,
        help="Fully-qualified name of the required base class.",
    )
    generate_parser.add_argument(
        "-o",
        "--output-dir",
        default=None,
        help="Directory receiving the <type>-schema.json files.",
    )
    generate_parser.add_argument(
        "--classpath",
        action="append",
        default=None,
        help=f"Importable locations, separated by '{os.pathsep}'; repeatable.",
    )
    generate_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Generate schemas with this many threads.",
    )
    generate_parser.add_argument(
        "--include-base",
        action="store_true",
        default=None,
        help="Also emit a schema for the base type itself.",
    )
    generate_parser.add_argument(
        "--include-abstract",
        action="store_true",
        default=None,
        help="Also emit schemas for abstract subclasses.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for schemagen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=args.quiet, log_file=args.log_file)

    if args.command != "generate":  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    try:
        config = load_config(Path(args.config))
    except ConfigurationError as exc:
        parser.exit(1, f"{exc}\n")
    config = apply_overrides(
        config,
        namespaces=args.namespaces,
        base_type=args.base_type,
        output_directory=_absolute(args.output_dir),
        classpath=_split_classpath(args.classpath),
        workers=args.workers,
        include_base=args.include_base,
        include_abstract=args.include_abstract,
    )

    report = Orchestrator().run(config)
    if not report.succeeded:
        parser.exit(1, f"schemagen generate failed: {report.message}\nRun with --verbose for more details.\n")

    written = len(report.written)
    if config.namespaces:
        print(f"{written} schema file(s) written to {_relativize(config.resolved_output_directory())}")
    else:
        print("No namespaces to scan, nothing to do")
    if report.failures:
        print(f"{len(report.failures)} type(s) skipped; see log for details")


def _split_classpath(values: Optional[Sequence[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    entries: List[str] = []
    for value in values:
        for part in value.split(os.pathsep):
            entries.append(str(Path(part).expanduser().resolve()) if part.strip() else part)
    return entries


def _absolute(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return str(Path(value).expanduser().resolve())


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
