"""Pipeline orchestration for schema generation runs."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from .classpath import ClasspathResolver
from .config import GeneratorConfig, validate_config
from .errors import ConfigurationError, OutputError, SchemaGenError, TypeResolutionError
from .generator import SchemaGenerator
from .index import ModuleIndex, TypeIndex
from .loader import TypeLoader
from .logging import for_type, get_logger
from .models import DiscoveredType, RunReport, RunState, TypeOutcome
from .type_scanner import TypeScanner
from .writer import OutputWriter

IndexFactory = Callable[[TypeLoader], TypeIndex]


class Orchestrator:
    """Coordinates scan -> generate -> write for one configured run."""

    def __init__(
        self,
        resolver: ClasspathResolver | None = None,
        index_factory: Optional[IndexFactory] = None,
    ) -> None:
        self.resolver = resolver or ClasspathResolver()
        self.index_factory: IndexFactory = index_factory or ModuleIndex
        self.logger = get_logger("orchestrator")

    def run(self, config: GeneratorConfig) -> RunReport:
        """Execute a generation run and report its outcome.

        Fatal errors (configuration, base type resolution, output directory
        creation) produce a ``FAILED`` report before any schema file is written.
        Any other exception escaping the pipeline also ends the run ``FAILED``
        with the exception named in the message.
        Failures of individual types are recorded as outcomes and never change
        the terminal state.
        """
        report = RunReport()
        self.logger.info("Generate JSON schema files")

        try:
            validate_config(config)
        except ConfigurationError as exc:
            self.logger.error("Invalid configuration: %s", exc)
            return report.fail(f"Invalid configuration: {exc}")
        report.state = RunState.VALIDATED

        namespaces = list(config.namespaces or [])
        self.logger.info("Namespace(s) to scan: %s", ", ".join(namespaces) or "(none)")
        if not namespaces:
            self.logger.info("No namespaces to scan, nothing to do")
            report.state = RunState.SUCCEEDED
            return report
        self.logger.info("Base type is: %s", config.base_type)

        try:
            return self._execute(config, namespaces, report)
        except Exception as exc:
            self._log_exception("Schema generation failed", exc)
            return report.fail(
                f"Schema generation failed: {exc.__class__.__name__}: {exc}"
            )

    def _execute(
        self, config: GeneratorConfig, namespaces: Sequence[str], report: RunReport
    ) -> RunReport:
        entries = self.resolver.resolve(config.classpath, root=config.root)
        loader = TypeLoader(entries)
        writer = OutputWriter(config.resolved_output_directory())
        report.state = RunState.RUNNING

        with loader.activate():
            try:
                base = loader.resolve(str(config.base_type))
            except TypeResolutionError as exc:
                self.logger.error("Base type unavailable: %s", exc)
                return report.fail(f"Base type unavailable: {exc}")
            try:
                writer.prepare()
            except OutputError as exc:
                self.logger.error("%s", exc)
                return report.fail(str(exc))

            scanner = TypeScanner(
                self.index_factory(loader),
                include_base=config.include_base,
                include_abstract=config.include_abstract,
            )
            discovered = scanner.scan(namespaces, base)
            self.logger.info("Discovered %d type(s)", len(discovered))
            generator = SchemaGenerator(loader)
            report.outcomes = self._process(discovered, generator, writer, config.workers)

        failed = len(report.failures)
        if failed:
            self.logger.warning("%d type(s) skipped because of errors", failed)
        report.state = RunState.SUCCEEDED
        return report

    def _process(
        self,
        discovered: Sequence[DiscoveredType],
        generator: SchemaGenerator,
        writer: OutputWriter,
        workers: int,
    ) -> List[TypeOutcome]:
        def _one(item: DiscoveredType) -> TypeOutcome:
            return self._process_one(item, generator, writer)

        if workers <= 1 or len(discovered) <= 1:
            return [_one(item) for item in discovered]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="schemagen") as pool:
            return list(pool.map(_one, discovered))

    def _process_one(
        self, item: DiscoveredType, generator: SchemaGenerator, writer: OutputWriter
    ) -> TypeOutcome:
        log = for_type(self.logger, item.fqn)
        log.info("Generating schema")
        stage = "generate"
        try:
            document = generator.generate(item)
            stage = "write"
            output = writer.write(item.fqn, document)
        except SchemaGenError as exc:
            self._log_exception(f"Skipped {item.fqn} at {stage} stage", exc, log)
            return TypeOutcome(fqn=item.fqn, error=str(exc), stage=stage)
        log.debug("Wrote %s", output.path)
        return TypeOutcome(fqn=item.fqn, output=output)

    def _log_exception(
        self,
        message: str,
        exc: Exception,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        logger = logger or self.logger
        if logger.isEnabledFor(logging.DEBUG):
            logger.exception("%s: %s", message, exc)
        else:
            logger.error("%s: %s", message, exc)


__all__ = ["IndexFactory", "Orchestrator"]
