"""CommandInterpreter — executes a stream of command lines against the graph.

Each line is tokenized, dispatched on its verb, and fully applied before
the next line is read. A failing line is reported and counted; it never
stops later lines. Raw byte lines are decoded as UTF-8 one at a time, so
a bad byte fails only the line that holds it.

Verbs:
  ``@addPages NAME...``          create pages
  ``@addLinks SOURCE DEST...``   link SOURCE to each DEST
  ``@isConnected SOURCE TARGET`` report whether TARGET is reachable
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog

from pagelinks.domain.commands import CommandLine, Verb, parse_line
from pagelinks.services.base import BaseService
from pagelinks.services.graph import GraphService
from pagelinks.services.reachability import ReachabilityService
from pagelinks.services.result import ErrorCode, ServiceResult
from pagelinks.services.telemetry import traced

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from pagelinks.infrastructure.graph.store import GraphStore

logger = logging.getLogger(__name__)


def _usage(op: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult.failure(op, ErrorCode.USAGE_ERROR, message, **detail)


class CommandInterpreter(BaseService):
    """Dispatches command lines to GraphService and ReachabilityService.

    Attributes:
        error_count: Number of errors recorded so far. A line can record
            more than one (e.g. two duplicate names on one ``@addPages``).
        lines_processed: Number of non-skipped lines executed.
    """

    def __init__(
        self,
        store: GraphStore,
        *,
        skip_blank_lines: bool = True,
    ) -> None:
        super().__init__(store)
        self._graph = GraphService(store)
        self._reachability = ReachabilityService(store)
        self._skip_blank_lines = skip_blank_lines
        self.error_count = 0
        self.lines_processed = 0
        self.failed_lines: list[int] = []

    @property
    def failed(self) -> bool:
        """True once any line has produced an error."""
        return self.error_count > 0

    # ------------------------------------------------------------------
    # Single line
    # ------------------------------------------------------------------

    @traced
    def execute(self, line: CommandLine) -> ServiceResult:
        """Execute one parsed line and record its outcome."""
        result = self._dispatch(line)
        meta = {**(result.meta or {}), "line": line.lineno}
        result = result.model_copy(update={"meta": meta})
        self._record(result, line.lineno)
        return result

    def execute_text(self, text: str | bytes, lineno: int) -> ServiceResult | None:
        """Decode, tokenize and execute one raw input line.

        Returns None for a blank line that was skipped.
        """
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as exc:
                return self._reject(
                    _usage("parse", f"Line is not valid UTF-8 (byte {exc.start})", line=lineno),
                    lineno,
                )
        line = parse_line(text, lineno)
        if line is None:
            if self._skip_blank_lines:
                logger.debug("Skipping blank line %d", lineno)
                return None
            return self._reject(_usage("parse", "Empty command line", line=lineno), lineno)
        return self.execute(line)

    def _reject(self, result: ServiceResult, lineno: int) -> ServiceResult:
        result = result.model_copy(update={"meta": {"line": lineno}})
        self._record(result, lineno)
        return result

    def _dispatch(self, line: CommandLine) -> ServiceResult:
        match line.known_verb:
            case Verb.ADD_PAGES:
                return self._graph.add_pages(line.args)
            case Verb.ADD_LINKS:
                if len(line.args) < 2:
                    return _usage(
                        "add_links",
                        f"{Verb.ADD_LINKS} requires a source page and at least one destination",
                        args=line.args,
                    )
                source, *dests = line.args
                return self._graph.add_links(source, dests)
            case Verb.IS_CONNECTED:
                if len(line.args) != 2:
                    return _usage(
                        "is_connected",
                        f"{Verb.IS_CONNECTED} requires exactly 2 arguments, got {len(line.args)}",
                        args=line.args,
                    )
                return self._reachability.is_connected(line.args[0], line.args[1])
            case None if not line.verb:
                return _usage("parse", "Empty command", line=line.lineno)
            case None:
                return _usage(
                    "parse",
                    f"Unrecognized command '{line.verb}'",
                    verb=line.verb,
                )

    def _record(self, result: ServiceResult, lineno: int) -> None:
        self.lines_processed += 1
        if result.ok:
            return
        failures = 1
        if result.error is not None:
            failures = int(result.error.detail.get("failures", 1))
        self.error_count += failures
        self.failed_lines.append(lineno)
        logger.debug("Line %d failed (%s): %d error(s)", lineno, result.op, failures)

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    def run(self, lines: Iterable[str | bytes]) -> Iterator[ServiceResult]:
        """Execute *lines* in order, yielding one result per executed line.

        Results are yielded as soon as each line is applied, so output for
        earlier lines is available before later lines are read.
        """
        for lineno, text in enumerate(lines, start=1):
            with structlog.contextvars.bound_contextvars(line=lineno):
                result = self.execute_text(text, lineno)
            if result is not None:
                yield result

    def summary(self) -> ServiceResult:
        """Describe the run so far: lines, errors, and graph size."""
        stats = self._graph.stats().data
        return ServiceResult(
            ok=True,
            op="run",
            data={
                "failed": self.failed,
                "lines": self.lines_processed,
                "errors": self.error_count,
                "failed_lines": list(self.failed_lines),
                "pages": stats["pages"],
                "links": stats["links"],
            },
        )
