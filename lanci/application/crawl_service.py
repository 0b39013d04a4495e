from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from lanci.domain.entities import CrawlResult
from lanci.domain.interfaces import IResultWriter
from .orchestrator import CrawlerOrchestrator

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CrawlRunReport:
    """
    Immutable value object summarising one crawl attempt.
    Returned by the application service when crawling finishes.
    """
    slug:          str
    status:        str
    elapsed_secs:  float
    outputs:       tuple[Path, ...] = ()
    error_kind:    str | None = None
    error_message: str | None = None


class CrawlApplicationService:
    """
    The top-level use case: crawl one problem and hand it to the writers.

    Receives all dependencies via constructor injection.
    Knows about the sequence of operations but not the implementation details.
    Writers only run after a complete crawl; a failed crawl writes nothing,
    and a failed save removes whatever part of it reached the disk.
    """

    def __init__(self, orchestrator: CrawlerOrchestrator, writers: list[IResultWriter], output_dir: Path) -> None:
        self._orchestrator = orchestrator
        self._writers      = writers
        self._output_dir   = output_dir

    async def execute(self, slug: str) -> CrawlRunReport:
        """
        Run the crawl for `slug`.
        Returns a CrawlRunReport describing what happened.
        """
        started_at = datetime.now(tz=timezone.utc)
        log.info("Crawling problem with slug: %s", slug)

        try:
            result  = await self._orchestrator.crawl_problem(slug)
            outputs = self._save(result)
        except Exception as exc:
            elapsed = (datetime.now(tz=timezone.utc) - started_at).total_seconds()
            log.error("Crawl failed [%s]: %s", type(exc).__name__, exc, exc_info=True)
            return CrawlRunReport(
                slug          = slug,
                status        = "failed",
                elapsed_secs  = elapsed,
                error_kind    = type(exc).__name__,
                error_message = str(exc),
            )

        elapsed = (datetime.now(tz=timezone.utc) - started_at).total_seconds()
        log.info(
            "Crawl complete | %s | %d accepted submissions | %.1fs",
            result.problem.name,
            len(result.submissions),
            elapsed,
        )
        return CrawlRunReport(
            slug         = slug,
            status       = "success",
            elapsed_secs = elapsed,
            outputs      = outputs,
        )

    def _save(self, result: CrawlResult) -> tuple[Path, ...]:
        """
        Render every output first, then write them all. If any write
        fails, the files already written for this run are removed again.
        """
        rendered = [(writer.target(result, self._output_dir), writer.render(result)) for writer in self._writers]

        self._output_dir.mkdir(parents=True, exist_ok=True)
        attempted: list[Path] = []
        try:
            for path, text in rendered:
                attempted.append(path)
                path.write_text(text, encoding="utf-8")
        except OSError:
            for path in attempted:
                if path.is_file():
                    path.unlink()
            log.warning("Removed partial output for %s", result.problem.name)
            raise

        for path in attempted:
            log.info("Problem saved to %s", path)
        return tuple(attempted)
