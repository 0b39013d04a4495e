"""
main.py: Composition Root
--------------------------
Turns environment settings and a problem URL into one crawl run. One
RateLimiter is built here and handed to both the API client and the
browser session; the process exits 1 on any failure.

                         main.py  (wires everything)
                            │
              ┌─────────────┼──────────────┐
              ▼             ▼              ▼
    CrawlApplicationService │     Markdown/JSON writers
              │             │
              ▼             ▼
    CrawlerOrchestrator   RateLimiter (one, shared)
              │             │
    ┌─────────┴──────┐      │
    ▼                ▼      │
LeetCodeClient   BrowserSession ◄┘
(IProblemApi)    (ISourceFetcher)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

import httpx

# Application layer
from lanci.application.crawl_service import CrawlApplicationService
from lanci.application.orchestrator import CrawlerOrchestrator
from lanci.application.rate_limiter import RateLimiter
from lanci.application.retry import RetryPolicy
from lanci.config import Settings
from lanci.domain.errors import CrawlerError, TransportError
from lanci.domain.url_parser import extract_slug

# Infrastructure layer
from lanci.infrastructure.browser_session import BrowserSession
from lanci.infrastructure.leetcode_client import LeetCodeClient
from lanci.infrastructure.result_writers import JsonResultWriter, MarkdownResultWriter

log = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "output"


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Dependency wiring
# ---------------------------------------------------------------------------

async def build_and_run(settings: Settings, slug: str, output_dir: Path) -> bool:
    """
    Wires all dependencies together and executes the crawl use case.
    Returns True when the crawl succeeded and its files were written.

    The browser session is closed exactly once, whatever happened.
    """
    rate_limiter = RateLimiter(settings.rate_limit)
    client       = httpx.AsyncClient()

    try:
        leetcode = LeetCodeClient(
            credential   = settings.credential,
            client       = client,          # injected, LeetCodeClient doesn't create this
            rate_limiter = rate_limiter,    # shared with the browser
        )
        session = await BrowserSession.connect(
            endpoint     = settings.webdriver_url,
            headless     = settings.webdriver_headless,
            credential   = settings.credential,
            rate_limiter = rate_limiter,
        )

        try:
            orchestrator = CrawlerOrchestrator(
                api            = leetcode,      # injected IProblemApi
                source_fetcher = session,       # injected ISourceFetcher
                retry_policy   = RetryPolicy(retry_on=(TransportError,)),
            )
            crawl_service = CrawlApplicationService(
                orchestrator = orchestrator,
                writers      = [MarkdownResultWriter(), JsonResultWriter()],
                output_dir   = output_dir,
            )

            report = await crawl_service.execute(slug)
        finally:
            await _close_session(session)

    finally:
        await client.aclose()

    if report.status == "success":
        log.info("Success | %s | %.1fs | %s", slug, report.elapsed_secs, ", ".join(map(str, report.outputs)))
        return True

    log.error("Failed | %s | %s: %s", slug, report.error_kind, report.error_message)
    return False


async def _close_session(session: BrowserSession) -> None:
    """Close the browser. A failure here is logged and never replaces the crawl report."""
    try:
        await session.close()
    except CrawlerError as exc:
        log.warning("Could not close the browser session: %s", exc)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch a LeetCode problem and your accepted submissions",
    )
    parser.add_argument(
        "-u", "--url",
        required = True,
        help     = "Problem URL, e.g. https://leetcode.com/problems/two-sum/",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type    = Path,
        default = Path(DEFAULT_OUTPUT_DIR),
        help    = f"Output directory (default: {DEFAULT_OUTPUT_DIR})",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    _configure_logging()

    try:
        settings = Settings.from_env()
        slug     = extract_slug(args.url)
        ok       = asyncio.run(build_and_run(settings, slug, args.output_dir))
    except CrawlerError as exc:
        log.error("%s: %s", type(exc).__name__, exc)
        sys.exit(1)

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
