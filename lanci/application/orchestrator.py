from __future__ import annotations

import asyncio
import functools
import logging

from lanci.application.retry import RetryPolicy
from lanci.domain.entities import (
    CodeSubmission,
    CrawlResult,
    ProblemRecord,
    filter_accepted,
)
from lanci.domain.errors import TransportError
from lanci.domain.interfaces import IProblemApi, ISourceFetcher

log = logging.getLogger(__name__)

CODE_FETCH_ATTEMPTS = 3


class CrawlerOrchestrator:
    """
    Assembles one CrawlResult for a problem slug.

    All dependencies are injected, this class creates NOTHING itself:
      - IProblemApi     → metadata and submission list (GraphQL)
      - ISourceFetcher  → submitted code (browser)
      - RetryPolicy     → how code fetches are retried

    The problem detail and the submission branch run concurrently.
    Inside the submission branch, code is fetched one page at a time
    because the source fetcher is a single stateful browser.

    Closing the source fetcher is the caller's job, whatever the outcome.
    """

    def __init__(
        self,
        api: IProblemApi,
        source_fetcher: ISourceFetcher,
        retry_policy: RetryPolicy | None = None,
        code_attempts: int = CODE_FETCH_ATTEMPTS,
    ) -> None:
        self._api            = api
        self._source_fetcher = source_fetcher
        self._retry_policy   = retry_policy or RetryPolicy(retry_on=(TransportError,))
        self._code_attempts  = code_attempts

    async def crawl_problem(self, slug: str) -> CrawlResult:
        """
        Fetch the problem and its accepted code.

        Both branches are allowed to settle before anything is raised, so
        no request is left running behind the caller's back. If either
        branch failed, its error is raised and nothing is returned.
        """
        detail, submissions = await asyncio.gather(
            self.fetch_problem_detail(slug),
            self.fetch_accepted_submissions(slug),
            return_exceptions=True,
        )

        errors = [o for o in (detail, submissions) if isinstance(o, BaseException)]
        if errors:
            for extra in errors[1:]:
                log.warning("Crawl of %s also failed with %s: %s", slug, type(extra).__name__, extra)
            raise errors[0]

        return CrawlResult(slug=slug, problem=detail, submissions=tuple(submissions))

    async def fetch_problem_detail(self, slug: str) -> ProblemRecord:
        log.info("Fetching problem detail for slug: %s", slug)
        return await self._api.fetch_problem_detail(slug)

    async def fetch_accepted_submissions(self, slug: str) -> list[CodeSubmission]:
        log.info("Fetching accepted submissions for slug: %s", slug)

        metas    = await self._api.fetch_submission_metas(slug)
        accepted = filter_accepted(metas)
        log.debug("%d of %d submissions accepted for %s", len(accepted), len(metas), slug)

        code_blocks: list[CodeSubmission] = []
        for meta in accepted:
            code = await self._retry_policy.execute(
                functools.partial(self._source_fetcher.fetch_source_text, meta.url),
                self._code_attempts,
            )
            code_blocks.append(CodeSubmission(language=meta.language, code=code))

        log.info("Found %d accepted submissions for slug: %s", len(code_blocks), slug)
        return code_blocks
