"""
Domain Layer: Interfaces (Abstract Contracts)
-----------------------------------------------
These are ABSTRACT definitions of what the infrastructure must provide.
The domain layer defines the shape; the infrastructure layer implements it.

The orchestrator depends on these, never on LeetCodeClient or
BrowserSession directly, so tests can hand it fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from .entities import CrawlResult, ProblemRecord, SubmissionMeta


class IProblemApi(ABC):
    """Contract for the JSON query API."""

    @abstractmethod
    async def fetch_problem_detail(self, slug: str) -> ProblemRecord:
        """Return the metadata and description of the problem."""
        ...

    @abstractmethod
    async def fetch_submission_metas(self, slug: str) -> list[SubmissionMeta]:
        """Return the first page of the user's submissions for the problem."""
        ...


class ISourceFetcher(ABC):
    """
    Contract for anything that can turn a submission detail page into the
    code that was submitted. Today that needs a real browser; if LeetCode
    ever exposes the code some other way, only the implementation changes.
    """

    @abstractmethod
    async def fetch_source_text(self, relative_url: str) -> str:
        """Return the submitted code shown on the page at `relative_url`."""
        ...


class IResultWriter(ABC):
    """
    Contract for one output format of a finished crawl.

    Writers only render; the application service puts every rendered
    output on disk together, so a failed run leaves no partial set behind.
    """

    @abstractmethod
    def target(self, result: CrawlResult, output_dir: Path) -> Path:
        """Return the file this format is saved to."""
        ...

    @abstractmethod
    def render(self, result: CrawlResult) -> str:
        """Return the full file content."""
        ...
