"""Problem URL helpers."""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlparse

from .errors import SlugParseError

log = logging.getLogger(__name__)

LEETCODE_HOST   = "https://leetcode.com"
PROBLEMS_MARKER = "problems"


def extract_slug(url: str) -> str:
    """
    Return the problem slug from a LeetCode problem URL.

    The slug is the first non-empty path segment after a segment equal to
    "problems":

        https://leetcode.com/problems/two-sum/description/  →  "two-sum"
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise SlugParseError(url)

    # `in` on an iterator consumes it up to and including the marker
    segments = iter(parsed.path.split("/"))
    if PROBLEMS_MARKER not in segments:
        raise SlugParseError(url)

    slug = next((s for s in segments if s), None)
    if slug is None:
        raise SlugParseError(url)

    log.debug("Extracted slug %r from %s", slug, url)
    return slug


def build_submission_url(relative_url: str) -> str:
    """Resolve a submission detail path such as /submissions/detail/1/ against the host."""
    return urljoin(LEETCODE_HOST, relative_url)
