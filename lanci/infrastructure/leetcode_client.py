from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import httpx

from lanci.application.rate_limiter import RateLimiter
from lanci.domain.entities import (
    AuthCredential,
    Difficulty,
    ProblemRecord,
    SubmissionMeta,
    TopicTag,
)
from lanci.domain.errors import ApiRequestError, ApiStatusError, ResponseShapeError
from lanci.domain.interfaces import IProblemApi
from lanci.domain.url_parser import LEETCODE_HOST

log = logging.getLogger(__name__)

LEETCODE_API_URL = "https://leetcode.com/graphql"
USER_AGENT       = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_11_6) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/54.0.2840.98 Safari/537.36"
)
REQUEST_TIMEOUT  = 30.0
SUBMISSION_PAGE_SIZE = 20

T = TypeVar("T")

QUESTION_DETAIL_QUERY = """
query getQuestionDetail($titleSlug: String!) {
  question(titleSlug: $titleSlug) {
    questionId
    questionFrontendId
    questionTitle
    questionTitleSlug
    content
    difficulty
    stats
    similarQuestions
    categoryTitle
    topicTags { name slug }
  }
}
"""

SUBMISSION_LIST_QUERY = """
query Submissions($offset: Int!, $limit: Int!, $lastKey: String, $questionSlug: String!) {
  submissionList(offset: $offset, limit: $limit, lastKey: $lastKey, questionSlug: $questionSlug) {
    submissions {
      id
      statusDisplay
      lang
      runtime
      timestamp
      url
      isPending
      __typename
    }
    __typename
  }
}
"""


# Anti-Corruption Layer
def _parse_pending(value: Any) -> bool:
    """LeetCode reports pending-ness as a label ("Not Pending"), not a bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "pending"
    raise TypeError(f"isPending has unexpected type {type(value).__name__}")


def _require_str(node: dict, key: str) -> str:
    value = node[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} should be a string, got {type(value).__name__}")
    return value


def decode_question(payload: dict) -> ProblemRecord:
    """
    ANTI-CORRUPTION LAYER: translates the getQuestionDetail response
    into our ProblemRecord.

    LeetCode sends:            We store as:
      "questionFrontendId"  →  frontend_id
      "categoryTitle"       →  category  etc.
    """
    node = payload["data"]["question"]
    return ProblemRecord(
        question_id       = _require_str(node, "questionId"),
        frontend_id       = _require_str(node, "questionFrontendId"),
        title             = _require_str(node, "questionTitle"),
        title_slug        = _require_str(node, "questionTitleSlug"),
        difficulty        = Difficulty(node["difficulty"]),
        content           = _require_str(node, "content"),
        category          = _require_str(node, "categoryTitle"),
        topic_tags        = frozenset(
            TopicTag(name=_require_str(tag, "name"), slug=_require_str(tag, "slug"))
            for tag in node["topicTags"]
        ),
        stats             = node.get("stats") or "",
        similar_questions = node.get("similarQuestions") or "",
    )


def decode_submission_list(payload: dict) -> list[SubmissionMeta]:
    """ANTI-CORRUPTION LAYER for the Submissions query."""
    nodes = payload["data"]["submissionList"]["submissions"]
    return [
        SubmissionMeta(
            submission_id = str(node["id"]),
            status        = _require_str(node, "statusDisplay"),
            language      = _require_str(node, "lang"),
            runtime       = _require_str(node, "runtime"),
            timestamp     = str(node["timestamp"]),
            url           = _require_str(node, "url"),
            is_pending    = _parse_pending(node["isPending"]),
        )
        for node in nodes
    ]


class LeetCodeClient(IProblemApi):
    """
    Concrete implementation of IProblemApi for LeetCode's GraphQL API.

    The constructor receives an httpx.AsyncClient and the shared
    RateLimiter (both injected) rather than creating them internally.
    Callers own the client lifecycle; tests pass a client backed by
    httpx.MockTransport.
    """

    def __init__(self, credential: AuthCredential, client: httpx.AsyncClient, rate_limiter: RateLimiter) -> None:
        self._client       = client
        self._rate_limiter = rate_limiter
        self._headers = {
            "Referer":      LEETCODE_HOST,
            "Cookie":       str(credential),
            "User-Agent":   USER_AGENT,
            "Content-Type": "application/json",
        }

    async def query(self, query_text: str, variables: dict[str, Any], decode: Callable[[dict], T]) -> T:
        """
        POST one GraphQL query and decode the answer with `decode`.

        Raises:
            ApiRequestError: the request never got a response
            ApiStatusError: the response status was not 2xx
            ResponseShapeError: the body was not JSON, or `decode` could not
                find the fields it needs
        """
        await self._rate_limiter.acquire()

        body = {"query": query_text, "variables": variables}
        log.debug("Sending GraphQL request: %s", variables)

        try:
            response = await self._client.post(
                LEETCODE_API_URL,
                headers=self._headers,
                json=body,
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ApiStatusError(exc.response.status_code, LEETCODE_API_URL) from exc
        except httpx.RequestError as exc:
            raise ApiRequestError(f"Request to {LEETCODE_API_URL} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ResponseShapeError(f"GraphQL response is not JSON: {exc}") from exc

        # GraphQL-level errors (different from HTTP errors)
        if isinstance(data, dict) and data.get("errors"):
            log.warning("GraphQL errors for variables %s: %s", variables, data["errors"])

        try:
            return decode(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise ResponseShapeError(f"Unexpected GraphQL response shape: {exc!r}") from exc

    # IProblemApi implementation
    async def fetch_problem_detail(self, slug: str) -> ProblemRecord:
        return await self.query(QUESTION_DETAIL_QUERY, {"titleSlug": slug}, decode_question)

    async def fetch_submission_metas(self, slug: str) -> list[SubmissionMeta]:
        variables = {
            "offset":       0,
            "limit":        SUBMISSION_PAGE_SIZE,
            "lastKey":      "",
            "questionSlug": slug,
        }
        return await self.query(SUBMISSION_LIST_QUERY, variables, decode_submission_list)
