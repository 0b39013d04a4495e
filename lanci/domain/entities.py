from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import CookieParseError

ACCEPTED_STATUS = "Accepted"

CSRF_COOKIE    = "csrftoken"
SESSION_COOKIE = "LEETCODE_SESSION"


class Difficulty(str, Enum):
    EASY   = "Easy"
    MEDIUM = "Medium"
    HARD   = "Hard"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TopicTag:
    """A topic tag. Two tags are the same tag when their slugs match."""
    name: str = field(compare=False)
    slug: str


@dataclass(frozen=True)
class ProblemRecord:
    """
    Immutable domain entity describing one LeetCode problem.

    Field names are OURS (snake_case), not LeetCode's (camelCase).
    The translation happens in the anti-corruption layer of the
    GraphQL client, not here.

    `stats` and `similar_questions` are kept as the raw JSON strings the
    API returns; nothing in the crawler interprets them.
    """
    question_id:       str
    frontend_id:       str
    title:             str
    title_slug:        str
    difficulty:        Difficulty
    content:           str
    category:          str
    topic_tags:        frozenset[TopicTag]
    stats:             str = ""
    similar_questions: str = ""

    @property
    def name(self) -> str:
        return f"{self.question_id}. {self.title}"


@dataclass(frozen=True)
class SubmissionMeta:
    """One row of the submission list. Never mutated after decoding."""
    submission_id: str
    status:        str
    language:      str
    runtime:       str
    timestamp:     str
    url:           str
    is_pending:    bool

    @property
    def is_accepted(self) -> bool:
        return self.status == ACCEPTED_STATUS


@dataclass(frozen=True)
class CodeSubmission:
    language: str
    code:     str


@dataclass(frozen=True)
class CrawlResult:
    """
    Everything one crawl produced for a single slug.

    `submissions` only ever holds code for accepted submissions, in the
    order the submission list returned them.
    """
    slug:        str
    problem:     ProblemRecord
    submissions: tuple[CodeSubmission, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        problem = self.problem
        return {
            "slug": self.slug,
            "problem": {
                "question_id":       problem.question_id,
                "frontend_id":       problem.frontend_id,
                "title":             problem.title,
                "title_slug":        problem.title_slug,
                "difficulty":        problem.difficulty.value,
                "content":           problem.content,
                "category":          problem.category,
                "topic_tags":        sorted(
                    ({"name": t.name, "slug": t.slug} for t in problem.topic_tags),
                    key=lambda t: t["slug"],
                ),
                "stats":             problem.stats,
                "similar_questions": problem.similar_questions,
            },
            "submissions": [
                {"language": s.language, "code": s.code} for s in self.submissions
            ],
        }


def filter_accepted(metas: list[SubmissionMeta]) -> list[SubmissionMeta]:
    """Keep accepted submissions only, preserving list order."""
    return [meta for meta in metas if meta.is_accepted]


@dataclass(frozen=True)
class AuthCredential:
    """
    The two LeetCode cookies every outbound call needs.

    Built once at startup from a browser-style cookie string. Both tokens
    are required; there is no such thing as a partial credential.
    """
    csrf_token:    str = field(repr=False)
    session_token: str = field(repr=False)

    @classmethod
    def from_cookie_string(cls, cookie_str: str) -> AuthCredential:
        csrf_token    = None
        session_token = None

        for part in cookie_str.split(";"):
            key, sep, value = part.strip().partition("=")
            if not sep:
                continue
            key = key.strip()
            if key == CSRF_COOKIE:
                csrf_token = value.strip()
            elif key == SESSION_COOKIE:
                session_token = value.strip()

        if csrf_token is None:
            raise CookieParseError(CSRF_COOKIE)
        if session_token is None:
            raise CookieParseError(SESSION_COOKIE)

        return cls(csrf_token=csrf_token, session_token=session_token)

    def __str__(self) -> str:
        return f"{CSRF_COOKIE}={self.csrf_token}; {SESSION_COOKIE}={self.session_token}"
