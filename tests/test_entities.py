"""Tests for credential parsing and the domain entities."""

import pytest

from lanci.domain.entities import AuthCredential, SubmissionMeta, TopicTag, filter_accepted
from lanci.domain.errors import ConfigError, CookieParseError


def _meta(submission_id, status):
    return SubmissionMeta(
        submission_id=submission_id,
        status=status,
        language="python3",
        runtime="40 ms",
        timestamp="1700000000",
        url=f"/submissions/detail/{submission_id}/",
        is_pending=False,
    )


def test_parse_valid_cookie_string():
    cookie_str = "csrftoken=abc123; LEETCODE_SESSION=xyz789"
    credential = AuthCredential.from_cookie_string(cookie_str)

    assert credential.csrf_token == "abc123"
    assert credential.session_token == "xyz789"
    assert str(credential) == cookie_str


def test_parse_cookie_string_ignores_order_and_unknown_keys():
    credential = AuthCredential.from_cookie_string(
        " LEETCODE_SESSION = xyz789 ;_ga=GA1.2;csrftoken=abc123;flag"
    )

    assert credential.csrf_token == "abc123"
    assert credential.session_token == "xyz789"
    assert str(credential) == "csrftoken=abc123; LEETCODE_SESSION=xyz789"


@pytest.mark.parametrize(
    "cookie_str, missing",
    [
        ("LEETCODE_SESSION=xyz789", "csrftoken"),
        ("csrftoken=abc123; INVALID_COOKIE=xyz789", "LEETCODE_SESSION"),
        ("INVALID_COOKIE=xyz789", "csrftoken"),
        ("", "csrftoken"),
    ],
)
def test_parse_cookie_string_missing_key(cookie_str, missing):
    with pytest.raises(CookieParseError) as exc_info:
        AuthCredential.from_cookie_string(cookie_str)

    assert exc_info.value.key == missing
    assert missing in str(exc_info.value)
    assert isinstance(exc_info.value, ConfigError)


def test_credential_repr_hides_tokens():
    credential = AuthCredential.from_cookie_string("csrftoken=abc123; LEETCODE_SESSION=xyz789")

    assert "abc123" not in repr(credential)
    assert "xyz789" not in repr(credential)


def test_topic_tag_identity_is_slug():
    assert TopicTag("Array", "array") == TopicTag("Arrays", "array")
    assert len({TopicTag("Array", "array"), TopicTag("Arrays", "array")}) == 1


def test_filter_accepted_keeps_order():
    metas = [_meta("1", "Accepted"), _meta("2", "Wrong Answer"), _meta("3", "Accepted")]

    accepted = filter_accepted(metas)

    assert [m.submission_id for m in accepted] == ["1", "3"]


def test_crawl_result_to_dict(crawl_result):
    data = crawl_result.to_dict()

    assert data["slug"] == "two-sum"
    assert data["problem"]["difficulty"] == "Easy"
    assert [t["slug"] for t in data["problem"]["topic_tags"]] == ["array", "hash-table"]
    assert data["submissions"][1] == {"language": "cpp", "code": "class Solution {};"}
    assert crawl_result.problem.name == "1. Two Sum"
