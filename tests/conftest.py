import random
from unittest.mock import MagicMock

import pytest
from selenium import webdriver

from lanci.application.rate_limiter import RateLimiter
from lanci.domain.entities import AuthCredential, CodeSubmission, CrawlResult, Difficulty, ProblemRecord, TopicTag


@pytest.fixture
def credential():
    return AuthCredential(csrf_token="abc123", session_token="xyz789")


@pytest.fixture
def fast_limiter():
    """A limiter generous enough that tests never notice it."""
    return RateLimiter(1000, jitter=(0.0, 0.0), rng=random.Random(0))


@pytest.fixture
def mock_driver():
    """Mock Selenium WebDriver for testing."""
    driver = MagicMock(spec=webdriver.Remote)
    driver.execute_script.return_value = "  class Solution: pass  \n"
    return driver


@pytest.fixture
def problem():
    return ProblemRecord(
        question_id="1",
        frontend_id="1",
        title="Two Sum",
        title_slug="two-sum",
        difficulty=Difficulty.EASY,
        content="<p>Find two numbers, 2 &lt;= n &lt;= 10<sup>4</sup></p>",
        category="Algorithms",
        topic_tags=frozenset({TopicTag("Array", "array"), TopicTag("Hash Table", "hash-table")}),
        stats='{"acRate": "50%"}',
        similar_questions="[]",
    )


@pytest.fixture
def crawl_result(problem):
    return CrawlResult(
        slug="two-sum",
        problem=problem,
        submissions=(
            CodeSubmission("python3", "class Solution:\n    pass"),
            CodeSubmission("cpp", "class Solution {};"),
        ),
    )
