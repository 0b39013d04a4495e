"""Tests for configuration loading and the composition root."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from lanci import main as lanci_main
from lanci.application.rate_limiter import RateLimiter
from lanci.config import Settings
from lanci.domain.errors import CookieParseError, InvalidSettingError, MissingSettingError, WebDriverCommandError
from lanci.infrastructure.leetcode_client import LeetCodeClient

COOKIE = "csrftoken=abc123; LEETCODE_SESSION=xyz789"


def test_settings_defaults():
    settings = Settings.from_env({"LEETCODE_COOKIE": COOKIE})

    assert settings.credential.csrf_token == "abc123"
    assert settings.webdriver_url == "http://localhost:4444"
    assert settings.webdriver_headless is False
    assert settings.rate_limit == 1


def test_settings_from_env():
    settings = Settings.from_env({
        "LEETCODE_COOKIE":    COOKIE,
        "WEBDRIVER_URL":      "http://selenium:4444/wd/hub",
        "WEBDRIVER_HEADLESS": "True",
        "RATE_LIMIT":         "3",
    })

    assert settings.webdriver_url == "http://selenium:4444/wd/hub"
    assert settings.webdriver_headless is True
    assert settings.rate_limit == 3


@pytest.mark.parametrize(
    "env, error",
    [
        ({}, MissingSettingError),
        ({"LEETCODE_COOKIE": "csrftoken=abc123"}, CookieParseError),
        ({"LEETCODE_COOKIE": COOKIE, "RATE_LIMIT": "fast"}, InvalidSettingError),
        ({"LEETCODE_COOKIE": COOKIE, "WEBDRIVER_HEADLESS": "maybe"}, InvalidSettingError),
    ],
)
def test_settings_errors(env, error):
    with pytest.raises(error):
        Settings.from_env(env)


def test_main_exits_on_bad_url(monkeypatch):
    monkeypatch.setenv("LEETCODE_COOKIE", COOKIE)
    run = MagicMock()
    monkeypatch.setattr(lanci_main, "build_and_run", run)

    with pytest.raises(SystemExit) as exc_info:
        lanci_main.main(["--url", "https://leetcode.com/whatever/slug"])

    assert exc_info.value.code == 1
    run.assert_not_called()


def test_main_exits_on_zero_rate_limit(monkeypatch):
    monkeypatch.setenv("LEETCODE_COOKIE", COOKIE)
    monkeypatch.setenv("RATE_LIMIT", "0")
    connect = AsyncMock()
    monkeypatch.setattr(lanci_main.BrowserSession, "connect", connect)

    with pytest.raises(SystemExit) as exc_info:
        lanci_main.main(["--url", "https://leetcode.com/problems/two-sum/"])

    assert exc_info.value.code == 1
    connect.assert_not_called()


@pytest.mark.asyncio
async def test_build_and_run_closes_session_once(monkeypatch, tmp_path, crawl_result):
    session = AsyncMock()
    monkeypatch.setattr(lanci_main.BrowserSession, "connect", AsyncMock(return_value=session))

    failing = AsyncMock(side_effect=RuntimeError("boom"))
    monkeypatch.setattr(lanci_main.CrawlerOrchestrator, "crawl_problem", failing)

    settings = Settings.from_env({"LEETCODE_COOKIE": COOKIE})
    ok = await lanci_main.build_and_run(settings, "two-sum", tmp_path)

    assert ok is False
    session.close.assert_awaited_once()
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_build_and_run_shares_one_rate_limiter(monkeypatch, tmp_path, crawl_result):
    client_cls = MagicMock(side_effect=LeetCodeClient)
    monkeypatch.setattr(lanci_main, "LeetCodeClient", client_cls)
    connect = AsyncMock(return_value=AsyncMock())
    monkeypatch.setattr(lanci_main.BrowserSession, "connect", connect)
    monkeypatch.setattr(lanci_main.CrawlerOrchestrator, "crawl_problem", AsyncMock(return_value=crawl_result))

    settings = Settings.from_env({"LEETCODE_COOKIE": COOKIE, "RATE_LIMIT": "4"})
    assert await lanci_main.build_and_run(settings, "two-sum", tmp_path) is True

    api_limiter = client_cls.call_args.kwargs["rate_limiter"]
    browser_limiter = connect.await_args.kwargs["rate_limiter"]
    assert isinstance(api_limiter, RateLimiter)
    assert api_limiter is browser_limiter


@pytest.mark.asyncio
async def test_close_failure_does_not_override_success(monkeypatch, tmp_path, crawl_result):
    session = AsyncMock()
    session.close.side_effect = WebDriverCommandError("Failed to close WebDriver session: gone")
    monkeypatch.setattr(lanci_main.BrowserSession, "connect", AsyncMock(return_value=session))
    monkeypatch.setattr(lanci_main.CrawlerOrchestrator, "crawl_problem", AsyncMock(return_value=crawl_result))

    settings = Settings.from_env({"LEETCODE_COOKIE": COOKIE})
    ok = await lanci_main.build_and_run(settings, "two-sum", tmp_path)

    assert ok is True
    session.close.assert_awaited_once()
    assert (tmp_path / "1. Two Sum.md").is_file()


@pytest.mark.asyncio
async def test_close_failure_does_not_hide_crawl_failure(monkeypatch, tmp_path, caplog):
    session = AsyncMock()
    session.close.side_effect = WebDriverCommandError("gone")
    monkeypatch.setattr(lanci_main.BrowserSession, "connect", AsyncMock(return_value=session))
    failing = AsyncMock(side_effect=WebDriverCommandError("page crashed"))
    monkeypatch.setattr(lanci_main.CrawlerOrchestrator, "crawl_problem", failing)

    settings = Settings.from_env({"LEETCODE_COOKIE": COOKIE})
    with caplog.at_level("ERROR", logger="lanci.main"):
        ok = await lanci_main.build_and_run(settings, "two-sum", tmp_path)

    assert ok is False
    assert "page crashed" in caplog.text
