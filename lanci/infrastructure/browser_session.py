"""
Remote browser access for the pages the GraphQL API does not serve.

LeetCode renders a submission's code client-side from a global
`pageData` object, so the only way to read it is to load the page in a
real browser and ask for that variable. Everything that knows about
`pageData` lives in this module.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import urllib3
from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.firefox.options import Options
from selenium.webdriver.remote.webdriver import WebDriver

from lanci.application.rate_limiter import RateLimiter
from lanci.domain.entities import CSRF_COOKIE, SESSION_COOKIE, AuthCredential
from lanci.domain.errors import BrowserSessionError, EmptyResultError, WebDriverCommandError
from lanci.domain.interfaces import ISourceFetcher
from lanci.domain.url_parser import LEETCODE_HOST, build_submission_url
from lanci.infrastructure.leetcode_client import USER_AGENT

log = logging.getLogger(__name__)

SUBMISSION_CODE_VARIABLE = "pageData.submissionCode"
SUBMISSION_CODE_SCRIPT   = "return window.pageData ? window.pageData.submissionCode : null;"

# Type aliases
DriverFactory = Callable[[str, Options], WebDriver]

# Selenium raises its own exceptions for WebDriver errors but lets the
# urllib3 ones from the HTTP link to the endpoint through unwrapped.
DRIVER_ERRORS = (WebDriverException, urllib3.exceptions.HTTPError)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, WebDriverException):
        return exc.msg or type(exc).__name__
    return str(exc) or type(exc).__name__


def setup_firefox_options(headless: bool) -> Options:
    """
    Firefox options with our user agent, optionally headless.

    The user agent goes in as a profile preference: WebDriver has no
    command to change it on a live session.
    """
    options = Options()
    options.set_preference("general.useragent.override", USER_AGENT)
    if headless:
        options.add_argument("-headless")
    return options


def connect_remote(endpoint: str, options: Options) -> WebDriver:
    return webdriver.Remote(command_executor=endpoint, options=options)


async def _quit_after_failure(driver: WebDriver) -> None:
    """Quit a half-built session. The original setup error is the one reported."""
    try:
        await asyncio.to_thread(driver.quit)
    except DRIVER_ERRORS as exc:
        log.warning("Could not quit WebDriver session after failed setup: %s", _describe(exc))


def _set_up_session(driver: WebDriver, credential: AuthCredential) -> None:
    """Plant the auth cookies on the LeetCode origin."""
    # Cookies can only be added for the domain currently loaded
    driver.get(LEETCODE_HOST)
    driver.add_cookie({"name": CSRF_COOKIE, "value": credential.csrf_token})
    driver.add_cookie({"name": SESSION_COOKIE, "value": credential.session_token})


class BrowserSession(ISourceFetcher):
    """
    One exclusive remote browser. Its navigation state is shared by every
    call, so callers must use it from one task at a time.

    Selenium is blocking; each command runs in a worker thread so the
    event loop keeps serving the API branch of the crawl meanwhile.

    Create with `await BrowserSession.connect(...)` and always finish with
    `await session.close()`.
    """

    def __init__(self, driver: WebDriver, rate_limiter: RateLimiter) -> None:
        self._driver       = driver
        self._rate_limiter = rate_limiter
        self._closed       = False

    @classmethod
    async def connect(
        cls,
        endpoint: str,
        headless: bool,
        credential: AuthCredential,
        rate_limiter: RateLimiter,
        driver_factory: DriverFactory = connect_remote,
    ) -> BrowserSession:
        """
        Open a WebDriver session at `endpoint` and log it into LeetCode.

        If anything after session creation fails, the session is quit
        before the error is raised, so no remote browser is left behind.
        """
        log.info("Connecting to WebDriver at %s (headless=%s)", endpoint, headless)
        options = setup_firefox_options(headless)

        try:
            driver = await asyncio.to_thread(driver_factory, endpoint, options)
        except DRIVER_ERRORS as exc:
            raise BrowserSessionError(f"Failed to create WebDriver session at {endpoint}: {_describe(exc)}") from exc

        try:
            await asyncio.to_thread(_set_up_session, driver, credential)
        except BaseException as exc:
            log.warning("WebDriver setup failed, closing session: %s", _describe(exc))
            await _quit_after_failure(driver)
            if isinstance(exc, DRIVER_ERRORS):
                raise WebDriverCommandError(f"Failed to set up WebDriver session: {_describe(exc)}") from exc
            raise

        return cls(driver, rate_limiter)

    # ISourceFetcher implementation
    async def fetch_source_text(self, relative_url: str) -> str:
        """
        Load a submission detail page and return its code.

        Raises:
            WebDriverCommandError: navigation or script execution failed
            EmptyResultError: the page has no code variable, or it is
                not a string
        """
        await self._rate_limiter.acquire()

        url = build_submission_url(relative_url)
        log.debug("Fetching submitted code from URL: %s", url)

        try:
            await asyncio.to_thread(self._driver.get, url)
            value = await asyncio.to_thread(self._driver.execute_script, SUBMISSION_CODE_SCRIPT)
        except DRIVER_ERRORS as exc:
            raise WebDriverCommandError(f"WebDriver command failed on {url}: {_describe(exc)}") from exc

        if not isinstance(value, str):
            raise EmptyResultError(SUBMISSION_CODE_VARIABLE)

        return value.strip()

    async def close(self) -> None:
        """End the remote session. Calling it again does nothing."""
        if self._closed:
            log.warning("BrowserSession.close() called on an already closed session")
            return
        self._closed = True

        try:
            await asyncio.to_thread(self._driver.quit)
        except DRIVER_ERRORS as exc:
            raise WebDriverCommandError(f"Failed to close WebDriver session: {_describe(exc)}") from exc
        log.debug("WebDriver session closed")
