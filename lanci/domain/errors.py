"""
Domain Layer: Error Taxonomy
-----------------------------
Every failure the crawler can report is a subclass of CrawlerError, grouped
by how the caller is expected to react:

  ConfigError     → bad input detected before any network activity
  TransportError  → the remote side (HTTP or WebDriver) failed; retryable
                    only where the caller wraps the call in a RetryPolicy
  ProtocolError   → the remote side answered, but not in the shape we expect
  SlugParseError  → the problem URL cannot be turned into a slug

Library exceptions (httpx, selenium, urllib3) never leak past the infrastructure
layer; they are wrapped into one of these with `raise ... from exc`.
"""

from __future__ import annotations


class CrawlerError(Exception):
    """Base class for every error raised by the crawler."""


# Configuration

class ConfigError(CrawlerError):
    """Invalid configuration. Raised before any network call is made."""


class CookieParseError(ConfigError):
    """The cookie string is missing one of the required keys."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Missing required field in cookies: {key}")


class ZeroRateLimitError(ConfigError):
    def __init__(self, quota: int) -> None:
        self.quota = quota
        super().__init__(f"Rate limit must be a positive number of operations per second, got {quota}")


class MissingSettingError(ConfigError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} environment variable is required")


class InvalidSettingError(ConfigError):
    def __init__(self, name: str, value: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid value for {name}: {value!r}")


# Transport

class TransportError(CrawlerError):
    """The request never produced a usable answer."""


class ApiRequestError(TransportError):
    """Network-level failure talking to the GraphQL endpoint."""


class ApiStatusError(TransportError):
    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"GraphQL endpoint {url} answered with HTTP {status_code}")


class BrowserSessionError(TransportError):
    """The remote WebDriver session could not be created."""


class WebDriverCommandError(TransportError):
    """A WebDriver command failed inside an open session."""


# Protocol

class ProtocolError(CrawlerError):
    """The remote side answered with something we cannot use."""


class ResponseShapeError(ProtocolError):
    """A decoded response is missing a field or has one of the wrong type."""


class EmptyResultError(ProtocolError):
    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Unexpected empty result when fetching `{source}`")


# Parsing

class SlugParseError(CrawlerError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Failed to get slug from URL: {url}")
