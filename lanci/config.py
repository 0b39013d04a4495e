"""
Runtime settings, read once from environment variables.

  LEETCODE_COOKIE     required, e.g. "csrftoken=...; LEETCODE_SESSION=..."
  WEBDRIVER_URL       WebDriver endpoint   (default http://localhost:4444)
  WEBDRIVER_HEADLESS  1/true/yes/on        (default off)
  RATE_LIMIT          outbound calls/sec   (default 1)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from lanci.domain.entities import AuthCredential
from lanci.domain.errors import InvalidSettingError, MissingSettingError

DEFAULT_WEBDRIVER_URL = "http://localhost:4444"
DEFAULT_RATE_LIMIT    = 1

_TRUE  = {"1", "true", "yes", "on"}
_FALSE = {"", "0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    credential:         AuthCredential
    webdriver_url:      str = DEFAULT_WEBDRIVER_URL
    webdriver_headless: bool = False
    rate_limit:         int = DEFAULT_RATE_LIMIT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from the environment.
        Fails fast with a ConfigError naming the offending variable.
        """
        env = os.environ if environ is None else environ

        cookie = env.get("LEETCODE_COOKIE")
        if not cookie:
            raise MissingSettingError("LEETCODE_COOKIE")

        headless_raw = env.get("WEBDRIVER_HEADLESS", "").strip().lower()
        if headless_raw in _TRUE:
            headless = True
        elif headless_raw in _FALSE:
            headless = False
        else:
            raise InvalidSettingError("WEBDRIVER_HEADLESS", headless_raw)

        rate_raw = env.get("RATE_LIMIT", str(DEFAULT_RATE_LIMIT))
        try:
            rate_limit = int(rate_raw)
        except ValueError:
            raise InvalidSettingError("RATE_LIMIT", rate_raw) from None

        return cls(
            credential         = AuthCredential.from_cookie_string(cookie),
            webdriver_url      = env.get("WEBDRIVER_URL") or DEFAULT_WEBDRIVER_URL,
            webdriver_headless = headless,
            rate_limit         = rate_limit,
        )
