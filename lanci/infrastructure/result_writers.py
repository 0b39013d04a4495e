from __future__ import annotations

import json
from pathlib import Path

from bs4 import BeautifulSoup
from markdownify import ATX, markdownify

from lanci.domain.entities import CodeSubmission, CrawlResult
from lanci.domain.interfaces import IResultWriter

# LeetCode language ids that fenced code blocks know under another name
FENCE_LANGUAGES = {
    "python3":    "python",
    "pythondata": "python",
    "postgresql": "sql",
    "mysql":      "sql",
    "mssql":      "sql",
    "oraclesql":  "sql",
}


def fence_language(language: str) -> str:
    return FENCE_LANGUAGES.get(language.lower(), language)


def code_block(submission: CodeSubmission) -> str:
    return f"```{fence_language(submission.language)}\n{submission.code}\n```"


def description_markup(html: str) -> str:
    """
    Flatten <sup>/<sub> into ^/_ so exponents survive the markdown
    conversion, which drops those tags:  <code>n<sup>th</sup></code>  →  <code>n^th</code>
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag_name, marker in (("sup", "^"), ("sub", "_")):
        for tag in soup.find_all(tag_name):
            tag.insert(0, marker)
            tag.unwrap()
    return str(soup)


def description_markdown(html: str) -> str:
    """The problem statement as markdown, exponents and indices flattened first."""
    # Underscores from flattened <sub> tags must stay literal
    return markdownify(
        description_markup(html),
        heading_style=ATX,
        escape_underscores=False,
        escape_misc=False,
    ).strip()


def render_markdown(result: CrawlResult) -> str:
    parts = [f"# Description\n\n{description_markdown(result.problem.content)}"]

    if result.submissions:
        parts.append("# Solution")
        for i, submission in enumerate(result.submissions, start=1):
            parts.append(f"{i}. \n\n{code_block(submission)}")

    return "\n\n".join(parts)


class MarkdownResultWriter(IResultWriter):
    """Produces `<output_dir>/<problem name>.md`."""

    def target(self, result: CrawlResult, output_dir: Path) -> Path:
        return output_dir / f"{result.problem.name}.md"

    def render(self, result: CrawlResult) -> str:
        return render_markdown(result)


class JsonResultWriter(IResultWriter):
    """
    Produces `<output_dir>/<problem name>.json`: the plain record that
    flashcard tooling consumes.
    """

    def target(self, result: CrawlResult, output_dir: Path) -> Path:
        return output_dir / f"{result.problem.name}.json"

    def render(self, result: CrawlResult) -> str:
        return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
