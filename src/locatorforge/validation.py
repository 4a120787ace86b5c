from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import soupsieve
from bs4 import BeautifulSoup, Tag

from .selector_rules import normalize_space, split_has_text

if TYPE_CHECKING:
    from playwright.sync_api import Page


class SelectorDocument(Protocol):
    def count(self, selector: str) -> int: ...


class MarkupDocument:
    """Parsed markup that answers selector match counts.

    ``:has-text("...")`` is evaluated the way Playwright does: a
    case-insensitive substring match against whitespace-normalised text.
    """

    def __init__(self, markup: str | BeautifulSoup) -> None:
        if isinstance(markup, BeautifulSoup):
            self.soup = markup
        else:
            self.soup = BeautifulSoup(markup or "", "html.parser")

    def select(self, selector: str) -> list[Tag]:
        text_query = split_has_text(selector)
        if text_query is None:
            return list(self.soup.select(selector))
        base, text = text_query
        needle = normalize_space(text).lower()
        return [
            node
            for node in self.soup.select(base)
            if needle in normalize_space(node.get_text()).lower()
        ]

    def count(self, selector: str) -> int:
        try:
            return len(self.select(selector))
        except (soupsieve.SelectorSyntaxError, ValueError, NotImplementedError):
            return 0


class PageDocument:
    """Live Playwright page; ``:has-text`` is native there."""

    def __init__(self, page: Page) -> None:
        self.page = page

    def count(self, selector: str) -> int:
        try:
            return len(self.page.query_selector_all(selector))
        except Exception:
            return 0


@dataclass(frozen=True, slots=True)
class LocatorValidation:
    unique: bool | None
    match_count: int | None
    message: str


def count_locator_matches(document: SelectorDocument | None, selector: str) -> int | None:
    text = str(selector or "").strip()
    if document is None:
        return None
    if not text:
        return 0
    return document.count(text)


def validate_locator(document: SelectorDocument | None, selector: str) -> LocatorValidation:
    match_count = count_locator_matches(document, selector)
    if match_count is None:
        return LocatorValidation(None, None, "No document available; uniqueness not checked.")
    if match_count == 1:
        return LocatorValidation(True, 1, "Locator is unique.")
    if match_count == 0:
        return LocatorValidation(False, 0, "Locator matches nothing in DOM.")
    return LocatorValidation(False, match_count, "Locator is not unique in DOM.")


def is_valid_css(selector: str) -> bool:
    text = str(selector or "").strip()
    if not text:
        return False
    text_query = split_has_text(text)
    if text_query is not None:
        text = text_query[0]
    try:
        soupsieve.compile(text)
    except (soupsieve.SelectorSyntaxError, ValueError, NotImplementedError):
        return False
    return True
