from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator

from .models import Element, Locator
from .scoring import rate_rule
from .selector_rules import (
    CSS_TEXT_TAGS,
    PLACEHOLDER_TAGS,
    TEST_ID_ATTRS,
    TEXT_PREDICATE_LIMIT,
    XPATH_TEXT_TAGS,
    escape_css_identifier,
    escape_css_string,
    semantic_class,
    xpath_literal,
)
from .validation import SelectorDocument, count_locator_matches

LOGGER = logging.getLogger("locatorforge.synthesizer")


@dataclass(slots=True)
class CandidateDraft:
    locator: str
    rule: str
    metadata: dict[str, Any] = field(default_factory=dict)


CssStrategy = Callable[[Element], "CandidateDraft | None"]


def _id_strategy(element: Element) -> CandidateDraft | None:
    value = element.attr("id")
    if not value:
        return None
    return CandidateDraft(f"#{escape_css_identifier(value)}", "id", {"source_attr": "id"})


def _name_strategy(element: Element) -> CandidateDraft | None:
    value = element.attr("name")
    if not value:
        return None
    return CandidateDraft(f'[name="{escape_css_string(value)}"]', "name", {"source_attr": "name"})


def _test_id_strategy(element: Element) -> CandidateDraft | None:
    for attr in TEST_ID_ATTRS:
        value = element.attr(attr)
        if value:
            return CandidateDraft(f'[{attr}="{escape_css_string(value)}"]', "test_id", {"source_attr": attr})
    return None


def _placeholder_strategy(element: Element) -> CandidateDraft | None:
    if element.tag not in PLACEHOLDER_TAGS:
        return None
    value = element.attr("placeholder")
    if not value:
        return None
    return CandidateDraft(
        f'[placeholder="{escape_css_string(value)}"]', "placeholder", {"source_attr": "placeholder"}
    )


def _aria_label_strategy(element: Element) -> CandidateDraft | None:
    value = element.attr("aria-label")
    if not value:
        return None
    return CandidateDraft(
        f'[aria-label="{escape_css_string(value)}"]', "aria_label", {"source_attr": "aria-label"}
    )


def _href_strategy(element: Element) -> CandidateDraft | None:
    if element.tag != "a":
        return None
    value = element.attr("href")
    if not value or value.strip().lower().startswith("javascript:"):
        return None
    return CandidateDraft(
        f'a[href="{escape_css_string(value)}"]',
        "href",
        {"source_attr": "href"},
    )


def _class_strategy(element: Element) -> CandidateDraft | None:
    classes = element.classes()
    if not classes:
        return None
    semantic = semantic_class(classes)
    chosen = semantic or classes[0]
    return CandidateDraft(
        f".{escape_css_identifier(chosen)}",
        "class",
        {"source_attr": "class", "semantic": semantic is not None},
    )


def _type_role_strategy(element: Element) -> CandidateDraft | None:
    input_type = element.attr("type")
    role = element.attr("role")
    if not input_type and not role:
        return None
    selector = element.tag
    if input_type:
        selector += f'[type="{escape_css_string(input_type)}"]'
    if role:
        selector += f'[role="{escape_css_string(role)}"]'
    return CandidateDraft(selector, "type" if input_type else "role", {"source_attr": "type" if input_type else "role"})


def _text_strategy(element: Element) -> CandidateDraft | None:
    if element.tag not in CSS_TEXT_TAGS:
        return None
    text = element.text
    if not text or len(text) >= TEXT_PREDICATE_LIMIT:
        return None
    return CandidateDraft(f'{element.tag}:has-text("{escape_css_string(text)}")', "text", {"source_attr": "text"})


def _structural_strategy(element: Element) -> CandidateDraft:
    locator = structural_css(element)
    return CandidateDraft(locator, "structural", {"uses_nth": ":nth-child(" in locator})


CSS_STRATEGIES: tuple[CssStrategy, ...] = (
    _id_strategy,
    _name_strategy,
    _test_id_strategy,
    _placeholder_strategy,
    _aria_label_strategy,
    _href_strategy,
    _class_strategy,
    _type_role_strategy,
    _text_strategy,
    _structural_strategy,
)


def iter_css_candidates(element: Element) -> Iterator[CandidateDraft]:
    seen: set[str] = set()
    for strategy in CSS_STRATEGIES:
        draft = strategy(element)
        if draft is None or draft.locator in seen:
            continue
        seen.add(draft.locator)
        yield draft


def structural_css(element: Element) -> str:
    if not element.path:
        return element.tag
    parts = [
        f"{segment.tag}:nth-child({segment.position})" if segment.same_tag_count > 1 else segment.tag
        for segment in element.path
    ]
    return " > ".join(parts)


def structural_xpath(element: Element) -> str:
    if not element.path:
        return f"//{element.tag}"
    parts = [
        f"{segment.tag}[{segment.type_position}]" if segment.same_tag_count > 1 else segment.tag
        for segment in element.path
    ]
    # fragments get wrapped in html/body by browsers
    prefix = "/" if element.path[0].tag == "html" else "//"
    return prefix + "/".join(parts)


def synthesize_css(element: Element, document: SelectorDocument | None = None) -> CandidateDraft:
    last: CandidateDraft | None = None
    for draft in iter_css_candidates(element):
        last = draft
        match_count = count_locator_matches(document, draft.locator)
        if match_count is None or match_count == 1:
            return draft
        LOGGER.debug("Rejected %s candidate %r (%s matches)", draft.rule, draft.locator, match_count)
    if last is None:
        return _structural_strategy(element)
    return last


def synthesize_xpath(element: Element) -> str:
    tag = element.tag
    text = element.text
    if tag in XPATH_TEXT_TAGS and text and len(text) < TEXT_PREDICATE_LIMIT:
        return f"//{tag}[normalize-space(.)={xpath_literal(text)}]"
    for attr in ("id", "name", *TEST_ID_ATTRS):
        value = element.attr(attr)
        if value:
            return f"//*[@{attr}={xpath_literal(value)}]"
    return structural_xpath(element)


def synthesize(element: Element, document: SelectorDocument | None = None) -> Locator:
    try:
        draft = synthesize_css(element, document)
    except Exception:
        LOGGER.exception("CSS synthesis failed for <%s>; using structural path", element.tag)
        draft = _structural_strategy(element)

    try:
        xpath = synthesize_xpath(element)
    except Exception:
        LOGGER.exception("XPath synthesis failed for <%s>; using structural path", element.tag)
        xpath = structural_xpath(element)

    return Locator(css_selector=draft.locator, xpath=xpath, quality=rate_rule(draft.rule), rule=draft.rule)


def synthesize_many(elements: Iterable[Element], document: SelectorDocument | None = None) -> list[Locator]:
    return [synthesize(element, document) for element in elements]
