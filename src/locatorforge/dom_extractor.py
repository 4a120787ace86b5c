from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from bs4 import BeautifulSoup, Tag

from .models import KEPT_ATTRIBUTES, Element, PathSegment, classify_element
from .selector_rules import normalize_space

if TYPE_CHECKING:
    from playwright.sync_api import ElementHandle, Page

LOGGER = logging.getLogger("locatorforge.extractor")

EXTRACTED_TAGS = ("button", "input", "a", "select", "textarea")

_LIVE_PAYLOAD_SCRIPT = """
(el) => {
  const kept = %s;
  const attrs = {};
  for (const attr of Array.from(el.attributes || [])) {
    if (kept.includes(attr.name)) {
      attrs[attr.name] = attr.value;
    }
  }
  const tag = el.tagName.toLowerCase();
  const text = (el.innerText || el.textContent || '').trim().replace(/\\s+/g, ' ').slice(0, 200);
  const path = [];
  let current = el;
  while (current && current.nodeType === Node.ELEMENT_NODE) {
    const parent = current.parentElement;
    const siblings = parent ? Array.from(parent.children) : [current];
    const sameTag = siblings.filter((node) => node.tagName === current.tagName);
    path.unshift({
      tag: current.tagName.toLowerCase(),
      position: siblings.indexOf(current) + 1,
      type_position: sameTag.indexOf(current) + 1,
      same_tag_count: sameTag.length,
    });
    current = parent;
  }
  return {
    tag,
    attributes: attrs,
    text,
    value: el.getAttribute('value') || '',
    hidden: el.hidden || el.getAttribute('aria-hidden') === 'true',
    path,
  };
}
""" % (list(KEPT_ATTRIBUTES),)


def extract_elements(markup: str | BeautifulSoup, *, include_hidden: bool = False) -> list[Element]:
    soup = markup if isinstance(markup, BeautifulSoup) else BeautifulSoup(markup or "", "html.parser")
    elements: list[Element] = []
    for node in soup.find_all(list(EXTRACTED_TAGS)):
        try:
            if not include_hidden and _is_hidden_node(node):
                continue
            elements.append(element_from_node(node, fallback_index=len(elements) + 1))
        except Exception as exc:
            LOGGER.debug("Skipping malformed <%s> fragment: %s", getattr(node, "name", "?"), exc)
            continue
    LOGGER.info("Extracted %s elements", len(elements))
    return elements


def element_from_node(node: Tag, fallback_index: int | None = None) -> Element:
    tag = (node.name or "").lower()
    attributes = _kept_attributes(node.attrs.items())
    text = normalize_space(node.get_text())
    if not text and tag == "input" and classify_element(tag, attributes.get("type")) == "button":
        text = normalize_space(_attr_text(node.get("value")))
    return _build_element(tag, attributes, text, _node_path(node), fallback_index)


def extract_elements_from_page(page: Page, *, include_hidden: bool = False) -> list[Element]:
    elements: list[Element] = []
    for handle in page.query_selector_all(", ".join(EXTRACTED_TAGS)):
        try:
            payload = handle.evaluate(_LIVE_PAYLOAD_SCRIPT)
            if not include_hidden and _is_hidden_payload(payload):
                continue
            elements.append(element_from_payload(payload, fallback_index=len(elements) + 1))
        except Exception as exc:
            LOGGER.debug("Skipping live element: %s", exc)
            continue
    LOGGER.info("Extracted %s live elements", len(elements))
    return elements


def element_from_handle(handle: ElementHandle) -> Element:
    return element_from_payload(handle.evaluate(_LIVE_PAYLOAD_SCRIPT))


def element_from_payload(payload: Mapping[str, Any], fallback_index: int | None = None) -> Element:
    tag = str(payload.get("tag") or "").lower()
    attributes = _kept_attributes(dict(payload.get("attributes") or {}).items())
    text = normalize_space(str(payload.get("text") or ""))
    if not text and classify_element(tag, attributes.get("type")) == "button" and tag == "input":
        text = normalize_space(str(payload.get("value") or ""))
    path = tuple(
        PathSegment(
            tag=str(item.get("tag") or "").lower(),
            position=int(item.get("position") or 1),
            type_position=int(item.get("type_position") or 1),
            same_tag_count=int(item.get("same_tag_count") or 1),
        )
        for item in payload.get("path") or []
        if isinstance(item, Mapping)
    )
    return _build_element(tag, attributes, text, path, fallback_index)


def resolve_display_name(attributes: Mapping[str, str], text: str) -> str:
    for value in (
        text,
        attributes.get("placeholder"),
        attributes.get("aria-label"),
        attributes.get("name"),
        attributes.get("id"),
    ):
        cleaned = normalize_space(value)
        if cleaned:
            return cleaned
    return ""


def _build_element(
    tag: str,
    attributes: dict[str, str],
    text: str,
    path: tuple[PathSegment, ...],
    fallback_index: int | None,
) -> Element:
    if not tag:
        raise ValueError("element without tag name")
    display_name = resolve_display_name(attributes, text)
    if not display_name and fallback_index is not None:
        display_name = f"{classify_element(tag, attributes.get('type'))}_{fallback_index}"
    return Element(tag=tag, display_name=display_name, attributes=attributes, text=text, path=path)


def _kept_attributes(items: Iterable[tuple[str, Any]]) -> dict[str, str]:
    attributes: dict[str, str] = {}
    for key, value in items:
        name = str(key).lower()
        if name not in KEPT_ATTRIBUTES:
            continue
        attributes[name] = _attr_text(value)
    return attributes


def _attr_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


def _node_path(node: Tag) -> tuple[PathSegment, ...]:
    segments: list[PathSegment] = []
    current: Tag | None = node
    while isinstance(current, Tag) and not isinstance(current, BeautifulSoup):
        parent = current.parent
        if parent is None:
            siblings = [current]
        else:
            siblings = [child for child in parent.children if isinstance(child, Tag)]
        same_tag = [child for child in siblings if child.name == current.name]
        segments.append(
            PathSegment(
                tag=(current.name or "").lower(),
                position=_index_of(siblings, current) + 1,
                type_position=_index_of(same_tag, current) + 1,
                same_tag_count=len(same_tag),
            )
        )
        current = parent
    segments.reverse()
    return tuple(segments)


def _index_of(nodes: list[Tag], target: Tag) -> int:
    for index, node in enumerate(nodes):
        if node is target:
            return index
    return 0


def _is_hidden_node(node: Tag) -> bool:
    if node.name == "input" and str(node.get("type") or "").strip().lower() == "hidden":
        return True
    if node.has_attr("hidden"):
        return True
    return str(node.get("aria-hidden") or "").strip().lower() == "true"


def _is_hidden_payload(payload: Mapping[str, Any]) -> bool:
    attributes = payload.get("attributes") or {}
    if str(payload.get("tag") or "").lower() == "input" and str(attributes.get("type") or "").lower() == "hidden":
        return True
    return bool(payload.get("hidden"))
