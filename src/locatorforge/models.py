from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import html
from typing import Any, Literal, Mapping

ElementKind = Literal["button", "input", "link", "dropdown", "checkbox", "radio", "textarea", "generic"]
StepAction = Literal["navigate", "fill", "click", "select", "check", "assert"]
QualityGrade = Literal["Excellent", "Good", "Fair"]

KEPT_ATTRIBUTES = (
    "id",
    "name",
    "class",
    "type",
    "placeholder",
    "role",
    "href",
    "data-testid",
    "data-test",
    "aria-label",
)

_BUTTON_INPUT_TYPES = {"submit", "button", "reset", "image"}


def classify_element(tag: str, input_type: str | None) -> ElementKind:
    normalized_tag = (tag or "").strip().lower()
    normalized_type = (input_type or "").strip().lower()
    if normalized_tag == "button":
        return "button"
    if normalized_tag == "input":
        if normalized_type in _BUTTON_INPUT_TYPES:
            return "button"
        if normalized_type == "checkbox":
            return "checkbox"
        if normalized_type == "radio":
            return "radio"
        return "input"
    if normalized_tag == "a":
        return "link"
    if normalized_tag == "select":
        return "dropdown"
    if normalized_tag == "textarea":
        return "textarea"
    return "generic"


@dataclass(frozen=True, slots=True)
class PathSegment:
    tag: str
    position: int
    type_position: int
    same_tag_count: int


@dataclass(frozen=True, slots=True)
class Element:
    tag: str
    display_name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    text: str = ""
    path: tuple[PathSegment, ...] = ()
    kind: ElementKind = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tag", (self.tag or "").strip().lower() or "*")
        object.__setattr__(self, "kind", classify_element(self.tag, self.attributes.get("type")))

    def attr(self, key: str) -> str | None:
        raw = self.attributes.get(key)
        if raw is None:
            return None
        value = str(raw)
        return value if value.strip() else None

    def classes(self) -> list[str]:
        raw = self.attributes.get("class") or ""
        seen: set[str] = set()
        classes: list[str] = []
        for item in raw.split():
            if item in seen:
                continue
            seen.add(item)
            classes.append(item)
        return classes

    def snippet(self) -> str:
        attrs = "".join(f' {key}="{html.escape(value, quote=True)}"' for key, value in self.attributes.items())
        if self.tag == "input":
            return f"<{self.tag}{attrs}>"
        return f"<{self.tag}{attrs}>{html.escape(self.text, quote=False)}</{self.tag}>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "tag": self.tag,
            "name": self.display_name,
            "text": self.text,
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True, slots=True)
class LocatorQuality:
    grade: QualityGrade
    reason: str

    @property
    def label(self) -> str:
        return f"{self.grade} ({self.reason})"


@dataclass(frozen=True, slots=True)
class Locator:
    css_selector: str
    xpath: str
    quality: LocatorQuality
    rule: str

    def to_dict(self) -> dict[str, str]:
        return {
            "cssSelector": self.css_selector,
            "xpath": self.xpath,
            "quality": self.quality.label,
        }


@dataclass(frozen=True, slots=True)
class Step:
    action: StepAction
    locator: str
    value: str | None = None
    expected: str | None = None

    def to_dict(self) -> dict[str, str]:
        payload = {"action": self.action, "locator": self.locator}
        if self.value is not None:
            payload["value"] = self.value
        if self.expected is not None:
            payload["expected"] = self.expected
        return payload


@dataclass(frozen=True, slots=True)
class Flow:
    title: str
    steps: tuple[Step, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "steps": [step.to_dict() for step in self.steps]}


@dataclass(slots=True)
class AnalysisResult:
    url: str
    elements: list[Element] = field(default_factory=list)
    flows: list[Flow] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def failure(cls, url: str, message: str) -> AnalysisResult:
        return cls(url=url, elements=[], flows=[], error=message or "Unknown error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "url": self.url,
            "elements": [element.to_dict() for element in self.elements],
            "flows": [flow.to_dict() for flow in self.flows],
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True, slots=True)
class InspectionResult:
    css_selector: str
    xpath: str
    framework_code: str
    quality: LocatorQuality


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    element: Element
    locator: Locator
    framework: str
    framework_code: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, str]:
        return {
            "element": self.element.snippet(),
            "cssSelector": self.locator.css_selector,
            "xpath": self.locator.xpath,
            "framework": self.framework_code,
            "timestamp": self.created_at.isoformat(),
        }
