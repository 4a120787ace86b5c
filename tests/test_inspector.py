import json

import pytest

from locatorforge.history import LocatorHistory
from locatorforge.inspector import LivePageSession, LocatorInspector, inspect_element
from locatorforge.models import Element
from locatorforge.validation import MarkupDocument

MARKUP = """
<div>
  <input id="user" placeholder="Username">
  <button class="btn">Save</button>
  <button class="btn">Cancel</button>
</div>
"""


def test_inspect_element_returns_locator_and_snippet() -> None:
    element = Element(tag="input", display_name="Username", attributes={"id": "user", "placeholder": "Username"})
    result = inspect_element(element, "playwright")
    assert result.css_selector == "#user"
    assert result.xpath == "//*[@id='user']"
    assert result.quality.label == "Excellent (ID)"
    assert "await page.locator('#user').click();" in result.framework_code
    assert "await page.locator('xpath=//*[@id=\\'user\\']').click();" in result.framework_code


def test_inspect_element_unknown_framework() -> None:
    element = Element(tag="button", display_name="Go", text="Go")
    result = inspect_element(element, "ruby")
    assert result.framework_code == '// Framework "ruby" not supported'
    assert result.css_selector == 'button:has-text("Go")'


def test_inspector_records_history() -> None:
    history = LocatorHistory(limit=2)
    inspector = LocatorInspector(history)
    document = MarkupDocument(MARKUP)
    inspector.inspect_markup(document, "#user", "cypress")
    result = inspector.inspect_markup(document, 'button:has-text("Cancel")', "selenium")
    assert inspector.history is history
    assert len(history) == 2
    assert result.css_selector == 'button:has-text("Cancel")'
    latest = history.snapshot()[-1]
    assert latest.framework == "selenium"
    assert latest.framework_code == result.framework_code

    inspector.inspect_markup(document, "#user", "testcafe")
    assert [entry.framework for entry in history.snapshot()] == ["selenium", "testcafe"]
    payload = json.loads(history.to_json())
    assert payload[-1]["cssSelector"] == "#user"


def test_inspect_markup_without_match_raises() -> None:
    with pytest.raises(LookupError):
        LocatorInspector().inspect_markup(MarkupDocument(MARKUP), "#missing", "playwright")


class _FakeHandle:
    def __init__(self, payload: dict) -> None:
        self.payload = payload

    def evaluate(self, script: str) -> dict:
        return self.payload


class _FakePage:
    url = "https://example.com"

    def __init__(self) -> None:
        self.visited: list[str] = []
        self.button = _FakeHandle(
            {
                "tag": "button",
                "attributes": {"class": "btn"},
                "text": "Save",
                "path": [
                    {"tag": "div", "position": 1, "type_position": 1, "same_tag_count": 1},
                    {"tag": "button", "position": 2, "type_position": 1, "same_tag_count": 2},
                ],
            }
        )

    def goto(self, url: str, wait_until: str = "load") -> None:
        self.visited.append(url)

    def query_selector(self, selector: str):
        return self.button if selector == "button.btn" else None

    def query_selector_all(self, selector: str) -> list[object]:
        counts = {".btn": 2, 'button:has-text("Save")': 1}
        return [object()] * counts.get(selector, 0)


def test_live_session_inspects_against_page() -> None:
    page = _FakePage()
    session = LivePageSession()
    session._page = page
    session.open("https://example.com/app")
    assert page.visited == ["https://example.com/app"]

    result = session.inspect("button.btn", "webdriverio")
    assert result.css_selector == 'button:has-text("Save")'
    assert result.quality.label == "Good (Text Content)"
    assert "await $('button:has-text(\"Save\")').click();" in result.framework_code
    assert len(session.inspector.history) == 1

    with pytest.raises(LookupError):
        session.inspect("#nothing", "webdriverio")

    session.close()
    with pytest.raises(RuntimeError):
        session.inspect("button.btn", "webdriverio")


def test_inspect_markup_with_malformed_selector_raises_lookup_error() -> None:
    with pytest.raises(LookupError, match="Invalid selector"):
        LocatorInspector().inspect_markup(MarkupDocument(MARKUP), "button[[", "playwright")
