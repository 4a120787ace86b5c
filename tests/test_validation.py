from locatorforge.validation import (
    MarkupDocument,
    PageDocument,
    count_locator_matches,
    is_valid_css,
    validate_locator,
)

MARKUP = """
<div>
  <button class="btn">Save changes</button>
  <button class="btn">Cancel</button>
  <span>save</span>
</div>
"""


class _FakePage:
    def __init__(self, matches: dict[str, int]) -> None:
        self.matches = matches

    def query_selector_all(self, selector: str) -> list[object]:
        if selector not in self.matches:
            raise ValueError(f"bad selector {selector}")
        return [object()] * self.matches[selector]


def test_markup_document_counts_plain_selectors() -> None:
    document = MarkupDocument(MARKUP)
    assert document.count(".btn") == 2
    assert document.count("span") == 1
    assert document.count("#missing") == 0


def test_markup_document_has_text_is_case_insensitive_substring() -> None:
    document = MarkupDocument(MARKUP)
    assert document.count('button:has-text("save")') == 1
    assert document.count('button:has-text("  SAVE   changes ")') == 1
    assert document.count(':has-text("save")') >= 2


def test_markup_document_invalid_selector_counts_zero() -> None:
    assert MarkupDocument(MARKUP).count("div[") == 0


def test_page_document_counts_and_swallows_driver_errors() -> None:
    document = PageDocument(_FakePage({"#ok": 1, ".many": 3}))
    assert document.count("#ok") == 1
    assert document.count(".many") == 3
    assert document.count("div[") == 0


def test_count_locator_matches_without_document() -> None:
    assert count_locator_matches(None, "#x") is None
    assert count_locator_matches(MarkupDocument(MARKUP), "   ") == 0


def test_validate_locator_messages() -> None:
    document = MarkupDocument(MARKUP)
    unique = validate_locator(document, "span")
    assert unique.unique is True
    assert unique.message == "Locator is unique."

    duplicate = validate_locator(document, ".btn")
    assert duplicate.unique is False
    assert duplicate.match_count == 2
    assert duplicate.message == "Locator is not unique in DOM."

    missing = validate_locator(document, "#nope")
    assert missing.match_count == 0
    assert missing.message == "Locator matches nothing in DOM."

    unchecked = validate_locator(None, "span")
    assert unchecked.unique is None


def test_is_valid_css() -> None:
    assert is_valid_css("#login")
    assert is_valid_css('#a\\"b')
    assert is_valid_css('button:has-text("Sign in")')
    assert not is_valid_css("div[")
    assert not is_valid_css("")
