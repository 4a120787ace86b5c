from locatorforge.dom_extractor import extract_elements
from locatorforge.locator_generator import (
    iter_css_candidates,
    structural_css,
    structural_xpath,
    synthesize,
    synthesize_many,
)
from locatorforge.models import Element, PathSegment
from locatorforge.validation import MarkupDocument, is_valid_css


def _single(markup: str) -> tuple[Element, MarkupDocument]:
    document = MarkupDocument(markup)
    elements = extract_elements(document.soup)
    return elements[0], document


def test_unique_id_wins() -> None:
    element, document = _single('<input id="user" placeholder="Username">')
    locator = synthesize(element, document)
    assert locator.css_selector == "#user"
    assert locator.quality.label == "Excellent (ID)"
    assert locator.xpath == "//*[@id='user']"


def test_class_rejected_for_type_attribute_when_not_unique() -> None:
    markup = """
    <button class="btn btn-primary" type="submit">Submit</button>
    <button class="btn">Cancel</button>
    """
    document = MarkupDocument(markup)
    submit = extract_elements(document.soup)[0]
    candidates = [draft.locator for draft in iter_css_candidates(submit)]
    assert candidates[0] == ".btn"

    locator = synthesize(submit, document)
    assert locator.css_selector == 'button[type="submit"]'
    assert locator.quality.label == "Fair (Type Attribute)"


def test_text_predicate_used_when_type_is_also_shared() -> None:
    markup = """
    <button class="btn btn-primary" type="submit">Submit</button>
    <button class="btn" type="submit">Save</button>
    """
    document = MarkupDocument(markup)
    submit = extract_elements(document.soup)[0]
    locator = synthesize(submit, document)
    assert locator.css_selector == 'button:has-text("Submit")'
    assert locator.quality.label == "Good (Text Content)"
    assert locator.xpath == "//button[normalize-space(.)='Submit']"


def test_semantic_class_is_preferred_over_first_class() -> None:
    element = Element(tag="button", display_name="Go", attributes={"class": "btn submit"})
    assert next(iter_css_candidates(element)).locator == ".submit"


def test_cascade_order_without_document() -> None:
    element = Element(
        tag="input",
        display_name="Email",
        attributes={"name": "email", "data-testid": "email-field", "placeholder": "Email"},
    )
    locator = synthesize(element)
    assert locator.css_selector == '[name="email"]'
    assert locator.quality.label == "Good (Name)"
    assert locator.xpath == "//*[@name='email']"


def test_test_id_selector_uses_present_attribute() -> None:
    element = Element(tag="div", display_name="x", attributes={"data-test": "card"})
    locator = synthesize(element)
    assert locator.css_selector == '[data-test="card"]'
    assert locator.quality.label == "Excellent (Test ID)"
    assert locator.xpath == "//*[@data-test='card']"


def test_placeholder_only_applies_to_text_fields() -> None:
    select = Element(tag="select", display_name="Pick", attributes={"placeholder": "Pick"})
    assert synthesize(select).rule == "structural"
    textarea = Element(tag="textarea", display_name="Notes", attributes={"placeholder": "Notes"})
    assert synthesize(textarea).css_selector == '[placeholder="Notes"]'


def test_aria_label_and_href_rules() -> None:
    icon = Element(tag="button", display_name="Close", attributes={"aria-label": "Close dialog"})
    assert synthesize(icon).css_selector == '[aria-label="Close dialog"]'

    link = Element(tag="a", display_name="About", attributes={"href": "/about"}, text="About")
    locator = synthesize(link)
    assert locator.css_selector == 'a[href="/about"]'
    assert locator.quality.label == "Good (Href)"

    script_link = Element(tag="a", display_name="Open", attributes={"href": "javascript:void(0)"}, text="Open")
    assert synthesize(script_link).css_selector == 'a:has-text("Open")'


def test_role_rule_when_type_missing() -> None:
    element = Element(tag="div", display_name="Menu", attributes={"role": "menu"})
    locator = synthesize(element)
    assert locator.css_selector == 'div[role="menu"]'
    assert locator.quality.label == "Good (Role)"


def test_long_text_skips_text_predicates() -> None:
    text = "x" * 60
    element = Element(tag="button", display_name=text, text=text)
    locator = synthesize(element)
    assert ":has-text" not in locator.css_selector
    assert "normalize-space" not in locator.xpath


def test_structural_fallback_is_non_empty_and_fair() -> None:
    markup = "<div><span>a</span><span>a</span></div>"
    document = MarkupDocument(markup)
    bare = Element(tag="span", display_name="span")
    assert synthesize(bare).css_selector == "span"
    assert synthesize(bare).xpath == "//span"

    path = (
        PathSegment("div", 1, 1, 1),
        PathSegment("span", 2, 2, 2),
    )
    element = Element(tag="span", display_name="a", text="a", path=path)
    assert structural_css(element) == "div > span:nth-child(2)"
    assert structural_xpath(element) == "//div/span[2]"
    locator = synthesize(element, document)
    assert locator.css_selector == "div > span:nth-child(2)"
    assert locator.quality.label == "Fair (Generic)"
    assert document.count(locator.css_selector) == 1


def test_quoted_id_is_escaped_and_parseable() -> None:
    element, document = _single("<div><button id='a\"b'>Go</button></div>")
    locator = synthesize(element, document)
    assert locator.css_selector == '#a\\"b'
    assert is_valid_css(locator.css_selector)
    assert document.count(locator.css_selector) == 1


def test_synthesize_is_idempotent() -> None:
    element, document = _single('<a href="/pricing" class="nav-link">Pricing</a>')
    assert synthesize(element, document) == synthesize(element, document)
    assert synthesize(element) == synthesize(element)


def test_good_or_excellent_selectors_are_unique_in_source() -> None:
    markup = """
    <html><body>
      <form>
        <input id="user" placeholder="Username">
        <input name="password" type="password" placeholder="Password">
        <input type="text">
        <input type="text">
        <button class="btn login">Login</button>
        <button class="btn">Cancel</button>
      </form>
      <nav><a href="/a">A</a><a href="/b">B</a><a href="/a">A again</a></nav>
    </body></html>
    """
    document = MarkupDocument(markup)
    elements = extract_elements(document.soup)
    for locator in synthesize_many(elements, document):
        assert locator.css_selector
        assert locator.xpath
        if locator.quality.grade in ("Excellent", "Good"):
            assert document.count(locator.css_selector) == 1, locator.css_selector


def test_structural_xpath_is_absolute_only_from_html_root() -> None:
    path = (
        PathSegment("html", 1, 1, 1),
        PathSegment("body", 2, 1, 1),
        PathSegment("input", 1, 1, 1),
    )
    element = Element(tag="input", display_name="input_1", path=path)
    assert structural_xpath(element) == "/html/body/input"


def test_nested_inline_text_is_not_padded() -> None:
    markup = "<button>Sign<b>in</b></button><button>Cancel</button>"
    element, document = _single(markup)
    assert element.text == "Signin"
    locator = synthesize(element, document)
    assert locator.css_selector == 'button:has-text("Signin")'
    assert locator.quality.label == "Good (Text Content)"
    assert document.count(locator.css_selector) == 1
    assert document.count('button:has-text("Sign in")') == 0
    assert locator.xpath == "//button[normalize-space(.)='Signin']"
    node = document.select("button")[0]
    assert " ".join("".join(node.strings).split()) == "Signin"


def test_padded_attribute_value_is_kept_verbatim() -> None:
    element, document = _single('<input name="q ">')
    locator = synthesize(element)
    assert locator.css_selector == '[name="q "]'
    assert locator.xpath == "//*[@name='q ']"
    assert document.count(locator.css_selector) == 1


def test_blank_attribute_is_ignored() -> None:
    element = Element(tag="input", display_name="x", attributes={"id": "   ", "name": "email"})
    assert synthesize(element).css_selector == '[name="email"]'
