"""Group extracted elements into candidate user flows.

Each heuristic looks at the element set on its own; the result keeps the
order login, form submission, navigation.
"""

from __future__ import annotations

from typing import Sequence

from .locator_generator import synthesize
from .models import Element, Flow, Step
from .selector_rules import contains_any, is_navigable_href
from .validation import SelectorDocument

LOGIN_KEYWORDS = ("login", "username", "email", "password")
USERNAME_KEYWORDS = ("username", "email")
PASSWORD_KEYWORDS = ("password",)
LOGIN_BUTTON_KEYWORDS = ("login", "sign in")
SUBMIT_KEYWORDS = ("submit", "send", "save")

TEST_EMAIL = "test@example.com"
TEST_PASSWORD = "password123"
TEST_VALUE = "Test Value"

LOGIN_EXPECTED = "dashboard|welcome|home"
FORM_EXPECTED = "success|thank|confirm"

MAX_FORM_FIELDS = 3
MAX_NAVIGATION_LINKS = 3

_FILLABLE_KINDS = {"input", "textarea"}


def infer_flows(
    elements: Sequence[Element],
    page_url: str,
    document: SelectorDocument | None = None,
) -> list[Flow]:
    flows: list[Flow] = []
    for heuristic in (infer_login_flow, infer_form_flow, infer_navigation_flow):
        flow = heuristic(elements, page_url, document)
        if flow is not None:
            flows.append(flow)
    return flows


def infer_login_flow(
    elements: Sequence[Element],
    page_url: str,
    document: SelectorDocument | None = None,
) -> Flow | None:
    login_elements = [element for element in elements if _mentions(element, LOGIN_KEYWORDS)]
    if len(login_elements) < 2:
        return None

    fields = [element for element in login_elements if element.kind in _FILLABLE_KINDS]
    username = next((element for element in fields if _mentions(element, USERNAME_KEYWORDS)), None)
    password = next(
        (element for element in fields if element is not username and _mentions(element, PASSWORD_KEYWORDS)),
        None,
    )
    if username is None or password is None:
        return None

    login_button = next(
        (
            element
            for element in elements
            if element.kind == "button" and contains_any(element.display_name, LOGIN_BUTTON_KEYWORDS)
        ),
        None,
    )

    steps = [
        Step("navigate", page_url),
        Step("fill", _locate(username, document), value=TEST_EMAIL),
        Step("fill", _locate(password, document), value=TEST_PASSWORD),
    ]
    if login_button is not None:
        steps.append(Step("click", _locate(login_button, document)))
    steps.append(Step("assert", "body", expected=LOGIN_EXPECTED))
    return Flow("User Login Flow", tuple(steps))


def infer_form_flow(
    elements: Sequence[Element],
    page_url: str,
    document: SelectorDocument | None = None,
) -> Flow | None:
    fields = [element for element in elements if element.kind in _FILLABLE_KINDS]
    submit_buttons = [
        element
        for element in elements
        if element.kind == "button" and contains_any(element.display_name, SUBMIT_KEYWORDS)
    ]
    if not fields or not submit_buttons:
        return None

    steps = [Step("navigate", page_url)]
    for field in fields[:MAX_FORM_FIELDS]:
        value = TEST_EMAIL if _is_email_field(field) else TEST_VALUE
        steps.append(Step("fill", _locate(field, document), value=value))
    steps.append(Step("click", _locate(submit_buttons[0], document)))
    steps.append(Step("assert", "body", expected=FORM_EXPECTED))
    return Flow("Form Submission Flow", tuple(steps))


def infer_navigation_flow(
    elements: Sequence[Element],
    page_url: str,
    document: SelectorDocument | None = None,
) -> Flow | None:
    links = [
        element
        for element in elements
        if element.kind == "link" and is_navigable_href(element.attr("href"))
    ][:MAX_NAVIGATION_LINKS]
    if not links:
        return None

    steps = [Step("navigate", page_url)]
    steps.extend(Step("click", _locate(link, document)) for link in links)
    return Flow("Navigation Flow", tuple(steps))


def _mentions(element: Element, keywords: tuple[str, ...]) -> bool:
    if contains_any(element.display_name, keywords):
        return True
    return any(contains_any(value, keywords) for value in element.attributes.values())


def _is_email_field(element: Element) -> bool:
    if (element.attr("type") or "").strip().lower() == "email":
        return True
    return _mentions(element, ("email",))


def _locate(element: Element, document: SelectorDocument | None) -> str:
    return synthesize(element, document).css_selector
