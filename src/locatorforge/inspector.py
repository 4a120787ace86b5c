from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import soupsieve

from .code_emitter import Framework, emit_locator_code
from .dom_extractor import element_from_handle, element_from_node
from .history import LocatorHistory
from .locator_generator import synthesize
from .models import AnalysisResult, Element, HistoryEntry, InspectionResult
from .runtime_checks import _is_missing_browser_error
from .scraper import analyze_page
from .validation import MarkupDocument, PageDocument, SelectorDocument

if TYPE_CHECKING:
    from playwright.sync_api import Browser, Page, Playwright

LOGGER = logging.getLogger("locatorforge.inspector")


def inspect_element(
    element: Element,
    framework: str | Framework,
    document: SelectorDocument | None = None,
) -> InspectionResult:
    locator = synthesize(element, document)
    return InspectionResult(
        css_selector=locator.css_selector,
        xpath=locator.xpath,
        framework_code=emit_locator_code(locator, framework),
        quality=locator.quality,
    )


class LocatorInspector:
    """Element-at-a-time entry point; owns the session history."""

    def __init__(self, history: LocatorHistory | None = None) -> None:
        self.history = history if history is not None else LocatorHistory()

    def inspect(
        self,
        element: Element,
        framework: str | Framework,
        document: SelectorDocument | None = None,
    ) -> InspectionResult:
        locator = synthesize(element, document)
        framework_code = emit_locator_code(locator, framework)
        resolved = Framework.parse(framework)
        self.history.record(
            HistoryEntry(
                element=element,
                locator=locator,
                framework=resolved.value if resolved else str(framework),
                framework_code=framework_code,
            )
        )
        LOGGER.info("Inspected <%s>: %s (%s)", element.tag, locator.css_selector, locator.quality.label)
        return InspectionResult(
            css_selector=locator.css_selector,
            xpath=locator.xpath,
            framework_code=framework_code,
            quality=locator.quality,
        )

    def inspect_markup(self, document: MarkupDocument, selector: str, framework: str | Framework) -> InspectionResult:
        try:
            nodes = document.select(selector)
        except (soupsieve.SelectorSyntaxError, ValueError, NotImplementedError) as exc:
            raise LookupError(f"Invalid selector {selector!r}: {exc}") from exc
        if not nodes:
            raise LookupError(f"No element matches {selector!r}.")
        return self.inspect(element_from_node(nodes[0]), framework, document)


class LivePageSession:
    """Synchronous Playwright session for inspecting a live page."""

    def __init__(self, inspector: LocatorInspector | None = None, *, headless: bool = True) -> None:
        self.inspector = inspector or LocatorInspector()
        self.headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None

    def __enter__(self) -> LivePageSession:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("No page is open. Call open(url) first.")
        return self._page

    def open(self, url: str) -> None:
        if self._page is None:
            self._launch()
        LOGGER.info("Opening %s", url)
        self.page.goto(url, wait_until="domcontentloaded")

    def inspect(self, selector: str, framework: str | Framework) -> InspectionResult:
        handle = self.page.query_selector(selector)
        if handle is None:
            raise LookupError(f"No element matches {selector!r}.")
        element = element_from_handle(handle)
        return self.inspector.inspect(element, framework, PageDocument(self.page))

    def analyze(self, *, include_hidden: bool = False) -> AnalysisResult:
        return analyze_page(self.page, include_hidden=include_hidden)

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
        self._page = None

    def _launch(self) -> None:
        from playwright.sync_api import sync_playwright

        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=self.headless)
        except Exception as exc:
            self.close()
            if _is_missing_browser_error(exc):
                raise RuntimeError(
                    "Playwright browser binaries are missing. Run `playwright install chromium`."
                ) from exc
            raise
        self._page = self._browser.new_page()
