"""Website analysis pipeline: fetch markup, extract elements, infer flows.

Failures never escape :func:`analyze_url`; they come back as an
:class:`AnalysisResult` whose ``error`` is set and whose collections are empty.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests
from bs4 import BeautifulSoup

from .dom_extractor import extract_elements, extract_elements_from_page
from .flow_inference import infer_flows
from .models import AnalysisResult
from .settings import DEFAULT_USER_AGENT, WorkbenchSettings
from .validation import MarkupDocument, PageDocument

if TYPE_CHECKING:
    from playwright.sync_api import Page

LOGGER = logging.getLogger("locatorforge.scraper")


def fetch_markup(url: str, *, timeout: float = 15.0, user_agent: str = DEFAULT_USER_AGENT) -> str:
    response = requests.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
    if not response.ok:
        raise requests.HTTPError(f"Failed to fetch {url}: {response.status_code}", response=response)
    return response.text


def analyze_markup(markup: str, url: str, *, include_hidden: bool = False) -> AnalysisResult:
    soup = BeautifulSoup(markup or "", "html.parser")
    document = MarkupDocument(soup)
    elements = extract_elements(soup, include_hidden=include_hidden)
    flows = infer_flows(elements, url, document)
    LOGGER.info("Analyzed %s: %s elements, %s flows", url, len(elements), len(flows))
    return AnalysisResult(url=url, elements=elements, flows=flows)


def analyze_url(url: str, settings: WorkbenchSettings | None = None) -> AnalysisResult:
    config = settings or WorkbenchSettings()
    target = (url or "").strip()
    if not target:
        return AnalysisResult.failure(target, "URL is required")

    try:
        markup = fetch_markup(target, timeout=config.request_timeout, user_agent=config.user_agent)
    except requests.RequestException as exc:
        LOGGER.warning("Fetch failed for %s: %s", target, exc)
        return AnalysisResult.failure(target, str(exc))

    try:
        return analyze_markup(markup, target, include_hidden=config.include_hidden)
    except Exception as exc:
        LOGGER.exception("Analysis failed for %s", target)
        return AnalysisResult.failure(target, str(exc))


def analyze_page(page: Page, *, include_hidden: bool = False) -> AnalysisResult:
    url = page.url
    try:
        elements = extract_elements_from_page(page, include_hidden=include_hidden)
        flows = infer_flows(elements, url, PageDocument(page))
    except Exception as exc:
        LOGGER.exception("Live analysis failed for %s", url)
        return AnalysisResult.failure(url, str(exc))
    return AnalysisResult(url=url, elements=elements, flows=flows)
