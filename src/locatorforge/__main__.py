from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Sequence

from playwright.sync_api import Error as PlaywrightError

from .code_emitter import GHERKIN, Framework, emit
from .history import LocatorHistory
from .inspector import LivePageSession, LocatorInspector
from .models import InspectionResult
from .runtime_checks import ensure_supported_python
from .scraper import analyze_markup, analyze_url
from .settings import WorkbenchSettings, load_settings
from .validation import LocatorValidation, MarkupDocument, PageDocument, is_valid_css, validate_locator

LOGGER = logging.getLogger("locatorforge.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locatorforge",
        description="Synthesize element locators and infer test flows from web pages.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--config", type=Path, default=None, help="Path to a settings JSON file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Extract elements and infer flows for a page.")
    analyze.add_argument("url")
    analyze.add_argument("--markup-file", type=Path, default=None, help="Analyze a saved HTML file instead of fetching.")
    analyze.add_argument("--format", choices=("json", "gherkin", "code"), default="json")
    analyze.add_argument("--framework", default=None)
    analyze.add_argument("--include-hidden", action="store_true", default=None)

    locate = subparsers.add_parser("locate", help="Synthesize a locator for one element of a saved HTML file.")
    locate.add_argument("--markup-file", type=Path, required=True)
    locate.add_argument("--selector", required=True, help="CSS selector picking the element to inspect.")
    locate.add_argument("--framework", default=None)
    locate.add_argument("--history-out", type=Path, default=None, help="Export locator history as JSON.")

    inspect = subparsers.add_parser("inspect", help="Synthesize a locator for an element of a live page.")
    inspect.add_argument("url")
    inspect.add_argument("--selector", required=True)
    inspect.add_argument("--framework", default=None)
    inspect.add_argument("--headed", action="store_true", help="Show the browser window.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    ensure_supported_python()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings(args.config)
    framework = args.framework or settings.default_framework

    match args.command:
        case "analyze":
            return _run_analyze(args, settings, framework)
        case "locate":
            return _run_locate(args, settings, framework)
        case "inspect":
            return _run_inspect(args, settings, framework)
    return 2


def _run_analyze(args: argparse.Namespace, settings: WorkbenchSettings, framework: str) -> int:
    if args.include_hidden is not None:
        settings.include_hidden = args.include_hidden

    if args.markup_file is not None:
        try:
            markup = args.markup_file.read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Could not read {args.markup_file}: {exc}", file=sys.stderr)
            return 1
        result = analyze_markup(markup, args.url, include_hidden=settings.include_hidden)
    else:
        result = analyze_url(args.url, settings)

    if result.error is not None:
        print(f"Analysis failed: {result.error}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif args.format == "gherkin":
        print(emit(result, GHERKIN))
    else:
        print(emit(result, framework))
    return 0


def _run_locate(args: argparse.Namespace, settings: WorkbenchSettings, framework: str) -> int:
    if not is_valid_css(args.selector):
        print(f"Invalid CSS selector: {args.selector!r}", file=sys.stderr)
        return 1
    try:
        markup = args.markup_file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Could not read {args.markup_file}: {exc}", file=sys.stderr)
        return 1

    document = MarkupDocument(markup)
    inspector = LocatorInspector(LocatorHistory(settings.history_limit))
    try:
        result = inspector.inspect_markup(document, args.selector, framework)
    except LookupError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    _print_inspection(result, validate_locator(document, result.css_selector), framework)

    if args.history_out is not None:
        ok, message = inspector.history.export(args.history_out)
        if not ok:
            print(message, file=sys.stderr)
            return 1
    return 0


def _run_inspect(args: argparse.Namespace, settings: WorkbenchSettings, framework: str) -> int:
    inspector = LocatorInspector(LocatorHistory(settings.history_limit))
    try:
        with LivePageSession(inspector, headless=not args.headed) as session:
            session.open(args.url)
            result = session.inspect(args.selector, framework)
            validation = validate_locator(PageDocument(session.page), result.css_selector)
    except (LookupError, RuntimeError, PlaywrightError) as exc:
        LOGGER.debug("Live inspection failed", exc_info=True)
        print(f"Inspection failed: {exc}", file=sys.stderr)
        return 1
    _print_inspection(result, validation, framework)
    return 0


def _print_inspection(result: InspectionResult, validation: LocatorValidation, framework: str) -> None:
    print(f"CSS:     {result.css_selector}")
    print(f"XPath:   {result.xpath}")
    print(f"Quality: {result.quality.label}")
    print(f"Check:   {validation.message}")
    resolved = Framework.parse(framework)
    print()
    print(f"{resolved.label if resolved else framework} code:")
    print(result.framework_code)


if __name__ == "__main__":
    raise SystemExit(main())
